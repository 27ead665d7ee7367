"""Shared fixtures for unit and integration tests."""
import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


async def _wait_until(predicate, timeout: float = 2.0, interval: float = 0.005) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(interval)


@pytest.fixture
def wait_until():
    """Await until predicate() is true, failing after a timeout."""
    return _wait_until


@pytest_asyncio.fixture
async def serve_events():
    """Start a local server whose GET /api/events is answered by `handler`.

    Returns the base URL to hand to EventsClient.
    """
    servers: list[TestServer] = []

    async def _serve(handler) -> str:
        app = web.Application()
        app.router.add_get("/api/events", handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return str(server.make_url("/api"))

    yield _serve

    for server in servers:
        await server.close()
