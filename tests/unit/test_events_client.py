"""Tests for the events HTTP client."""
import asyncio
import pytest
from aiohttp import web


def test_events_url_strips_trailing_slash():
    from webhook_dashboard.collectors.webhook.client import EventsClient

    client = EventsClient("https://example.com/api/")

    assert client.events_url == "https://example.com/api/events"


def test_client_default_values():
    from webhook_dashboard.collectors.webhook.client import EventsClient

    client = EventsClient("https://example.com/api")

    assert client.timeout_seconds is None


@pytest.mark.asyncio
async def test_fetch_returns_decoded_array(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient

    async def handler(request):
        return web.json_response([{"ticker": "AAPL"}, {"ticker": "TSLA"}])

    client = EventsClient(await serve_events(handler))

    payload = await client.fetch_events()

    assert payload == [{"ticker": "AAPL"}, {"ticker": "TSLA"}]


@pytest.mark.asyncio
async def test_fetch_returns_non_array_unvalidated(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient

    async def handler(request):
        return web.json_response({})

    client = EventsClient(await serve_events(handler))

    assert await client.fetch_events() == {}


@pytest.mark.asyncio
async def test_server_error_raises_network_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import NetworkError

    async def handler(request):
        return web.Response(status=500, text="boom")

    client = EventsClient(await serve_events(handler))

    with pytest.raises(NetworkError, match="Request failed with status code 500") as exc_info:
        await client.fetch_events()

    assert exc_info.value.status == 500


@pytest.mark.asyncio
async def test_not_found_raises_network_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import NetworkError

    async def handler(request):
        return web.Response(status=404)

    client = EventsClient(await serve_events(handler))

    with pytest.raises(NetworkError, match="404"):
        await client.fetch_events()


@pytest.mark.asyncio
async def test_empty_body_raises_format_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import FormatError

    async def handler(request):
        return web.Response(status=200, text="")

    client = EventsClient(await serve_events(handler))

    with pytest.raises(FormatError, match="No data received from the server"):
        await client.fetch_events()


@pytest.mark.asyncio
async def test_json_null_raises_format_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import FormatError

    async def handler(request):
        return web.Response(status=200, text="null", content_type="application/json")

    client = EventsClient(await serve_events(handler))

    with pytest.raises(FormatError, match="No data received"):
        await client.fetch_events()


@pytest.mark.asyncio
async def test_invalid_json_raises_format_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import FormatError

    async def handler(request):
        return web.Response(status=200, text="<html>not json</html>")

    client = EventsClient(await serve_events(handler))

    with pytest.raises(FormatError, match="Invalid JSON"):
        await client.fetch_events()


@pytest.mark.asyncio
async def test_non_utf8_body_raises_format_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import FormatError

    async def handler(request):
        return web.Response(status=200, body=b'[{"ticker": "\xff\xfe"}]', content_type="application/json")

    client = EventsClient(await serve_events(handler))

    with pytest.raises(FormatError, match="Invalid JSON"):
        await client.fetch_events()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["0", "false", "\"\"", "0.0"])
async def test_falsy_scalar_raises_no_data(serve_events, body):
    from webhook_dashboard.collectors.webhook.client import EventsClient, NO_DATA_MESSAGE
    from webhook_dashboard.collectors.webhook.errors import FormatError

    async def handler(request):
        return web.Response(status=200, text=body, content_type="application/json")

    client = EventsClient(await serve_events(handler))

    with pytest.raises(FormatError, match=NO_DATA_MESSAGE):
        await client.fetch_events()


@pytest.mark.asyncio
async def test_empty_array_is_data(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient

    async def handler(request):
        return web.json_response([])

    client = EventsClient(await serve_events(handler))

    assert await client.fetch_events() == []


@pytest.mark.asyncio
async def test_timeout_raises_network_error(serve_events):
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import NetworkError

    async def handler(request):
        await asyncio.sleep(0.5)
        return web.json_response([])

    client = EventsClient(await serve_events(handler), timeout_seconds=0.05)

    with pytest.raises(NetworkError, match="timed out"):
        await client.fetch_events()


@pytest.mark.asyncio
async def test_connection_refused_raises_network_error():
    import socket
    from webhook_dashboard.collectors.webhook.client import EventsClient
    from webhook_dashboard.collectors.webhook.errors import NetworkError

    # Grab a free port and release it so nothing is listening there
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()

    client = EventsClient(f"http://127.0.0.1:{port}/api")

    with pytest.raises(NetworkError):
        await client.fetch_events()


def test_errors_are_fetch_errors():
    from webhook_dashboard.collectors.webhook.errors import FetchError, FormatError, NetworkError

    assert issubclass(NetworkError, FetchError)
    assert issubclass(FormatError, FetchError)
    assert str(FormatError("x")) == "x"
    assert NetworkError("x").status is None
