"""HTTP client for the webhook backend's events endpoint."""
import asyncio
import json
import logging
from typing import Any

import aiohttp

from webhook_dashboard.collectors.webhook.errors import FormatError, NetworkError

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data received from the server"


class EventsClient:
    """Fetches raw event records from `<base_url>/events`.

    The client only classifies failures; shaping the payload into rows is
    the normalizer's job.

    Attributes:
        base_url: API root, without the trailing /events
        timeout_seconds: Total request timeout, None to wait indefinitely
    """

    def __init__(self, base_url: str, timeout_seconds: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/events"

    async def fetch_events(self) -> Any:
        """GET the events endpoint and return the decoded JSON body.

        Returns:
            Decoded JSON payload (not yet validated as an array)

        Raises:
            NetworkError: On transport errors, timeouts and non-2xx statuses
            FormatError: If the body is empty, a falsy JSON scalar or not valid UTF-8 JSON
        """
        logger.debug(
            "STEP 1/2: Requesting events",
            extra={
                "extra_data": {
                    "action": "fetch_start",
                    "url": self.events_url,
                    "timeout": self.timeout_seconds,
                }
            },
        )

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.events_url) as response:
                    if not 200 <= response.status < 300:
                        raise NetworkError(
                            f"Request failed with status code {response.status}",
                            status=response.status,
                        )

                    body = await response.read()

        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(str(e) or "Failed to fetch events") from e

        if not body.strip():
            raise FormatError(NO_DATA_MESSAGE)

        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise FormatError(f"Invalid JSON in response: {e}") from e

        # Falsy scalars count as no data; empty arrays and objects do not
        if payload is None or (not payload and isinstance(payload, (bool, int, float, str))):
            raise FormatError(NO_DATA_MESSAGE)

        logger.debug(
            "STEP 2/2: Events received",
            extra={
                "extra_data": {
                    "action": "fetch_success",
                    "status": response.status,
                    "count": len(payload) if isinstance(payload, list) else None,
                }
            },
        )

        return payload
