"""Normalization of raw webhook event payloads."""
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from webhook_dashboard.collectors.webhook.errors import FormatError
from webhook_dashboard.models import Event
from webhook_dashboard.models.events import NUMERIC_FIELDS

INVALID_FORMAT_MESSAGE = "Invalid data format: Expected an array"


def iso_timestamp(moment: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text(value: Any, default: str) -> str:
    return str(value or default).strip()


def _number(value: Any) -> Any:
    return value if value is not None else 0


def normalize_event(raw: Any, index: int, now_iso: str) -> Event:
    """Normalize a single raw record into an Event.

    Never raises: anything that is not a mapping is treated as an empty
    record and every missing or invalid field gets its default.

    Args:
        raw: One element of the server payload
        index: Position of the record, used for the placeholder id
        now_iso: Timestamp substituted for missing timenow/time values

    Returns:
        Event with all twelve fields populated
    """
    record = raw if isinstance(raw, Mapping) else {}

    numbers = {name: _number(record.get(name)) for name in NUMERIC_FIELDS}

    return Event(
        id=str(record.get("id") or f"temp-{index}"),
        ticker=_text(record.get("ticker"), "N/A"),
        message=_text(record.get("message"), ""),
        timenow=record.get("timenow") or now_iso,
        u_interval=_text(record.get("u_interval"), ""),
        time=record.get("time") or now_iso,
        **numbers,
    )


def normalize_events(raw: Any, now: datetime | None = None) -> list[Event]:
    """Normalize a server payload into a list of Events.

    Args:
        raw: Decoded JSON body of the events endpoint
        now: Wall-clock reading used for missing timestamps (defaults to now)

    Returns:
        One Event per input element, in input order

    Raises:
        FormatError: If the payload is not array-shaped
    """
    if not isinstance(raw, (list, tuple)):
        raise FormatError(INVALID_FORMAT_MESSAGE)

    now_iso = iso_timestamp(now or datetime.now(timezone.utc))

    return [normalize_event(item, index, now_iso) for index, item in enumerate(raw)]
