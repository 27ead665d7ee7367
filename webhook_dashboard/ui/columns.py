"""Grid column definitions with display getters and formatters."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from webhook_dashboard.models import Event

INVALID_DATE = "Invalid Date"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds, None if unparseable."""
    if isinstance(value, datetime):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None

    return None


def format_timestamp(value: Any) -> str:
    """Format like "Oct 18, 2026, 3:04:05 PM" in the timestamp's own offset."""
    moment = parse_timestamp(value)
    if moment is None:
        return INVALID_DATE

    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment:%b} {moment.day}, {moment.year}, {hour}:{moment:%M:%S} {meridiem}"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: Any) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_volume(value: Any) -> str:
    if value is None:
        return "0"
    if is_number(value):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return f"{value:,}"
    return str(value)


@dataclass(frozen=True)
class Column:
    """One grid column."""
    field: str
    header: str
    width: int
    getter: Callable[[Event], Any]
    formatter: Callable[[Any], str] = str
    numeric: bool = False
    timestamp: bool = False

    def value(self, event: Event) -> Any:
        return self.getter(event)

    def text(self, event: Event) -> str:
        return self.formatter(self.value(event))


def _text_column(field: str, header: str, width: int, fallback: str) -> Column:
    return Column(field, header, width, getter=lambda e: getattr(e, field) or fallback)


def _number_column(field: str, header: str, formatter: Callable[[Any], str] = format_number) -> Column:
    def getter(event: Event) -> Any:
        value = getattr(event, field)
        return value if value is not None else 0

    return Column(field, header, 130, getter=getter, formatter=formatter, numeric=True)


def _timestamp_column(field: str, header: str) -> Column:
    return Column(
        field, header, 200,
        getter=lambda e: getattr(e, field),
        formatter=format_timestamp,
        timestamp=True,
    )


COLUMNS: tuple[Column, ...] = (
    _text_column("ticker", "Ticker", 130, "N/A"),
    _timestamp_column("timenow", "Timestamp"),
    _text_column("message", "Message", 200, "No message"),
    _number_column("open", "Open"),
    _number_column("high", "High"),
    _number_column("low", "Low"),
    _number_column("close", "Close"),
    _number_column("price", "Price"),
    _number_column("volume", "Volume", formatter=format_volume),
    _text_column("u_interval", "Interval", 100, "N/A"),
    _timestamp_column("time", "Created At"),
)


def get_column(field: str) -> Column:
    """Look up a column by field name.

    Raises:
        KeyError: If no column has that field
    """
    for column in COLUMNS:
        if column.field == field:
            return column
    raise KeyError(field)
