"""Client-side sorting, pagination and text layout of grid rows."""
from dataclasses import dataclass
from datetime import timezone
from typing import Any, Iterable, Sequence

from webhook_dashboard.models import Event
from webhook_dashboard.ui.columns import COLUMNS, Column, get_column, is_number, parse_timestamp


@dataclass(frozen=True)
class Page:
    """One page of grid rows."""
    rows: tuple[Event, ...]
    page: int          # Zero-based, clamped to the available pages
    page_count: int
    total: int


def _sort_key(column: Column, event: Event) -> Any | None:
    """Comparable key for the column value, None when it can't be ordered."""
    value = column.value(event)

    if column.timestamp:
        moment = parse_timestamp(value)
        if moment is None:
            return None
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return (0, moment.timestamp())

    if column.numeric:
        # Non-numeric values sort after numbers, as text
        if is_number(value):
            return (0, float(value), "")
        return (1, 0.0, str(value).lower())

    return (0, str(value).lower())


def sort_events(events: Iterable[Event], field: str, descending: bool = False) -> list[Event]:
    """Sort events by a column. Rows whose value can't be ordered go last.

    Raises:
        KeyError: If field is not a grid column
    """
    column = get_column(field)

    keyed = [(_sort_key(column, event), event) for event in events]
    ordered = [pair for pair in keyed if pair[0] is not None]
    unordered = [event for key, event in keyed if key is None]

    ordered.sort(key=lambda pair: pair[0], reverse=descending)
    return [event for _, event in ordered] + unordered


def paginate(events: Sequence[Event], page: int, page_size: int) -> Page:
    """Slice out one page, clamping the page number into range."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    total = len(events)
    page_count = max(1, -(-total // page_size))
    page = min(max(page, 0), page_count - 1)
    start = page * page_size

    return Page(
        rows=tuple(events[start:start + page_size]),
        page=page,
        page_count=page_count,
        total=total,
    )


def _fit(text: str, width: int, right: bool) -> str:
    if len(text) > width:
        text = text[:max(width - 1, 0)] + "…"
    return text.rjust(width) if right else text.ljust(width)


def render_table(rows: Iterable[Event], columns: Sequence[Column] = COLUMNS) -> str:
    """Lay rows out as fixed-width text, one character per 10 px of column width."""
    widths = [max(column.width // 10, len(column.header)) for column in columns]

    lines = [
        " ".join(_fit(c.header, w, c.numeric) for c, w in zip(columns, widths)),
        " ".join("-" * w for w in widths),
    ]
    for event in rows:
        lines.append(" ".join(_fit(c.text(event), w, c.numeric) for c, w in zip(columns, widths)))

    return "\n".join(lines)
