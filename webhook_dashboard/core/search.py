"""Search filter over normalized events."""
from typing import Iterable

from webhook_dashboard.models import Event


def matches(event: Event, needle: str) -> bool:
    """True if the lowercased needle occurs in the event's ticker or message."""
    ticker = str(event.ticker or "").lower()
    message = str(event.message or "").lower()
    return needle in ticker or needle in message


def filter_events(events: Iterable[Event], query: str) -> list[Event]:
    """Return the events whose ticker or message contains the query.

    Matching is a case-insensitive substring test of the trimmed query.
    An empty or whitespace-only query matches everything. Input order is
    kept and the input is never modified.

    Args:
        events: Normalized events, typically the poller's current snapshot
        query: Free-text search input

    Returns:
        New list with the matching events
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(events)
    return [event for event in events if matches(event, needle)]
