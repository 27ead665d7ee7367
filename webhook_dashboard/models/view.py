"""Renderer-facing dashboard snapshot."""
from dataclasses import dataclass

from webhook_dashboard.models.events import Event
from webhook_dashboard.models.poll_state import PollPhase


@dataclass(frozen=True)
class DashboardView:
    """What a renderer needs to draw one frame of the dashboard."""
    events: tuple[Event, ...]   # Rows matching the current query
    total: int                  # Row count before filtering
    query: str
    loading: bool
    error: str | None
    update_flag: bool
    retry_count: int
    phase: PollPhase
