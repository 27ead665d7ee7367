"""Data models for the webhook dashboard."""

from webhook_dashboard.models.events import Event
from webhook_dashboard.models.poll_state import PollPhase, PollState
from webhook_dashboard.models.view import DashboardView

__all__ = [
    "Event",
    "PollPhase",
    "PollState",
    "DashboardView",
]
