"""Poller state snapshots."""
from dataclasses import dataclass, replace
from enum import Enum

from webhook_dashboard.models.events import Event


class PollPhase(Enum):
    """Where the poller is in its fetch cycle."""
    IDLE = "idle"
    FETCHING = "fetching"
    SCHEDULED_RETRY = "scheduled_retry"
    STOPPED = "stopped"


@dataclass(frozen=True)
class PollState:
    """Immutable snapshot of the poller's state.

    A new snapshot is built for every change, so a reference handed to a
    subscriber never changes underneath it.
    """
    events: tuple[Event, ...] = ()
    loading: bool = True
    last_error: str | None = None
    retry_count: int = 0
    update_flag: bool = False
    phase: PollPhase = PollPhase.IDLE

    def evolve(self, **changes) -> "PollState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
