"""Polling loop for the webhook events endpoint.

Owns the dashboard's PollState: fetches on start, on a fixed refresh
interval, on bounded fixed-delay retries and on manual retry, and
publishes a new snapshot on the event bus for every change.
"""
import asyncio
import logging
from typing import Any, Callable, Protocol

from webhook_dashboard.collectors.webhook.errors import FetchError, FormatError, NetworkError
from webhook_dashboard.collectors.webhook.normalizer import normalize_events
from webhook_dashboard.core.event_bus import EventBus
from webhook_dashboard.core.scheduler import PeriodicTask, ScheduledTask
from webhook_dashboard.models import Event, PollPhase, PollState

logger = logging.getLogger(__name__)

STATE_TOPIC = "poll_state"

MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 2.0
REFRESH_INTERVAL_SECONDS = 60.0


class EventsSource(Protocol):
    """Anything that can fetch the raw events payload."""

    async def fetch_events(self) -> Any:
        ...


class Poller:
    """Fetches events periodically and retries failed fetches.

    All work happens on one event loop and at most one fetch is in flight
    at a time. Each fetch remembers the generation it was started in, so a
    response that arrives after stop() is dropped instead of applied.
    """

    def __init__(
        self,
        client: EventsSource,
        event_bus: EventBus | None = None,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY_SECONDS,
        refresh_interval: float = REFRESH_INTERVAL_SECONDS,
        retry_format_errors: bool = True,
    ):
        """Initialize the poller.

        Args:
            client: Source of raw event payloads
            event_bus: Bus to publish snapshots on (a private one if None)
            max_retries: Retries after the first failed attempt of a cycle
            retry_delay: Fixed delay before each retry, in seconds
            refresh_interval: Delay between periodic refreshes, in seconds
            retry_format_errors: Retry malformed payloads like network errors
        """
        self.client = client
        self.event_bus = event_bus or EventBus()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.refresh_interval = refresh_interval
        self.retry_format_errors = retry_format_errors

        self._state = PollState()
        self._running = False
        self._generation = 0

        self._fetch_task: asyncio.Task | None = None
        self._retry_timer: ScheduledTask | None = None
        self._refresh_timer: PeriodicTask | None = None

    @property
    def state(self) -> PollState:
        """Current snapshot."""
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def fetch_in_flight(self) -> bool:
        return self._fetch_task is not None and not self._fetch_task.done()

    @property
    def retry_pending(self) -> bool:
        return self._retry_timer is not None and self._retry_timer.pending

    def subscribe(self, callback: Callable[[PollState], None]) -> Callable[[], None]:
        """Call `callback` with every new snapshot. Returns an unsubscribe function."""
        return self.event_bus.subscribe([STATE_TOPIC], callback)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Fetch immediately and start the periodic refresh.

        Must be called from within a running event loop.
        """
        if self._running:
            logger.warning("Poller already running")
            return

        self._running = True
        self._generation += 1
        logger.info(
            f"Poller started (refresh every {self.refresh_interval}s, "
            f"max_retries={self.max_retries}, retry_delay={self.retry_delay}s)"
        )

        self._refresh_timer = PeriodicTask(self.refresh_interval, self._on_refresh_tick, name="refresh")
        self._begin_fetch(retry_count=0, trigger="start")

    def stop(self) -> None:
        """Cancel the refresh timer, any scheduled retry and the in-flight fetch.

        Publishes a final STOPPED snapshot; nothing changes after that.
        """
        if not self._running:
            return

        self._running = False
        self._generation += 1

        if self._refresh_timer:
            self._refresh_timer.cancel()
        if self._retry_timer:
            self._retry_timer.cancel()
        if self._fetch_task and not self._fetch_task.done():
            self._fetch_task.cancel()

        self._state = self._state.evolve(phase=PollPhase.STOPPED, loading=False)
        self.event_bus.publish(STATE_TOPIC, self._state)

        logger.debug(
            "STOP: Poller stopped",
            extra={
                "extra_data": {
                    "action": "poller_stop",
                    "events": len(self._state.events),
                    "last_error": self._state.last_error,
                }
            },
        )
        logger.info("Poller stopped")

    async def close(self) -> None:
        """Stop and wait for every cancelled task to finish."""
        self.stop()

        pending = [t.wait() for t in (self._refresh_timer, self._retry_timer) if t]
        if self._fetch_task:
            pending.append(asyncio.gather(self._fetch_task, return_exceptions=True))
        await asyncio.gather(*pending)

    # =========================================================================
    # Consumer actions
    # =========================================================================

    def retry_now(self) -> None:
        """Fetch right away instead of waiting for the retry delay or refresh."""
        if not self._running:
            logger.warning("Cannot retry: poller not running")
            return

        if self.fetch_in_flight:
            logger.debug("Retry requested while a fetch is in flight, ignoring")
        elif self.retry_pending:
            logger.info("Firing scheduled retry now")
            self._retry_timer.fire_now()
        else:
            self._begin_fetch(retry_count=0, trigger="manual")

    def acknowledge_error(self) -> None:
        """Clear the error message. Does not stop a retry chain in progress."""
        if self._state.last_error is not None:
            self._set_state(last_error=None)

    def acknowledge_update(self) -> None:
        """Clear the one-shot update notification."""
        if self._state.update_flag:
            self._set_state(update_flag=False)

    # =========================================================================
    # Fetch cycle
    # =========================================================================

    def _on_refresh_tick(self) -> None:
        if self.fetch_in_flight or self.retry_pending:
            logger.debug(
                "Refresh skipped: poll cycle in progress",
                extra={
                    "extra_data": {
                        "action": "refresh_skipped",
                        "phase": self._state.phase.value,
                    }
                },
            )
            return

        self._begin_fetch(retry_count=0, trigger="refresh")

    def _begin_fetch(self, retry_count: int, trigger: str) -> None:
        self._retry_timer = None
        self._set_state(phase=PollPhase.FETCHING, loading=True, retry_count=retry_count)

        logger.debug(
            f"FETCH: attempt {retry_count + 1}/{self.max_retries + 1}",
            extra={
                "extra_data": {
                    "action": "fetch_begin",
                    "trigger": trigger,
                    "retry_count": retry_count,
                }
            },
        )

        self._fetch_task = asyncio.get_running_loop().create_task(
            self._fetch(self._generation, retry_count),
            name="fetch-events",
        )

    async def _fetch(self, generation: int, retry_count: int) -> None:
        try:
            raw = await self.client.fetch_events()
            events = normalize_events(raw)
        except FetchError as e:
            error = e
        except Exception as e:
            logger.exception(f"Unexpected error fetching events: {e}")
            error = NetworkError(str(e) or "Failed to fetch events")
        else:
            if generation != self._generation:
                logger.debug("Discarding response that arrived after stop()")
                return
            self._on_success(events)
            return

        if generation != self._generation:
            logger.debug("Discarding failure that arrived after stop()")
            return
        self._on_failure(error, retry_count)

    def _on_success(self, events: list[Event]) -> None:
        self._set_state(
            phase=PollPhase.IDLE,
            events=tuple(events),
            loading=False,
            last_error=None,
            retry_count=0,
            update_flag=True,
        )
        logger.info(f"Fetched {len(events)} events")

    def _on_failure(self, error: FetchError, retry_count: int) -> None:
        message = str(error) or "Failed to fetch events"
        logger.error(f"Error fetching events: {message}")

        retryable = self.retry_format_errors or not isinstance(error, FormatError)

        if retryable and retry_count < self.max_retries:
            next_count = retry_count + 1
            self._retry_timer = ScheduledTask(
                self.retry_delay,
                lambda: self._begin_fetch(retry_count=next_count, trigger="retry"),
                name="retry",
            )
            self._set_state(phase=PollPhase.SCHEDULED_RETRY, last_error=message)
            logger.info(f"Retry {next_count}/{self.max_retries} in {self.retry_delay}s")
            return

        self._set_state(phase=PollPhase.IDLE, loading=False, last_error=message)
        if retryable:
            logger.warning(f"Giving up after {self.max_retries} retries; waiting for next refresh")
        else:
            logger.warning(f"Not retrying {type(error).__name__}; waiting for next refresh")

    def _set_state(self, **changes) -> None:
        if not self._running:
            return

        self._state = self._state.evolve(**changes)
        self.event_bus.publish(STATE_TOPIC, self._state)
