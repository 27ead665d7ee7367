"""Dashboard controller wiring the poller, search and renderers together."""
import asyncio
import logging
from typing import Callable

from webhook_dashboard.collectors.webhook.client import EventsClient
from webhook_dashboard.collectors.webhook.poller import Poller, EventsSource
from webhook_dashboard.core.config import Config
from webhook_dashboard.core.event_bus import EventBus
from webhook_dashboard.core.search import filter_events
from webhook_dashboard.models import DashboardView, PollState

logger = logging.getLogger(__name__)

VIEW_TOPIC = "dashboard_view"


class Dashboard:
    """Wires all components together and manages lifecycle.

    Responsibilities:
    1. Build the events client, event bus and poller from configuration
    2. Hold the search query and derive the filtered view
    3. Republish a DashboardView whenever the poll state or query changes
    4. Forward renderer actions (acknowledge, retry) to the poller
    """

    def __init__(self, config: Config, client: EventsSource | None = None):
        """Initialize the dashboard.

        Args:
            config: System configuration
            client: Events source override (an EventsClient for config.api if None)
        """
        self.config = config
        self.event_bus = EventBus()

        self.client = client or EventsClient(
            base_url=config.api.base_url,
            timeout_seconds=config.api.request_timeout_seconds,
        )

        self.poller = Poller(
            client=self.client,
            event_bus=self.event_bus,
            max_retries=config.poller.max_retries,
            retry_delay=config.poller.retry_delay_seconds,
            refresh_interval=config.poller.refresh_interval_seconds,
            retry_format_errors=config.poller.retry_format_errors,
        )

        self._query = ""
        self._stopped = asyncio.Event()
        self.poller.subscribe(self._on_poll_state)

        logger.info("Dashboard initialized")

    @property
    def is_running(self) -> bool:
        return self.poller.is_running

    @property
    def search_query(self) -> str:
        return self._query

    def view(self) -> DashboardView:
        """Build the renderer snapshot from the current poll state and query."""
        state = self.poller.state
        return DashboardView(
            events=tuple(filter_events(state.events, self._query)),
            total=len(state.events),
            query=self._query,
            loading=state.loading,
            error=state.last_error,
            update_flag=state.update_flag,
            retry_count=state.retry_count,
            phase=state.phase,
        )

    def subscribe(self, callback: Callable[[DashboardView], None]) -> Callable[[], None]:
        """Call `callback` with every new view. Returns an unsubscribe function."""
        return self.event_bus.subscribe([VIEW_TOPIC], callback)

    def _on_poll_state(self, state: PollState) -> None:
        self.event_bus.publish(VIEW_TOPIC, self.view())

    # =========================================================================
    # Renderer actions
    # =========================================================================

    def set_search_query(self, query: str) -> None:
        """Update the search query and publish the refiltered view."""
        if query == self._query:
            return
        self._query = query
        logger.debug(f"Search query set to {query!r}")
        self.event_bus.publish(VIEW_TOPIC, self.view())

    def acknowledge_error(self) -> None:
        self.poller.acknowledge_error()

    def acknowledge_update(self) -> None:
        self.poller.acknowledge_update()

    def retry_now(self) -> None:
        self.poller.retry_now()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start polling. Must be called from within a running event loop."""
        logger.info(f"Starting dashboard for {self.config.api.base_url}")
        self._stopped.clear()
        self.poller.start()

    def stop(self) -> None:
        """Stop polling and cancel all timers."""
        logger.info("Stopping dashboard...")
        self.poller.stop()
        self._stopped.set()

    async def run(self) -> None:
        """Start polling and block until stop() is called or the task is cancelled.

        Returns at once without polling if stop() was requested beforehand.
        """
        if self._stopped.is_set():
            logger.info("Stop requested before run, not starting")
            return

        self.start()
        try:
            await self._stopped.wait()
        except asyncio.CancelledError:
            logger.info("Dashboard cancelled")
        finally:
            await self.poller.close()
            logger.info("Dashboard stopped")
