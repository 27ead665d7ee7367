"""Console renderer for the dashboard."""
import logging
import sys
from typing import Callable, TextIO

from webhook_dashboard.core.dashboard import Dashboard
from webhook_dashboard.core.scheduler import ScheduledTask
from webhook_dashboard.models import DashboardView, Event
from webhook_dashboard.ui.grid import paginate, render_table, sort_events

logger = logging.getLogger(__name__)

UPDATE_MESSAGE = "Table data is updated!"


class ConsoleRenderer:
    """Draws dashboard views as text and auto-dismisses notification banners.

    The renderer owns only presentation state (sort, page, banner timers);
    everything it shows comes from the DashboardView it is handed.
    """

    def __init__(self, dashboard: Dashboard, stream: TextIO | None = None):
        settings = dashboard.config.dashboard

        self.dashboard = dashboard
        self.stream = stream or sys.stdout
        self.page_size = settings.page_size
        self.sort_field = settings.sort_field
        self.sort_descending = settings.sort_descending
        self.error_banner_seconds = settings.error_banner_seconds
        self.update_banner_seconds = settings.update_banner_seconds
        self.page = 0

        self._unsubscribe: Callable[[], None] | None = None
        self._error_timer: ScheduledTask | None = None
        self._update_timer: ScheduledTask | None = None
        self._shown_error: str | None = None
        self._shown_rows: tuple[Event, ...] | None = None
        self._shown_query: str | None = None

    def attach(self) -> None:
        """Start rendering every view the dashboard publishes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.dashboard.subscribe(self.render)

    def detach(self) -> None:
        """Stop rendering and cancel pending banner timers."""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        for timer in (self._error_timer, self._update_timer):
            if timer:
                timer.cancel()

    def render(self, view: DashboardView) -> None:
        self._render_error(view)
        self._render_update(view)

        if view.events != self._shown_rows or view.query != self._shown_query:
            self._shown_rows = view.events
            self._shown_query = view.query
            self._write(self._grid_text(view))

    def _render_error(self, view: DashboardView) -> None:
        if not view.error:
            self._shown_error = None
            if self._error_timer:
                self._error_timer.cancel()
                self._error_timer = None
            return

        if view.error == self._shown_error:
            return

        self._shown_error = view.error
        self._write(f"[ERROR] {view.error}")

        if self._error_timer:
            self._error_timer.cancel()
        self._error_timer = ScheduledTask(
            self.error_banner_seconds, self.dashboard.acknowledge_error, name="error-banner"
        )

    def _render_update(self, view: DashboardView) -> None:
        if not view.update_flag:
            return
        if self._update_timer and self._update_timer.pending:
            return

        self._write(f"[UPDATED] {UPDATE_MESSAGE}")
        self._update_timer = ScheduledTask(
            self.update_banner_seconds, self.dashboard.acknowledge_update, name="update-banner"
        )

    def _grid_text(self, view: DashboardView) -> str:
        rows = sort_events(view.events, self.sort_field, self.sort_descending)
        page = paginate(rows, self.page, self.page_size)
        self.page = page.page

        status = f"{len(view.events)} of {view.total} events"
        if view.query.strip():
            status += f" matching {view.query.strip()!r}"
        status += f" - page {page.page + 1}/{page.page_count}"
        if view.loading:
            status += " (loading)"

        return f"{render_table(page.rows)}\n{status}"

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()
