"""Main Textual application for gitme dash interactive mode."""

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Input, Label
from textual.worker import Worker

from gitme.core.config import ConfigError, GitmeConfig, load_config
from gitme.core.review import build_review_command
from gitme.gateway.github.abc import PrDataSource
from gitme.gateway.github.types import PullRequest, RepositoryConfig, Role
from gitme.gateway.review_launcher.abc import ReviewLaunchError
from gitme.tui.context import GitmeDashContext
from gitme.tui.dashboard import Dashboard, DashboardFrame
from gitme.tui.data.scheduler import RefreshScheduler
from gitme.tui.data.store import PrStore
from gitme.tui.data.types import CycleResult
from gitme.tui.screens.help_screen import HelpScreen
from gitme.tui.views.types import get_view_config
from gitme.tui.widgets.details_panel import BODY_PREVIEW_LINES, DetailsPanel
from gitme.tui.widgets.pr_table import PullRequestTable
from gitme.tui.widgets.status_bar import StatusBar
from gitme.tui.widgets.view_bar import ViewBar

logger = logging.getLogger(__name__)

# Seconds to wait for cancelled refresh cycles before closing the data source
SHUTDOWN_TIMEOUT = 2.0


class GitmeDashApp(App):
    """Interactive TUI for the gitme dashboard.

    Shows the pull requests waiting for the user's review and the user's own
    pull requests, grouped by repository, refreshed in the background.
    """

    CSS_PATH = Path(__file__).parent / "styles" / "dash.tcss"

    # Keys go to the app bindings until search mode focuses the input
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("q", "exit_app", "Quit"),
        Binding("escape", "escape", "Clear search", show=False),
        Binding("question_mark", "help", "Help"),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("up", "cursor_up", "Up", show=False),
        Binding("d", "page_down", "Page down", show=False),
        Binding("u", "page_up", "Page up", show=False),
        Binding("n", "next_repository", "Next repo", show=False),
        Binding("p", "previous_repository", "Previous repo", show=False),
        Binding("tab", "next_view", "Next view", priority=True),
        Binding("shift+tab", "previous_view", "Previous view", show=False, priority=True),
        Binding("1", "switch_view('REVIEW_REQUESTED')", "Review Requested", show=False),
        Binding("2", "switch_view('AUTHORED')", "My PRs", show=False),
        Binding("enter", "toggle_expand", "Expand"),
        Binding("e", "expand_all", "Expand all", show=False),
        Binding("c", "collapse_all", "Collapse all", show=False),
        Binding("s", "toggle_sort", "Sort"),
        Binding("slash", "start_search", "Search"),
        Binding("f", "refresh", "Refresh"),
        Binding("o", "open_pr", "Open"),
        Binding("r", "review", "Review"),
        Binding("R", "reload_config", "Reload config", show=False),
        Binding("ctrl+d", "scroll_details(1)", "Scroll details down", show=False),
        Binding("ctrl+u", "scroll_details(-1)", "Scroll details up", show=False),
    ]

    def __init__(self, ctx: GitmeDashContext, *, refresh_interval: float | None = None) -> None:
        """Initialize the dashboard app.

        Args:
            ctx: Configuration and gateways
            refresh_interval: Seconds between timed refreshes (0 to disable),
                defaults to the configured refresh_interval
        """
        super().__init__()
        self._ctx = ctx
        self._config = ctx.config
        self._refresh_interval = (
            refresh_interval if refresh_interval is not None else ctx.config.refresh_interval
        )
        self._data_source = ctx.data_source
        self._store = PrStore(ctx.config.repositories)
        self._dashboard = Dashboard(self._store)
        self._scheduler = RefreshScheduler(
            store=self._store,
            data_source=self._data_source,
            username=ctx.config.username,
            time=ctx.time,
            interval=self._refresh_interval,
            fetch_timeout=ctx.config.fetch_timeout or None,
            spawn=self._spawn_cycle,
        )
        self._scheduler.add_listener(self._on_cycle_complete)
        self._last_updates: dict[Role, tuple[str, float]] = {}
        self._dashboard_frame: DashboardFrame | None = None
        self._searching = False
        self._pending_reload: tuple[GitmeConfig, PrDataSource] | None = None
        self._table: PullRequestTable | None = None
        self._status_bar: StatusBar | None = None

    @property
    def dashboard(self) -> Dashboard:
        return self._dashboard

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def frame(self) -> DashboardFrame | None:
        """Last frame rendered, None before the first render."""
        return self._dashboard_frame

    @property
    def searching(self) -> bool:
        return self._searching

    def compose(self) -> ComposeResult:
        """Create the application layout."""
        yield ViewBar(active_role=self._dashboard.active_role)
        with Container(id="main-container"):
            yield Label(
                "No repositories configured. Add one with: gitme config add-repo OWNER/NAME",
                id="empty-message",
            )
            yield PullRequestTable()
            yield DetailsPanel(id="details")
        yield Input(
            placeholder="Search repository, number or title",
            id="search-input",
            disabled=True,
        )
        yield StatusBar()

    def on_mount(self) -> None:
        """Initialize app after mounting."""
        self._table = self.query_one(PullRequestTable)
        self._status_bar = self.query_one(StatusBar)
        self._render_dashboard()

        if self._store.repositories:
            self._scheduler.refresh_all()
            self._render_dashboard()

        if self._refresh_interval > 0:
            self.set_interval(1.0, self._on_refresh_tick)

    def _spawn_cycle(self, coro: Coroutine[Any, Any, None]) -> Worker[None]:
        return self.run_worker(coro, group="refresh", exit_on_error=True)

    def _on_refresh_tick(self) -> None:
        now = self._ctx.time.monotonic()
        if self._scheduler.tick(now):
            self._render_dashboard()
        remaining = self._scheduler.seconds_until_refresh(self._dashboard.active_role, now)
        if self._status_bar is not None:
            self._status_bar.set_refresh_countdown(None if remaining is None else int(remaining))

    def _on_cycle_complete(self, result: CycleResult) -> None:
        self._dashboard.on_cycle_complete(result)
        self._last_updates[result.role] = (
            self._ctx.time.now().strftime("%H:%M:%S"),
            result.duration,
        )
        self._render_dashboard()

    def _render_dashboard(self) -> None:
        """Project the dashboard into the widgets."""
        refreshing = {role for role in Role if self._scheduler.in_flight(role)}
        frame = self._dashboard.frame(refreshing)
        self._dashboard_frame = frame
        bucket_frame = frame.active

        has_repositories = bool(self._store.repositories)
        self.query_one("#empty-message", Label).display = not has_repositories
        if self._table is not None:
            self._table.display = has_repositories
            self._table.populate(bucket_frame, self._ctx.time.now())

        self.query_one(DetailsPanel).show_row(bucket_frame.selected_row)

        view_bar = self.query_one(ViewBar)
        view_bar.set_active_role(frame.active_role)
        view_bar.set_counts(
            {role: bucket.pull_request_count for role, bucket in frame.buckets.items()}
        )

        if self._status_bar is not None:
            self._status_bar.set_frame(bucket_frame)
            last_update = self._last_updates.get(frame.active_role)
            if last_update is not None:
                self._status_bar.set_last_update(*last_update)

    def _set_message(self, message: str) -> None:
        if self._status_bar is not None:
            self._status_bar.set_message(message)

    # Navigation ----------------------------------------------------------

    def action_exit_app(self) -> None:
        self.exit()

    def action_cursor_down(self) -> None:
        self._dashboard.active.move_selection(1)
        self._render_dashboard()

    def action_cursor_up(self) -> None:
        self._dashboard.active.move_selection(-1)
        self._render_dashboard()

    def action_page_down(self) -> None:
        self._dashboard.active.jump(1)
        self._render_dashboard()

    def action_page_up(self) -> None:
        self._dashboard.active.jump(-1)
        self._render_dashboard()

    def action_next_repository(self) -> None:
        self._dashboard.active.next_repository()
        self._render_dashboard()

    def action_previous_repository(self) -> None:
        self._dashboard.active.previous_repository()
        self._render_dashboard()

    def action_next_view(self) -> None:
        self._stop_search()
        self._dashboard.next_view()
        self._render_dashboard()

    def action_previous_view(self) -> None:
        self._stop_search()
        self._dashboard.previous_view()
        self._render_dashboard()

    def action_switch_view(self, role_name: str) -> None:
        self._dashboard.switch_to(Role[role_name])
        self._render_dashboard()

    # Grouping ------------------------------------------------------------

    def action_toggle_expand(self) -> None:
        self._dashboard.active.toggle_selected()
        self._render_dashboard()

    def action_expand_all(self) -> None:
        self._dashboard.active.expand_all()
        self._render_dashboard()

    def action_collapse_all(self) -> None:
        self._dashboard.active.collapse_all()
        self._render_dashboard()

    def action_toggle_sort(self) -> None:
        bucket = self._dashboard.active
        bucket.toggle_sort()
        self._set_message(f"Sorted {bucket.sort_state.display_label}")
        self._render_dashboard()

    # Search --------------------------------------------------------------

    def action_start_search(self) -> None:
        search_input = self.query_one("#search-input", Input)
        self._searching = True
        search_input.disabled = False
        search_input.value = self._dashboard.active.view.search_query
        search_input.add_class("visible")
        search_input.focus()

    def action_escape(self) -> None:
        """Clear the search and leave search mode."""
        if not self._searching:
            return
        self.query_one("#search-input", Input).value = ""
        self._dashboard.active.set_search("")
        self._stop_search()
        self._render_dashboard()

    def _stop_search(self) -> None:
        if not self._searching:
            return
        self._searching = False
        search_input = self.query_one("#search-input", Input)
        search_input.remove_class("visible")
        search_input.disabled = True
        self.set_focus(None)

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        if not self._searching:
            return
        self._dashboard.active.set_search(event.value)
        self._render_dashboard()

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        """Enter keeps the search text and returns to navigation."""
        self._stop_search()
        self._render_dashboard()

    # Actions -------------------------------------------------------------

    def action_scroll_details(self, direction: int) -> None:
        """Scroll the description in the details panel by half its window."""
        step = max(BODY_PREVIEW_LINES // 2, 1)
        self.query_one(DetailsPanel).scroll_body(direction * step)

    def action_help(self) -> None:
        self.push_screen(HelpScreen())

    def action_refresh(self) -> None:
        """Refresh both buckets now; buckets already refreshing are left alone."""
        if not self._scheduler.refresh_all():
            self._set_message("Refresh already in progress")
        self._render_dashboard()

    def action_open_pr(self) -> None:
        """Open selected pull request in browser."""
        pr = self._dashboard.active.selected_pull_request()
        if pr is None:
            self._set_message("Select a pull request to open")
            return
        self._ctx.browser.launch(pr.url)
        self._set_message(f"Opened PR #{pr.number}")

    def action_review(self) -> None:
        """Run the review command in the selected repository's checkout."""
        view = get_view_config(self._dashboard.active_role)
        if not view.allows_review:
            self._set_message("Review is only available in the Review Requested view")
            return

        repository = self._selected_repository()
        if repository is None:
            self._set_message("Select a pull request to review")
            return

        try:
            review_command = build_review_command(self._config, repository)
            self._ctx.review_launcher.launch(review_command)
        except ReviewLaunchError as e:
            logger.warning("Review command failed: %s", e)
            self._set_message(str(e))
            return
        self._set_message(f"Started {review_command.command} in {review_command.cwd}")

    def _selected_repository(self) -> RepositoryConfig | None:
        activation = self._dashboard.active.activate_selection()
        if isinstance(activation, PullRequest):
            return self._config.find_repository(activation.repository)
        return activation

    def action_reload_config(self) -> None:
        """Re-read config.toml and apply it without restarting."""
        try:
            config = load_config(self._ctx.config_path)
        except ConfigError as e:
            self._set_message(f"Config error: {e}")
            return
        if config is None:
            self._set_message(f"No config file at {self._ctx.config_path}")
            return

        try:
            data_source = self._ctx.data_source_factory(config)
        except (RuntimeError, ValueError) as e:
            self._set_message(f"Cannot authenticate: {e}")
            return

        replaced = self._pending_reload
        self._pending_reload = (config, data_source)
        if replaced is not None:
            # A reload is already waiting for the refresh in flight; the newer file wins
            _, unused_source = replaced
            if unused_source is not data_source and unused_source is not self._data_source:
                self.run_worker(unused_source.aclose(), group="cleanup")
            return

        if any(self._scheduler.in_flight(role) for role in Role):
            self._set_message("Reloading configuration after the refresh in progress")
        self.run_worker(self._apply_reload(), group="reload", exit_on_error=True)

    async def _apply_reload(self) -> None:
        """Swap in the pending configuration once no cycle is in flight.

        Cycles read the repository list and data source when they start, so
        the swap waits for them. Nothing below wait_idle() suspends before
        refresh_all(), so every bucket is refetched with the new settings.
        """
        await self._scheduler.wait_idle()
        pending = self._pending_reload
        self._pending_reload = None
        if pending is None:
            return
        config, data_source = pending

        old_source = self._data_source
        self._data_source = data_source
        self._config = config
        self._scheduler.reconfigure(
            config.repositories,
            username=config.username,
            data_source=data_source,
            interval=self._refresh_interval,
        )
        self._dashboard.reconcile_all()
        self._scheduler.refresh_all()
        self._set_message("Configuration reloaded")
        self._render_dashboard()

        if old_source is not data_source:
            await old_source.aclose()

    async def on_unmount(self) -> None:
        """Stop refresh cycles before closing the data source they fetch from."""
        self.workers.cancel_group(self, "refresh")
        try:
            await asyncio.wait_for(self._scheduler.wait_idle(), timeout=SHUTDOWN_TIMEOUT)
        except TimeoutError:
            logger.debug("Refresh cycles still running after %ss at shutdown", SHUTDOWN_TIMEOUT)
        await self._data_source.aclose()
