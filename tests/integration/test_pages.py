"""
Integration tests for dashboard pages and the terminal dashboard.

Pages are driven through refresh() so each test controls exactly when
pollers run.
"""

import asyncio
import io

import pytest

from arbview.api.models import SystemSettings
from arbview.config.constants import SETTINGS_SECTION_INTERVAL
from arbview.config.settings import Settings
from arbview.core.types import ConnectionState, SidebarBadges
from arbview.dashboard.context import DashboardContext
from arbview.dashboard.metric_card import LOADING_TEXT
from arbview.dashboard.pages import (
    AlertsPage,
    DashboardPage,
    SettingsPage,
    Sidebar,
    TransactionsPage,
    WalletsPage,
)
from arbview.dashboard.terminal import TerminalDashboard
from arbview.telemetry.metrics import PollMetrics
from tests.mocks.source import MockDataSource


class TestPages:
    """Tests for page pollers and actions."""

    @pytest.mark.asyncio
    async def test_dashboard_cards_load(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test refresh loads every card of the dashboard page."""
        page = DashboardPage(mock_source, settings)
        assert all(card.render_value() == LOADING_TEXT for card in page.cards)

        await page.refresh()

        assert len(page.cards) == 6
        assert all(card.enabled for card in page.cards)
        assert all(card.render_value() != LOADING_TEXT for card in page.cards)
        assert page.connection_state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_top_opportunities_sorted(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test opportunities are ranked by profit percentage."""
        page = DashboardPage(mock_source, settings)
        assert page.top_opportunities() == []

        await page.refresh()

        top = page.top_opportunities(limit=3)
        assert len(top) <= 3
        profits = [o.profit_percentage for o in top]
        assert profits == sorted(profits, reverse=True)

    @pytest.mark.asyncio
    async def test_failing_endpoint_is_isolated(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test one failing endpoint only affects its own poller."""
        mock_source.fail("get_transaction_history")
        page = TransactionsPage(mock_source, settings)

        await page.refresh()

        assert page.stats.state.has_loaded
        assert page.stats.state.error is None
        assert page.history.state.error == "HTTP 500: Internal server error"
        assert page.errors == {"transactions.history": "HTTP 500: Internal server error"}
        assert page.recent() == []

    @pytest.mark.asyncio
    async def test_retry_clears_error(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test refresh after recovery clears the error."""
        mock_source.fail("get_dashboard_summary")
        page = DashboardPage(mock_source, settings)

        await page.refresh()
        assert page.connection_state is ConnectionState.ERROR
        assert page.last_error is not None

        mock_source.recover("get_dashboard_summary")
        await page.refresh()

        assert page.last_error is None
        assert page.connection_state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_recent_filters_by_status(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test transaction history filtering."""
        page = TransactionsPage(mock_source, settings)
        await page.refresh()

        confirmed = page.recent(status="confirmed", limit=100)

        assert all(tx.status == "confirmed" for tx in confirmed)

    @pytest.mark.asyncio
    async def test_acknowledge_alert_refreshes(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test acknowledging re-polls the alert list."""
        page = AlertsPage(mock_source, settings)
        await page.refresh()
        alert_id = page.active.state.data[0].id

        await page.acknowledge(alert_id)

        statuses = {a.id: a.status for a in page.active.state.data}
        assert statuses[alert_id] == "acknowledged"
        assert mock_source.call_count("get_active_alerts") == 2

    @pytest.mark.asyncio
    async def test_toggle_rule_flips_state(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test toggling without a target state flips the loaded one."""
        page = AlertsPage(mock_source, settings)
        await page.refresh()
        rule = page.rules.state.data[0]

        sent = await page.toggle_rule(rule.id)

        assert sent is (not rule.enabled)
        assert page.rules.state.data[0].enabled is sent

    @pytest.mark.asyncio
    async def test_toggle_unknown_rule(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test flipping a rule that is not loaded fails."""
        page = AlertsPage(mock_source, settings)

        with pytest.raises(KeyError):
            await page.toggle_rule("missing")

    @pytest.mark.asyncio
    async def test_add_wallet(self, mock_source: MockDataSource, settings: Settings) -> None:
        """Test adding a wallet refreshes the list and counts."""
        page = WalletsPage(mock_source, settings)
        await page.refresh()
        before = len(page.wallets.state.data)

        wallet = await page.add_wallet("0xfeed", "Ops", "Ethereum")

        assert wallet is not None
        assert len(page.wallets.state.data) == before + 1
        assert page.cards[1].animated.target_value == before + 1

    @pytest.mark.asyncio
    async def test_settings_load_once_and_save(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test settings sections load on start and reload after save."""
        page = SettingsPage(mock_source, settings)

        assert page.start() == []
        await asyncio.sleep(0)
        await page._load_task

        system = page.section("system").data
        assert isinstance(system, SystemSettings)
        assert mock_source.call_count("get_settings") == 4

        await page.save("system", system.model_copy(update={"timezone": "CET"}))

        assert page.section("system").data.timezone == "CET"
        await page.stop()
        assert not page.running

    def test_settings_interval_is_not_wallets(
        self, mock_source: MockDataSource, settings: Settings
    ) -> None:
        """Test settings sections do not borrow another page's poll interval."""
        page = SettingsPage(mock_source, settings)

        intervals = {poller.interval_s for poller in page.sections.values()}

        assert intervals == {SETTINGS_SECTION_INTERVAL}
        assert SETTINGS_SECTION_INTERVAL != settings.wallets_poll_s

    @pytest.mark.asyncio
    async def test_start_and_stop(self, mock_source: MockDataSource, settings: Settings) -> None:
        """Test pages poll immediately on start and stop cleanly."""
        page = WalletsPage(mock_source, settings)

        handles = page.start()
        await asyncio.sleep(0.05)

        assert len(handles) == 1
        assert page.running
        assert page.wallets.state.has_loaded

        await page.stop()

        assert not page.running
        assert all(p.closed for p in page.pollers)

    @pytest.mark.asyncio
    async def test_metrics_recorded(self, mock_source: MockDataSource, settings: Settings) -> None:
        """Test successful and failed cycles are counted per poller."""
        metrics = PollMetrics()
        mock_source.fail("get_alert_rules")
        page = AlertsPage(mock_source, settings, metrics)

        await page.refresh()

        assert metrics.get_counters("alerts.stats").succeeded == 1
        assert metrics.get_counters("alerts.rules").failed == 1


class TestSidebar:
    """Tests for sidebar badge feeds."""

    @pytest.mark.asyncio
    async def test_badges_follow_feeds(
        self,
        mock_source: MockDataSource,
        context: DashboardContext,
        settings: Settings,
        opportunity_list,
        network_list,
    ) -> None:
        """Test each feed update recomputes the badge counts."""
        mock_source.respond("get_opportunities", opportunity_list)
        mock_source.respond("get_networks", network_list)
        sidebar = Sidebar(mock_source, context, settings)

        await sidebar.opportunities.refresh()
        assert context.badges == SidebarBadges(opportunities=128)

        await sidebar.networks.refresh()
        assert context.badges == SidebarBadges(opportunities=128, wallets=2, alerts=1)


class TestTerminalDashboard:
    """Tests for the terminal dashboard."""

    @pytest.fixture
    def dashboard(
        self, mock_source: MockDataSource, context: DashboardContext, settings: Settings
    ) -> TerminalDashboard:
        return TerminalDashboard(mock_source, context, settings, PollMetrics(), output=io.StringIO())

    def test_render_before_load(self, dashboard: TerminalDashboard) -> None:
        """Test the first paint shows placeholders at a fixed width."""
        output = dashboard.render()

        assert "DASHBOARD" in output
        assert "Total Profit: Loading..." in output
        assert all(len(line) == 72 for line in output.splitlines())

    @pytest.mark.asyncio
    async def test_render_after_refresh(self, dashboard: TerminalDashboard) -> None:
        """Test values and badges appear after a refresh."""
        await dashboard.refresh()

        output = dashboard.render()

        assert "Total Profit: $" in output
        assert "Live" in output
        assert "Loading..." not in output

    @pytest.mark.asyncio
    async def test_error_line(
        self, dashboard: TerminalDashboard, mock_source: MockDataSource
    ) -> None:
        """Test fetch errors are shown with a retry hint."""
        mock_source.fail("get_dashboard_summary")

        await dashboard.refresh()

        assert "HTTP 500: Internal server error (press r to retry)" in dashboard.render()

    @pytest.mark.asyncio
    async def test_switch_page(self, dashboard: TerminalDashboard) -> None:
        """Test switching stops the old page and starts the new one."""
        old = dashboard.page
        dashboard.start()

        page = await dashboard.switch_page(2)

        assert isinstance(page, AlertsPage)
        assert page.running
        assert not old.running
        assert all(p.closed for p in old.pollers)
        assert "<3> Alerts" in dashboard.render()

        with pytest.raises(IndexError):
            await dashboard.switch_page(9)

        await dashboard.stop()
        assert not page.running

    @pytest.mark.asyncio
    async def test_rapid_page_switches_leave_no_pollers(
        self, dashboard: TerminalDashboard
    ) -> None:
        """Test back-to-back page keys mount only the last page and stop cancels everything."""
        dashboard.start()

        dashboard.handle_key("2")
        dashboard.handle_key("3")
        await asyncio.sleep(0.2)

        assert isinstance(dashboard.page, AlertsPage)
        assert dashboard.page.running

        await dashboard.stop()

        alive = [
            task.get_name()
            for task in asyncio.all_tasks()
            if task.get_name().startswith("poll:") and not task.done()
        ]
        assert alive == []

    @pytest.mark.asyncio
    async def test_concurrent_switches_run_in_order(
        self, dashboard: TerminalDashboard
    ) -> None:
        """Test overlapping switches each unmount the page mounted before them."""
        first = dashboard.page

        second, third = await asyncio.gather(
            dashboard.switch_page(1), dashboard.switch_page(2)
        )

        assert isinstance(second, TransactionsPage)
        assert dashboard.page is third
        assert all(p.closed for p in first.pollers)
        assert all(p.closed for p in second.pollers)
        assert not any(p.closed for p in third.pollers)

        await dashboard.stop()
        assert all(p.closed for p in third.pollers)

    @pytest.mark.asyncio
    async def test_keys(self, dashboard: TerminalDashboard, context: DashboardContext) -> None:
        """Test theme, page and quit keys."""
        dashboard.handle_key("t")
        assert context.theme == "dark"

        dashboard.handle_key("2")
        await asyncio.sleep(0.01)
        assert isinstance(dashboard.page, TransactionsPage)

        dashboard.handle_key("q")
        assert dashboard._stopped.is_set()

        await dashboard.stop()

    @pytest.mark.asyncio
    async def test_display_writes_frame(self, dashboard: TerminalDashboard) -> None:
        """Test display clears the screen and writes the panel."""
        dashboard.display()

        written = dashboard._output.getvalue()  # type: ignore[attr-defined]
        assert written.startswith("\033[H\033[J")
        assert "ARBVIEW" in written
