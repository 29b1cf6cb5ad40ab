"""
Dashboard pages.

Each page owns the pollers for the endpoints it displays plus the metric
cards bound to them. Endpoints are fetched independently: one failing
endpoint marks only its own poller as failed, and refresh() re-runs every
poller of the page (the retry action).
"""

import asyncio
import logging
from typing import Any

from arbview.api.models import (
    AddWalletRequest,
    Alert,
    AlertRule,
    AlertStats,
    DashboardSummary,
    NetworkList,
    OpportunityList,
    SettingsModel,
    Transaction,
    TransactionStats,
    WalletInfo,
    WalletType,
)
from arbview.api.source import DashboardDataSource
from arbview.config.constants import SETTINGS_SECTION_INTERVAL, SETTINGS_SECTIONS
from arbview.config.settings import Settings, get_settings
from arbview.core.interpolator import ClockFunction
from arbview.core.types import ConnectionState
from arbview.dashboard.context import DashboardContext
from arbview.dashboard.metric_card import Extractor, MetricCard
from arbview.polling.poller import FetchFunction, PollHandle, Poller
from arbview.polling.state import PollState
from arbview.telemetry.metrics import PollMetrics
from arbview.utils.formatting import (
    ValueFormatter,
    format_currency,
    format_integer,
    format_number,
    format_percentage,
)


logger = logging.getLogger(__name__)


class Page:
    """Base page: a set of pollers and the cards bound to them."""

    title = "Page"
    key = "page"

    def __init__(
        self,
        source: DashboardDataSource,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        clock: ClockFunction | None = None,
    ) -> None:
        self._source = source
        self._settings = settings or get_settings()
        self._metrics = metrics
        self._clock = clock
        self._pollers: list[Poller[Any]] = []
        self._cards: list[MetricCard[Any]] = []
        self._handles: list[PollHandle] = []

    def _add_poller(self, name: str, fetch: FetchFunction[Any], interval_s: float) -> Poller[Any]:
        poller: Poller[Any] = Poller(f"{self.key}.{name}", fetch, interval_s, self._metrics)
        self._pollers.append(poller)
        return poller

    def _add_card(
        self,
        label: str,
        poller: Poller[Any],
        extractor: Extractor[Any],
        formatter: ValueFormatter = format_number,
    ) -> MetricCard[Any]:
        card: MetricCard[Any] = MetricCard(
            label,
            poller,
            extractor,
            formatter,
            duration_ms=self._settings.animation_duration_ms,
            clock=self._clock,
        )
        self._cards.append(card)
        return card

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def pollers(self) -> list[Poller[Any]]:
        return list(self._pollers)

    @property
    def cards(self) -> list[MetricCard[Any]]:
        return list(self._cards)

    @property
    def running(self) -> bool:
        return any(p.running for p in self._pollers)

    @property
    def connection_state(self) -> ConnectionState:
        """State of the page's primary (first) poller."""
        if not self._pollers:
            return ConnectionState.IDLE
        return self._pollers[0].state.connection_state

    @property
    def errors(self) -> dict[str, str]:
        """Latest error per failing poller."""
        return {p.name: p.state.error for p in self._pollers if p.state.error is not None}

    @property
    def last_error(self) -> str | None:
        for poller in self._pollers:
            if poller.state.error is not None:
                return poller.state.error
        return None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> list[PollHandle]:
        """Start every poller of the page."""
        self._handles = [poller.start() for poller in self._pollers]
        logger.info(f"{self.title} page started ({len(self._pollers)} pollers)")
        return self._handles

    async def stop(self) -> None:
        """Cancel every poller and wait for them to finish."""
        for poller in self._pollers:
            poller.cancel()
        await asyncio.gather(*(poller.stop() for poller in self._pollers))
        self._handles = []

    async def refresh(self) -> None:
        """Re-run every poller now."""
        await asyncio.gather(*(poller.refresh() for poller in self._pollers))

    def tick(self, now: float | None = None) -> None:
        """Advance every card's animation."""
        for card in self._cards:
            card.tick(now)


class DashboardPage(Page):
    """Headline metrics and live opportunities."""

    title = "Dashboard"
    key = "dashboard"

    def __init__(
        self,
        source: DashboardDataSource,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        clock: ClockFunction | None = None,
    ) -> None:
        super().__init__(source, settings, metrics, clock)

        self.summary: Poller[DashboardSummary] = self._add_poller(
            "summary", source.get_dashboard_summary, self._settings.dashboard_poll_s
        )
        self.opportunities: Poller[OpportunityList] = self._add_poller(
            "opportunities", source.get_opportunities, self._settings.opportunities_poll_s
        )

        self._add_card("Total Profit", self.summary, lambda s: s.total_profit_usd, format_currency)
        self._add_card(
            "Opportunities", self.summary, lambda s: s.total_opportunities, format_integer
        )
        self._add_card(
            "Avg Profit", self.summary, lambda s: s.average_profit_pct, format_percentage
        )
        self._add_card(
            "Success Rate",
            self.summary,
            lambda s: s.success_rate,
            lambda v: format_percentage(v, decimals=1),
        )
        self._add_card("Active Networks", self.summary, lambda s: s.active_networks, format_integer)
        self._add_card("Executed Trades", self.summary, lambda s: s.executed_trades, format_integer)

    def top_opportunities(self, limit: int = 5) -> list[Any]:
        """Most profitable opportunities from the latest poll."""
        data = self.opportunities.state.data
        if data is None:
            return []
        ranked = sorted(data.opportunities, key=lambda o: o.profit_percentage, reverse=True)
        return ranked[:limit]


class TransactionsPage(Page):
    """Transaction statistics and history."""

    title = "Transactions"
    key = "transactions"

    def __init__(
        self,
        source: DashboardDataSource,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        clock: ClockFunction | None = None,
    ) -> None:
        super().__init__(source, settings, metrics, clock)

        interval = self._settings.transactions_poll_s
        self.stats: Poller[TransactionStats] = self._add_poller(
            "stats", source.get_transaction_stats, interval
        )
        self.history: Poller[list[Transaction]] = self._add_poller(
            "history", source.get_transaction_history, interval
        )

        self._add_card("Transactions", self.stats, lambda s: s.total_transactions, format_integer)
        self._add_card("Volume 24h", self.stats, lambda s: s.total_volume_24h, format_currency)
        self._add_card("Profit 24h", self.stats, lambda s: s.total_profit_24h, format_currency)
        self._add_card(
            "Success Rate",
            self.stats,
            lambda s: s.success_rate,
            lambda v: format_percentage(v, decimals=1),
        )
        self._add_card("Avg Gas Fee", self.stats, lambda s: s.average_gas_fee, format_currency)

    def recent(self, status: str | None = None, limit: int = 10) -> list[Transaction]:
        """Latest transactions, optionally filtered by status."""
        history = self.history.state.data or []
        if status is not None:
            history = [tx for tx in history if tx.status == status]
        return history[:limit]


class AlertsPage(Page):
    """Active alerts and alert rules, with acknowledge/resolve/toggle actions."""

    title = "Alerts"
    key = "alerts"

    def __init__(
        self,
        source: DashboardDataSource,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        clock: ClockFunction | None = None,
    ) -> None:
        super().__init__(source, settings, metrics, clock)

        interval = self._settings.alerts_poll_s
        self.stats: Poller[AlertStats] = self._add_poller(
            "stats", source.get_alert_stats, interval
        )
        self.active: Poller[list[Alert]] = self._add_poller(
            "active", source.get_active_alerts, interval
        )
        self.rules: Poller[list[AlertRule]] = self._add_poller(
            "rules", source.get_alert_rules, interval
        )

        self._add_card("Active Alerts", self.stats, lambda s: s.active_alerts, format_integer)
        self._add_card("Critical", self.stats, lambda s: s.critical_alerts, format_integer)
        self._add_card("Active Rules", self.stats, lambda s: s.active_rules, format_integer)
        self._add_card(
            "Avg Response (s)",
            self.stats,
            lambda s: s.average_response_time,
            lambda v: format_number(v, max_decimals=1),
        )

    async def acknowledge(self, alert_id: str) -> None:
        """Acknowledge an alert and refresh the alert lists."""
        await self._source.acknowledge_alert(alert_id)
        logger.info(f"Alert {alert_id} acknowledged")
        await asyncio.gather(self.active.refresh(), self.stats.refresh())

    async def resolve(self, alert_id: str) -> None:
        """Resolve an alert and refresh the alert lists."""
        await self._source.resolve_alert(alert_id)
        logger.info(f"Alert {alert_id} resolved")
        await asyncio.gather(self.active.refresh(), self.stats.refresh())

    async def toggle_rule(self, rule_id: str, enabled: bool | None = None) -> bool:
        """
        Enable or disable a rule.

        Args:
            rule_id: Rule to change.
            enabled: New state; when None the rule's current state is flipped.

        Returns:
            The state that was sent.

        Raises:
            KeyError: If enabled is None and the rule is not in the loaded list.
        """
        if enabled is None:
            rules = self.rules.state.data or []
            current = next((r for r in rules if r.id == rule_id), None)
            if current is None:
                raise KeyError(rule_id)
            enabled = not current.enabled

        await self._source.toggle_alert_rule(rule_id, enabled)
        logger.info(f"Alert rule {rule_id} {'enabled' if enabled else 'disabled'}")
        await asyncio.gather(self.rules.refresh(), self.stats.refresh())
        return enabled


class WalletsPage(Page):
    """Monitored wallets and portfolio totals."""

    title = "Wallets"
    key = "wallets"

    def __init__(
        self,
        source: DashboardDataSource,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        clock: ClockFunction | None = None,
    ) -> None:
        super().__init__(source, settings, metrics, clock)

        self.wallets: Poller[list[WalletInfo]] = self._add_poller(
            "list", source.get_wallets, self._settings.wallets_poll_s
        )

        self._add_card(
            "Total Balance",
            self.wallets,
            lambda ws: sum(w.balance_usd for w in ws),
            format_currency,
        )
        self._add_card("Wallets", self.wallets, len, format_integer)
        self._add_card(
            "Connected",
            self.wallets,
            lambda ws: sum(1 for w in ws if w.is_connected),
            format_integer,
        )

    async def add_wallet(
        self,
        address: str,
        name: str,
        network: str,
        wallet_type: WalletType = "hot",
    ) -> WalletInfo | None:
        """
        Register a wallet and refresh the list.

        Raises:
            pydantic.ValidationError: If a field is empty.
        """
        request = AddWalletRequest(address=address, name=name, network=network, type=wallet_type)
        wallet = await self._source.add_wallet(request)
        logger.info(f"Wallet {name} added on {network}")
        await self.wallets.refresh()
        return wallet


class SettingsPage(Page):
    """
    Settings sections.

    Sections are loaded once when the page starts and again after each
    save; they are not polled on a timer.
    """

    title = "Settings"
    key = "settings"

    def __init__(
        self,
        source: DashboardDataSource,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        clock: ClockFunction | None = None,
    ) -> None:
        super().__init__(source, settings, metrics, clock)

        self.sections: dict[str, Poller[SettingsModel]] = {}
        for section in SETTINGS_SECTIONS:
            self.sections[section] = self._add_poller(
                section, self._section_fetcher(section), SETTINGS_SECTION_INTERVAL
            )
        self._load_task: asyncio.Task[None] | None = None

    def _section_fetcher(self, section: str) -> FetchFunction[SettingsModel]:
        async def fetch() -> SettingsModel:
            return await self._source.get_settings(section)

        return fetch

    @property
    def running(self) -> bool:
        return self._load_task is not None and not self._load_task.done()

    def start(self) -> list[PollHandle]:
        """Load every section once."""
        self._load_task = asyncio.create_task(self.refresh(), name="settings:load")
        return []

    async def stop(self) -> None:
        if self._load_task:
            self._load_task.cancel()
            try:
                await self._load_task
            except asyncio.CancelledError:
                pass
            self._load_task = None
        await super().stop()

    def section(self, name: str) -> PollState[SettingsModel]:
        """
        State of one section.

        Raises:
            KeyError: If the section is unknown.
        """
        return self.sections[name].state

    async def save(self, section: str, payload: SettingsModel) -> None:
        """
        Save one section and reload it.

        Raises:
            KeyError: If the section is unknown.
        """
        poller = self.sections[section]
        await self._source.save_settings(section, payload)
        logger.info(f"Settings section {section} saved")
        await poller.refresh()


class Sidebar(Page):
    """
    Sidebar feeds: opportunities and networks, folded into the badge counts
    held by the dashboard context.
    """

    title = "Sidebar"
    key = "sidebar"

    def __init__(
        self,
        source: DashboardDataSource,
        context: DashboardContext,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
    ) -> None:
        super().__init__(source, settings, metrics)
        self._context = context

        self.opportunities: Poller[OpportunityList] = self._add_poller(
            "opportunities", source.get_opportunities, self._settings.sidebar_opportunities_poll_s
        )
        self.networks: Poller[NetworkList] = self._add_poller(
            "networks", source.get_networks, self._settings.sidebar_networks_poll_s
        )
        self.opportunities.add_listener(self._update_badges)
        self.networks.add_listener(self._update_badges)

    def _update_badges(self, _state: PollState[Any]) -> None:
        self._context.update_badges(self.opportunities.state.data, self.networks.state.data)
