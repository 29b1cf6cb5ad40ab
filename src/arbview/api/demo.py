"""
Client-side fake data provider.

Implements the same interface as DashboardClient with randomly drifting
values, so the dashboard can be demoed without a backend. Mutating calls
(acknowledge, resolve, toggle, add wallet, save settings) update in-memory
state and are visible on the next read.
"""

import logging
import random
from datetime import UTC, datetime, timedelta

from arbview.api.client import DashboardAPIError
from arbview.api.models import (
    SETTINGS_MODELS,
    AddWalletRequest,
    Alert,
    AlertCondition,
    AlertRule,
    AlertStats,
    DashboardSummary,
    NetworkList,
    NetworkStatus,
    Opportunity,
    OpportunityList,
    SettingsModel,
    Transaction,
    TransactionStats,
    WalletInfo,
)
from arbview.config.constants import (
    DEMO_EXCHANGES,
    DEMO_NETWORKS,
    DEMO_TOKENS,
    SETTINGS_SECTIONS,
)


logger = logging.getLogger(__name__)


def _iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


class DemoDataSource:
    """
    Random-walk implementation of the dashboard data source.

    Pass a seed for reproducible output.
    """

    def __init__(self, seed: int | None = None, opportunity_count: int = 12) -> None:
        """
        Initialize the demo source.

        Args:
            seed: Random seed; None for non-deterministic data.
            opportunity_count: Typical number of open opportunities.
        """
        self._rng = random.Random(seed)
        self._opportunity_count = opportunity_count
        self._now = lambda: datetime.now(tz=UTC)

        self._profit_usd = 12_500.0
        self._executed = 140
        self._success_rate = 96.5

        self._networks = [
            NetworkStatus(
                id=name.lower(),
                name=name,
                connected=self._rng.random() > 0.15,
                block_number=self._rng.randint(10_000_000, 20_000_000),
                gas_price=round(self._rng.uniform(1.0, 60.0), 2),
                latency_ms=round(self._rng.uniform(50.0, 250.0), 1),
            )
            for name in DEMO_NETWORKS
        ]
        self._alerts = [self._make_alert(i) for i in range(1, 6)]
        self._rules = [self._make_rule(i) for i in range(1, 5)]
        self._wallets = [self._make_wallet(i) for i in range(1, 4)]
        self._settings: dict[str, SettingsModel] = {
            section: SETTINGS_MODELS[section]()  # type: ignore[misc]
            for section in SETTINGS_SECTIONS
        }

    # =========================================================================
    # Generators
    # =========================================================================

    def _make_alert(self, index: int) -> Alert:
        network = self._rng.choice(DEMO_NETWORKS)
        threshold = round(self._rng.uniform(0.1, 2.0), 2)
        return Alert(
            id=f"alert-{index}",
            title=f"Spread above {threshold}% on {network}",
            message="Profit threshold exceeded",
            type=self._rng.choice(["price", "arbitrage", "network", "volume"]),
            severity=self._rng.choice(["low", "medium", "high", "critical"]),
            status="active",
            triggered_at=_iso(self._now() - timedelta(minutes=self._rng.randint(1, 240))),
            conditions=AlertCondition(
                parameter="profit_percentage",
                operator=">",
                value=threshold,
                current_value=round(threshold + self._rng.uniform(0.01, 0.5), 3),
            ),
            network=network,
            pair=f"{self._rng.choice(DEMO_TOKENS)}/USDC",
            source="monitor",
        )

    def _make_rule(self, index: int) -> AlertRule:
        return AlertRule(
            id=f"rule-{index}",
            name=f"Rule {index}",
            description="Notify when spread exceeds threshold",
            type="arbitrage",
            conditions=AlertCondition(parameter="profit_percentage", operator=">", value=0.5),
            enabled=index % 2 == 1,
            notification_channels=["browser"],
            created_at=_iso(self._now() - timedelta(days=index)),
            trigger_count=self._rng.randint(0, 50),
        )

    def _make_wallet(self, index: int) -> WalletInfo:
        address = "0x" + "".join(self._rng.choice("0123456789abcdef") for _ in range(40))
        return WalletInfo(
            id=f"wallet-{index}",
            name=f"Wallet {index}",
            address=address,
            network=self._rng.choice(DEMO_NETWORKS),
            type="cold" if index == 1 else "hot",
            balance_usd=round(self._rng.uniform(500.0, 50_000.0), 2),
            native_balance=round(self._rng.uniform(0.1, 20.0), 4),
            native_token="ETH",
            token_count=self._rng.randint(1, 15),
            last_activity=_iso(self._now()),
            created_at=_iso(self._now() - timedelta(days=30 * index)),
            is_connected=True,
        )

    def _make_opportunity(self, index: int) -> Opportunity:
        token_in, token_out = self._rng.sample(DEMO_TOKENS, 2)
        exchange_in, exchange_out = self._rng.sample(DEMO_EXCHANGES, 2)
        profit_pct = (
            self._rng.uniform(0.05, 2.5) if self._rng.random() < 0.6 else self._rng.uniform(0.0, 0.05)
        )
        return Opportunity(
            id=f"opp-{index}",
            token_in=token_in,
            token_out=token_out,
            exchange_in=exchange_in,
            exchange_out=exchange_out,
            network=self._rng.choice(DEMO_NETWORKS),
            profit_amount=round(self._rng.uniform(5.0, 500.0), 2),
            profit_percentage=round(profit_pct, 4),
            strategy=self._rng.choice(["cross_exchange", "triangular", "flash_loan"]),
            confidence=round(self._rng.uniform(0.6, 0.99), 2),
            detected_at=_iso(self._now()),
        )

    # =========================================================================
    # Dashboard & Arbitrage
    # =========================================================================

    async def get_dashboard_summary(self) -> DashboardSummary:
        opportunities = await self.get_opportunities()
        self._profit_usd += self._rng.gauss(25.0, 40.0)
        if self._rng.random() < 0.3:
            self._executed += 1
        self._success_rate = min(100.0, max(80.0, self._success_rate + self._rng.gauss(0, 0.2)))

        profits = [o.profit_percentage for o in opportunities.opportunities]
        return DashboardSummary(
            total_opportunities=opportunities.total or len(profits),
            total_profit_usd=round(self._profit_usd, 2),
            average_profit_pct=round(sum(profits) / len(profits), 4) if profits else 0.0,
            active_networks=sum(1 for n in self._networks if n.connected),
            executed_trades=self._executed,
            success_rate=round(self._success_rate, 2),
            last_updated=_iso(self._now()),
        )

    async def get_opportunities(self) -> OpportunityList:
        count = max(0, self._opportunity_count + self._rng.randint(-3, 3))
        items = [self._make_opportunity(i) for i in range(1, count + 1)]
        return OpportunityList(opportunities=items, total=count)

    async def get_networks(self) -> NetworkList:
        for network in self._networks:
            if self._rng.random() < 0.05:
                network.connected = not network.connected
            if network.block_number is not None:
                network.block_number += self._rng.randint(0, 3)
        networks = [n.model_copy() for n in self._networks]
        return NetworkList(
            networks=networks,
            active_connections=sum(1 for n in networks if n.connected),
        )

    # =========================================================================
    # Transactions
    # =========================================================================

    async def get_transaction_stats(self) -> TransactionStats:
        total = self._executed + 60
        failed = max(0, int(total * (100.0 - self._success_rate) / 100.0))
        pending = self._rng.randint(0, 4)
        return TransactionStats(
            total_transactions=total,
            successful_transactions=total - failed - pending,
            pending_transactions=pending,
            failed_transactions=failed,
            total_volume_24h=round(self._rng.uniform(100_000.0, 900_000.0), 2),
            total_profit_24h=round(self._rng.uniform(200.0, 3_000.0), 2),
            average_gas_fee=round(self._rng.uniform(0.5, 25.0), 2),
            success_rate=round(self._success_rate, 2),
        )

    async def get_transaction_history(self) -> list[Transaction]:
        history = []
        for i in range(1, 21):
            from_token, to_token = self._rng.sample(DEMO_TOKENS, 2)
            amount = round(self._rng.uniform(100.0, 10_000.0), 2)
            history.append(
                Transaction(
                    id=f"tx-{i}",
                    hash="0x" + "".join(self._rng.choice("0123456789abcdef") for _ in range(64)),
                    type=self._rng.choice(["arbitrage", "swap", "deposit", "withdrawal"]),
                    status=self._rng.choices(
                        ["confirmed", "pending", "failed"], weights=[85, 10, 5]
                    )[0],
                    from_token=from_token,
                    to_token=to_token,
                    from_amount=amount,
                    to_amount=round(amount * self._rng.uniform(0.98, 1.03), 2),
                    network=self._rng.choice(DEMO_NETWORKS),
                    gas_fee=round(self._rng.uniform(0.5, 25.0), 2),
                    profit_loss=round(self._rng.gauss(15.0, 30.0), 2),
                    timestamp=_iso(self._now() - timedelta(minutes=7 * i)),
                    block_number=self._rng.randint(10_000_000, 20_000_000),
                    confirmation_count=self._rng.randint(0, 64),
                )
            )
        return history

    # =========================================================================
    # Alerts
    # =========================================================================

    def _find_alert(self, alert_id: str) -> Alert:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        raise DashboardAPIError("HTTP 404: Alert not found", status=404)

    async def get_alert_stats(self) -> AlertStats:
        active = [a for a in self._alerts if a.status == "active"]
        return AlertStats(
            total_alerts=len(self._alerts),
            active_alerts=len(active),
            critical_alerts=sum(1 for a in active if a.severity == "critical"),
            resolved_today=sum(1 for a in self._alerts if a.status == "resolved"),
            total_rules=len(self._rules),
            active_rules=sum(1 for r in self._rules if r.enabled),
            average_response_time=round(self._rng.uniform(30.0, 300.0), 1),
            success_rate=round(self._success_rate, 2),
        )

    async def get_active_alerts(self) -> list[Alert]:
        return [a.model_copy() for a in self._alerts if a.status in ("active", "acknowledged")]

    async def get_alert_rules(self) -> list[AlertRule]:
        return [r.model_copy() for r in self._rules]

    async def acknowledge_alert(self, alert_id: str) -> None:
        alert = self._find_alert(alert_id)
        alert.status = "acknowledged"
        logger.debug(f"Demo alert {alert_id} acknowledged")

    async def resolve_alert(self, alert_id: str) -> None:
        alert = self._find_alert(alert_id)
        alert.status = "resolved"
        alert.resolved_at = _iso(self._now())
        logger.debug(f"Demo alert {alert_id} resolved")

    async def toggle_alert_rule(self, rule_id: str, enabled: bool) -> None:
        for rule in self._rules:
            if rule.id == rule_id:
                rule.enabled = enabled
                return
        raise DashboardAPIError("HTTP 404: Rule not found", status=404)

    # =========================================================================
    # Wallets
    # =========================================================================

    async def get_wallets(self) -> list[WalletInfo]:
        return [w.model_copy() for w in self._wallets]

    async def add_wallet(self, request: AddWalletRequest) -> WalletInfo | None:
        if any(w.address.lower() == request.address.lower() for w in self._wallets):
            raise DashboardAPIError("HTTP 409: Wallet already registered", status=409)
        wallet = WalletInfo(
            id=f"wallet-{len(self._wallets) + 1}",
            name=request.name,
            address=request.address,
            network=request.network,
            type=request.type,
            created_at=_iso(self._now()),
            is_connected=True,
        )
        self._wallets.append(wallet)
        return wallet.model_copy()

    # =========================================================================
    # Settings
    # =========================================================================

    async def get_settings(self, section: str) -> SettingsModel:
        if section not in self._settings:
            raise ValueError(f"Unknown settings section: {section}")
        return self._settings[section].model_copy(deep=True)

    async def save_settings(self, section: str, payload: SettingsModel) -> None:
        if section not in self._settings:
            raise ValueError(f"Unknown settings section: {section}")
        expected = SETTINGS_MODELS[section]
        self._settings[section] = expected.model_validate(payload.model_dump())  # type: ignore[assignment]

    async def close(self) -> None:
        """Nothing to release."""
