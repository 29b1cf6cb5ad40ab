"""
Data source interface shared by the HTTP client and the demo provider.

Pages depend only on this protocol, so real and fake data are
interchangeable and fake data never leaks into rendering code.
"""

from typing import Protocol

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
)


class DashboardDataSource(Protocol):
    """Everything the dashboard pages read or write."""

    async def get_dashboard_summary(self) -> DashboardSummary: ...

    async def get_opportunities(self) -> OpportunityList: ...

    async def get_networks(self) -> NetworkList: ...

    async def get_transaction_stats(self) -> TransactionStats: ...

    async def get_transaction_history(self) -> list[Transaction]: ...

    async def get_alert_stats(self) -> AlertStats: ...

    async def get_active_alerts(self) -> list[Alert]: ...

    async def get_alert_rules(self) -> list[AlertRule]: ...

    async def acknowledge_alert(self, alert_id: str) -> None: ...

    async def resolve_alert(self, alert_id: str) -> None: ...

    async def toggle_alert_rule(self, rule_id: str, enabled: bool) -> None: ...

    async def get_wallets(self) -> list[WalletInfo]: ...

    async def add_wallet(self, request: AddWalletRequest) -> WalletInfo | None: ...

    async def get_settings(self, section: str) -> SettingsModel: ...

    async def save_settings(self, section: str, payload: SettingsModel) -> None: ...

    async def close(self) -> None: ...
