"""
Pydantic models for backend API responses.

These models provide type-safe parsing of dashboard resources
with automatic validation. Unknown fields are ignored so the backend
can grow without breaking the client.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class APIModel(BaseModel):
    """Base for all API resources."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Dashboard & Arbitrage
# =============================================================================


class DashboardSummary(APIModel):
    """Headline metrics shown on the dashboard cards."""

    total_opportunities: int = Field(default=0, alias="totalOpportunities")
    total_profit_usd: float = Field(default=0.0, alias="totalProfitUsd")
    average_profit_pct: float = Field(default=0.0, alias="averageProfitPercentage")
    active_networks: int = Field(default=0, alias="activeNetworks")
    executed_trades: int = Field(default=0, alias="executedTrades")
    success_rate: float = Field(default=0.0, alias="successRate")
    last_updated: str | None = Field(default=None, alias="lastUpdated")


class Opportunity(APIModel):
    """Detected arbitrage opportunity."""

    id: str
    token_in: str = Field(default="N/A", alias="tokenIn")
    token_out: str = Field(default="N/A", alias="tokenOut")
    exchange_in: str = Field(default="Unknown", alias="exchangeIn")
    exchange_out: str = Field(default="Unknown", alias="exchangeOut")
    network: str = Field(default="Unknown", alias="blockchainFrom")
    profit_amount: float = Field(default=0.0, alias="profitAmount")
    profit_percentage: float = Field(default=0.0, alias="profitPercentage")
    strategy: str = "cross_exchange"
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    detected_at: str | None = None


class OpportunityList(APIModel):
    """Opportunities response with the absolute total (unpaginated)."""

    opportunities: list[Opportunity] = Field(default_factory=list)
    total: int | None = None


class NetworkStatus(APIModel):
    """Connection status of one blockchain network."""

    id: str
    name: str
    connected: bool = False
    block_number: int | None = Field(default=None, alias="blockNumber")
    gas_price: float | None = Field(default=None, alias="gasPrice")
    latency_ms: float | None = Field(default=None, alias="latencyMs")


class NetworkList(APIModel):
    """Networks response."""

    networks: list[NetworkStatus] = Field(default_factory=list)
    active_connections: int | None = None


# =============================================================================
# Transactions
# =============================================================================


class TransactionStats(APIModel):
    """Aggregated transaction statistics."""

    total_transactions: int = 0
    successful_transactions: int = 0
    pending_transactions: int = 0
    failed_transactions: int = 0
    total_volume_24h: float = 0.0
    total_profit_24h: float = 0.0
    average_gas_fee: float = 0.0
    success_rate: float = 0.0


class Transaction(APIModel):
    """Single on-chain transaction."""

    id: str
    hash: str
    type: Literal["arbitrage", "swap", "deposit", "withdrawal", "fee"]
    status: Literal["pending", "confirmed", "failed", "cancelled"]
    from_address: str = ""
    to_address: str = ""
    from_token: str = ""
    to_token: str = ""
    from_amount: float = 0.0
    to_amount: float = 0.0
    network: str = ""
    gas_fee: float = 0.0
    profit_loss: float = 0.0
    timestamp: str
    block_number: int | None = None
    confirmation_count: int | None = None


# =============================================================================
# Alerts
# =============================================================================

AlertType = Literal["price", "volume", "arbitrage", "network", "wallet", "system"]


class AlertCondition(APIModel):
    """Threshold that triggers an alert."""

    parameter: str
    operator: str
    value: float
    current_value: float | None = None


class Alert(APIModel):
    """Triggered alert."""

    id: str
    title: str
    message: str = ""
    type: AlertType
    severity: Literal["low", "medium", "high", "critical"]
    status: Literal["active", "acknowledged", "resolved", "dismissed"]
    triggered_at: str
    resolved_at: str | None = None
    conditions: AlertCondition | None = None
    network: str | None = None
    pair: str | None = None
    source: str = ""
    actions_taken: list[str] = Field(default_factory=list)


class AlertRule(APIModel):
    """Configured alert rule."""

    id: str
    name: str
    description: str = ""
    type: AlertType
    conditions: AlertCondition | None = None
    enabled: bool = True
    notification_channels: list[Literal["email", "sms", "webhook", "browser"]] = Field(
        default_factory=list
    )
    created_at: str | None = None
    last_triggered: str | None = None
    trigger_count: int = 0


class AlertStats(APIModel):
    """Aggregated alert statistics."""

    total_alerts: int = 0
    active_alerts: int = 0
    critical_alerts: int = 0
    resolved_today: int = 0
    total_rules: int = 0
    active_rules: int = 0
    average_response_time: float = 0.0
    success_rate: float = 0.0


# =============================================================================
# Wallets
# =============================================================================

WalletType = Literal["hot", "cold", "hardware", "multisig"]


class WalletInfo(APIModel):
    """Monitored wallet."""

    id: str
    name: str
    address: str
    network: str
    type: WalletType = "hot"
    balance_usd: float = 0.0
    native_balance: float = 0.0
    native_token: str = ""
    token_count: int = 0
    last_activity: str | None = None
    created_at: str | None = None
    is_connected: bool = False


class AddWalletRequest(APIModel):
    """Payload for registering a wallet."""

    address: str = Field(min_length=1)
    name: str = Field(min_length=1)
    network: str = Field(min_length=1)
    type: WalletType = "hot"


# =============================================================================
# Settings
# =============================================================================


class SystemSettings(APIModel):
    """General system configuration."""

    system_name: str = "ArbitrageX"
    timezone: str = "UTC"
    language: str = "en"
    currency: str = "USD"
    refresh_interval: int = 5
    max_concurrent_operations: int = 10
    api_rate_limit: int = 100
    api_timeout: int = 30
    enable_api_logging: bool = True
    monitoring_enabled: bool = True
    alert_threshold: float = 0.5
    auto_trading: bool = False
    risk_management: bool = True
    email_notifications: bool = False
    sms_notifications: bool = False
    browser_notifications: bool = True
    webhook_url: str | None = None


class SecuritySettings(APIModel):
    """Security configuration."""

    two_factor_auth: bool = False
    session_timeout: int = 30
    allowed_ips: list[str] = Field(default_factory=list)
    api_key_rotation_days: int = 90
    encryption_enabled: bool = True
    backup_frequency: Literal["daily", "weekly", "monthly"] = "daily"


class NetworkConfig(APIModel):
    """RPC configuration for one network."""

    name: str
    enabled: bool = True
    rpc_url: str = ""
    chain_id: int = 0
    gas_limit: int = 0
    priority_fee: float = 0.0


class NetworkSettings(APIModel):
    """Per-network configuration."""

    networks: list[NetworkConfig] = Field(default_factory=list)


class NotificationChannel(APIModel):
    """One notification channel."""

    enabled: bool = False
    address: str | None = None
    number: str | None = None
    url: str | None = None


class NotificationEvents(APIModel):
    """Event subscriptions."""

    arbitrage_opportunities: bool = True
    price_alerts: bool = True
    network_issues: bool = True
    wallet_activity: bool = False
    system_updates: bool = False


class NotificationSettings(APIModel):
    """Notification configuration."""

    channels: dict[str, NotificationChannel] = Field(default_factory=dict)
    events: NotificationEvents = Field(default_factory=NotificationEvents)


SettingsModel = SystemSettings | SecuritySettings | NetworkSettings | NotificationSettings

SETTINGS_MODELS: dict[str, type[APIModel]] = {
    "system": SystemSettings,
    "security": SecuritySettings,
    "networks": NetworkSettings,
    "notifications": NotificationSettings,
}
