"""
Dashboard constants and configuration values.

This module contains all hardcoded values used throughout the dashboard.
Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# Backend API
# =============================================================================

DEFAULT_API_BASE_URL: Final[str] = "http://localhost:3000/api/proxy/api/v2"
API_PREFIX: Final[str] = "/api/proxy/api/v2"

# Transactions
ENDPOINT_TRANSACTION_STATS: Final[str] = "/transactions/stats"
ENDPOINT_TRANSACTION_HISTORY: Final[str] = "/transactions/history"

# Alerts
ENDPOINT_ALERT_STATS: Final[str] = "/alerts/stats"
ENDPOINT_ALERTS_ACTIVE: Final[str] = "/alerts/active"
ENDPOINT_ALERT_RULES: Final[str] = "/alerts/rules"
ENDPOINT_ALERT_ACKNOWLEDGE: Final[str] = "/alerts/{alert_id}/acknowledge"
ENDPOINT_ALERT_RESOLVE: Final[str] = "/alerts/{alert_id}/resolve"
ENDPOINT_ALERT_RULE_TOGGLE: Final[str] = "/alerts/rules/{rule_id}/toggle"

# Wallets
ENDPOINT_WALLETS_LIST: Final[str] = "/wallets/list"
ENDPOINT_WALLETS_ADD: Final[str] = "/wallets/add"

# Settings
ENDPOINT_SETTINGS: Final[str] = "/settings/{section}"
SETTINGS_SECTIONS: Final[tuple[str, ...]] = ("system", "security", "networks", "notifications")

# Arbitrage & networks
ENDPOINT_OPPORTUNITIES: Final[str] = "/arbitrage/opportunities"
ENDPOINT_NETWORKS: Final[str] = "/blockchain/networks"
ENDPOINT_DASHBOARD_SUMMARY: Final[str] = "/dashboard/summary"

# Request timeout (seconds)
DEFAULT_REQUEST_TIMEOUT: Final[float] = 10.0


# =============================================================================
# Polling Intervals (seconds)
# =============================================================================

POLL_INTERVAL_DASHBOARD: Final[float] = 5.0
POLL_INTERVAL_OPPORTUNITIES: Final[float] = 3.0
POLL_INTERVAL_TRANSACTIONS: Final[float] = 15.0
POLL_INTERVAL_ALERTS: Final[float] = 10.0
POLL_INTERVAL_WALLETS: Final[float] = 30.0
POLL_INTERVAL_SIDEBAR_OPPORTUNITIES: Final[float] = 8.0
POLL_INTERVAL_SIDEBAR_NETWORKS: Final[float] = 20.0

# Settings sections load on mount and after save, never on a timer
SETTINGS_SECTION_INTERVAL: Final[float] = 60.0


# =============================================================================
# Animation
# =============================================================================

DEFAULT_ANIMATION_DURATION_MS: Final[float] = 800.0
DEFAULT_FPS: Final[int] = 30


# =============================================================================
# Preferences
# =============================================================================

THEMES: Final[tuple[str, ...]] = ("light", "dark", "ios-glass", "arbitragex")
DEFAULT_THEME: Final[str] = "light"

THEME_LABELS: Final[dict[str, str]] = {
    "light": "Light",
    "dark": "Dark",
    "ios-glass": "iOS Glass",
    "arbitragex": "ArbitrageX",
}

DEFAULT_PREFERENCES_FILE: Final[str] = "~/.config/arbview/preferences.json"


# =============================================================================
# Demo Backend
# =============================================================================

DEFAULT_SERVER_HOST: Final[str] = "127.0.0.1"
DEFAULT_SERVER_PORT: Final[int] = 8000

DEMO_NETWORKS: Final[tuple[str, ...]] = (
    "Ethereum",
    "BSC",
    "Polygon",
    "Arbitrum",
    "Optimism",
    "Avalanche",
    "Base",
    "Solana",
)

DEMO_TOKENS: Final[tuple[str, ...]] = ("ETH", "USDC", "USDT", "WBTC", "DAI", "MATIC", "BNB", "SOL")

DEMO_EXCHANGES: Final[tuple[str, ...]] = (
    "Uniswap V3",
    "SushiSwap",
    "Curve",
    "Balancer",
    "PancakeSwap",
    "QuickSwap",
)


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000

# Latency samples kept per poller
POLL_LATENCY_WINDOW: Final[int] = 200
