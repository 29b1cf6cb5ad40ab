"""
Async REST client for the dashboard backend.

Optimized for periodic polling with:
- A single pooled session with keep-alive
- Fast JSON parsing with orjson
- Tolerant unwrapping of ``{"data": ...}`` envelopes
- Typed errors with human-readable messages
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import aiohttp
import orjson
from pydantic import BaseModel, ValidationError

from arbview.api.models import (
    AddWalletRequest,
    Alert,
    AlertRule,
    AlertStats,
    DashboardSummary,
    NetworkList,
    OpportunityList,
    SETTINGS_MODELS,
    SettingsModel,
    Transaction,
    TransactionStats,
    WalletInfo,
)
from arbview.config.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    ENDPOINT_ALERT_ACKNOWLEDGE,
    ENDPOINT_ALERT_RESOLVE,
    ENDPOINT_ALERT_RULE_TOGGLE,
    ENDPOINT_ALERT_RULES,
    ENDPOINT_ALERT_STATS,
    ENDPOINT_ALERTS_ACTIVE,
    ENDPOINT_DASHBOARD_SUMMARY,
    ENDPOINT_NETWORKS,
    ENDPOINT_OPPORTUNITIES,
    ENDPOINT_SETTINGS,
    ENDPOINT_TRANSACTION_HISTORY,
    ENDPOINT_TRANSACTION_STATS,
    ENDPOINT_WALLETS_ADD,
    ENDPOINT_WALLETS_LIST,
    SETTINGS_SECTIONS,
)


M = TypeVar("M", bound=BaseModel)


class DashboardClientError(Exception):
    """Base exception for dashboard client errors."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DashboardAPIError(DashboardClientError):
    """Exception for non-2xx API responses."""

    pass


class AuthenticationRequiredError(DashboardAPIError):
    """The backend rejected the request with 401."""

    def __init__(self) -> None:
        super().__init__("Authentication required", status=401)


def unwrap(body: Any, key: str | None = None) -> Any:
    """
    Extract a resource from a response body.

    Accepts ``{"data": X}``, ``{key: X}`` or the resource itself.

    Example:
        >>> unwrap({"data": {"a": 1}})
        {'a': 1}
        >>> unwrap({"alerts": [1, 2]}, "alerts")
        [1, 2]
        >>> unwrap([1, 2], "alerts")
        [1, 2]
    """
    if isinstance(body, dict):
        if body.get("data") is not None:
            return body["data"]
        if key is not None and body.get(key) is not None:
            return body[key]
    return body


def unwrap_list(body: Any, key: str) -> list[Any]:
    """Like unwrap() but always yields a list."""
    items = unwrap(body, key)
    if isinstance(items, dict):
        items = items.get(key)
    return items if isinstance(items, list) else []


class DashboardClient:
    """
    Async client for the ``/api/proxy/api/v2`` backend.

    Features:
    - Single session with connection pooling
    - Bearer token authentication when configured
    - orjson for fast JSON parsing
    - Per-request total timeout
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        access_token: str | None = None,
        timeout_s: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL including the ``/api/v2`` prefix.
            access_token: Optional bearer token.
            timeout_s: Total timeout per request in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._access_token = access_token
        self._timeout = aiohttp.ClientTimeout(total=timeout_s)
        self._timeout_s = timeout_s
        self._session: aiohttp.ClientSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=20,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )

            headers = {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
            if self._access_token:
                headers["Authorization"] = f"Bearer {self._access_token}"

            self._session = aiohttp.ClientSession(
                connector=connector,
                headers=headers,
                timeout=self._timeout,
                json_serialize=lambda x: orjson.dumps(x).decode(),
            )

        return self._session

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    @asynccontextmanager
    async def _request_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Context manager translating transport failures."""
        session = await self._get_session()
        try:
            yield session
        except asyncio.TimeoutError as e:
            raise DashboardClientError(
                f"Request timed out after {self._timeout_s:g}s"
            ) from e
        except aiohttp.ClientError as e:
            raise DashboardClientError(f"Network error: {e}") from e

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST).
            endpoint: Endpoint path relative to the base URL.
            payload: JSON body for POST requests.

        Returns:
            Parsed JSON body (None for an empty body).

        Raises:
            AuthenticationRequiredError: On 401.
            DashboardAPIError: On any other non-2xx response.
            DashboardClientError: On network, timeout or decoding errors.
        """
        url = f"{self._base_url}{endpoint}"

        async with self._request_context() as session:
            if method == "GET":
                async with session.get(url) as response:
                    return await self._handle_response(response)
            elif method == "POST":
                async with session.post(url, json=payload or {}) as response:
                    return await self._handle_response(response)
            else:
                raise DashboardClientError(f"Unsupported method: {method}")

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        """Validate status and parse the body."""
        text = await response.text()

        if response.status == 401:
            raise AuthenticationRequiredError()

        if response.status >= 400:
            message = response.reason or "Request failed"
            try:
                body = orjson.loads(text) if text else None
            except orjson.JSONDecodeError:
                body = None
            if isinstance(body, dict):
                message = str(body.get("message") or body.get("error") or message)
            raise DashboardAPIError(f"HTTP {response.status}: {message}", status=response.status)

        if not text:
            return None

        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise DashboardClientError(f"Invalid JSON response: {e}") from e

    @staticmethod
    def _parse(model: type[M], data: Any, resource: str) -> M:
        """Validate a resource, translating validation errors."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise DashboardClientError(
                f"Invalid {resource} payload: {e.error_count()} validation error(s)"
            ) from e

    def _parse_list(self, model: type[M], items: list[Any], resource: str) -> list[M]:
        return [self._parse(model, item, resource) for item in items]

    # =========================================================================
    # Dashboard & Arbitrage
    # =========================================================================

    async def get_dashboard_summary(self) -> DashboardSummary:
        """Get headline dashboard metrics."""
        body = await self._request("GET", ENDPOINT_DASHBOARD_SUMMARY)
        return self._parse(DashboardSummary, unwrap(body) or {}, "dashboard summary")

    async def get_opportunities(self) -> OpportunityList:
        """
        Get all current opportunities.

        The absolute ``total`` is taken from the envelope when present,
        otherwise from the nested resource.
        """
        body = await self._request("GET", ENDPOINT_OPPORTUNITIES)
        total = body.get("total") if isinstance(body, dict) else None
        inner = unwrap(body, "opportunities")
        if isinstance(inner, dict):
            total = inner.get("total", total)
        items = unwrap_list(inner, "opportunities")
        return self._parse(
            OpportunityList,
            {"opportunities": items, "total": total},
            "opportunities",
        )

    async def get_networks(self) -> NetworkList:
        """Get blockchain network connection status."""
        body = await self._request("GET", ENDPOINT_NETWORKS)
        active = body.get("active_connections") if isinstance(body, dict) else None
        inner = unwrap(body, "networks")
        if isinstance(inner, dict):
            active = inner.get("active_connections", active)
        items = unwrap_list(inner, "networks")
        return self._parse(
            NetworkList,
            {"networks": items, "active_connections": active},
            "networks",
        )

    # =========================================================================
    # Transactions
    # =========================================================================

    async def get_transaction_stats(self) -> TransactionStats:
        """Get aggregated transaction statistics."""
        body = await self._request("GET", ENDPOINT_TRANSACTION_STATS)
        return self._parse(TransactionStats, unwrap(body) or {}, "transaction stats")

    async def get_transaction_history(self) -> list[Transaction]:
        """Get recent transactions."""
        body = await self._request("GET", ENDPOINT_TRANSACTION_HISTORY)
        return self._parse_list(Transaction, unwrap_list(body, "transactions"), "transaction")

    # =========================================================================
    # Alerts
    # =========================================================================

    async def get_alert_stats(self) -> AlertStats:
        """Get aggregated alert statistics."""
        body = await self._request("GET", ENDPOINT_ALERT_STATS)
        return self._parse(AlertStats, unwrap(body) or {}, "alert stats")

    async def get_active_alerts(self) -> list[Alert]:
        """Get currently active alerts."""
        body = await self._request("GET", ENDPOINT_ALERTS_ACTIVE)
        return self._parse_list(Alert, unwrap_list(body, "alerts"), "alert")

    async def get_alert_rules(self) -> list[AlertRule]:
        """Get configured alert rules."""
        body = await self._request("GET", ENDPOINT_ALERT_RULES)
        return self._parse_list(AlertRule, unwrap_list(body, "rules"), "alert rule")

    async def acknowledge_alert(self, alert_id: str) -> None:
        """Mark an alert as acknowledged."""
        await self._request("POST", ENDPOINT_ALERT_ACKNOWLEDGE.format(alert_id=alert_id))

    async def resolve_alert(self, alert_id: str) -> None:
        """Mark an alert as resolved."""
        await self._request("POST", ENDPOINT_ALERT_RESOLVE.format(alert_id=alert_id))

    async def toggle_alert_rule(self, rule_id: str, enabled: bool) -> None:
        """Enable or disable an alert rule."""
        await self._request(
            "POST",
            ENDPOINT_ALERT_RULE_TOGGLE.format(rule_id=rule_id),
            {"enabled": enabled},
        )

    # =========================================================================
    # Wallets
    # =========================================================================

    async def get_wallets(self) -> list[WalletInfo]:
        """Get monitored wallets."""
        body = await self._request("GET", ENDPOINT_WALLETS_LIST)
        return self._parse_list(WalletInfo, unwrap_list(body, "wallets"), "wallet")

    async def add_wallet(self, request: AddWalletRequest) -> WalletInfo | None:
        """
        Register a wallet for monitoring.

        Returns:
            The created wallet when the backend echoes it back.
        """
        body = await self._request("POST", ENDPOINT_WALLETS_ADD, request.model_dump())
        data = unwrap(body, "wallet")
        if isinstance(data, dict) and "id" in data:
            return self._parse(WalletInfo, data, "wallet")
        return None

    # =========================================================================
    # Settings
    # =========================================================================

    async def get_settings(self, section: str) -> SettingsModel:
        """
        Get one settings section.

        Args:
            section: One of system, security, networks, notifications.
        """
        model = self._settings_model(section)
        body = await self._request("GET", ENDPOINT_SETTINGS.format(section=section))
        return self._parse(model, unwrap(body) or {}, f"{section} settings")  # type: ignore[return-value]

    async def save_settings(self, section: str, payload: SettingsModel) -> None:
        """Persist one settings section."""
        self._settings_model(section)
        await self._request(
            "POST",
            ENDPOINT_SETTINGS.format(section=section),
            payload.model_dump(),
        )

    @staticmethod
    def _settings_model(section: str) -> type[BaseModel]:
        if section not in SETTINGS_SECTIONS:
            raise ValueError(f"Unknown settings section: {section}")
        return SETTINGS_MODELS[section]

    async def __aenter__(self) -> "DashboardClient":
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
