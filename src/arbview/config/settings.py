"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arbview.config.constants import (
    DEFAULT_ANIMATION_DURATION_MS,
    DEFAULT_API_BASE_URL,
    DEFAULT_FPS,
    DEFAULT_PREFERENCES_FILE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    POLL_INTERVAL_ALERTS,
    POLL_INTERVAL_DASHBOARD,
    POLL_INTERVAL_OPPORTUNITIES,
    POLL_INTERVAL_SIDEBAR_NETWORKS,
    POLL_INTERVAL_SIDEBAR_OPPORTUNITIES,
    POLL_INTERVAL_TRANSACTIONS,
    POLL_INTERVAL_WALLETS,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via ``ARBVIEW_*`` environment variables.
    Sensitive values use SecretStr for safe handling.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARBVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Backend API
    # =========================================================================

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the backend API (including the /api/v2 prefix)",
    )

    access_token: SecretStr | None = Field(
        default=None,
        description="Bearer token sent to /api/v2 endpoints",
    )

    request_timeout_s: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0.0,
        le=120.0,
        description="Total timeout for a single request in seconds",
    )

    # =========================================================================
    # Data Source
    # =========================================================================

    use_demo_data: bool = Field(
        default=False,
        description="Use the client-side fake data provider instead of the API",
    )

    demo_seed: int | None = Field(
        default=None,
        description="Random seed for reproducible demo data",
    )

    # =========================================================================
    # Polling Intervals (seconds)
    # =========================================================================

    dashboard_poll_s: float = Field(default=POLL_INTERVAL_DASHBOARD, ge=0.5)
    opportunities_poll_s: float = Field(default=POLL_INTERVAL_OPPORTUNITIES, ge=0.5)
    transactions_poll_s: float = Field(default=POLL_INTERVAL_TRANSACTIONS, ge=0.5)
    alerts_poll_s: float = Field(default=POLL_INTERVAL_ALERTS, ge=0.5)
    wallets_poll_s: float = Field(default=POLL_INTERVAL_WALLETS, ge=0.5)
    sidebar_opportunities_poll_s: float = Field(
        default=POLL_INTERVAL_SIDEBAR_OPPORTUNITIES, ge=0.5
    )
    sidebar_networks_poll_s: float = Field(default=POLL_INTERVAL_SIDEBAR_NETWORKS, ge=0.5)

    # =========================================================================
    # Rendering
    # =========================================================================

    animation_duration_ms: float = Field(
        default=DEFAULT_ANIMATION_DURATION_MS,
        ge=0.0,
        le=10_000.0,
        description="Duration of metric value transitions in milliseconds",
    )

    fps: int = Field(
        default=DEFAULT_FPS,
        ge=1,
        le=120,
        description="Terminal repaint rate in frames per second",
    )

    preferences_path: Path = Field(
        default=Path(DEFAULT_PREFERENCES_FILE),
        validate_default=True,
        description="File holding the persisted UI preferences (theme)",
    )

    # =========================================================================
    # Logging
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional log file; the terminal dashboard owns stdout",
    )

    # =========================================================================
    # Demo Backend
    # =========================================================================

    server_host: str = Field(default=DEFAULT_SERVER_HOST)
    server_port: int = Field(default=DEFAULT_SERVER_PORT, ge=1, le=65535)

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("api_base_url", mode="after")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("preferences_path", "log_file", mode="after")
    @classmethod
    def expand_path(cls, v: Path | None) -> Path | None:
        """Expand ``~`` in file paths."""
        return v.expanduser() if v is not None else None

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def token(self) -> str | None:
        """Plain access token, or None when not configured."""
        if self.access_token is None:
            return None
        return self.access_token.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
