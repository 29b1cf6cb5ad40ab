"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from pathlib import Path

import pytest

from arbview.api.demo import DemoDataSource
from arbview.api.models import DashboardSummary, NetworkList, NetworkStatus, OpportunityList
from arbview.config.settings import Settings
from arbview.core.interpolator import AnimatedValue
from arbview.dashboard.context import DashboardContext
from arbview.telemetry.metrics import PollMetrics
from tests.mocks.clock import FakeClock
from tests.mocks.source import MockDataSource


# =============================================================================
# Clock Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at t=0 ms."""
    return FakeClock()


@pytest.fixture
def animated(clock: FakeClock) -> AnimatedValue:
    """Interpolator seeded at 0 with the default 800 ms duration."""
    return AnimatedValue(initial=0.0, duration_ms=800.0, clock=clock)


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        use_demo_data=True,
        demo_seed=42,
        preferences_path=tmp_path / "preferences.json",
        dashboard_poll_s=0.5,
        opportunities_poll_s=0.5,
        transactions_poll_s=0.5,
        alerts_poll_s=0.5,
        wallets_poll_s=0.5,
        sidebar_opportunities_poll_s=0.5,
        sidebar_networks_poll_s=0.5,
    )


# =============================================================================
# Data Source Fixtures
# =============================================================================


@pytest.fixture
def demo_source() -> DemoDataSource:
    """Seeded demo provider."""
    return DemoDataSource(seed=42)


@pytest.fixture
def mock_source() -> MockDataSource:
    """Mock source backed by a seeded demo provider."""
    return MockDataSource(seed=7)


@pytest.fixture
def metrics() -> PollMetrics:
    """Fresh poll metrics collector."""
    return PollMetrics()


@pytest.fixture
def context(tmp_path: Path) -> DashboardContext:
    """Dashboard context persisting to a temporary file."""
    return DashboardContext(tmp_path / "prefs" / "preferences.json")


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def summary_payload() -> dict:
    """Dashboard summary as sent by the backend (camelCase)."""
    return {
        "totalOpportunities": 42,
        "totalProfitUsd": 12345.67,
        "averageProfitPercentage": 0.42,
        "activeNetworks": 6,
        "executedTrades": 150,
        "successRate": 97.5,
        "lastUpdated": "2024-01-01T00:00:00Z",
        "unknownField": "ignored",
    }


@pytest.fixture
def summary(summary_payload: dict) -> DashboardSummary:
    """Parsed dashboard summary."""
    return DashboardSummary.model_validate(summary_payload)


@pytest.fixture
def network_list() -> NetworkList:
    """Three networks, one disconnected."""
    return NetworkList(
        networks=[
            NetworkStatus(id="ethereum", name="Ethereum", connected=True),
            NetworkStatus(id="polygon", name="Polygon", connected=True),
            NetworkStatus(id="bsc", name="BSC", connected=False),
        ],
    )


@pytest.fixture
def opportunity_list() -> OpportunityList:
    """Empty page of opportunities with a large absolute total."""
    return OpportunityList(opportunities=[], total=128)
