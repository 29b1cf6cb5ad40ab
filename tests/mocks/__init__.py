"""Mock implementations for testing."""

from tests.mocks.clock import FakeClock
from tests.mocks.fetch import ControlledFetch, CountingFetch
from tests.mocks.source import MockDataSource


__all__ = [
    "ControlledFetch",
    "FakeClock",
    "CountingFetch",
    "MockDataSource",
]
