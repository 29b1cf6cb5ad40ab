"""
Controllable fetch function for poller tests.

Each call parks on a future that the test resolves explicitly, so the
order in which overlapping poll cycles complete can be chosen freely.
"""

import asyncio
from typing import Any


class ControlledFetch:
    """Async callable whose calls complete only when the test says so."""

    def __init__(self) -> None:
        self.pending: list[asyncio.Future[Any]] = []

    async def __call__(self) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future

    @property
    def call_count(self) -> int:
        return len(self.pending)

    def resolve(self, index: int, value: Any) -> None:
        """Complete call number index (0-based) with value."""
        self.pending[index].set_result(value)

    def fail(self, index: int, error: Exception) -> None:
        """Complete call number index (0-based) with an error."""
        self.pending[index].set_exception(error)

    async def wait_for_calls(self, count: int) -> None:
        """Yield to the loop until at least count calls are parked."""
        for _ in range(100):
            if len(self.pending) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} calls, got {len(self.pending)}")


class CountingFetch:
    """Async callable returning 1, 2, 3, ... on successive calls."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> int:
        self.calls += 1
        return self.calls
