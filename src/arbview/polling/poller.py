"""
Periodic fetching of one backend resource.

A Poller is a cancellable scheduled task: start() returns a handle, and
once the handle is cancelled no further poll is scheduled and any response
still in flight is dropped. Overlapping cycles (a manual refresh while a
timed poll is running) are both allowed to complete; only the most
recently started cycle that finishes gets to update the state.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from itertools import count
from typing import Generic, TypeVar

from arbview.api.client import DashboardClientError
from arbview.polling.state import PollState
from arbview.telemetry.metrics import PollMetrics
from arbview.utils.time import monotonic_ms


logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchFunction = Callable[[], Awaitable[T]]
StateListener = Callable[[PollState[T]], None]


class PollHandle:
    """Cancellation handle returned by Poller.start()."""

    __slots__ = ("_poller",)

    def __init__(self, poller: "Poller[object]") -> None:
        self._poller = poller

    def cancel(self) -> None:
        """Cancel the schedule. Safe to call more than once."""
        self._poller.cancel()

    @property
    def cancelled(self) -> bool:
        return self._poller.closed


class Poller(Generic[T]):
    """
    Fetch a resource now and then every ``interval_s`` seconds.

    Features:
    - Manual refresh that doubles as the retry action
    - Last-started-wins ordering of responses
    - Previous data kept across failures
    - No automatic retry or backoff; the next cycle is the next tick
    """

    def __init__(
        self,
        name: str,
        fetch: FetchFunction[T],
        interval_s: float,
        metrics: PollMetrics | None = None,
    ) -> None:
        """
        Initialize the poller.

        Args:
            name: Identifier used in logs and metrics.
            fetch: Async callable returning the resource.
            interval_s: Delay between the end of one cycle and the next.
            metrics: Optional metrics collector.
        """
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")

        self._name = name
        self._fetch = fetch
        self._interval_s = interval_s
        self._metrics = metrics

        self._state: PollState[T] = PollState()
        self._sequence = count(1)
        self._applied_seq = 0
        self._listeners: list[StateListener[T]] = []
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> PollState[T]:
        return self._state

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def running(self) -> bool:
        """Whether the schedule is active."""
        return self._task is not None and not self._task.done()

    @property
    def closed(self) -> bool:
        """Whether the poller has been cancelled."""
        return self._closed

    def add_listener(self, listener: StateListener[T]) -> None:
        """Call listener with the new state after every applied cycle."""
        self._listeners.append(listener)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> PollHandle:
        """
        Start polling immediately, then every interval.

        Returns:
            Handle that cancels the schedule.

        Raises:
            RuntimeError: If the poller was already cancelled.
        """
        if self._closed:
            raise RuntimeError(f"Poller {self._name} was cancelled")

        if not self.running:
            self._task = asyncio.create_task(self._run(), name=f"poll:{self._name}")
            logger.debug(f"Poller {self._name} started ({self._interval_s:g}s)")

        return PollHandle(self)  # type: ignore[arg-type]

    def cancel(self) -> None:
        """Cancel the schedule without waiting for it to unwind."""
        if self._closed:
            return
        self._closed = True
        if self._task:
            self._task.cancel()
        logger.debug(f"Poller {self._name} cancelled")

    async def stop(self) -> None:
        """Cancel the schedule and wait for the task to finish."""
        self.cancel()
        if self._task:
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _run(self) -> None:
        while not self._closed:
            await self._cycle()
            await asyncio.sleep(self._interval_s)

    # =========================================================================
    # Poll Cycle
    # =========================================================================

    async def refresh(self) -> PollState[T]:
        """
        Run one poll cycle now (manual refresh / retry).

        Returns:
            State after the cycle. Unchanged if the poller is cancelled.
        """
        if not self._closed:
            await self._cycle()
        return self._state

    async def _cycle(self) -> None:
        seq = next(self._sequence)
        self._state.in_flight += 1
        started = monotonic_ms()

        data: T | None = None
        error: str | None = None
        try:
            data = await self._fetch()
        except DashboardClientError as e:
            error = str(e)
        except Exception as e:
            logger.exception(f"Unexpected error polling {self._name}")
            error = f"Unexpected error: {e}"
        finally:
            self._state.in_flight -= 1

        latency_ms = monotonic_ms() - started

        if self._closed or seq < self._applied_seq:
            logger.debug(f"Poller {self._name}: discarding response #{seq}")
            if self._metrics:
                self._metrics.record_discarded(self._name)
            return

        self._applied_seq = seq
        self._state.poll_count += 1

        if error is not None:
            self._state.error = error
            self._state.failure_count += 1
            logger.warning(f"Fetch failed for {self._name}: {error}")
            if self._metrics:
                self._metrics.record_failure(self._name)
        else:
            self._state.has_changes = not self._state.has_loaded or data != self._state.data
            self._state.data = data
            self._state.error = None
            self._state.has_loaded = True
            self._state.last_updated = time.time()
            logger.debug(f"Poller {self._name}: cycle #{seq} applied in {latency_ms:.0f}ms")
            if self._metrics:
                self._metrics.record_success(self._name, latency_ms)

        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"Poll listener error for {self._name}: {e}")
