"""
Per-frame callback scheduling.

Plays the role of the host repaint loop: registered callbacks run once per
frame on the event loop. Nothing runs after a handle is cancelled or the
scheduler is stopped.
"""

import asyncio
import logging
from collections.abc import Callable
from itertools import count

from arbview.config.constants import DEFAULT_FPS
from arbview.utils.time import monotonic_ms


logger = logging.getLogger(__name__)

# Receives the frame timestamp in milliseconds
FrameCallback = Callable[[float], None]


class FrameHandle:
    """Registration of one frame callback."""

    __slots__ = ("_scheduler", "_key")

    def __init__(self, scheduler: "FrameScheduler", key: int) -> None:
        self._scheduler = scheduler
        self._key = key

    def cancel(self) -> None:
        """Stop invoking the callback. Safe to call more than once."""
        self._scheduler._remove(self._key)

    @property
    def active(self) -> bool:
        return self._scheduler._has(self._key)


class FrameScheduler:
    """
    Cooperative frame loop.

    Features:
    - Fixed frame rate on the running event loop
    - Per-callback error isolation
    - Handles for cancelling individual callbacks
    """

    def __init__(self, fps: int = DEFAULT_FPS) -> None:
        """
        Initialize the scheduler.

        Args:
            fps: Frames per second.
        """
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._interval = 1.0 / fps
        self._callbacks: dict[int, FrameCallback] = {}
        self._keys = count()
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._frames = 0

    def register(self, callback: FrameCallback) -> FrameHandle:
        """
        Register a callback to run on every frame.

        Args:
            callback: Called with the frame timestamp in milliseconds.

        Returns:
            Handle that unregisters the callback.
        """
        key = next(self._keys)
        self._callbacks[key] = callback
        return FrameHandle(self, key)

    def _remove(self, key: int) -> None:
        self._callbacks.pop(key, None)

    def _has(self, key: int) -> bool:
        return key in self._callbacks

    def run_frame(self, now: float | None = None) -> None:
        """Invoke every registered callback once."""
        now = monotonic_ms() if now is None else now
        self._frames += 1
        # Snapshot so callbacks may cancel themselves
        for key, callback in list(self._callbacks.items()):
            if key not in self._callbacks:
                continue
            try:
                callback(now)
            except Exception as e:
                logger.error(f"Frame callback error: {e}")

    async def _run(self) -> None:
        while self._running:
            self.run_frame()
            await asyncio.sleep(self._interval)

    def start(self) -> asyncio.Task[None]:
        """Start the frame loop as a background task."""
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        """Stop the loop and drop all callbacks."""
        self._running = False
        self._callbacks.clear()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def frame_count(self) -> int:
        return self._frames

    @property
    def callback_count(self) -> int:
        return len(self._callbacks)
