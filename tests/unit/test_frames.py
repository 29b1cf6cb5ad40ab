"""
Unit tests for FrameScheduler.
"""

import asyncio

import pytest

from arbview.core.frames import FrameScheduler


class TestFrameScheduler:
    """Tests for FrameScheduler."""

    def test_rejects_non_positive_fps(self) -> None:
        """Test fps must be positive."""
        with pytest.raises(ValueError):
            FrameScheduler(fps=0)

    def test_run_frame_invokes_callbacks(self) -> None:
        """Test every registered callback receives the frame time."""
        scheduler = FrameScheduler()
        received: list[float] = []

        scheduler.register(received.append)
        scheduler.run_frame(now=16.0)
        scheduler.run_frame(now=32.0)

        assert received == [16.0, 32.0]
        assert scheduler.frame_count == 2

    def test_cancelled_callback_not_invoked(self) -> None:
        """Test a cancelled handle stops its callback."""
        scheduler = FrameScheduler()
        received: list[float] = []

        handle = scheduler.register(received.append)
        handle.cancel()
        scheduler.run_frame(now=1.0)

        assert received == []
        assert not handle.active
        assert scheduler.callback_count == 0

    def test_callback_may_cancel_itself(self) -> None:
        """Test cancelling from inside a callback is safe."""
        scheduler = FrameScheduler()
        calls: list[float] = []

        def once(now: float) -> None:
            calls.append(now)
            handle.cancel()

        handle = scheduler.register(once)
        scheduler.run_frame(now=1.0)
        scheduler.run_frame(now=2.0)

        assert calls == [1.0]

    def test_callback_error_is_isolated(self) -> None:
        """Test one failing callback does not stop the others."""
        scheduler = FrameScheduler()
        received: list[float] = []

        def broken(now: float) -> None:
            raise RuntimeError("render failed")

        scheduler.register(broken)
        scheduler.register(received.append)
        scheduler.run_frame(now=5.0)

        assert received == [5.0]

    @pytest.mark.asyncio
    async def test_start_and_stop(self) -> None:
        """Test the loop runs frames until stopped."""
        scheduler = FrameScheduler(fps=100)
        received: list[float] = []
        scheduler.register(received.append)

        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert received
        assert not scheduler.running
        assert scheduler.callback_count == 0

        frames = scheduler.frame_count
        await asyncio.sleep(0.03)

        assert scheduler.frame_count == frames
