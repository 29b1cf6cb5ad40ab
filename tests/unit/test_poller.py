"""
Unit tests for Poller and PollState.

Tests scheduling, cancellation, response ordering and failure handling.
"""

import asyncio

import pytest

from arbview.api.client import AuthenticationRequiredError, DashboardAPIError
from arbview.core.types import ConnectionState
from arbview.polling.poller import Poller
from arbview.polling.state import PollState
from arbview.telemetry.metrics import PollMetrics
from tests.mocks.fetch import ControlledFetch, CountingFetch


class TestPollState:
    """Tests for derived connection state."""

    def test_idle(self) -> None:
        """Test a fresh state is idle."""
        assert PollState().connection_state is ConnectionState.IDLE

    def test_loading(self) -> None:
        """Test in flight without data is loading."""
        state: PollState[int] = PollState(in_flight=1)

        assert state.connection_state is ConnectionState.LOADING
        assert state.is_loading

    def test_error_before_first_load(self) -> None:
        """Test an error with nothing loaded is an error state."""
        state: PollState[int] = PollState(error="boom")

        assert state.connection_state is ConnectionState.ERROR
        assert not state.is_stale

    def test_updating(self) -> None:
        """Test in flight with data is updating."""
        state = PollState(data=1, has_loaded=True, in_flight=1)

        assert state.connection_state is ConnectionState.UPDATING
        assert state.connection_state.is_live

    def test_stale(self) -> None:
        """Test data plus a failed refresh is stale."""
        state = PollState(data=1, has_loaded=True, error="boom")

        assert state.connection_state is ConnectionState.STALE
        assert state.is_stale
        assert not state.connection_state.is_live

    def test_connected(self) -> None:
        """Test loaded without error is connected."""
        state = PollState(data=1, has_loaded=True)

        assert state.connection_state is ConnectionState.CONNECTED


class TestPoller:
    """Tests for Poller."""

    def test_rejects_non_positive_interval(self) -> None:
        """Test the interval must be positive."""
        with pytest.raises(ValueError):
            Poller("bad", CountingFetch(), 0.0)

    @pytest.mark.asyncio
    async def test_refresh_applies_data(self, metrics: PollMetrics) -> None:
        """Test a manual refresh loads data."""
        poller = Poller("counter", CountingFetch(), 10.0, metrics)

        state = await poller.refresh()

        assert state.data == 1
        assert state.has_loaded
        assert state.has_changes
        assert state.error is None
        assert state.poll_count == 1
        assert state.last_updated is not None
        assert state.connection_state is ConnectionState.CONNECTED
        assert metrics.get_counters("counter").succeeded == 1
        assert metrics.get_latency_stats("counter").count == 1

    @pytest.mark.asyncio
    async def test_unchanged_data_clears_has_changes(self) -> None:
        """Test has_changes is False when the data did not change."""

        async def fetch() -> dict:
            return {"value": 1}

        poller = Poller("static", fetch, 10.0)

        await poller.refresh()
        state = await poller.refresh()

        assert not state.has_changes
        assert state.poll_count == 2

    @pytest.mark.asyncio
    async def test_failure_before_load(self, metrics: PollMetrics) -> None:
        """Test a failed first fetch reports an error with no data."""

        async def fetch() -> int:
            raise DashboardAPIError("HTTP 500: Internal server error", status=500)

        poller = Poller("failing", fetch, 10.0, metrics)

        state = await poller.refresh()

        assert state.data is None
        assert state.error == "HTTP 500: Internal server error"
        assert state.connection_state is ConnectionState.ERROR
        assert state.failure_count == 1
        assert metrics.get_counters("failing").failed == 1

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_data(self) -> None:
        """Test a failed refresh keeps the last good data and marks it stale."""
        calls = 0

        async def fetch() -> int:
            nonlocal calls
            calls += 1
            if calls > 1:
                raise AuthenticationRequiredError()
            return 7

        poller = Poller("flaky", fetch, 10.0)
        await poller.refresh()

        state = await poller.refresh()

        assert state.data == 7
        assert state.error == "Authentication required"
        assert state.connection_state is ConnectionState.STALE

    @pytest.mark.asyncio
    async def test_recovery_clears_error(self) -> None:
        """Test a successful retry clears the error."""
        fail = True

        async def fetch() -> int:
            if fail:
                raise DashboardAPIError("HTTP 503: Unavailable", status=503)
            return 1

        poller = Poller("retry", fetch, 10.0)
        await poller.refresh()

        fail = False
        state = await poller.refresh()

        assert state.error is None
        assert state.data == 1
        assert state.connection_state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_recorded(self) -> None:
        """Test non-client exceptions are reported rather than killing the poller."""

        async def fetch() -> int:
            raise RuntimeError("kaboom")

        poller = Poller("buggy", fetch, 10.0)

        state = await poller.refresh()

        assert state.error == "Unexpected error: kaboom"

    @pytest.mark.asyncio
    async def test_validating_while_in_flight(self) -> None:
        """Test the state reports a cycle in flight."""
        fetch = ControlledFetch()
        poller = Poller("slow", fetch, 10.0)

        task = asyncio.create_task(poller.refresh())
        await fetch.wait_for_calls(1)

        assert poller.state.is_validating
        assert poller.state.connection_state is ConnectionState.LOADING

        fetch.resolve(0, "done")
        await task

        assert not poller.state.is_validating

    @pytest.mark.asyncio
    async def test_newer_response_wins_over_late_older_one(self, metrics: PollMetrics) -> None:
        """Test an older cycle finishing last does not overwrite newer data."""
        fetch = ControlledFetch()
        poller = Poller("race", fetch, 10.0, metrics)

        first = asyncio.create_task(poller.refresh())
        second = asyncio.create_task(poller.refresh())
        await fetch.wait_for_calls(2)

        fetch.resolve(1, "new")
        await second
        fetch.resolve(0, "old")
        await first

        assert poller.state.data == "new"
        assert poller.state.poll_count == 1
        assert metrics.get_counters("race").discarded == 1

    @pytest.mark.asyncio
    async def test_in_order_responses_both_apply(self) -> None:
        """Test responses completing in start order are all applied."""
        fetch = ControlledFetch()
        poller = Poller("ordered", fetch, 10.0)

        first = asyncio.create_task(poller.refresh())
        second = asyncio.create_task(poller.refresh())
        await fetch.wait_for_calls(2)

        fetch.resolve(0, "old")
        await first
        fetch.resolve(1, "new")
        await second

        assert poller.state.data == "new"
        assert poller.state.poll_count == 2

    @pytest.mark.asyncio
    async def test_late_error_does_not_override_newer_success(self) -> None:
        """Test an older failing cycle is discarded once a newer one applied."""
        fetch = ControlledFetch()
        poller = Poller("race-error", fetch, 10.0)

        first = asyncio.create_task(poller.refresh())
        second = asyncio.create_task(poller.refresh())
        await fetch.wait_for_calls(2)

        fetch.resolve(1, "fresh")
        await second
        fetch.fail(0, DashboardAPIError("HTTP 500: late", status=500))
        await first

        assert poller.state.data == "fresh"
        assert poller.state.error is None

    @pytest.mark.asyncio
    async def test_response_after_cancel_is_discarded(self) -> None:
        """Test an in-flight response arriving after cancellation is dropped."""
        fetch = ControlledFetch()
        poller = Poller("cancelled", fetch, 10.0)

        task = asyncio.create_task(poller.refresh())
        await fetch.wait_for_calls(1)
        poller.cancel()
        fetch.resolve(0, "late")
        await task

        assert poller.state.data is None
        assert not poller.state.has_loaded

    @pytest.mark.asyncio
    async def test_refresh_after_cancel_does_not_fetch(self) -> None:
        """Test a cancelled poller never fetches again."""
        fetch = CountingFetch()
        poller = Poller("closed", fetch, 10.0)
        poller.cancel()

        state = await poller.refresh()

        assert fetch.calls == 0
        assert state.poll_count == 0

    @pytest.mark.asyncio
    async def test_start_polls_immediately(self) -> None:
        """Test start() runs a first cycle without waiting an interval."""
        fetch = CountingFetch()
        poller = Poller("immediate", fetch, 60.0)

        handle = poller.start()
        for _ in range(5):
            await asyncio.sleep(0)

        assert fetch.calls == 1
        assert poller.running
        assert poller.state.data == 1

        handle.cancel()
        await poller.stop()

        assert handle.cancelled
        assert not poller.running

    @pytest.mark.asyncio
    async def test_polls_repeatedly_until_cancelled(self) -> None:
        """Test the schedule repeats and stops for good on cancel."""
        fetch = CountingFetch()
        poller = Poller("repeat", fetch, 0.01)

        handle = poller.start()
        await asyncio.sleep(0.08)

        assert fetch.calls >= 2

        handle.cancel()
        await asyncio.sleep(0)
        calls_at_cancel = fetch.calls
        await asyncio.sleep(0.05)

        assert fetch.calls == calls_at_cancel
        assert not poller.running

    @pytest.mark.asyncio
    async def test_start_after_cancel_raises(self) -> None:
        """Test a cancelled poller cannot be restarted."""
        poller = Poller("once", CountingFetch(), 10.0)
        poller.cancel()

        with pytest.raises(RuntimeError):
            poller.start()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_schedule(self) -> None:
        """Test starting a running poller does not add a second loop."""
        fetch = CountingFetch()
        poller = Poller("single", fetch, 60.0)

        poller.start()
        poller.start()
        for _ in range(5):
            await asyncio.sleep(0)

        assert fetch.calls == 1

        await poller.stop()

    @pytest.mark.asyncio
    async def test_listeners_receive_state(self) -> None:
        """Test listeners are called after each applied cycle."""
        poller = Poller("listened", CountingFetch(), 10.0)
        seen: list[int] = []

        def broken(state: PollState[int]) -> None:
            raise ValueError("listener bug")

        poller.add_listener(broken)
        poller.add_listener(lambda state: seen.append(state.data))

        await poller.refresh()
        await poller.refresh()

        assert seen == [1, 2]
