"""Fetch state of a polled resource."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from arbview.core.types import ConnectionState


T = TypeVar("T")


@dataclass
class PollState(Generic[T]):
    """
    What the UI knows about one polled resource.

    Data from the last successful cycle is kept when a later cycle fails,
    so a refresh error never blanks an already-rendered page.
    """

    data: T | None = None
    error: str | None = None
    has_loaded: bool = False
    in_flight: int = 0
    has_changes: bool = False
    last_updated: float | None = None
    poll_count: int = 0
    failure_count: int = 0

    @property
    def is_validating(self) -> bool:
        """A cycle is currently in flight."""
        return self.in_flight > 0

    @property
    def is_loading(self) -> bool:
        """Initial load: in flight and nothing to show yet."""
        return self.is_validating and not self.has_loaded

    @property
    def is_stale(self) -> bool:
        """Showing old data because the last cycle failed."""
        return self.has_loaded and self.error is not None

    @property
    def connection_state(self) -> ConnectionState:
        if not self.has_loaded:
            if self.is_validating:
                return ConnectionState.LOADING
            if self.error is not None:
                return ConnectionState.ERROR
            return ConnectionState.IDLE
        if self.is_validating:
            return ConnectionState.UPDATING
        if self.error is not None:
            return ConnectionState.STALE
        return ConnectionState.CONNECTED
