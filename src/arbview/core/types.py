"""
Type definitions for the dashboard.

This module contains the enums and small dataclasses shared between the
interpolator, the pollers and the renderer. Using slots=True for
memory efficiency and faster attribute access.
"""

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class AnimationState(str, Enum):
    """Interpolator state."""

    IDLE = "IDLE"
    TRANSITIONING = "TRANSITIONING"


class ChangeDirection(str, Enum):
    """Sign of the last accepted value change."""

    UP = "UP"
    DOWN = "DOWN"
    NONE = "NONE"


class ConnectionState(str, Enum):
    """Fetch status of a polled resource, as shown to the user."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    UPDATING = "updating"
    STALE = "stale"
    CONNECTED = "connected"

    @property
    def is_live(self) -> bool:
        """Whether the resource currently has fresh data."""
        return self in (ConnectionState.CONNECTED, ConnectionState.UPDATING)


# =============================================================================
# Display Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class AnimatedFrame:
    """
    One sample of an animated value.

    Frozen so frames can be handed to the renderer without copying.
    """

    value: float
    is_animating: bool
    direction: ChangeDirection = ChangeDirection.NONE


@dataclass(slots=True, frozen=True)
class SidebarBadges:
    """Counts shown next to the sidebar navigation entries."""

    opportunities: int = 0
    wallets: int = 0
    alerts: int = 0
