"""Core module containing the value interpolator, frame loop, and type definitions."""

from arbview.core.frames import FrameHandle, FrameScheduler
from arbview.core.interpolator import AnimatedValue
from arbview.core.types import (
    AnimatedFrame,
    AnimationState,
    ChangeDirection,
    ConnectionState,
    SidebarBadges,
)


__all__ = [
    "AnimatedFrame",
    "AnimatedValue",
    "AnimationState",
    "ChangeDirection",
    "ConnectionState",
    "FrameHandle",
    "FrameScheduler",
    "SidebarBadges",
]
