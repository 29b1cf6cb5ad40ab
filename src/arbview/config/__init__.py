"""Configuration module for the dashboard."""

from arbview.config.constants import (
    DEFAULT_ANIMATION_DURATION_MS,
    DEFAULT_API_BASE_URL,
    DEFAULT_THEME,
    THEMES,
)
from arbview.config.settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_ANIMATION_DURATION_MS",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_THEME",
    "THEMES",
]
