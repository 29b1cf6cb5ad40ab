"""
Dashboard-wide state shared by every page.

Holds the theme preference and the sidebar badge counts. The theme is the
only persisted preference; it is stored as a small JSON document.
"""

import logging
from pathlib import Path

import orjson

from arbview.api.models import NetworkList, OpportunityList
from arbview.config.constants import DEFAULT_THEME, THEME_LABELS, THEMES
from arbview.core.types import SidebarBadges
from arbview.dashboard.badges import compute_badges


logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class DashboardContext:
    """
    Explicitly owned UI context.

    Created once by the host and passed to whatever needs it.
    """

    def __init__(self, preferences_path: Path) -> None:
        """
        Initialize the context.

        Args:
            preferences_path: JSON file holding the persisted theme.
        """
        self._path = preferences_path
        self._theme = DEFAULT_THEME
        self._badges = SidebarBadges()

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def theme_label(self) -> str:
        return THEME_LABELS.get(self._theme, self._theme)

    @property
    def badges(self) -> SidebarBadges:
        return self._badges

    @property
    def preferences_path(self) -> Path:
        return self._path

    # =========================================================================
    # Theme
    # =========================================================================

    def load(self) -> str:
        """
        Read the persisted theme.

        Missing, unreadable, or unknown values fall back to the default.

        Returns:
            The active theme.
        """
        self._theme = DEFAULT_THEME

        if not self._path.exists():
            return self._theme

        try:
            stored = orjson.loads(self._path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning(f"Could not read preferences from {self._path}: {e}")
            return self._theme

        theme = stored.get(THEME_KEY) if isinstance(stored, dict) else None
        if theme in THEMES:
            self._theme = theme
        elif theme is not None:
            logger.info(f"Ignoring unknown theme {theme!r}")

        return self._theme

    def set_theme(self, name: str) -> None:
        """
        Switch theme and persist the choice.

        Raises:
            ValueError: If the theme is unknown.
        """
        if name not in THEMES:
            raise ValueError(f"Unknown theme: {name}")
        if name == self._theme:
            return
        self._theme = name
        self._save()
        logger.debug(f"Theme set to {name}")

    def cycle_theme(self) -> str:
        """Advance to the next theme in the list; returns it."""
        index = THEMES.index(self._theme) if self._theme in THEMES else -1
        self.set_theme(THEMES[(index + 1) % len(THEMES)])
        return self._theme

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(orjson.dumps({THEME_KEY: self._theme}))
        except OSError as e:
            logger.warning(f"Could not persist theme to {self._path}: {e}")

    # =========================================================================
    # Badges
    # =========================================================================

    def update_badges(
        self,
        opportunities: OpportunityList | None,
        networks: NetworkList | None,
    ) -> SidebarBadges:
        """Recompute the badge counts from the latest sidebar feeds."""
        self._badges = compute_badges(opportunities, networks)
        return self._badges
