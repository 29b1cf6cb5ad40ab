"""
Metric cards: one polled number shown through an interpolator.

A card watches a Poller, pulls its number out of the latest data with an
extractor, and feeds it to an AnimatedValue. The renderer then asks the
card for a formatted string once per frame.
"""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from arbview.config.constants import DEFAULT_ANIMATION_DURATION_MS
from arbview.core.interpolator import AnimatedValue, ClockFunction
from arbview.core.types import AnimatedFrame, ChangeDirection
from arbview.polling.poller import Poller
from arbview.polling.state import PollState
from arbview.utils.formatting import PLACEHOLDER, ValueFormatter, format_number


logger = logging.getLogger(__name__)

T = TypeVar("T")

Extractor = Callable[[T], float | None]

LOADING_TEXT = "Loading..."


class MetricCard(Generic[T]):
    """
    Animated card bound to one field of a polled resource.

    Before the resource has loaded for the first time the card shows a
    loading placeholder and no interpolator runs. Once loaded, later
    refreshes (including failed ones) keep showing a number.
    """

    def __init__(
        self,
        label: str,
        poller: Poller[T],
        extractor: Extractor[T],
        formatter: ValueFormatter = format_number,
        duration_ms: float | None = DEFAULT_ANIMATION_DURATION_MS,
        clock: ClockFunction | None = None,
    ) -> None:
        """
        Initialize the card and subscribe to the poller.

        Args:
            label: Card title.
            poller: Source of the resource.
            extractor: Picks the card's number out of the resource.
            formatter: Turns the displayed value into text.
            duration_ms: Transition duration.
            clock: Millisecond clock override (tests).
        """
        self._label = label
        self._poller = poller
        self._extract = extractor
        self._format = formatter
        self._animated = AnimatedValue(duration_ms=duration_ms, clock=clock)

        poller.add_listener(self._on_state)

    @property
    def label(self) -> str:
        return self._label

    @property
    def poller(self) -> Poller[T]:
        return self._poller

    @property
    def animated(self) -> AnimatedValue:
        return self._animated

    @property
    def enabled(self) -> bool:
        """Animation runs only once the resource has loaded."""
        return self._poller.state.has_loaded

    @property
    def direction(self) -> ChangeDirection:
        return self._animated.direction

    def _on_state(self, state: PollState[Any]) -> None:
        if state.data is None:
            return
        try:
            raw = self._extract(state.data)
        except (AttributeError, KeyError, TypeError) as e:
            logger.warning(f"Card {self._label}: cannot extract value: {e}")
            raw = None
        self._animated.update(raw, enabled=state.has_loaded)

    def tick(self, now: float | None = None) -> AnimatedFrame:
        """Advance the card's animation; called once per frame."""
        return self._animated.tick(now)

    def render_value(self) -> str:
        """Text for the card body."""
        if not self.enabled or not self._animated.is_initialized:
            return LOADING_TEXT
        value = self._animated.value
        text = self._format(value)
        return text if text else PLACEHOLDER

    def __repr__(self) -> str:
        return f"MetricCard({self._label!r}, {self._animated!r})"
