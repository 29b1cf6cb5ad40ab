"""
Animated value interpolation for metric displays.

Each metric card owns one AnimatedValue. When a poll delivers a new number,
the display glides from wherever it currently sits towards the new target
over a fixed duration instead of jumping. The interpolator never schedules
anything itself; the host calls tick() once per repaint.
"""

import math
from collections.abc import Callable

from arbview.config.constants import DEFAULT_ANIMATION_DURATION_MS
from arbview.core.types import AnimatedFrame, AnimationState, ChangeDirection
from arbview.utils.math import (
    EasingFunction,
    clamp,
    ease_out_quad,
    is_finite_number,
    lerp,
    safe_divide,
)
from arbview.utils.time import monotonic_ms


ClockFunction = Callable[[], float]


def _coerce(raw: object) -> float:
    """Convert raw input to float, mapping anything unusable to NaN."""
    if is_finite_number(raw):
        return float(raw)  # type: ignore[arg-type]
    return math.nan


def _direction(old: float, new: float) -> ChangeDirection:
    if not (math.isfinite(old) and math.isfinite(new)) or old == new:
        return ChangeDirection.NONE
    return ChangeDirection.UP if new > old else ChangeDirection.DOWN


class AnimatedValue:
    """
    Anti-flicker counter for a single displayed metric.

    States:
    - IDLE: displayed value equals the target.
    - TRANSITIONING: displayed value moves from the previous start point
      towards the target along the easing curve.

    A new target arriving mid-transition restarts the animation from the
    value currently on screen. Degenerate input (NaN, None, infinities) and
    degenerate durations (NaN, zero, negative) snap immediately.
    """

    def __init__(
        self,
        initial: float | None = None,
        duration_ms: float | None = DEFAULT_ANIMATION_DURATION_MS,
        easing: EasingFunction = ease_out_quad,
        clock: ClockFunction | None = None,
    ) -> None:
        """
        Initialize the interpolator.

        Args:
            initial: First observed value, shown immediately. When None the
                first call to update() seeds the value instead.
            duration_ms: Length of each transition in milliseconds.
            easing: Curve mapping elapsed fraction to progress.
            clock: Millisecond clock, monotonic by default.
        """
        self._duration_ms = _coerce(duration_ms)
        self._easing = easing
        self._clock = clock or monotonic_ms

        self._target = math.nan
        self._displayed = math.nan
        self._previous = math.nan
        self._start = 0.0
        self._state = AnimationState.IDLE
        self._direction = ChangeDirection.NONE
        self._initialized = False
        self._last_now = 0.0

        if initial is not None:
            self._seed(initial)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def value(self) -> float:
        """
        Value currently on screen.

        Mid-transition this is the value as of the last tick() or update();
        once duration_ms has elapsed it is the target, ticked or not.
        """
        self._settle()
        return self._displayed

    displayed_value = value

    @property
    def target_value(self) -> float:
        """Latest true value received."""
        return self._target

    @property
    def previous_target_value(self) -> float:
        """Starting point of the current (or last) transition."""
        return self._previous

    @property
    def animation_start(self) -> float:
        """Clock reading at which the current transition started."""
        return self._start

    @property
    def duration_ms(self) -> float:
        return self._duration_ms

    @property
    def state(self) -> AnimationState:
        self._settle()
        return self._state

    @property
    def is_animating(self) -> bool:
        """False as soon as duration_ms has elapsed since the transition began."""
        self._settle()
        return self._state is AnimationState.TRANSITIONING

    @property
    def direction(self) -> ChangeDirection:
        """Sign of the last accepted change."""
        return self._direction

    @property
    def is_initialized(self) -> bool:
        """Whether a first value has been observed."""
        return self._initialized

    @property
    def frame(self) -> AnimatedFrame:
        """Last computed frame; a finished transition reports its target."""
        self._settle()
        return AnimatedFrame(
            value=self._displayed,
            is_animating=self.is_animating,
            direction=self._direction,
        )

    # =========================================================================
    # Operations
    # =========================================================================

    def update(
        self,
        raw_value: float | None,
        enabled: bool = True,
        now: float | None = None,
    ) -> AnimatedFrame:
        """
        Feed the latest value from the data source.

        Args:
            raw_value: Latest true metric value.
            enabled: False while the surrounding data has never loaded; the
                value is then mirrored without animating.
            now: Clock reading override.

        Returns:
            Frame after applying the update.
        """
        if not self._initialized:
            self._seed(raw_value)
            return self.frame

        if not enabled or not is_finite_number(raw_value) or not self._can_animate():
            self._snap_to(_coerce(raw_value))
            return self.frame

        value = float(raw_value)  # type: ignore[arg-type]
        now = self._clock() if now is None else now
        self._last_now = max(self._last_now, now)

        # Bring the display up to date so a restart begins where it sits
        self._advance(now)

        if value == self._target:
            return self.frame

        if not math.isfinite(self._displayed):
            self._snap_to(value)
            return self.frame

        self._previous = self._displayed
        self._target = value
        self._start = now
        self._direction = _direction(self._previous, value)

        if self._previous == self._target:
            self._displayed = self._target
            self._state = AnimationState.IDLE
        else:
            self._state = AnimationState.TRANSITIONING

        return self.frame

    def tick(self, now: float | None = None) -> AnimatedFrame:
        """
        Advance the transition to the current time.

        Called by the host once per repaint.

        Args:
            now: Clock reading override.

        Returns:
            Frame at the given time.
        """
        if self._state is AnimationState.TRANSITIONING:
            self._advance(self._clock() if now is None else now)
        return self.frame

    def snap(self) -> AnimatedFrame:
        """Finish any running transition immediately."""
        self._displayed = self._target
        self._previous = self._target
        self._state = AnimationState.IDLE
        return self.frame

    def set_duration(self, duration_ms: float | None) -> None:
        """Change the duration used by subsequent transitions."""
        self._duration_ms = _coerce(duration_ms)
        if not self._can_animate():
            self.snap()

    # =========================================================================
    # Internals
    # =========================================================================

    def _can_animate(self) -> bool:
        return math.isfinite(self._duration_ms) and self._duration_ms > 0

    def _seed(self, raw_value: object) -> None:
        value = _coerce(raw_value)
        self._target = value
        self._displayed = value
        self._previous = value
        self._state = AnimationState.IDLE
        self._direction = ChangeDirection.NONE
        self._initialized = True

    def _snap_to(self, value: float) -> None:
        changed = not (value == self._target or (math.isnan(value) and math.isnan(self._target)))
        if changed:
            self._direction = _direction(self._displayed, value)
        self._target = value
        self._displayed = value
        self._previous = value
        self._state = AnimationState.IDLE

    def _settle(self) -> None:
        if self._state is not AnimationState.TRANSITIONING:
            return
        now = max(self._clock(), self._last_now)
        if now - self._start >= self._duration_ms:
            self._advance(now)

    def _advance(self, now: float) -> None:
        if self._state is not AnimationState.TRANSITIONING:
            return
        self._last_now = max(self._last_now, now)

        t = clamp(safe_divide(now - self._start, self._duration_ms, 1.0), 0.0, 1.0)
        if t >= 1.0:
            self._displayed = self._target
            self._state = AnimationState.IDLE
            return

        eased = clamp(self._easing(t), 0.0, 1.0)
        low = min(self._previous, self._target)
        high = max(self._previous, self._target)
        displayed = lerp(self._previous, self._target, eased)
        if not math.isfinite(displayed):
            self._displayed = self._target
            self._state = AnimationState.IDLE
            return
        self._displayed = clamp(displayed, low, high)

    def __repr__(self) -> str:
        return (
            f"AnimatedValue(value={self._displayed!r}, target={self._target!r}, "
            f"state={self._state.value})"
        )
