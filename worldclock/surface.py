# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Display surface interface and an in-memory animated implementation."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional


class ClockField(Enum):
    """Regions of a clock, in display order."""
    HOURS = "hours"
    SEPARATOR_HM = "separator-hm"
    MINUTES = "minutes"
    SEPARATOR_MS = "separator-ms"
    SECONDS = "seconds"


CLOCK_FIELDS = [
    ClockField.HOURS,
    ClockField.SEPARATOR_HM,
    ClockField.MINUTES,
    ClockField.SEPARATOR_MS,
    ClockField.SECONDS,
]

SEPARATORS = (ClockField.SEPARATOR_HM, ClockField.SEPARATOR_MS)


class DisplaySurface(ABC):
    """Abstract target a clock writes its text and animations into.

    A clock owns exactly one surface. Animations are fire-and-forget: the
    clock never waits for them to finish.
    """

    @abstractmethod
    def build(self, fields: List[ClockField]) -> None:
        """Discard any previous content and create the given regions."""

    @abstractmethod
    def set_text(self, field: ClockField, text: str) -> None:
        """Replace the text of a region."""

    @abstractmethod
    def fade_to(self, field: ClockField, opacity: float, duration_ms: float) -> None:
        """Animate the opacity of a region to a value over a duration."""

    @abstractmethod
    def show(self, field: ClockField, duration_ms: float) -> None:
        """Reveal a hidden region over a duration."""

    @abstractmethod
    def hide(self, field: ClockField, duration_ms: float) -> None:
        """Hide a region over a duration."""


@dataclass
class Fade:
    """Linear interpolation between two values over time (seconds)."""
    start_value: float
    end_value: float
    start_time: float = 0.0
    duration: float = 0.0

    def value_at(self, now: float) -> float:
        if self.duration <= 0 or now >= self.start_time + self.duration:
            return self.end_value
        if now <= self.start_time:
            return self.start_value
        progress = (now - self.start_time) / self.duration
        return self.start_value + (self.end_value - self.start_value) * progress

    def is_complete(self, now: float) -> bool:
        return self.duration <= 0 or now >= self.start_time + self.duration


@dataclass
class FieldState:
    """Current text plus opacity and visibility animations of one region."""
    text: str = ""
    opacity: Fade = field(default_factory=lambda: Fade(1.0, 1.0))
    visibility: Fade = field(default_factory=lambda: Fade(1.0, 1.0))


class AnimatedSurface(DisplaySurface):
    """
    Display surface that keeps per-region state in memory.

    Fades are evaluated lazily against a monotonic clock, so a renderer can
    sample the effective opacity of each region at whatever frame rate it
    runs.
    """

    def __init__(self, label: str = "", clock_fn: Callable[[], float] = time.monotonic):
        """
        Args:
            label: Caption drawn with the clock (e.g., the zone name).
            clock_fn: Monotonic time source in seconds.
        """
        self.label = label
        self._clock_fn = clock_fn
        self._fields: Dict[ClockField, FieldState] = {}

    @property
    def fields(self) -> List[ClockField]:
        return list(self._fields)

    def build(self, fields: Iterable[ClockField]) -> None:
        self._fields = {f: FieldState() for f in fields}

    def _state(self, field: ClockField) -> FieldState:
        try:
            return self._fields[field]
        except KeyError:
            raise KeyError(f"surface has no region '{field.value}'") from None

    def _retarget(self, fade: Fade, target: float, duration_ms: float) -> Fade:
        now = self._clock_fn()
        # Start from wherever the running animation currently is
        return Fade(
            start_value=fade.value_at(now),
            end_value=target,
            start_time=now,
            duration=max(0.0, duration_ms) / 1000.0,
        )

    def set_text(self, field: ClockField, text: str) -> None:
        self._state(field).text = text

    def fade_to(self, field: ClockField, opacity: float, duration_ms: float) -> None:
        state = self._state(field)
        state.opacity = self._retarget(state.opacity, opacity, duration_ms)

    def show(self, field: ClockField, duration_ms: float) -> None:
        state = self._state(field)
        state.visibility = self._retarget(state.visibility, 1.0, duration_ms)

    def hide(self, field: ClockField, duration_ms: float) -> None:
        state = self._state(field)
        state.visibility = self._retarget(state.visibility, 0.0, duration_ms)

    def text(self, field: ClockField) -> str:
        return self._state(field).text

    def opacity(self, field: ClockField, now: Optional[float] = None) -> float:
        """Effective opacity of a region: faded opacity times visibility."""
        state = self._state(field)
        if now is None:
            now = self._clock_fn()
        return state.opacity.value_at(now) * state.visibility.value_at(now)

    def is_visible(self, field: ClockField, now: Optional[float] = None) -> bool:
        """False once a hide animation has fully completed."""
        state = self._state(field)
        if now is None:
            now = self._clock_fn()
        return not (state.visibility.end_value == 0.0 and state.visibility.is_complete(now))

    def is_animating(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = self._clock_fn()
        return any(
            not (s.opacity.is_complete(now) and s.visibility.is_complete(now))
            for s in self._fields.values()
        )
