"""
Timeline construction for animated slides.

Turns a :class:`SlideSpec` and a target duration into the ordered set of
cues that drive the slide's CSS animations. Pure and deterministic: no I/O
and no clock access.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any

from slidereel.core.errors import InvalidSlideData
from slidereel.core.models import Cue, SlideSpec

# Allows for float noise when comparing a cue against the duration
_DELAY_EPSILON = 1e-9


@dataclass(frozen=True)
class TimelineTiming:
    """Stagger constants, in seconds."""

    title_delay: float = 0.3
    bullet_base_delay: float = 0.8
    bullet_gap: float = 0.4
    chart_base_delay: float = 1.5
    bar_gap: float = 0.3

    def bullet_delay(self, index: int) -> float:
        return self.bullet_base_delay + index * self.bullet_gap

    def bar_delay(self, index: int) -> float:
        return self.chart_base_delay + index * self.bar_gap


DEFAULT_TIMING = TimelineTiming()


def validate_duration(duration: Any) -> float:
    """Return ``duration`` as a float or raise ``InvalidSlideData``."""
    if isinstance(duration, bool) or not isinstance(duration, Real):
        raise InvalidSlideData(f"Duration must be a number, got {duration!r}")
    try:
        value = float(duration)
    except OverflowError as e:
        raise InvalidSlideData("Duration is out of range") from e
    if not math.isfinite(value) or value <= 0:
        raise InvalidSlideData(f"Duration must be a positive number, got {duration!r}")
    return value


def chart_values(spec: SlideSpec) -> list[tuple[str, float]]:
    """Validated ``(label, value)`` pairs in the slide's insertion order."""
    pairs: list[tuple[str, float]] = []
    for label, raw in spec.visual_data.items():
        if isinstance(raw, bool) or not isinstance(raw, Real):
            raise InvalidSlideData(
                f"Chart value for {label!r} must be a number, got {raw!r}"
            )
        try:
            value = float(raw)
        except OverflowError as e:
            raise InvalidSlideData(f"Chart value for {label!r} is out of range") from e
        if not math.isfinite(value):
            raise InvalidSlideData(f"Chart value for {label!r} is not finite: {raw!r}")
        pairs.append((str(label), value))
    return pairs


def bar_heights(values: list[float]) -> list[float]:
    """Heights as percentages of the largest value.

    A non-positive maximum yields zero height for every bar, and negative
    values are floored at zero.
    """
    if not values:
        return []
    peak = max(values)
    if peak <= 0:
        return [0.0 for _ in values]
    return [max(0.0, value / peak * 100.0) for value in values]


def build_timeline(
    spec: SlideSpec, duration: float, timing: TimelineTiming = DEFAULT_TIMING
) -> tuple[Cue, ...]:
    """Build every cue for ``spec``; raises if any cue lands after ``duration``."""
    duration = validate_duration(duration)
    cues: list[Cue] = [Cue("title", timing.title_delay)]
    cues.extend(
        Cue(f"bullet-{idx}", timing.bullet_delay(idx))
        for idx in range(len(spec.bullets))
    )
    if spec.has_chart:
        pairs = chart_values(spec)
        cues.extend(Cue(f"bar-{idx}", timing.bar_delay(idx)) for idx in range(len(pairs)))

    late = [cue for cue in cues if cue.delay_seconds > duration + _DELAY_EPSILON]
    if late:
        first = late[0]
        raise InvalidSlideData(
            f"Cue '{first.target}' starts at {first.delay_seconds:.2f}s, after the "
            f"{duration:g}s slide duration ({len(late)} cue(s) out of range)"
        )
    return tuple(cues)


__all__ = [
    "TimelineTiming",
    "DEFAULT_TIMING",
    "validate_duration",
    "chart_values",
    "bar_heights",
    "build_timeline",
]
