from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, NamedTuple, Tuple

from aftershocks.config import ScaleConfig, is_mobile

MINUTE = timedelta(minutes=1)


def total_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes spanned by ``[start, end]``, rounded up, at least 1."""
    minutes = math.ceil((end - start).total_seconds() / 60)
    return max(1, minutes)


def chart_height(start: datetime, end: datetime, pixels_per_minute: float = ScaleConfig.pixels_per_minute) -> float:
    return total_minutes(start, end) * pixels_per_minute


@dataclass(frozen=True)
class TimeScale:
    """Linear map from ``[start, end]`` to ``[0, height]`` pixels.

    A zero-width domain is widened to one minute so the mapping stays defined;
    ``end`` then reports the widened bound.
    """

    start: datetime
    end: datetime
    height: float

    def __post_init__(self):
        if self.end <= self.start:
            object.__setattr__(self, "end", self.start + MINUTE)

    @property
    def span_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def __call__(self, instant: datetime) -> float:
        return (instant - self.start).total_seconds() / self.span_seconds * self.height

    def invert(self, y: float) -> datetime:
        return self.start + timedelta(seconds=y / self.height * self.span_seconds)


def _sqrt(x: float) -> float:
    return math.copysign(math.sqrt(abs(x)), x)


@dataclass(frozen=True)
class RadiusScale:
    """Square-root scale: circle area grows linearly with magnitude."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, magnitude: float) -> float:
        d0, d1 = _sqrt(self.domain[0]), _sqrt(self.domain[1])
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        t = (_sqrt(magnitude) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    @classmethod
    def for_magnitudes(cls, magnitudes, radius_range: Tuple[float, float]) -> "RadiusScale":
        magnitudes = list(magnitudes)
        return cls(domain=(min(magnitudes), max(magnitudes)), range=tuple(radius_range))


def radius_range_for(viewport_width: float, config: ScaleConfig = ScaleConfig()) -> Tuple[float, float]:
    if is_mobile(viewport_width, config.mobile_breakpoint):
        return config.mobile_radius_range
    return config.radius_range


# -----------------------
# Ticks
# -----------------------

class Tick(NamedTuple):
    instant: datetime
    major: bool       # on the hour
    labelled: bool    # every fifth minute
    label: str


def minute_ticks(start: datetime, end: datetime) -> List[Tick]:
    ticks = []
    t = start
    while t <= end:
        major = t.minute == 0
        labelled = t.minute % 5 == 0
        label = t.strftime("%b %d, %I:%M %p" if major else "%I:%M") if labelled else ""
        ticks.append(Tick(t, major, labelled, label))
        t += MINUTE
    return ticks
