"""Configuration and constants for the aftershock timeline.

Layout physics, scale ranges, responsive margins and render thresholds live
here so the core functions can take them as explicit inputs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple


# -----------------------
# Layout engine
# -----------------------

@dataclass(frozen=True)
class LayoutConfig:
    """Force relaxation settings for the beeswarm layout."""

    iterations: int = 300
    x_strength: float = 0.1
    y_strength: float = 1.0
    collide_padding: float = 1.5     # added to every circle's radius
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    seed: int = 1                    # jiggle generator seed

    @property
    def alpha_decay(self) -> float:
        return 1 - self.alpha_min ** (1 / self.iterations)


# -----------------------
# Scales
# -----------------------

@dataclass(frozen=True)
class ScaleConfig:
    pixels_per_minute: float = 15
    radius_range: Tuple[float, float] = (14, 45)
    mobile_radius_range: Tuple[float, float] = (10, 35)
    mobile_breakpoint: int = 768


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float


DESKTOP_MARGINS = Margins(top=150, right=80, bottom=50, left=180)
MOBILE_MARGINS = Margins(top=100, right=40, bottom=40, left=60)


def is_mobile(viewport_width: float, breakpoint: int = ScaleConfig.mobile_breakpoint) -> bool:
    return viewport_width < breakpoint


def margins_for(viewport_width: float, breakpoint: int = ScaleConfig.mobile_breakpoint) -> Margins:
    return MOBILE_MARGINS if is_mobile(viewport_width, breakpoint) else DESKTOP_MARGINS


# -----------------------
# Render / reveal
# -----------------------

@dataclass(frozen=True)
class RenderConfig:
    label_min_magnitude: float = 2.5
    scroll_hint_hide_after: float = 200
    default_viewport_width: int = 1280
    default_viewport_height: int = 800


@dataclass(frozen=True)
class AppConfig:
    data_source: str = field(default_factory=lambda: os.getenv("AFTERSHOCK_DATA", "data.csv"))
    log_level: str = field(default_factory=lambda: os.getenv("AFTERSHOCK_LOG_LEVEL", "INFO"))
    time_column: str = "time"
    magnitude_column: str = "magnitude"
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    scale: ScaleConfig = field(default_factory=ScaleConfig)
    render: RenderConfig = field(default_factory=RenderConfig)


CONFIG = AppConfig()
