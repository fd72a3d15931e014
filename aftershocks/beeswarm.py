"""Beeswarm layout: time on the vertical axis, collisions resolved sideways.

Vertical targets come straight from the time scale. Horizontal positions come
from a fixed number of relaxation ticks over explicit state arrays: every
circle is pulled toward its target ``y`` (strongly) and toward the centre line
(weakly) while overlapping circles push each other apart.

The tick follows the usual velocity-Verlet style force simulation: alpha
decays geometrically from 1 toward ``alpha_min`` over ``iterations`` ticks,
positioning forces are scaled by alpha, the collision force is not, and
velocities are damped by ``velocity_decay`` before being added to positions.
"""

from __future__ import annotations

import math
from time import perf_counter
from typing import Callable, List, Sequence, Tuple

import numpy as np
from loguru import logger

from aftershocks.config import LayoutConfig
from aftershocks.errors import EmptyDatasetError
from aftershocks.events import Event
from aftershocks.scales import TimeScale


class Lcg:
    """Linear congruential generator; the only source of randomness in the layout."""

    a = 1664525
    c = 1013904223
    m = 4294967296

    def __init__(self, seed: int = 1):
        self.state = seed

    def __call__(self) -> float:
        self.state = (self.a * self.state + self.c) % self.m
        return self.state / self.m


def jiggle(random: Callable[[], float]) -> float:
    return (random() - 0.5) * 1e-6


def target_ys(events: Sequence[Event], chart_height: float) -> np.ndarray:
    scale = TimeScale(events[0].instant, events[-1].instant, chart_height)
    return np.array([scale(e.instant) for e in events], dtype=float)


def _collide(x, y, vx, vy, radii, random, strength: float = 1.0) -> None:
    """One collision pass, updating ``vx``/``vy`` in place."""
    n = len(x)
    # candidate search runs on the positions at the start of the pass
    py = y + vy
    order = np.argsort(py, kind="stable")
    sorted_py = py[order]
    reach = float(radii.max())

    xs, ys = x.tolist(), y.tolist()
    vxs, vys = vx.tolist(), vy.tolist()
    rs = radii.tolist()

    for i in range(n):
        ri = rs[i]
        ri2 = ri * ri
        xi = xs[i] + vxs[i]
        yi = ys[i] + vys[i]

        lo = np.searchsorted(sorted_py, yi - ri - reach, side="left")
        hi = np.searchsorted(sorted_py, yi + ri + reach, side="right")
        for j in np.sort(order[lo:hi]).tolist():
            if j <= i:
                continue
            rj = rs[j]
            r = ri + rj
            dx = xi - xs[j] - vxs[j]
            dy = yi - ys[j] - vys[j]
            l2 = dx * dx + dy * dy
            if l2 >= r * r:
                continue
            if dx == 0:
                dx = jiggle(random)
                l2 += dx * dx
            if dy == 0:
                dy = jiggle(random)
                l2 += dy * dy
            l = math.sqrt(l2)
            l = (r - l) / l * strength
            dx *= l
            dy *= l
            rj2 = rj * rj
            w = rj2 / (ri2 + rj2)   # the smaller circle takes the larger share
            vxs[i] += dx * w
            vys[i] += dy * w
            vxs[j] -= dx * (1 - w)
            vys[j] -= dy * (1 - w)

    vx[:] = vxs
    vy[:] = vys


def relax(
        y_target: np.ndarray,
        radii: np.ndarray,
        center_x: float,
        config: LayoutConfig = LayoutConfig(),
        ) -> Tuple[np.ndarray, np.ndarray]:
    """Run the fixed-length relaxation; returns final ``(x, y)`` arrays.

    ``radii`` are collision radii (padding already included).
    """
    n = len(y_target)
    x = np.full(n, float(center_x))
    y = np.array(y_target, dtype=float)
    vx = np.zeros(n)
    vy = np.zeros(n)

    random = Lcg(config.seed)
    alpha = 1.0
    alpha_decay = config.alpha_decay
    keep = 1 - config.velocity_decay

    for _ in range(config.iterations):
        alpha += (0.0 - alpha) * alpha_decay

        vy += (y_target - y) * config.y_strength * alpha
        vx += (center_x - x) * config.x_strength * alpha
        if n > 1:
            _collide(x, y, vx, vy, radii, random)

        vx *= keep
        vy *= keep
        x += vx
        y += vy

    return x, y


def layout(
        events: Sequence[Event],
        chart_height: float,
        center_x: float,
        radius_fn: Callable[[float], float],
        config: LayoutConfig = LayoutConfig(),
        ) -> List[Event]:
    """Position sorted events; returns new events with ``position`` set, same order."""
    if not events:
        raise EmptyDatasetError("Cannot lay out an empty event list")

    start = perf_counter()
    y_target = target_ys(events, chart_height)
    radii = np.array([radius_fn(e.magnitude) for e in events], dtype=float) + config.collide_padding
    x, y = relax(y_target, radii, center_x, config)

    laid_out = [e.with_position(xi, yi) for e, xi, yi in zip(events, x.tolist(), y.tolist())]
    logger.debug(
        "Beeswarm layout: {} events, {} ticks, {:.3f}s",
        len(events), config.iterations, perf_counter() - start,
    )
    return laid_out


def overlap_fraction(events: Sequence[Event], radius_fn: Callable[[float], float]) -> float:
    """Share of circle pairs whose centres are closer than the sum of their radii."""
    n = len(events)
    if n < 2:
        return 0.0
    xy = np.array([e.position for e in events], dtype=float)
    r = np.array([radius_fn(e.magnitude) for e in events], dtype=float)

    dist = np.hypot(xy[:, None, 0] - xy[None, :, 0], xy[:, None, 1] - xy[None, :, 1])
    reach = r[:, None] + r[None, :]
    upper = np.triu(np.ones((n, n), dtype=bool), k=1)
    overlaps = int(np.count_nonzero((dist < reach) & upper))
    return overlaps / (n * (n - 1) / 2)
