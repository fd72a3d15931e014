from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np
import pytest

from aftershocks.beeswarm import Lcg, layout, overlap_fraction, relax, target_ys
from aftershocks.config import LayoutConfig
from aftershocks.errors import EmptyDatasetError
from aftershocks.events import Event
from aftershocks.scales import RadiusScale, chart_height

T0 = datetime(2025, 10, 10, 9, 43)


def make_events(offsets_minutes, magnitudes) -> list[Event]:
    return [
        Event(raw_time="", magnitude=m, instant=T0 + timedelta(minutes=o), record={"i": i})
        for i, (o, m) in enumerate(zip(offsets_minutes, magnitudes))
    ]


@pytest.fixture
def burst_events() -> list[Event]:
    """80 events, two per minute, magnitudes cycling through 1.0..5.0."""
    offsets = [k // 2 for k in range(80)]
    mags = [1.0 + (k % 9) * 0.5 for k in range(80)]
    return make_events(offsets, mags)


def run_layout(events, radius_fn, center_x=500.0):
    height = chart_height(events[0].instant, events[-1].instant)
    return layout(events, height, center_x, radius_fn)


def test_single_event_sits_on_center_line():
    events = make_events([0], [4.2])
    out = layout(events, 15, 321.5, lambda m: 20)

    assert out[0].position == (321.5, 0.0)


def test_empty_input_raises():
    with pytest.raises(EmptyDatasetError):
        layout([], 100, 50, lambda m: 10)


def test_layout_keeps_order_and_input_untouched(burst_events):
    radius = RadiusScale((1.0, 5.0), (4, 12))
    out = run_layout(burst_events, radius)

    assert [e.record["i"] for e in out] == list(range(80))
    assert all(e.position is None for e in burst_events)
    assert all(e.position is not None for e in out)


def test_layout_is_deterministic(burst_events):
    radius = RadiusScale((1.0, 5.0), (4, 12))
    first = run_layout(burst_events, radius)
    second = run_layout(burst_events, radius)

    assert [e.position for e in first] == [e.position for e in second]


def test_layout_resolves_overlaps(burst_events):
    radius = RadiusScale((1.0, 5.0), (4, 12))
    out = run_layout(burst_events, radius)

    assert overlap_fraction(out, radius) < 0.01


def test_layout_spreads_sideways_and_keeps_time(burst_events):
    radius = RadiusScale((1.0, 5.0), (4, 12))
    height = chart_height(burst_events[0].instant, burst_events[-1].instant)
    out = run_layout(burst_events, radius)

    xs = np.array([e.position.x for e in out])
    ys = np.array([e.position.y for e in out])
    targets = target_ys(burst_events, height)

    # simultaneous events cannot share the centre line
    assert np.ptp(xs) > 10
    # drift along the time axis stays under a minute on average
    assert np.mean(np.abs(ys - targets)) < 15


def test_target_ys_span_chart():
    events = make_events([0, 10, 30], [2, 2, 2])
    ys = target_ys(events, 450)
    assert ys.tolist() == pytest.approx([0, 150, 450])


def test_relax_without_collisions_stays_on_targets():
    # far apart circles: only the positioning forces act, and they are already satisfied
    y_target = np.array([0.0, 500.0, 1000.0])
    x, y = relax(y_target, np.array([5.0, 5.0, 5.0]), 200.0, LayoutConfig())

    assert x.tolist() == [200.0, 200.0, 200.0]
    assert y.tolist() == y_target.tolist()


def test_lcg_sequence_is_fixed():
    a, b = Lcg(1), Lcg(1)
    seq = [a() for _ in range(5)]
    assert seq == [b() for _ in range(5)]
    assert all(0 <= v < 1 for v in seq)
    assert Lcg(2)() != seq[0]


def test_overlap_fraction():
    events = [
        Event("", 1.0, T0).with_position(0, 0),
        Event("", 1.0, T0).with_position(5, 0),
        Event("", 1.0, T0).with_position(100, 0),
    ]
    assert overlap_fraction(events, lambda m: 4) == pytest.approx(1 / 3)
    assert overlap_fraction(events[:1], lambda m: 4) == 0.0
