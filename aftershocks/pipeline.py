from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from aftershocks.annotations import DEFAULT_ANNOTATIONS, Annotation, AnnotationBox, annotation_box
from aftershocks.beeswarm import layout, overlap_fraction
from aftershocks.config import CONFIG, AppConfig, Margins, margins_for
from aftershocks.errors import EmptyDatasetError
from aftershocks.events import Event, normalize_events
from aftershocks.scales import (
    RadiusScale,
    Tick,
    TimeScale,
    chart_height,
    minute_ticks,
    radius_range_for,
    total_minutes,
)

SUBTITLE_TIME_FORMAT = "%b %d, %I:%M %p"


@dataclass(frozen=True)
class TimelineModel:
    """Everything the render layer needs; positions are final."""

    events: List[Event]
    time_scale: TimeScale
    radius_scale: RadiusScale
    margins: Margins
    viewport_width: float
    width: float
    center_x: float
    chart_height: float
    total_minutes: int
    ticks: List[Tick]
    annotations: List[AnnotationBox]
    subtitle: str


def subtitle(events: Sequence[Event], minutes: int) -> str:
    start, end = events[0].instant, events[-1].instant
    return (
        f"{len(events)} events over {minutes} minutes | "
        f"{start.strftime(SUBTITLE_TIME_FORMAT)} - {end.strftime(SUBTITLE_TIME_FORMAT)}"
    )


def build_timeline(
        records: Iterable[dict],
        viewport_width: float,
        config: AppConfig = CONFIG,
        annotations: Optional[Sequence[Annotation]] = None,
        ) -> TimelineModel:
    """Normalize, scale and lay out the records in one sequential pass.

    Raises EmptyDatasetError when no record has a usable time and magnitude;
    in that case no scale is built and the layout never runs.
    """
    events = normalize_events(records, config.time_column, config.magnitude_column)
    if not events:
        raise EmptyDatasetError("No events with a valid time and magnitude")

    start, end = events[0].instant, events[-1].instant
    minutes = total_minutes(start, end)
    height = chart_height(start, end, config.scale.pixels_per_minute)
    time_scale = TimeScale(start, end, height)
    radius_scale = RadiusScale.for_magnitudes(
        (e.magnitude for e in events),
        radius_range_for(viewport_width, config.scale),
    )

    margins = margins_for(viewport_width, config.scale.mobile_breakpoint)
    width = viewport_width - margins.left - margins.right
    center_x = width / 2

    laid_out = layout(events, height, center_x, radius_scale, config.layout)
    logger.info(
        "Laid out {} events over {} minutes (chart {}px, overlap {:.2%})",
        len(laid_out), minutes, height, overlap_fraction(laid_out, radius_scale),
    )

    if annotations is None:
        annotations = DEFAULT_ANNOTATIONS
    # annotations outside the data's time range would land off the chart
    boxes = [
        annotation_box(a, time_scale, margins, width, viewport_width, config.scale.mobile_breakpoint)
        for a in annotations
        if a.end >= start and a.start <= end
    ]

    return TimelineModel(
        events=laid_out,
        time_scale=time_scale,
        radius_scale=radius_scale,
        margins=margins,
        viewport_width=viewport_width,
        width=width,
        center_x=center_x,
        chart_height=height,
        total_minutes=minutes,
        ticks=minute_ticks(start, end),
        annotations=boxes,
        subtitle=subtitle(laid_out, minutes),
    )
