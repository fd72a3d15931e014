from __future__ import annotations

from datetime import datetime
from typing import List, Sequence

import plotly.graph_objects as go

from aftershocks.annotations import chars_per_line, wrap_text
from aftershocks.config import RenderConfig
from aftershocks.events import Event
from aftershocks.pipeline import TimelineModel

BACKGROUND = "#0b0c10"
CIRCLE_COLOR = "rgba(231, 76, 60, 0.75)"
CIRCLE_HIDDEN_COLOR = "rgba(231, 76, 60, 0.06)"
TICK_COLOR = "rgba(255, 255, 255, 0.25)"
MAJOR_TICK_COLOR = "rgba(255, 255, 255, 0.6)"
TEXT_COLOR = "rgba(255, 255, 255, 0.85)"


# -----------------------
# Reveal
# -----------------------

def reveal_threshold(scroll_top: float, viewport_height: float) -> float:
    """Page offset of the middle of the viewport."""
    return scroll_top + viewport_height / 2


def revealed(
        events: Sequence[Event],
        scroll_top: float,
        viewport_height: float,
        margin_top: float,
        ) -> List[bool]:
    """An event shows once its circle centre has scrolled above the viewport middle."""
    threshold = reveal_threshold(scroll_top, viewport_height)
    return [e.position.y + margin_top <= threshold for e in events]


def furthest_scroll(scroll_top: float, reached: float = 0) -> float:
    """Scroll offset to reveal up to; revealing is one-way, scrolling back up hides nothing."""
    return max(scroll_top, reached)


def time_at_viewport_middle(model: TimelineModel, scroll_top: float, viewport_height: float) -> datetime:
    y = reveal_threshold(scroll_top, viewport_height) - model.margins.top
    y = min(max(y, 0.0), model.chart_height)
    return model.time_scale.invert(y)


def show_scroll_hint(scroll_top: float, config: RenderConfig = RenderConfig()) -> bool:
    return scroll_top <= config.scroll_hint_hide_after


def page_height(model: TimelineModel) -> float:
    return model.chart_height + model.margins.top + model.margins.bottom


# -----------------------
# Figure
# -----------------------

def _hover_text(e: Event) -> str:
    return (
        "Time: " + e.instant.strftime("%b %d, %I:%M %p")
        + "<br>Magnitude: " + f"{e.magnitude:g}"
    )


def _add_ticks(fig: go.Figure, model: TimelineModel) -> None:
    cx = model.center_x
    for major in (False, True):
        xs, ys = [], []
        for t in model.ticks:
            if t.major != major:
                continue
            y = model.time_scale(t.instant)
            xs += [cx - 20, cx + 20, None]
            ys += [y, y, None]
        if xs:
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="lines",
                    line=dict(color=MAJOR_TICK_COLOR if major else TICK_COLOR, width=1.5 if major else 1),
                    hoverinfo="skip",
                    showlegend=False,
                )
            )

    labelled = [t for t in model.ticks if t.labelled]
    if labelled:
        fig.add_trace(
            go.Scatter(
                x=[cx - 30] * len(labelled),
                y=[model.time_scale(t.instant) for t in labelled],
                mode="text",
                text=[f"<b>{t.label}</b>" if t.major else t.label for t in labelled],
                textposition="middle left",
                textfont=dict(
                    size=[14 if t.major else 12 for t in labelled],
                    color=TEXT_COLOR,
                ),
                hoverinfo="skip",
                showlegend=False,
                cliponaxis=False,
            )
        )


def _add_circles(fig: go.Figure, model: TimelineModel, visible: List[bool], config: RenderConfig) -> None:
    for shown in (False, True):
        sub = [e for e, v in zip(model.events, visible) if v == shown]
        if not sub:
            continue
        fig.add_trace(
            go.Scatter(
                x=[e.position.x for e in sub],
                y=[e.position.y for e in sub],
                mode="markers",
                marker=dict(
                    size=[2 * model.radius_scale(e.magnitude) for e in sub],
                    sizemode="diameter",
                    color=CIRCLE_COLOR if shown else CIRCLE_HIDDEN_COLOR,
                    line=dict(color="rgba(255, 255, 255, 0.5)" if shown else "rgba(0, 0, 0, 0)", width=1),
                ),
                hovertext=[_hover_text(e) for e in sub] if shown else None,
                hoverinfo="text" if shown else "skip",
                showlegend=False,
            )
        )

    # Magnitude labels appear with their circles and are not drawn before that
    labels = [
        e for e, v in zip(model.events, visible)
        if v and e.magnitude >= config.label_min_magnitude
    ]
    if labels:
        fig.add_trace(
            go.Scatter(
                x=[e.position.x for e in labels],
                y=[e.position.y for e in labels],
                mode="text",
                text=[f"{e.magnitude:g}" for e in labels],
                textposition="middle center",
                textfont=dict(size=12, color="#ffffff"),
                hoverinfo="skip",
                showlegend=False,
            )
        )


def _add_annotations(fig: go.Figure, model: TimelineModel) -> None:
    for box in model.annotations:
        right = box.align == "right"
        fig.add_annotation(
            x=box.x + box.width if right else box.x,
            y=box.y,
            xref="x",
            yref="y",
            xanchor="right" if right else "left",
            yanchor="top",
            showarrow=False,
            align=box.align,
            text=wrap_text(box.text, width=chars_per_line(box)),
            font=dict(size=box.font_size, color=f"rgba(255, 255, 255, {box.opacity})"),
        )


def build_figure(
        model: TimelineModel,
        scroll_top: float,
        viewport_height: float,
        config: RenderConfig = RenderConfig(),
        ) -> go.Figure:
    """Draw the timeline with one axis unit per pixel.

    Chart coordinates have their origin at the top-left of the plot area, the
    margins extend the axes so annotation boxes in the margins stay visible.
    """
    m = model.margins
    visible = revealed(model.events, scroll_top, viewport_height, m.top)

    fig = go.Figure()
    fig.add_shape(
        type="line",
        x0=model.center_x,
        x1=model.center_x,
        y0=0,
        y1=model.chart_height,
        line=dict(color="rgba(255, 255, 255, 0.3)", width=2),
        layer="below",
    )
    _add_ticks(fig, model)
    _add_circles(fig, model, visible, config)
    _add_annotations(fig, model)

    fig.update_xaxes(
        range=[-m.left, model.width + m.right],
        visible=False,
        fixedrange=True,
    )
    fig.update_yaxes(
        range=[model.chart_height + m.bottom, -m.top],   # time flows downward
        visible=False,
        fixedrange=True,
    )
    fig.update_layout(
        width=model.viewport_width,
        height=page_height(model),
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor=BACKGROUND,
        plot_bgcolor=BACKGROUND,
        showlegend=False,
        hovermode="closest",
    )
    return fig
