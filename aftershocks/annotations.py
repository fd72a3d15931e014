from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from aftershocks.config import Margins, ScaleConfig, is_mobile
from aftershocks.scales import TimeScale


# -----------------------
# Data model
# -----------------------

@dataclass(frozen=True)
class AnnotationOptions:
    font_size: Optional[float] = None        # right side; 16px desktop, 12px mobile
    left_font_size: Optional[float] = None   # left side; 14px desktop, 10px mobile
    offset_y: float = 100
    height: float = 120


@dataclass(frozen=True)
class Annotation:
    start: datetime
    end: datetime
    text: str
    side: str = "right"    # "left" for running-count milestones
    options: AnnotationOptions = field(default_factory=AnnotationOptions)


@dataclass(frozen=True)
class AnnotationBox:
    x: float
    y: float
    width: float
    height: float
    font_size: float
    align: str
    opacity: float
    text: str


def _d(day: int, hour: int, minute: int) -> datetime:
    return datetime(2025, 10, day, hour, minute)


DEFAULT_ANNOTATIONS: List[Annotation] = [
    Annotation(_d(10, 17, 14), _d(10, 17, 20), "100 aftershocks", "left"),
    Annotation(_d(10, 22, 50), _d(10, 22, 58), "200 aftershocks", "left"),
    Annotation(_d(11, 3, 20), _d(11, 3, 30), "300 aftershocks", "left"),
    Annotation(
        _d(10, 9, 46), _d(10, 9, 50),
        "The 7.4-magnitude earthquake hit off the coast of Davao Oriental at 9:43 a.m."
        "<br><br>Aftershocks followed.",
    ),
    Annotation(_d(10, 10, 40), _d(10, 10, 50), "In just an hour, 10 aftershocks were recorded."),
    Annotation(
        _d(10, 11, 40), _d(10, 11, 50),
        "By the second hour, there were already 25 aftershocks, with one at 5.8 magnitude.",
    ),
    Annotation(_d(10, 14, 0), _d(10, 14, 10), "Aftershocks continued throughout the day."),
    Annotation(_d(10, 16, 30), _d(10, 16, 40), "As the evening approached, more aftershocks were recorded..."),
    Annotation(
        _d(11, 0, 0), _d(11, 0, 20),
        "By the end of Oct. 10, <b>229 aftershocks</b> had been recorded, data from state volcanologists showed.",
    ),
    Annotation(_d(10, 19, 0), _d(10, 19, 10), "...and more..."),
    Annotation(_d(10, 21, 0), _d(10, 21, 10), "...and more."),
    Annotation(
        _d(11, 2, 30), _d(11, 2, 40),
        "Similar to the main earthquake, most aftershocks hit offshore, although some hit land.",
    ),
    Annotation(
        _d(11, 3, 30), _d(11, 3, 40),
        "Hence, not all aftershocks are felt. There are various factors that dictate this, "
        "but some research says a magnitude of 3.0 and above are more likely to be felt.",
        options=AnnotationOptions(height=150),
    ),
    Annotation(
        _d(11, 6, 30), _d(11, 6, 40),
        "By the end of 24 hours since the main earthquake happened, 360 aftershocks had been monitored.",
    ),
    Annotation(
        _d(11, 10, 20), _d(11, 10, 50),
        "The Philippines sits on the \"Pacific Ring of Fire\" where earthquakes are common. "
        "Before Davao Oriental, Cebu, the country's largest city, was also hit by an earthquake last Sept. 30.",
        options=AnnotationOptions(height=170),
    ),
    Annotation(_d(11, 14, 26), _d(11, 14, 38), "The Cebu earthquake is also generating aftershocks to this day."),
    Annotation(
        _d(11, 16, 0), _d(11, 16, 10),
        "Aftershocks from the Davao Oriental earthquake subsided somewhat in the afternoon of Oct. 11.",
    ),
    Annotation(
        _d(11, 18, 20), _d(11, 18, 30),
        "But by the evening, they picked up again. Between 7 and 9 p.m., 30 aftershocks were recorded, "
        "government data showed, some of which were only separated by minutes.",
        options=AnnotationOptions(height=170),
    ),
    Annotation(_d(11, 16, 25), _d(11, 16, 30), "400 aftershocks", "left"),
    Annotation(_d(12, 0, 20), _d(12, 0, 30), "By the end of Oct. 11, there had been 470 aftershocks recorded."),
    Annotation(
        _d(12, 9, 0), _d(12, 9, 30),
        "Volcanologists said they have recorded over 1,500 aftershocks from the Davao Oriental earthquake "
        "to date. They said aftershocks would continue for days or even weeks.",
        options=AnnotationOptions(height=160),
    ),
    Annotation(_d(12, 2, 50), _d(12, 2, 55), "500 aftershocks", "left"),
]


# -----------------------
# Geometry
# -----------------------

def annotation_box(
        annotation: Annotation,
        time_scale: TimeScale,
        margins: Margins,
        width: float,
        viewport_width: float,
        breakpoint: int = ScaleConfig.mobile_breakpoint,
        ) -> AnnotationBox:
    """Place an annotation box in chart coordinates (origin at the top-left of the plot area).

    The box is vertically anchored on the midpoint of the annotation's time span.
    """
    anchor_y = (time_scale(annotation.start) + time_scale(annotation.end)) / 2
    mobile = is_mobile(viewport_width, breakpoint)
    opts = annotation.options

    if annotation.side == "left":
        return AnnotationBox(
            x=-margins.left + 5 if mobile else -margins.left + 500,
            y=anchor_y - 40,
            width=margins.left - 10 if mobile else margins.left - 20,
            height=80,
            font_size=opts.left_font_size or (10 if mobile else 14),
            align="right",
            opacity=0.4,
            text=annotation.text,
        )

    return AnnotationBox(
        x=width / 2 + 30 if mobile else width - 550,
        y=anchor_y - opts.offset_y,
        width=viewport_width - margins.left - width / 2 - 50 if mobile else margins.right + 200,
        height=opts.height,
        font_size=opts.font_size or (12 if mobile else 16),
        align="left",
        opacity=0.8,
        text=annotation.text,
    )


def wrap_text(text: str, width: int = 30) -> str:
    """Insert <br> every `width` characters without splitting words.

    Breaks already present in the text are kept.
    """
    if not text:
        return ""

    wrapped = []
    for paragraph in text.split("<br>"):
        words = paragraph.split()
        lines = []
        current = []
        count = 0

        for w in words:
            if current and count + len(w) + len(current) > width:
                lines.append(" ".join(current))
                current = [w]
                count = len(w)
            else:
                current.append(w)
                count += len(w)

        if current:
            lines.append(" ".join(current))
        wrapped.append("<br>".join(lines))

    return "<br>".join(wrapped)


def chars_per_line(box: AnnotationBox) -> int:
    # average glyph is a bit over half the font size wide
    return max(8, int(box.width / (box.font_size * 0.55)))
