from __future__ import annotations

import io
import math
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, List, NamedTuple, Optional

import pandas as pd
from loguru import logger

from aftershocks.ingest import find_column


# -----------------------
# Data model
# -----------------------

class Position(NamedTuple):
    x: float
    y: float


@dataclass
class Event:
    raw_time: str
    magnitude: float
    instant: Optional[datetime] = None       # derived; None when unparseable
    position: Optional[Position] = None      # derived by the layout engine
    record: dict = field(default_factory=dict)  # source row, untouched

    @staticmethod
    def from_row(row: dict, time_column: str = "time", magnitude_column: str = "magnitude") -> "Event":
        raw_time = row.get(time_column)
        return Event(
            raw_time=raw_time if isinstance(raw_time, str) else ("" if raw_time is None else str(raw_time)),
            magnitude=_to_float(row.get(magnitude_column)),
            instant=parse_instant(raw_time),
            record=dict(row),
        )

    def with_position(self, x: float, y: float) -> "Event":
        return replace(self, position=Position(float(x), float(y)))

    def to_row(self) -> dict:
        d = dict(self.record)
        d["instant"] = self.instant.isoformat(sep=" ") if self.instant else None
        d["x"] = self.position.x if self.position else None
        d["y"] = self.position.y if self.position else None
        return d


def _to_float(val) -> float:
    if val is None:
        return math.nan
    try:
        return float(val)
    except (TypeError, ValueError):
        return math.nan


# -----------------------
# Timestamp parsing
# -----------------------

MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

# e.g. "10 Oct 2025 - 5:14 PM"
TIMESTAMP_RE = re.compile(r"(\d+) (\w+) (\d+) - (\d+):(\d+) (AM|PM)")


def parse_instant(text) -> Optional[datetime]:
    """Parse ``"D Mon YYYY - H:MM AM/PM"`` into a naive local datetime, or None."""
    if not isinstance(text, str):
        return None
    m = TIMESTAMP_RE.search(text)
    if not m:
        return None

    day, month_word, year, hour, minute, ampm = m.groups()
    month = MONTHS.get(month_word[:3])
    if month is None:
        return None

    hour = int(hour)
    if ampm == "PM" and hour != 12:
        hour += 12
    if ampm == "AM" and hour == 12:
        hour = 0

    try:
        return datetime(int(year), month, int(day), hour, int(minute))
    except ValueError:
        # 31 Feb, hour 25, year 0 ...
        return None


def is_valid(event: Event) -> bool:
    return event.instant is not None and math.isfinite(event.magnitude)


def normalize_events(
        records: Iterable[dict],
        time_column: str = "time",
        magnitude_column: str = "magnitude",
        ) -> List[Event]:
    """Annotate each record with its instant, drop the unusable ones, sort by instant.

    The sort is stable, so events sharing an instant keep their input order.
    """
    records = list(records)
    if not records:
        return []

    columns = records[0].keys()
    time_key = find_column(columns, time_column)
    magnitude_key = find_column(columns, magnitude_column)

    events = [Event.from_row(r, time_key, magnitude_key) for r in records]
    valid = [e for e in events if is_valid(e)]
    valid.sort(key=lambda e: e.instant)

    dropped = len(events) - len(valid)
    if dropped:
        logger.debug("Dropped {} of {} records with unparseable time or magnitude", dropped, len(events))
    return valid


# -----------------------
# Export
# -----------------------

def events_to_csv_bytes(events: List[Event], radius_fn=None) -> bytes:
    rows = []
    for e in events:
        row = e.to_row()
        if radius_fn is not None:
            row["radius"] = radius_fn(e.magnitude)
        rows.append(row)
    df = pd.DataFrame(rows)
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
