"""
Timeline normalizer: day-boundary sleep accounting for a candidate day.

Pure functions, no I/O. Input is the summarizer's candidate events and
metrics for a target date D; output is what may be stored for D plus the
sleep that belongs to D-1.

Rules
-----
- Times are minutes since midnight. "24:00" is a valid end of day only.
- Stored times are zero-padded "HH:MM".
- start <= end  → same-day interval, clipped to [0, 1440].
- start >  end  → crosses midnight. D keeps [00:00, end]; for sleep, the
                  [start, 1440) part is a carryover segment for D-1 and is
                  never written to D's event list.
- Events with an unparseable time are kept as-is and ignored by sleep math.
- D's sleep metric is the duration of the sleep segment with the earliest
  end (the night's main sleep), or 0 when there is none. The summarizer's
  sleepHours is always discarded.

Public API
----------
parse_clock(value)                → int | None
format_clock(minutes)             → "HH:MM"
normalize_day(events, metrics)    → NormalizedDay
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from cadence.models.event import EventCategory

MINUTES_PER_DAY = 1440
MIDNIGHT = "00:00"
# Stored events never end at "24:00"; the last displayable minute is used.
LAST_MINUTE = "23:59"

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass
class TimelineEvent:
    label: str
    category: str
    start_time: Optional[str]
    end_time: Optional[str]
    notes: Optional[str] = None

    @property
    def is_sleep(self) -> bool:
        return _category_value(self.category) == EventCategory.sleep.value


@dataclass(frozen=True)
class SleepSegment:
    start: int   # minutes since midnight
    end: int     # exclusive; up to 1440

    @property
    def minutes(self) -> int:
        return self.end - self.start

    @property
    def hours(self) -> float:
        return self.minutes / 60


@dataclass
class MetricValues:
    productive_hours: float = 0.0
    neutral_hours: float = 0.0
    wasted_hours: float = 0.0
    sleep_hours: float = 0.0
    focus_blocks: int = 0
    context_switches: int = 0


@dataclass
class NormalizedDay:
    events: list[TimelineEvent]
    metrics: MetricValues
    main_sleep: Optional[SleepSegment] = None
    # Same-day sleep candidates for D, in input order (main sleep included).
    sleep_segments: list[SleepSegment] = field(default_factory=list)
    # Sleep owed to D-1, relative to D-1's clock.
    previous_day_segments: list[SleepSegment] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Clock helpers
# ---------------------------------------------------------------------------

def _category_value(category) -> str:
    return category.value if hasattr(category, "value") else str(category)


def parse_clock(value: Optional[str]) -> Optional[int]:
    """Parse "H:MM", "HH:MM" or "HH:MM:SS" into minutes since midnight.

    Returns None for anything malformed. "24:00" parses to 1440.
    """
    if not isinstance(value, str):
        return None
    m = _CLOCK_RE.match(value.strip())
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    seconds = int(m.group(3) or 0)
    if minutes > 59 or seconds > 59:
        return None
    if hours == 24 and minutes == 0 and seconds == 0:
        return MINUTES_PER_DAY
    if hours > 23:
        return None
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Minutes since midnight → "HH:MM". 1440 and above render as "23:59"."""
    if minutes >= MINUTES_PER_DAY:
        return LAST_MINUTE
    minutes = max(0, minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def main_sleep_segment(segments: Iterable[SleepSegment]) -> Optional[SleepSegment]:
    """The segment with the earliest end; first one wins on ties."""
    best: Optional[SleepSegment] = None
    for seg in segments:
        if best is None or seg.end < best.end:
            best = seg
    return best


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def _hours(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(v) or math.isinf(v) or v < 0:
        return 0.0
    return v


def _count(value) -> int:
    return int(round(_hours(value)))


def clip_metrics(metrics) -> MetricValues:
    """Coerce summarizer metrics into non-negative hours and counts."""
    return MetricValues(
        productive_hours=_hours(getattr(metrics, "productive_hours", 0)),
        neutral_hours=_hours(getattr(metrics, "neutral_hours", 0)),
        wasted_hours=_hours(getattr(metrics, "wasted_hours", 0)),
        sleep_hours=_hours(getattr(metrics, "sleep_hours", 0)),
        focus_blocks=_count(getattr(metrics, "focus_blocks", 0)),
        context_switches=_count(getattr(metrics, "context_switches", 0)),
    )


# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------

def _to_timeline_event(e) -> TimelineEvent:
    if isinstance(e, TimelineEvent):
        return replace(e)
    return TimelineEvent(
        label=e.label,
        category=_category_value(e.category),
        start_time=e.start_time,
        end_time=e.end_time,
        notes=e.notes,
    )


def normalize_day(events: Iterable, metrics) -> NormalizedDay:
    """
    Split cross-midnight events, pick D's main sleep and collect D-1's share.

    `events` are CandidateEvent / TimelineEvent-like objects (label, category,
    start_time, end_time, notes); `metrics` any object with the six metric
    attributes. Neither input is mutated.
    """
    out_events: list[TimelineEvent] = []
    same_day: list[SleepSegment] = []
    previous_day: list[SleepSegment] = []

    for raw in events:
        event = _to_timeline_event(raw)
        start = parse_clock(event.start_time)
        end = parse_clock(event.end_time)

        if start is None or end is None or start >= MINUTES_PER_DAY:
            # Unusable for time math ("24:00" is only an end); shown as reported.
            out_events.append(event)
            continue

        if start <= end:
            event.start_time = format_clock(start)
            event.end_time = format_clock(end)
            if event.is_sleep and end > start:
                same_day.append(SleepSegment(start, end))
            out_events.append(event)
            continue

        # Crosses midnight: only [00:00, end] lives on D.
        if event.is_sleep:
            owed = SleepSegment(start, MINUTES_PER_DAY)
            if owed.minutes > 0:
                previous_day.append(owed)
        if end == 0:
            continue
        event.start_time = MIDNIGHT
        event.end_time = format_clock(end)
        if event.is_sleep:
            same_day.append(SleepSegment(0, end))
        out_events.append(event)

    values = clip_metrics(metrics)
    main = main_sleep_segment(same_day)
    values.sleep_hours = main.hours if main else 0.0

    return NormalizedDay(
        events=out_events,
        metrics=values,
        main_sleep=main,
        sleep_segments=same_day,
        previous_day_segments=previous_day,
    )
