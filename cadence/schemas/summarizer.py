"""
Typed contract for the summarizer's JSON output.

The model's answer is untrusted: it is validated here, at the boundary, into
a CandidateDay or rejected. Times stay strings because a malformed time is
tolerated downstream (kept for display, ignored for sleep math).
"""
from typing import Optional


from cadence.models.event import EventCategory
from cadence.schemas.common import CamelModel


class CandidateEvent(CamelModel):
    label: str
    category: EventCategory
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None


class CandidateMetrics(CamelModel):
    productive_hours: float
    neutral_hours: float
    wasted_hours: float
    sleep_hours: float
    focus_blocks: float
    context_switches: float


class CandidateDay(CamelModel):
    date: str
    events: list[CandidateEvent]
    summary: str
    metrics: CandidateMetrics
    suggestions: list[str]
