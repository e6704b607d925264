"""
Day read models.

GET /days              → list[DaySummaryOut]
GET /days/{id}         → DayDetailOut
GET /days/by-date/{d}  → DayDetailOut
"""
from typing import Optional

from pydantic import Field

from cadence.schemas.common import CamelModel


class MetricsOut(CamelModel):
    productive_hours: float = 0.0
    neutral_hours: float = 0.0
    wasted_hours: float = 0.0
    sleep_hours: float = 0.0
    focus_blocks: int = 0
    context_switches: int = 0


class EventOut(CamelModel):
    id: Optional[int] = None
    label: str
    category: str
    start_time: Optional[str] = Field(default=None, description='"HH:MM" on the day\'s date.')
    end_time: Optional[str] = Field(default=None, description='"HH:MM" on the day\'s date.')
    notes: Optional[str] = None
    is_carryover: bool = Field(
        default=False,
        description="True for the marker of sleep that continued into the next date.",
    )


class DaySummaryOut(CamelModel):
    id: int
    date: str
    summary: Optional[str] = None
    suggestions: list[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    metrics: Optional[MetricsOut] = None


class DayDetailOut(DaySummaryOut):
    transcript: list[str] = Field(default_factory=list)
    events: list[EventOut] = Field(default_factory=list)
