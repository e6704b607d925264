"""
Dashboard schemas.

GET/PUT /dashboard/prefs   → DashboardPrefsOut
GET     /dashboard/overview → OverviewResponse
"""
from typing import Optional

from pydantic import Field

from cadence.schemas.common import CamelModel
from cadence.schemas.day import DaySummaryOut

PINNED_METRICS_MAX = 24


class DashboardPrefsIn(CamelModel):
    pinned_metrics: list[str] = Field(default_factory=list, max_length=PINNED_METRICS_MAX)


class DashboardPrefsOut(CamelModel):
    pinned_metrics: list[str]


class TrendPoint(CamelModel):
    date: str
    has_data: bool
    productive_hours: float = 0.0
    neutral_hours: float = 0.0
    wasted_hours: float = 0.0
    sleep_hours: float = 0.0


class Totals(CamelModel):
    productive_hours: float
    neutral_hours: float
    wasted_hours: float
    sleep_hours: float
    focus_blocks: int
    context_switches: int


class OverviewResponse(CamelModel):
    start: str
    end: str
    days_with_data: int
    totals: Totals
    averages: Totals = Field(description="Per recorded day; counts are rounded.")
    trend: list[TrendPoint] = Field(description="One point per calendar day, oldest first.")
    latest: Optional[DaySummaryOut] = None
    pinned_metrics: list[str]
