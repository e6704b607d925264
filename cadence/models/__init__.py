from .day import Day
from .day_metrics import DayMetrics
from .event import Event, EventCategory
from .goal import Goal
from .dashboard_prefs import DashboardPrefs

__all__ = [
    "Day",
    "DayMetrics",
    "Event",
    "EventCategory",
    "Goal",
    "DashboardPrefs",
]
