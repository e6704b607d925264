"""
Dashboard service: pinned-metric preferences and the trend overview.

Public API
----------
get_pinned_metrics(db, owner_id)            → list[str]
set_pinned_metrics(db, owner_id, keys)      → list[str]
build_overview(db, owner_id, days, end)     → dict
"""
from __future__ import annotations

import json
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from cadence.models.dashboard_prefs import DashboardPrefs
from cadence.models.day import Day
from cadence.models.day_metrics import DayMetrics
from cadence.services.days import day_summary_dict, metrics_dict

DEFAULT_WINDOW_DAYS = 7
MAX_WINDOW_DAYS = 90

_HOUR_KEYS = ("productive_hours", "neutral_hours", "wasted_hours", "sleep_hours")
_COUNT_KEYS = ("focus_blocks", "context_switches")


# ---------------------------------------------------------------------------
# Pinned metrics
# ---------------------------------------------------------------------------

def get_pinned_metrics(db: Session, owner_id: str) -> list[str]:
    prefs = db.query(DashboardPrefs).filter(DashboardPrefs.user_id == owner_id).first()
    if prefs is None:
        return []
    try:
        keys = json.loads(prefs.pinned_metrics or "[]")
    except ValueError:
        return []
    return [k for k in keys if isinstance(k, str)]


def set_pinned_metrics(db: Session, owner_id: str, keys: list[str]) -> list[str]:
    """Upsert the owner's pinned metric keys. Blank and repeated keys are dropped."""
    cleaned: list[str] = []
    for key in keys:
        key = key.strip()
        if key and key not in cleaned:
            cleaned.append(key)

    prefs = db.query(DashboardPrefs).filter(DashboardPrefs.user_id == owner_id).first()
    if prefs is None:
        prefs = DashboardPrefs(user_id=owner_id)
        db.add(prefs)
    prefs.pinned_metrics = json.dumps(cleaned)
    db.commit()
    return cleaned


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------

def build_overview(
    db: Session,
    owner_id: str,
    days: int = DEFAULT_WINDOW_DAYS,
    end: Optional[date] = None,
) -> dict:
    """
    Trend window of `days` calendar days ending at `end` (defaults to the
    latest recorded day, or today when there is none). Days without metrics
    appear in the trend with has_data=False and are left out of averages.
    """
    days = max(1, min(days, MAX_WINDOW_DAYS))

    latest_row = (
        db.query(Day, DayMetrics)
        .outerjoin(DayMetrics, DayMetrics.day_id == Day.id)
        .filter(Day.user_id == owner_id)
        .order_by(Day.date.desc())
        .first()
    )
    if end is None:
        end = latest_row[0].date if latest_row else date.today()
    start = end - timedelta(days=days - 1)

    rows = (
        db.query(Day, DayMetrics)
        .outerjoin(DayMetrics, DayMetrics.day_id == Day.id)
        .filter(Day.user_id == owner_id, Day.date >= start, Day.date <= end)
        .all()
    )
    by_date = {d.date: metrics_dict(m) for d, m in rows}

    totals = {k: 0.0 for k in _HOUR_KEYS} | {k: 0 for k in _COUNT_KEYS}
    trend = []
    with_data = 0
    for offset in range(days):
        current = start + timedelta(days=offset)
        m = by_date.get(current)
        point = {"date": current.isoformat(), "has_data": m is not None}
        if m is not None:
            with_data += 1
            for key in _HOUR_KEYS:
                point[key] = m[key]
                totals[key] += m[key]
            for key in _COUNT_KEYS:
                totals[key] += m[key]
        trend.append(point)

    divisor = with_data or 1
    averages = {k: round(totals[k] / divisor, 2) for k in _HOUR_KEYS}
    averages |= {k: int(round(totals[k] / divisor)) for k in _COUNT_KEYS}

    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days_with_data": with_data,
        "totals": {k: (round(v, 2) if k in _HOUR_KEYS else v) for k, v in totals.items()},
        "averages": averages,
        "trend": trend,
        "latest": day_summary_dict(*latest_row) if latest_row else None,
        "pinned_metrics": get_pinned_metrics(db, owner_id),
    }
