"""
Day store: owner-scoped reads, the per-date writer, and cascade delete.

Public API
----------
get_day_by_date(db, owner_id, day)          → Day | None
get_day_by_id(db, owner_id, day_id)         → Day | None
get_or_create_day(db, owner_id, day)        → Day          (flush only)
ensure_metrics(db, day)                     → DayMetrics   (flush only)
write_day(db, owner_id, day, ...)           → Day          (flush only)
list_days(db, owner_id)                     → list[dict]
day_detail(db, day)                         → dict
delete_day(db, owner_id, day_id)            → None         (commits)

Writers never commit: the recap pipeline patches D-1 and writes D in one
transaction and commits once.
"""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cadence.core.errors import NotFoundError, PersistenceError
from cadence.models.day import Day
from cadence.models.day_metrics import DayMetrics
from cadence.models.event import Event
from cadence.services.timeline import MetricValues, TimelineEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# JSON list columns
# ---------------------------------------------------------------------------

def load_string_list(raw: Optional[str]) -> list[str]:
    """Decode a JSON-encoded list column, tolerating legacy plain strings."""
    if raw is None:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        value = raw
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    if isinstance(value, str) and value.strip():
        return [value]
    return []


def dump_string_list(values: Optional[Iterable[str]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps([v for v in values if isinstance(v, str)])


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def get_day_by_date(db: Session, owner_id: str, day: date) -> Optional[Day]:
    return (
        db.query(Day)
        .filter(Day.user_id == owner_id, Day.date == day)
        .first()
    )


def get_day_by_id(db: Session, owner_id: str, day_id: int) -> Optional[Day]:
    return (
        db.query(Day)
        .filter(Day.id == day_id, Day.user_id == owner_id)
        .first()
    )


def get_metrics(db: Session, day: Day) -> Optional[DayMetrics]:
    return db.query(DayMetrics).filter(DayMetrics.day_id == day.id).first()


def list_events(db: Session, day: Day) -> list[Event]:
    return (
        db.query(Event)
        .filter(Event.day_id == day.id, Event.user_id == day.user_id)
        .order_by(Event.start_time.asc(), Event.id.asc())
        .all()
    )


def carryover_markers(db: Session, day: Day) -> list[Event]:
    return (
        db.query(Event)
        .filter(Event.day_id == day.id, Event.carryover_minutes.isnot(None))
        .all()
    )


# ---------------------------------------------------------------------------
# Writes (flush only)
# ---------------------------------------------------------------------------

def get_or_create_day(db: Session, owner_id: str, day: date) -> Day:
    """Return the Day for (owner, date), creating an empty one if absent."""
    row = get_day_by_date(db, owner_id, day)
    if row is None:
        row = Day(user_id=owner_id, date=day, transcript="[]", summary=None, suggestions=None)
        db.add(row)
        db.flush()
    return row


def ensure_metrics(db: Session, day: Day) -> DayMetrics:
    """Return the Day's metrics row, creating a zeroed one, and keep the link current."""
    metrics = get_metrics(db, day)
    if metrics is None:
        metrics = DayMetrics(
            day_id=day.id,
            productive_hours=0.0,
            neutral_hours=0.0,
            wasted_hours=0.0,
            sleep_hours=0.0,
            focus_blocks=0,
            context_switches=0,
        )
        db.add(metrics)
        db.flush()
    if day.metrics_id != metrics.id:
        day.metrics_id = metrics.id
        db.flush()
    return metrics


def write_day(
    db: Session,
    owner_id: str,
    day: date,
    transcript: list[str],
    summary: Optional[str],
    suggestions: list[str],
    events: list[TimelineEvent],
    metrics: MetricValues,
) -> Day:
    """
    Upsert D's row, replace its metrics and its full event set.

    Carryover markers already on D (sleep that a later date pushed back onto
    D) are kept and their minutes stay counted in D's sleep total.
    """
    row = get_or_create_day(db, owner_id, day)
    row.transcript = dump_string_list(transcript)
    row.summary = summary
    row.suggestions = dump_string_list(suggestions)
    db.flush()

    markers = carryover_markers(db, row)
    carried_minutes = sum(m.carryover_minutes or 0 for m in markers)
    marker_labels = {m.label for m in markers}

    stored = ensure_metrics(db, row)
    stored.productive_hours = metrics.productive_hours
    stored.neutral_hours = metrics.neutral_hours
    stored.wasted_hours = metrics.wasted_hours
    stored.sleep_hours = metrics.sleep_hours + carried_minutes / 60
    stored.focus_blocks = metrics.focus_blocks
    stored.context_switches = metrics.context_switches

    (
        db.query(Event)
        .filter(Event.day_id == row.id, Event.carryover_minutes.is_(None))
        .delete(synchronize_session=False)
    )
    db.add_all([
        Event(
            day_id=row.id,
            user_id=owner_id,
            label=e.label,
            category=e.category,
            start_time=e.start_time or None,
            end_time=e.end_time or None,
            notes=e.notes or None,
        )
        for e in events
        if e.label not in marker_labels
    ])
    db.flush()
    return row


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def delete_day(db: Session, owner_id: str, day_id: int) -> None:
    """Delete a Day with its events and metrics, all or nothing."""
    row = get_day_by_id(db, owner_id, day_id)
    if row is None:
        raise NotFoundError("Day", day_id)
    day_date = row.date
    try:
        db.query(Event).filter(Event.day_id == row.id).delete(synchronize_session=False)
        row.metrics_id = None
        db.flush()
        db.query(DayMetrics).filter(DayMetrics.day_id == row.id).delete(synchronize_session=False)
        db.delete(row)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete day %s", day_id)
        raise PersistenceError("Failed to delete day.", detail=str(exc)) from exc
    logger.info("Deleted day %s (%s)", day_id, day_date)


# ---------------------------------------------------------------------------
# Dict helpers
# ---------------------------------------------------------------------------

def metrics_dict(m: Optional[DayMetrics]) -> Optional[dict]:
    if m is None:
        return None
    return {
        "productive_hours": float(m.productive_hours or 0),
        "neutral_hours": float(m.neutral_hours or 0),
        "wasted_hours": float(m.wasted_hours or 0),
        "sleep_hours": float(m.sleep_hours or 0),
        "focus_blocks": int(m.focus_blocks or 0),
        "context_switches": int(m.context_switches or 0),
    }


def event_dict(e: Event) -> dict:
    return {
        "id": e.id,
        "label": e.label,
        "category": e.category.value if hasattr(e.category, "value") else str(e.category),
        "start_time": e.start_time,
        "end_time": e.end_time,
        "notes": e.notes,
        "is_carryover": e.carryover_minutes is not None,
    }


def day_summary_dict(d: Day, m: Optional[DayMetrics]) -> dict:
    return {
        "id": d.id,
        "date": str(d.date),
        "summary": d.summary,
        "suggestions": load_string_list(d.suggestions),
        "created_at": d.created_at.isoformat() if d.created_at else None,
        "metrics": metrics_dict(m),
    }


def day_detail(db: Session, d: Day) -> dict:
    payload = day_summary_dict(d, get_metrics(db, d))
    payload["transcript"] = load_string_list(d.transcript)
    payload["events"] = [event_dict(e) for e in list_events(db, d)]
    return payload


def list_days(db: Session, owner_id: str) -> list[dict]:
    rows = (
        db.query(Day, DayMetrics)
        .outerjoin(DayMetrics, DayMetrics.day_id == Day.id)
        .filter(Day.user_id == owner_id)
        .order_by(Day.date.desc())
        .all()
    )
    return [day_summary_dict(d, m) for d, m in rows]
