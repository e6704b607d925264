"""
Cross-day sleep carryover.

When a recap for date D reports sleep that started the evening before, the
part before midnight belongs to D-1. This module adds that time to D-1's
sleep metric and keeps one marker event on D-1 labelled with D.

The patch is idempotent per D: the marker stores the minutes it
contributed, and re-applying for the same D swaps the old contribution for
the new one instead of adding on top of it. Flush only; the caller owns the
transaction and must run this before writing D.

Public API
----------
carryover_label(target_day)                        → str
apply_carryover(db, owner_id, target_day, segs)    → CarryoverResult | None
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cadence.models.event import Event, EventCategory
from cadence.services.days import ensure_metrics, get_or_create_day
from cadence.services.timeline import LAST_MINUTE, SleepSegment, format_clock

logger = logging.getLogger(__name__)


@dataclass
class CarryoverResult:
    previous_day: date
    previous_day_id: int
    minutes: int
    replaced_minutes: int
    sleep_hours: float


def carryover_label(target_day: date) -> str:
    return f"Sleep carried into {target_day.isoformat()}"


def _drop_stale_markers(db: Session, markers: Sequence[Event]) -> None:
    """Remove previous markers for the same target date. Failure is non-fatal."""
    if not markers:
        return
    savepoint = db.begin_nested()
    try:
        for marker in markers:
            db.delete(marker)
        db.flush()
        savepoint.commit()
    except SQLAlchemyError:
        savepoint.rollback()
        logger.warning(
            "Could not remove %d stale carryover marker(s); continuing",
            len(markers), exc_info=True,
        )


def apply_carryover(
    db: Session,
    owner_id: str,
    target_day: date,
    segments: Sequence[SleepSegment],
) -> Optional[CarryoverResult]:
    """Move the pre-midnight sleep in `segments` onto target_day - 1."""
    if not segments:
        return None

    previous = target_day - timedelta(days=1)
    day = get_or_create_day(db, owner_id, previous)
    metrics = ensure_metrics(db, day)

    label = carryover_label(target_day)
    stale = (
        db.query(Event)
        .filter(Event.day_id == day.id, Event.label == label)
        .all()
    )
    replaced = sum(m.carryover_minutes or 0 for m in stale)
    minutes = sum(seg.minutes for seg in segments)

    current = float(metrics.sleep_hours or 0)
    metrics.sleep_hours = max(0.0, current - replaced / 60 + minutes / 60)
    # Backed out above; a marker that outlives the cleanup must not count again.
    for marker in stale:
        marker.carryover_minutes = 0
    db.flush()

    _drop_stale_markers(db, stale)

    db.add(Event(
        day_id=day.id,
        user_id=owner_id,
        label=label,
        category=EventCategory.sleep,
        start_time=format_clock(min(seg.start for seg in segments)),
        end_time=LAST_MINUTE,
        notes=None,
        carryover_minutes=minutes,
    ))
    db.flush()

    logger.info(
        "Carried %d sleep minute(s) from %s onto %s (replaced %d)",
        minutes, target_day, previous, replaced,
    )
    return CarryoverResult(
        previous_day=previous,
        previous_day_id=day.id,
        minutes=minutes,
        replaced_minutes=replaced,
        sleep_hours=metrics.sleep_hours,
    )
