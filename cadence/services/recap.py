"""
Recap ingestion pipeline.

    load D → summarize → normalize → patch D-1 → write D → commit

One request, one transaction. The D-1 patch is flushed before D is written
and both are committed together, so a failure anywhere leaves both dates as
they were. Nothing is written when validation or the summarizer fails.

Public API
----------
analyze_day(db, owner_id, day, transcript, now_local_time, summarizer) → RecapResult
build_existing_state(db, day_row)                                      → dict | None
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cadence.core.errors import PersistenceError, ValidationError
from cadence.models.day import Day
from cadence.services import days as day_store
from cadence.services.carryover import CarryoverResult, apply_carryover
from cadence.services.locks import KeyedLocks, day_locks
from cadence.services.summarizer import Summarizer, SummarizerRequest
from cadence.services.timeline import normalize_day

logger = logging.getLogger(__name__)

_LOCAL_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class RecapResult:
    day: Day
    detail: dict                 # day_store.day_detail() of D after commit
    transcript: list[str]
    carryover: Optional[CarryoverResult] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _coerce_date(value: Union[date, str, None]) -> date:
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValidationError("Missing date.", field="date")
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}; expected YYYY-MM-DD.", field="date") from exc


def _validate(
    day: Union[date, str, None],
    transcript: Optional[str],
    now_local_time: Optional[str],
) -> tuple[date, str, Optional[str]]:
    target = _coerce_date(day)
    text = transcript.strip() if isinstance(transcript, str) else ""
    if not text:
        raise ValidationError("Missing transcript.", field="transcript")
    if now_local_time is not None and not _LOCAL_TIME_RE.match(now_local_time):
        raise ValidationError(
            f"Invalid nowLocalTime {now_local_time!r}; expected HH:MM.",
            field="nowLocalTime",
        )
    return target, text, now_local_time


def build_existing_state(db: Session, row: Optional[Day]) -> Optional[dict]:
    """Serialize the stored day for the summarizer, or None on first recap."""
    if row is None:
        return None
    metrics = day_store.metrics_dict(day_store.get_metrics(db, row))
    return {
        "date": str(row.date),
        "summary": row.summary or "",
        "suggestions": day_store.load_string_list(row.suggestions),
        "transcript": day_store.load_string_list(row.transcript),
        "metrics": (
            {
                "productiveHours": metrics["productive_hours"],
                "neutralHours": metrics["neutral_hours"],
                "wastedHours": metrics["wasted_hours"],
                "sleepHours": metrics["sleep_hours"],
                "focusBlocks": metrics["focus_blocks"],
                "contextSwitches": metrics["context_switches"],
            }
            if metrics
            else None
        ),
        # Carryover markers are owned by the patcher, not by the recap.
        "events": [
            {
                "label": e.label,
                "category": e.category.value if hasattr(e.category, "value") else e.category,
                "startTime": e.start_time,
                "endTime": e.end_time,
                "notes": e.notes or "",
            }
            for e in day_store.list_events(db, row)
            if e.carryover_minutes is None
        ],
    }


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def analyze_day(
    db: Session,
    owner_id: str,
    day: Union[date, str, None],
    transcript: Optional[str],
    summarizer: Summarizer,
    now_local_time: Optional[str] = None,
    locks: KeyedLocks = day_locks,
) -> RecapResult:
    target, text, now_local_time = _validate(day, transcript, now_local_time)
    previous = target - timedelta(days=1)

    with locks.hold((owner_id, previous), (owner_id, target)):
        existing = day_store.get_day_by_date(db, owner_id, target)
        history = day_store.load_string_list(existing.transcript) if existing else []
        updated_history = [*history, text]

        request = SummarizerRequest(
            date=target.isoformat(),
            new_transcript=text,
            existing_state=build_existing_state(db, existing),
            now_local_time=now_local_time,
        )
        # End the read transaction before the slow network call.
        db.rollback()

        candidate = summarizer.summarize(request)
        if candidate.date != target.isoformat():
            logger.warning(
                "Summarizer answered for %r while ingesting %s; using %s",
                candidate.date, target, target,
            )

        normalized = normalize_day(candidate.events, candidate.metrics)

        try:
            carryover = apply_carryover(db, owner_id, target, normalized.previous_day_segments)
            row = day_store.write_day(
                db,
                owner_id,
                target,
                transcript=updated_history,
                summary=candidate.summary,
                suggestions=candidate.suggestions,
                events=normalized.events,
                metrics=normalized.metrics,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to persist recap for %s", target)
            raise PersistenceError(
                "Failed to save the analyzed day; nothing was changed.",
                detail=str(exc),
            ) from exc

        db.refresh(row)
        logger.info(
            "Ingested recap #%d for %s: %d events, sleep %.2fh",
            len(updated_history), target, len(normalized.events), normalized.metrics.sleep_hours,
        )
        return RecapResult(
            day=row,
            detail=day_store.day_detail(db, row),
            transcript=updated_history,
            carryover=carryover,
        )
