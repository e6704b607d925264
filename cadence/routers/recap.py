"""
Recap router.

POST /analyze-day  merge a new recap into the day and re-derive its timeline
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cadence.core.auth import get_owner_id, require_authorized
from cadence.db.base import get_db
from cadence.schemas.common import ErrorResponse
from cadence.schemas.day import EventOut, MetricsOut
from cadence.schemas.recap import RecapRequest, RecapResponse
from cadence.services.recap import RecapResult, analyze_day
from cadence.services.summarizer import Summarizer, get_summarizer

router = APIRouter(tags=["recap"], dependencies=[Depends(require_authorized)])


def _result_to_response(result: RecapResult) -> RecapResponse:
    detail = result.detail
    return RecapResponse(
        day_id=detail["id"],
        date=detail["date"],
        events=[EventOut(**e) for e in detail["events"]],
        summary=detail["summary"],
        metrics=MetricsOut(**(detail["metrics"] or {})),
        suggestions=detail["suggestions"],
        transcript=result.transcript,
    )


@router.post(
    "/analyze-day",
    response_model=RecapResponse,
    summary="Analyze a daily recap",
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials."},
        422: {"model": ErrorResponse, "description": "Missing date or transcript, or malformed nowLocalTime."},
        500: {"model": ErrorResponse, "description": "Configuration or persistence failure. Nothing was written."},
        502: {"model": ErrorResponse, "description": "Summarizer failed or returned unusable output. Nothing was written."},
    },
)
def analyze(
    payload: RecapRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
    summarizer: Summarizer = Depends(get_summarizer),
):
    """
    Append the recap to the date's transcript history, have the summarizer
    regenerate the structured day, then:

    - split events that cross midnight and recompute sleep from the main
      (earliest-ending) sleep block,
    - move pre-midnight sleep onto the previous date,
    - replace the day's metrics and events.

    Everything is saved in one transaction; on any error neither date changes.
    """
    result = analyze_day(
        db=db,
        owner_id=owner_id,
        day=payload.date,
        transcript=payload.transcript,
        now_local_time=payload.now_local_time,
        summarizer=summarizer,
    )
    return _result_to_response(result)
