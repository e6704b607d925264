"""
Days router.

GET    /days
GET    /days/by-date/{day}
GET    /days/{day_id}
DELETE /days/{day_id}
"""
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cadence.core.auth import get_owner_id, require_authorized
from cadence.core.errors import NotFoundError
from cadence.db.base import get_db
from cadence.schemas.common import OkResponse
from cadence.schemas.day import DayDetailOut, DaySummaryOut
from cadence.services import days as day_store

router = APIRouter(prefix="/days", tags=["days"], dependencies=[Depends(require_authorized)])


@router.get("", response_model=list[DaySummaryOut], summary="All recorded days, newest first")
def list_days(db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)):
    return day_store.list_days(db, owner_id)


@router.get(
    "/by-date/{day}",
    response_model=DayDetailOut,
    summary="Day detail by calendar date",
    responses={404: {"description": "No recap recorded for that date."}},
)
def get_day_by_date(
    day: date,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    row = day_store.get_day_by_date(db, owner_id, day)
    if row is None:
        raise NotFoundError("Day", day)
    return day_store.day_detail(db, row)


@router.get(
    "/{day_id}",
    response_model=DayDetailOut,
    summary="Day detail with transcript history and timeline",
    responses={404: {"description": "Day not found for this owner."}},
)
def get_day(day_id: int, db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)):
    row = day_store.get_day_by_id(db, owner_id, day_id)
    if row is None:
        raise NotFoundError("Day", day_id)
    return day_store.day_detail(db, row)


@router.delete(
    "/{day_id}",
    response_model=OkResponse,
    summary="Delete a day with its events and metrics",
    responses={404: {"description": "Day not found for this owner."}},
)
def delete_day(day_id: int, db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)):
    day_store.delete_day(db, owner_id, day_id)
    return OkResponse()
