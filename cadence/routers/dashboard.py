"""
Dashboard router.

GET /dashboard/prefs
PUT /dashboard/prefs
GET /dashboard/overview
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cadence.core.auth import get_owner_id, require_authorized
from cadence.db.base import get_db
from cadence.schemas.dashboard import DashboardPrefsIn, DashboardPrefsOut, OverviewResponse
from cadence.services import dashboard as dashboard_service

router = APIRouter(
    prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_authorized)]
)


@router.get("/prefs", response_model=DashboardPrefsOut, summary="Pinned metric cards")
def get_prefs(db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)):
    return DashboardPrefsOut(pinned_metrics=dashboard_service.get_pinned_metrics(db, owner_id))


@router.put("/prefs", response_model=DashboardPrefsOut, summary="Replace pinned metric cards")
def put_prefs(
    payload: DashboardPrefsIn,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    keys = dashboard_service.set_pinned_metrics(db, owner_id, payload.pinned_metrics)
    return DashboardPrefsOut(pinned_metrics=keys)


@router.get("/overview", response_model=OverviewResponse, summary="Trend window and totals")
def overview(
    days: int = Query(
        default=dashboard_service.DEFAULT_WINDOW_DAYS,
        ge=1,
        le=dashboard_service.MAX_WINDOW_DAYS,
        description="Window size in calendar days.",
    ),
    end: Optional[date] = Query(
        default=None,
        description="Last day of the window. Defaults to the latest recorded day.",
        examples=["2025-01-11"],
    ),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    """
    Per-day productive / neutral / wasted / sleep hours for the window,
    totals and per-recorded-day averages, the latest day and the pinned
    metric keys, in one call for the dashboard.
    """
    return dashboard_service.build_overview(db, owner_id, days=days, end=end)
