# app/endpoints/marketing/dashboard.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.deps import require_member
from database.session import get_db
from schemas.marketing.dashboard import DashboardStatsResponse
from service.dashboard import get_dashboard_stats

router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="대시보드 통계",
)
def read_dashboard_stats(
    db: Session = Depends(get_db),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    _=Depends(require_member),
) -> DashboardStatsResponse:
    return get_dashboard_stats(db, year=year, month=month)
