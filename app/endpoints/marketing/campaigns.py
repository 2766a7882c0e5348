# app/endpoints/marketing/campaigns.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from core.deps import require_manager, require_member
from crud.marketing.campaign import campaign_crud
from crud.marketing.client import client_crud
from database.session import get_db
from models.marketing.campaign import Campaign
from schemas.marketing.campaign import (
    CampaignCreate,
    CampaignPage,
    CampaignResponse,
    CampaignUpdate,
    check_campaign_period,
)

router = APIRouter()


def _get_or_404(db: Session, campaign_id: int) -> Campaign:
    obj = campaign_crud.get(db, campaign_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
    return obj


def _to_responses(db: Session, rows: List[Campaign]) -> List[CampaignResponse]:
    totals = campaign_crud.totals_by_campaign(db, [r.id for r in rows])
    out = []
    for r in rows:
        budget_sum, spend_sum = totals.get(r.id, (0, 0))
        resp = CampaignResponse.model_validate(r)
        out.append(
            resp.model_copy(
                update={
                    "total_budget_amount": float(budget_sum),
                    "total_actual_spend": float(spend_sum),
                }
            )
        )
    return out


@router.get("", response_model=CampaignPage, summary="캠페인 목록 (예산/지출 합계 포함)")
def list_campaigns(
    db: Session = Depends(get_db),
    client_id: Optional[int] = Query(None, alias="client", ge=1),
    search: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _=Depends(require_member),
):
    rows, total = campaign_crud.list_campaigns(
        db, client_id=client_id, search=search, offset=offset, limit=limit,
    )
    return {
        "items": _to_responses(db, rows),
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post(
    "",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
    summary="캠페인 등록",
)
def create_campaign(
    payload: CampaignCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    if client_crud.get(db, payload.client_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="client not found")
    obj = campaign_crud.create(db, obj_in=payload)
    return _to_responses(db, [obj])[0]


@router.get("/{campaign_id}", response_model=CampaignResponse, summary="캠페인 조회")
def get_campaign(
    campaign_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_member),
):
    return _to_responses(db, [_get_or_404(db, campaign_id)])[0]


@router.patch("/{campaign_id}", response_model=CampaignResponse, summary="캠페인 수정")
def update_campaign(
    payload: CampaignUpdate,
    campaign_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    obj = _get_or_404(db, campaign_id)
    data = payload.model_dump(exclude_unset=True)

    # 부분 수정 후의 기간이 유효한지 확인
    merged = {
        k: data.get(k, getattr(obj, k))
        for k in ("start_year", "start_month", "end_year", "end_month")
    }
    try:
        check_campaign_period(**merged)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    obj = campaign_crud.update(db, db_obj=obj, obj_in=data)
    return _to_responses(db, [obj])[0]


@router.delete(
    "/{campaign_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="캠페인 삭제 (예산/실적 포함)",
)
def delete_campaign(
    campaign_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    campaign_crud.delete(db, db_obj=_get_or_404(db, campaign_id))
