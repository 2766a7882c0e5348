# app/endpoints/marketing/budgets.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.deps import require_manager, require_member
from crud.marketing.budget import budget_crud
from crud.marketing.campaign import campaign_crud
from database.session import get_db
from schemas.marketing.budget import BudgetCreate, BudgetPage, BudgetResponse, BudgetUpdate

router = APIRouter()


def _get_or_404(db: Session, budget_id: int):
    obj = budget_crud.get(db, budget_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return obj


@router.get("", response_model=BudgetPage, summary="예산 목록")
def list_budgets(
    db: Session = Depends(get_db),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    campaign_id: Optional[int] = Query(None, alias="campaignId", ge=1),
    client_id: Optional[int] = Query(None, alias="client", ge=1),
    platform: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    _=Depends(require_member),
):
    rows, total = budget_crud.list_budgets(
        db,
        offset=offset,
        limit=limit,
        year=year,
        month=month,
        campaign_id=campaign_id,
        client_id=client_id,
        platform=platform if platform != "all" else None,
    )
    return {
        "items": [BudgetResponse.model_validate(r) for r in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post(
    "",
    response_model=BudgetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="예산 등록",
)
def create_budget(
    payload: BudgetCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    if campaign_crud.get(db, payload.campaign_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="campaign not found")
    try:
        obj = budget_crud.create(db, obj_in=payload)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="budget already exists for this campaign/month/platform/operation/budget type",
        ) from e
    return BudgetResponse.model_validate(obj)


@router.get("/{budget_id}", response_model=BudgetResponse, summary="예산 조회")
def get_budget(
    budget_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_member),
):
    return BudgetResponse.model_validate(_get_or_404(db, budget_id))


@router.patch("/{budget_id}", response_model=BudgetResponse, summary="예산 수정 (금액/KPI)")
def update_budget(
    payload: BudgetUpdate,
    budget_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    obj = budget_crud.update(db, db_obj=_get_or_404(db, budget_id), obj_in=payload)
    return BudgetResponse.model_validate(obj)


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT, summary="예산 삭제")
def delete_budget(
    budget_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    budget_crud.delete(db, db_obj=_get_or_404(db, budget_id))
