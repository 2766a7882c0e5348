# app/endpoints/marketing/results.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.deps import require_manager, require_member
from crud.marketing.result import result_crud
from crud.marketing.campaign import campaign_crud
from database.session import get_db
from schemas.marketing.result import ResultCreate, ResultPage, ResultResponse, ResultUpdate

router = APIRouter()


def _get_or_404(db: Session, result_id: int):
    obj = result_crud.get(db, result_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Result not found")
    return obj


@router.get("", response_model=ResultPage, summary="실적 목록")
def list_results(
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
    rows, total = result_crud.list_results(
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
        "items": [ResultResponse.model_validate(r) for r in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post(
    "",
    response_model=ResultResponse,
    status_code=status.HTTP_201_CREATED,
    summary="실적 등록",
)
def create_result(
    payload: ResultCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    if campaign_crud.get(db, payload.campaign_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="campaign not found")
    try:
        obj = result_crud.create(db, obj_in=payload)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="result already exists for this campaign/month/platform/operation/budget type",
        ) from e
    return ResultResponse.model_validate(obj)


@router.get("/{result_id}", response_model=ResultResponse, summary="실적 조회")
def get_result(
    result_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_member),
):
    return ResultResponse.model_validate(_get_or_404(db, result_id))


@router.patch("/{result_id}", response_model=ResultResponse, summary="실적 수정 (지출/성과)")
def update_result(
    payload: ResultUpdate,
    result_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    obj = result_crud.update(db, db_obj=_get_or_404(db, result_id), obj_in=payload)
    return ResultResponse.model_validate(obj)


@router.delete("/{result_id}", status_code=status.HTTP_204_NO_CONTENT, summary="실적 삭제")
def delete_result(
    result_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    result_crud.delete(db, db_obj=_get_or_404(db, result_id))
