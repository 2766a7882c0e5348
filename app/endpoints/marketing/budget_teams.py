# app/endpoints/marketing/budget_teams.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from core.deps import require_manager, require_member
from crud.marketing.budget import budget_crud
from crud.marketing.team import budget_team_crud, team_crud
from database.session import get_db
from schemas.marketing.team import (
    BudgetTeamCreate,
    BudgetTeamDetail,
    BudgetTeamList,
    BudgetTeamResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=BudgetTeamList, summary="예산 팀 배분 목록")
def list_allocations(
    db: Session = Depends(get_db),
    budget_id: Optional[int] = Query(None, alias="budgetId", ge=1),
    _=Depends(require_member),
):
    rows = budget_team_crud.list_allocations(db, budget_id=budget_id)
    return {
        "items": [BudgetTeamDetail.model_validate(r) for r in rows],
        "total": len(rows),
    }


@router.post("", response_model=BudgetTeamResponse, summary="예산 팀 배분 설정 (있으면 갱신)")
def set_allocation(
    payload: BudgetTeamCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    if budget_crud.get(db, payload.budget_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="budget not found")
    team = team_crud.get(db, payload.team_id)
    if team is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="team not found")
    if not team.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="team is inactive")

    try:
        row, created = budget_team_crud.upsert(
            db,
            budget_id=payload.budget_id,
            team_id=payload.team_id,
            allocation=payload.allocation,
        )
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    db.refresh(row)
    logger.info(
        "budget %s team %s allocation=%s (%s)",
        row.budget_id, row.team_id, row.allocation, "created" if created else "updated",
    )
    return BudgetTeamResponse.model_validate(row)


@router.delete(
    "/{allocation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="예산 팀 배분 삭제",
)
def delete_allocation(
    allocation_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    row = budget_team_crud.get(db, allocation_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Allocation not found")
    budget_team_crud.delete(db, db_obj=row)
