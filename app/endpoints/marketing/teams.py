# app/endpoints/marketing/teams.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.deps import require_admin, require_manager, require_member
from crud.marketing.team import team_crud
from database.session import get_db
from models.marketing.team import Team
from schemas.marketing.team import TeamCreate, TeamPage, TeamResponse, TeamStats, TeamUpdate

router = APIRouter()


def _get_or_404(db: Session, team_id: int) -> Team:
    obj = team_crud.get(db, team_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Team not found")
    return obj


def _to_responses(db: Session, rows: List[Team]) -> List[TeamResponse]:
    stats = team_crud.stats_by_team(db, [r.id for r in rows])
    return [
        TeamResponse.model_validate(r).model_copy(
            update={"stats": TeamStats(**stats.get(r.id, {}))}
        )
        for r in rows
    ]


def _ensure_unique_name(db: Session, name: str, *, team_id: Optional[int] = None) -> None:
    existing = team_crud.get_by_name(db, name)
    if existing is not None and existing.id != team_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="team name already exists")


@router.get("", response_model=TeamPage, summary="팀 목록 (배분 통계 포함)")
def list_teams(
    db: Session = Depends(get_db),
    include_inactive: bool = Query(False, alias="includeInactive"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _=Depends(require_member),
):
    rows, total = team_crud.list_teams(
        db, include_inactive=include_inactive, offset=offset, limit=limit,
    )
    return {
        "items": _to_responses(db, rows),
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post(
    "",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="팀 등록",
)
def create_team(
    payload: TeamCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    _ensure_unique_name(db, payload.name)
    try:
        obj = team_crud.create(db, obj_in=payload)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="team name already exists") from e
    return _to_responses(db, [obj])[0]


@router.get("/{team_id}", response_model=TeamResponse, summary="팀 조회")
def get_team(
    team_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_member),
):
    return _to_responses(db, [_get_or_404(db, team_id)])[0]


@router.patch("/{team_id}", response_model=TeamResponse, summary="팀 수정")
def update_team(
    payload: TeamUpdate,
    team_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    obj = _get_or_404(db, team_id)
    if payload.name is not None:
        _ensure_unique_name(db, payload.name, team_id=obj.id)
    try:
        obj = team_crud.update(db, db_obj=obj, obj_in=payload)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="team name already exists") from e
    return _to_responses(db, [obj])[0]


@router.delete(
    "/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="팀 삭제 (배분이 없을 때만)",
)
def delete_team(
    team_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_admin),
):
    obj = _get_or_404(db, team_id)
    if team_crud.has_allocations(db, obj.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="team has budget allocations; deactivate it instead",
        )
    team_crud.delete(db, db_obj=obj)
