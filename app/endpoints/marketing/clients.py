# app/endpoints/marketing/clients.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from core.deps import require_manager, require_member
from crud.marketing.client import client_crud
from database.session import get_db
from schemas.marketing.client import ClientCreate, ClientPage, ClientResponse, ClientUpdate

router = APIRouter()


def _get_or_404(db: Session, client_id: int):
    obj = client_crud.get(db, client_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return obj


@router.get("", response_model=ClientPage, summary="클라이언트 목록")
def list_clients(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="이름/담당자 부분 일치"),
    priority: Optional[int] = Query(None, ge=0),
    department: Optional[str] = Query(None, description="business_division"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _=Depends(require_member),
):
    rows, total = client_crud.list_clients(
        db,
        search=search,
        priority=priority,
        business_division=department,
        offset=offset,
        limit=limit,
    )
    return {
        "items": [ClientResponse.model_validate(r) for r in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="클라이언트 등록",
)
def create_client(
    payload: ClientCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    return ClientResponse.model_validate(client_crud.create(db, obj_in=payload))


@router.get("/{client_id}", response_model=ClientResponse, summary="클라이언트 조회")
def get_client(
    client_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_member),
):
    return ClientResponse.model_validate(_get_or_404(db, client_id))


@router.patch("/{client_id}", response_model=ClientResponse, summary="클라이언트 수정")
def update_client(
    payload: ClientUpdate,
    client_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    obj = _get_or_404(db, client_id)
    obj = client_crud.update(db, db_obj=obj, obj_in=payload)
    return ClientResponse.model_validate(obj)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="클라이언트 삭제 (캠페인/예산/실적 포함)",
)
def delete_client(
    client_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    client_crud.delete(db, db_obj=_get_or_404(db, client_id))
