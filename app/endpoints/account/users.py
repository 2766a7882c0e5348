# app/endpoints/account/users.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.deps import require_admin
from core.security import hash_password
from crud.account import user as user_crud
from database.session import get_db
from models.account.user import User
from schemas.account.user import AdminUserResponse, UserCreate, UserPage, UserUpdate
from schemas.enums import Role, UserStatus

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=UserPage, summary="사용자 목록 (admin)")
def list_users(
    db: Session = Depends(get_db),
    role: Optional[Role] = Query(None),
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _=Depends(require_admin),
):
    rows, total = user_crud.list_users(
        db,
        role=role.value if role else None,
        status=user_status.value if user_status else None,
        offset=offset,
        limit=limit,
    )
    return {
        "items": [AdminUserResponse.model_validate(r) for r in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post(
    "",
    response_model=AdminUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="사용자 등록 (admin)",
)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
):
    if user_crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already registered")

    try:
        user = user_crud.create_user(
            db,
            email=payload.email,
            password=payload.password,
            role=payload.role.value,
            name=payload.name,
            department=payload.department,
        )
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already registered") from e
    logger.info("user %s created by admin %s (role=%s)", user.id, me.id, user.role)
    return AdminUserResponse.model_validate(user)


@router.get("/{user_id}", response_model=AdminUserResponse, summary="사용자 조회 (admin)")
def get_user(
    user_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    _=Depends(require_admin),
):
    return AdminUserResponse.model_validate(_get_or_404(db, user_id))


@router.patch(
    "/{user_id}",
    response_model=AdminUserResponse,
    summary="사용자 수정 (역할/상태/이름/부서/비밀번호)",
)
def update_user(
    payload: UserUpdate,
    user_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
):
    user = _get_or_404(db, user_id)
    data = payload.model_dump(exclude_unset=True, mode="json")

    if "password" in data:
        new_password = data.pop("password")
        if new_password:
            data["password_hash"] = hash_password(new_password)

    # 자기 자신의 관리자 권한/활성 상태는 바꿀 수 없음
    if user.id == me.id:
        if data.get("role", Role.admin.value) != Role.admin.value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="cannot change own role")
        if data.get("status", UserStatus.active.value) != UserStatus.active.value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="cannot suspend yourself")

    user = user_crud.update_user(db, user=user, data=data)
    logger.info("user %s updated by admin %s: %s", user.id, me.id, sorted(data))
    return AdminUserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="사용자 삭제 (admin)")
def delete_user(
    user_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
):
    user = _get_or_404(db, user_id)
    if user.id == me.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="cannot delete yourself")
    user_crud.delete_user(db, user=user)
    logger.info("user %s deleted by admin %s", user_id, me.id)
