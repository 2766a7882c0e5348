# core/deps.py
from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.config import ROLE_LEVELS
from core.security import parse_access_token
from database.session import get_db
from models.account.user import User

_bearer = HTTPBearer(auto_error=False)


# ==============================
# 인증 스텁 (JWT 교체 예정)
# Authorization: Bearer dev-access-{user_id}
# ==============================
def get_current_user(
    creds: HTTPAuthorizationCredentials = Security(_bearer),
    db: Session = Depends(get_db),
) -> User:
    user_id = parse_access_token(creds.credentials if creds else None)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    if (user.status or "").lower() != "active":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="inactive user")
    return user


def has_required_role(user: User, required_role: str) -> bool:
    """admin > manager > member 계층 비교."""
    have = ROLE_LEVELS.get((user.role or "").lower(), 0)
    need = ROLE_LEVELS[required_role]
    return have >= need


# ==============================
# 역할 검사
# - 조회: member 이상
# - 등록/수정/삭제/CSV 가져오기: manager 이상
# ==============================
def require_role(required_role: str) -> Callable[..., User]:
    if required_role not in ROLE_LEVELS:
        raise ValueError(f"unknown role: {required_role}")

    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_required_role(current_user, required_role):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        return current_user

    return _dependency


require_member = require_role("member")
require_manager = require_role("manager")
require_admin = require_role("admin")
