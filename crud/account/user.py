# crud/account/user.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from core.security import hash_password
from models.account.user import User


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    stmt = select(User).where(func.lower(User.email) == email.strip().lower())
    return db.execute(stmt).scalars().first()


def list_users(
    db: Session,
    *,
    role: Optional[str] = None,
    status: Optional[str] = None,
    offset: int = 0,
    limit: int = 50,
) -> Tuple[List[User], int]:
    """
    사용자 목록 (rows, total).
    - role / status 필터
    - 최근 가입 순
    """
    filters = []
    if role is not None:
        filters.append(User.role == role)
    if status is not None:
        filters.append(User.status == status)

    base_stmt: Select = select(User)
    if filters:
        base_stmt = base_stmt.where(*filters)

    total = db.execute(
        select(func.count()).select_from(base_stmt.subquery())
    ).scalar_one()

    stmt = (
        base_stmt
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(offset)
        .limit(limit)
    )
    rows = db.execute(stmt).scalars().all()
    return list(rows), int(total or 0)


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    role: str = "member",
    name: Optional[str] = None,
    department: Optional[str] = None,
) -> User:
    user = User(
        email=email.strip().lower(),
        password_hash=hash_password(password),
        role=role,
        name=name,
        department=department,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session,
    *,
    user: User,
    data: Dict[str, Any],
) -> User:
    for key, value in data.items():
        setattr(user, key, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, *, user: User) -> None:
    db.delete(user)
    db.commit()


def touch_last_login(db: Session, user: User) -> User:
    user.last_login_at = datetime.now(timezone.utc)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
