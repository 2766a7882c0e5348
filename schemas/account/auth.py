# schemas/account/auth.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.base import ORMBase
from schemas.enums import Role, UserStatus


class LoginInput(ORMBase):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class AuthTokens(ORMBase):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(ORMBase):
    id: int
    email: str
    name: Optional[str] = None
    role: Role
    status: UserStatus
    department: Optional[str] = None
    last_login_at: Optional[datetime] = None
