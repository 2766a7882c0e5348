# schemas/account/user.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from schemas.account.auth import UserResponse
from schemas.base import ORMBase, Page
from schemas.enums import Role, UserStatus
from schemas.validators import reject_null, strip_text


class UserCreate(ORMBase):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8)
    role: Role = Role.member
    name: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, v):
        v = strip_text(v)
        return v.lower() if isinstance(v, str) else v


class UserUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[Role] = None
    status: Optional[UserStatus] = None
    department: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)

    @field_validator("role", "status")
    @classmethod
    def _not_null(cls, v):
        return reject_null(v)


class AdminUserResponse(UserResponse):
    created_at: datetime
    updated_at: datetime


UserPage = Page[AdminUserResponse]
