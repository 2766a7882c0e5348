# schemas/marketing/client.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.base import ORMBase, Page


class ClientCreate(ORMBase):
    name: str = Field(..., min_length=1, max_length=200)
    manager: Optional[str] = None
    business_division: Optional[str] = None
    sales_department: Optional[str] = None
    priority: int = Field(999, ge=0)


class ClientUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    manager: Optional[str] = None
    business_division: Optional[str] = None
    sales_department: Optional[str] = None
    priority: Optional[int] = Field(None, ge=0)


class ClientResponse(ORMBase):
    id: int
    name: str
    manager: Optional[str] = None
    business_division: Optional[str] = None
    sales_department: Optional[str] = None
    priority: int
    created_at: datetime
    updated_at: datetime


ClientPage = Page[ClientResponse]
