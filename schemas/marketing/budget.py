# schemas/marketing/budget.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from core.config import DEFAULT_BUDGET_TYPE
from schemas.base import ORMBase, Page
from schemas.validators import KEY_TEXT_FIELDS, reject_null, strip_text


class BudgetCreate(ORMBase):
    campaign_id: int = Field(..., ge=1)
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    platform: str = Field(..., min_length=1)
    operation_type: str = Field(..., min_length=1)
    budget_type: str = Field(DEFAULT_BUDGET_TYPE, min_length=1)
    amount: Decimal = Field(..., ge=0)
    target_kpi: Optional[str] = None
    target_value: Optional[Decimal] = Field(None, ge=0)

    @field_validator(*KEY_TEXT_FIELDS, mode="before")
    @classmethod
    def _strip_key_text(cls, v):
        return strip_text(v)


class BudgetUpdate(ORMBase):
    amount: Optional[Decimal] = Field(None, ge=0)
    target_kpi: Optional[str] = None
    target_value: Optional[Decimal] = Field(None, ge=0)

    @field_validator("amount")
    @classmethod
    def _amount_not_null(cls, v):
        return reject_null(v)


class BudgetResponse(ORMBase):
    id: int
    campaign_id: int
    campaign_name: Optional[str] = None
    client_name: Optional[str] = None
    year: int
    month: int
    platform: str
    operation_type: str
    budget_type: str
    amount: float
    target_kpi: Optional[str] = None
    target_value: Optional[float] = None
    created_at: datetime
    updated_at: datetime


BudgetPage = Page[BudgetResponse]
