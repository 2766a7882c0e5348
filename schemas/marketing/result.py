# schemas/marketing/result.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from core.config import DEFAULT_BUDGET_TYPE
from schemas.base import ORMBase, Page
from schemas.validators import KEY_TEXT_FIELDS, reject_null, strip_text


class ResultCreate(ORMBase):
    campaign_id: int = Field(..., ge=1)
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    platform: str = Field(..., min_length=1)
    operation_type: str = Field(..., min_length=1)
    budget_type: str = Field(DEFAULT_BUDGET_TYPE, min_length=1)
    actual_spend: Decimal = Field(Decimal("0"), ge=0)
    actual_result: Decimal = Field(Decimal("0"), ge=0)

    @field_validator(*KEY_TEXT_FIELDS, mode="before")
    @classmethod
    def _strip_key_text(cls, v):
        return strip_text(v)


class ResultUpdate(ORMBase):
    actual_spend: Optional[Decimal] = Field(None, ge=0)
    actual_result: Optional[Decimal] = Field(None, ge=0)

    @field_validator("actual_spend", "actual_result")
    @classmethod
    def _values_not_null(cls, v):
        return reject_null(v)


class ResultResponse(ORMBase):
    id: int
    campaign_id: int
    campaign_name: Optional[str] = None
    client_name: Optional[str] = None
    year: int
    month: int
    platform: str
    operation_type: str
    budget_type: str
    actual_spend: float
    actual_result: float
    created_at: datetime
    updated_at: datetime


ResultPage = Page[ResultResponse]
