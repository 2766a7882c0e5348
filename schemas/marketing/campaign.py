# schemas/marketing/campaign.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, model_validator

from schemas.base import ORMBase, Page


def check_campaign_period(start_year, start_month, end_year, end_month) -> None:
    if (end_year is None) != (end_month is None):
        raise ValueError("end_year and end_month must be given together")
    if end_year is not None and start_year is not None and start_month is not None:
        if (end_year, end_month) < (start_year, start_month):
            raise ValueError("campaign end must not be before its start")


class CampaignCreate(ORMBase):
    client_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=200)
    purpose: Optional[str] = None
    total_budget: Decimal = Field(Decimal("0"), ge=0)
    start_year: int = Field(..., ge=2000, le=2100)
    start_month: int = Field(..., ge=1, le=12)
    end_year: Optional[int] = Field(None, ge=2000, le=2100)
    end_month: Optional[int] = Field(None, ge=1, le=12)

    @model_validator(mode="after")
    def _validate_period(self):
        check_campaign_period(self.start_year, self.start_month, self.end_year, self.end_month)
        return self


class CampaignUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    purpose: Optional[str] = None
    total_budget: Optional[Decimal] = Field(None, ge=0)
    start_year: Optional[int] = Field(None, ge=2000, le=2100)
    start_month: Optional[int] = Field(None, ge=1, le=12)
    end_year: Optional[int] = Field(None, ge=2000, le=2100)
    end_month: Optional[int] = Field(None, ge=1, le=12)


class CampaignResponse(ORMBase):
    id: int
    client_id: int
    client_name: Optional[str] = None
    name: str
    purpose: Optional[str] = None
    total_budget: float
    start_year: int
    start_month: int
    end_year: Optional[int] = None
    end_month: Optional[int] = None
    status: Literal["active", "ended"] = "active"

    # 목록 조회 시 집계
    total_budget_amount: float = 0.0
    total_actual_spend: float = 0.0

    created_at: datetime
    updated_at: datetime


CampaignPage = Page[CampaignResponse]
