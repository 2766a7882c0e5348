# schemas/marketing/budget_result.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from core.config import DEFAULT_BUDGET_TYPE
from schemas.base import ORMBase
from schemas.marketing.team import TeamAllocationInput
from schemas.validators import KEY_TEXT_FIELDS, strip_text


class ClientDisplay(ORMBase):
    id: int
    name: str
    business_division: Optional[str] = None


class CampaignDisplay(ORMBase):
    id: int
    name: str
    client: ClientDisplay


class TeamAllocationItem(ORMBase):
    id: int
    team_id: int
    team_name: str
    allocation: float  # %
    color: Optional[str] = None


class BudgetResultItem(ORMBase):
    id: str
    campaign_id: int
    year: int
    month: int
    platform: str
    operation_type: str
    budget_type: str

    # 예산
    budget_id: Optional[int] = None
    budget_amount: Optional[float] = None
    target_kpi: Optional[str] = None
    target_value: Optional[float] = None
    team_allocations: List[TeamAllocationItem] = []

    # 실적
    result_id: Optional[int] = None
    actual_spend: Optional[float] = None
    actual_result: Optional[float] = None

    # 계산값
    budget_utilization: float = 0.0
    roi: float = 0.0
    variance: float = 0.0
    achievement_rate: float = 0.0

    campaign: CampaignDisplay


class BudgetResultSummary(ORMBase):
    total_budget: float = 0.0
    total_spend: float = 0.0
    total_result: float = 0.0
    item_count: int = 0
    budget_item_count: int = 0
    result_item_count: int = 0
    efficiency: float = 0.0
    roi: float = 0.0


class BudgetResultResponse(ORMBase):
    success: bool = True
    data: List[BudgetResultItem] = []
    summary: BudgetResultSummary


class MonthlyOverviewResponse(BudgetResultResponse):
    year: int
    month: int


class BudgetResultCreate(ORMBase):
    campaign_id: int = Field(..., ge=1)
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    platform: str = Field(..., min_length=1)
    operation_type: str = Field(..., min_length=1)
    budget_type: str = Field(DEFAULT_BUDGET_TYPE, min_length=1)

    budget_amount: Optional[Decimal] = Field(None, ge=0)
    target_kpi: Optional[str] = None
    target_value: Optional[Decimal] = Field(None, ge=0)

    actual_spend: Optional[Decimal] = Field(None, ge=0)
    actual_result: Optional[Decimal] = Field(None, ge=0)

    # 예산 측과 함께만 등록
    team_allocations: List[TeamAllocationInput] = []

    @field_validator(*KEY_TEXT_FIELDS, mode="before")
    @classmethod
    def _strip_key_text(cls, v):
        return strip_text(v)

    @model_validator(mode="after")
    def _require_one_side(self):
        if self.budget_amount is None and self.actual_spend is None and self.actual_result is None:
            raise ValueError("budget_amount or actual_spend/actual_result is required")
        if self.team_allocations and self.budget_amount is None:
            raise ValueError("team_allocations require budget_amount")
        return self


class BudgetResultCreated(ORMBase):
    success: bool = True
    budget_id: Optional[int] = None
    result_id: Optional[int] = None
    message: str = ""
