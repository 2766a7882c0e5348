# schemas/marketing/team.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from schemas.base import ORMBase, Page
from schemas.marketing.budget import BudgetResponse
from schemas.validators import reject_null, strip_text

_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# --------------------
# 팀
# --------------------
class TeamCreate(ORMBase):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=_COLOR_PATTERN)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return strip_text(v)


class TeamUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=_COLOR_PATTERN)
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return strip_text(v)

    @field_validator("name", "is_active")
    @classmethod
    def _not_null(cls, v):
        return reject_null(v)


class TeamStats(ORMBase):
    budget_item_count: int = 0
    total_allocation: float = 0.0  # 배분 비율(%) 합계
    allocated_amount: float = 0.0  # Σ 예산 × 비율 / 100
    campaign_count: int = 0
    client_count: int = 0


class TeamResponse(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: bool
    stats: TeamStats = TeamStats()
    created_at: datetime
    updated_at: datetime


TeamPage = Page[TeamResponse]


# --------------------
# 예산 팀 배분
# --------------------
class TeamAllocationInput(ORMBase):
    team_id: int = Field(..., ge=1)
    allocation: Decimal = Field(..., gt=0, le=100, decimal_places=2)


class BudgetTeamCreate(TeamAllocationInput):
    budget_id: int = Field(..., ge=1)


class BudgetTeamResponse(ORMBase):
    id: int
    budget_id: int
    team_id: int
    team_name: Optional[str] = None
    team_color: Optional[str] = None
    allocation: float
    created_at: datetime
    updated_at: datetime


class BudgetTeamDetail(BudgetTeamResponse):
    budget: BudgetResponse


class BudgetTeamList(ORMBase):
    items: List[BudgetTeamDetail] = []
    total: int = 0
