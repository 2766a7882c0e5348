# schemas/marketing/dashboard.py
from __future__ import annotations

from typing import List, Optional

from schemas.base import ORMBase


class DashboardTotals(ORMBase):
    total_clients: int = 0
    total_campaigns: int = 0
    active_campaigns: int = 0
    total_budget: float = 0.0
    total_spend: float = 0.0
    total_result: float = 0.0
    efficiency: float = 0.0
    budget_utilization: float = 0.0


class PlatformBreakdown(ORMBase):
    platform: str
    budget: float = 0.0
    spend: float = 0.0
    result: float = 0.0


class ClientBreakdown(ORMBase):
    client_id: int
    client_name: str
    business_division: Optional[str] = None
    budget: float = 0.0
    spend: float = 0.0
    result: float = 0.0
    efficiency: float = 0.0


class DepartmentBreakdown(ORMBase):
    department: str
    client_count: int = 0
    budget: float = 0.0
    spend: float = 0.0
    result: float = 0.0
    efficiency: float = 0.0


class MonthlyTrendPoint(ORMBase):
    year: int
    month: int
    budget: float = 0.0
    spend: float = 0.0
    result: float = 0.0


class DashboardStatsResponse(ORMBase):
    totals: DashboardTotals
    platforms: List[PlatformBreakdown] = []
    clients: List[ClientBreakdown] = []
    departments: List[DepartmentBreakdown] = []
    monthly_trends: List[MonthlyTrendPoint] = []
