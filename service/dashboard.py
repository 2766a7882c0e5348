# service/dashboard.py
"""대시보드 통계 (플랫폼/클라이언트/부서별 집계, 12개월 추이)."""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.config import TREND_MONTHS
from models.marketing.budget import Budget
from models.marketing.campaign import Campaign
from models.marketing.client import Client
from models.marketing.result import Result
from schemas.marketing.dashboard import (
    ClientBreakdown,
    DashboardStatsResponse,
    DashboardTotals,
    DepartmentBreakdown,
    MonthlyTrendPoint,
    PlatformBreakdown,
)
from service.reconciliation import HUNDRED, safe_ratio, to_decimal

UNASSIGNED_DEPARTMENT = "未設定"


def _d(v) -> Decimal:
    return to_decimal(v)


def _period_conds(model, year: Optional[int], month: Optional[int]) -> list:
    conds = []
    if year is not None:
        conds.append(model.year == year)
    if month is not None:
        conds.append(model.month == month)
    return conds


def recent_months(today: date, count: int = TREND_MONTHS) -> List[Tuple[int, int]]:
    """today 가 속한 달로 끝나는 최근 count 개월 (오래된 순)."""
    months = []
    y, m = today.year, today.month
    for _ in range(count):
        months.append((y, m))
        m -= 1
        if m == 0:
            y, m = y - 1, 12
    return list(reversed(months))


# ------------------------------------------------------------------
# 1) 합계
# ------------------------------------------------------------------
def _build_totals(db: Session, *, year, month, today: date) -> DashboardTotals:
    total_clients = db.execute(select(func.count(Client.id))).scalar_one()
    total_campaigns = db.execute(select(func.count(Campaign.id))).scalar_one()

    # 종료 연월 미설정 or (종료 연월 >= 이번 달)
    active_campaigns = db.execute(
        select(func.count(Campaign.id)).where(
            Campaign.active_in_clause(today.year, today.month)
        )
    ).scalar_one()

    total_budget = _d(db.execute(
        select(func.coalesce(func.sum(Budget.amount), 0)).where(*_period_conds(Budget, year, month))
    ).scalar_one())
    spend, result = db.execute(
        select(
            func.coalesce(func.sum(Result.actual_spend), 0),
            func.coalesce(func.sum(Result.actual_result), 0),
        ).where(*_period_conds(Result, year, month))
    ).one()
    total_spend, total_result = _d(spend), _d(result)

    return DashboardTotals(
        total_clients=int(total_clients or 0),
        total_campaigns=int(total_campaigns or 0),
        active_campaigns=int(active_campaigns or 0),
        total_budget=total_budget,
        total_spend=total_spend,
        total_result=total_result,
        efficiency=safe_ratio(total_result, total_spend),
        budget_utilization=safe_ratio(total_spend, total_budget) * HUNDRED,
    )


# ------------------------------------------------------------------
# 2) 플랫폼별
# ------------------------------------------------------------------
def _build_platforms(db: Session, *, year, month) -> List[PlatformBreakdown]:
    budget_rows = db.execute(
        select(Budget.platform, func.coalesce(func.sum(Budget.amount), 0))
        .where(*_period_conds(Budget, year, month))
        .group_by(Budget.platform)
    ).all()
    result_rows = db.execute(
        select(
            Result.platform,
            func.coalesce(func.sum(Result.actual_spend), 0),
            func.coalesce(func.sum(Result.actual_result), 0),
        )
        .where(*_period_conds(Result, year, month))
        .group_by(Result.platform)
    ).all()

    acc: Dict[str, Dict[str, Decimal]] = defaultdict(
        lambda: {"budget": Decimal("0"), "spend": Decimal("0"), "result": Decimal("0")}
    )
    for platform, amount in budget_rows:
        acc[platform]["budget"] += _d(amount)
    for platform, spend, result in result_rows:
        acc[platform]["spend"] += _d(spend)
        acc[platform]["result"] += _d(result)

    items = [PlatformBreakdown(platform=p, **v) for p, v in acc.items()]
    items.sort(key=lambda x: (-x.budget, x.platform))
    return items


# ------------------------------------------------------------------
# 3) 클라이언트별 / 부서별
# ------------------------------------------------------------------
def _client_sums(db: Session, *, year, month) -> Dict[int, Dict[str, Decimal]]:
    budget_rows = db.execute(
        select(Campaign.client_id, func.coalesce(func.sum(Budget.amount), 0))
        .join(Campaign, Budget.campaign_id == Campaign.id)
        .where(*_period_conds(Budget, year, month))
        .group_by(Campaign.client_id)
    ).all()
    result_rows = db.execute(
        select(
            Campaign.client_id,
            func.coalesce(func.sum(Result.actual_spend), 0),
            func.coalesce(func.sum(Result.actual_result), 0),
        )
        .join(Campaign, Result.campaign_id == Campaign.id)
        .where(*_period_conds(Result, year, month))
        .group_by(Campaign.client_id)
    ).all()

    sums: Dict[int, Dict[str, Decimal]] = defaultdict(
        lambda: {"budget": Decimal("0"), "spend": Decimal("0"), "result": Decimal("0")}
    )
    for client_id, amount in budget_rows:
        sums[client_id]["budget"] += _d(amount)
    for client_id, spend, result in result_rows:
        sums[client_id]["spend"] += _d(spend)
        sums[client_id]["result"] += _d(result)
    return sums


def _build_clients_and_departments(
    db: Session, *, year, month
) -> Tuple[List[ClientBreakdown], List[DepartmentBreakdown]]:
    sums = _client_sums(db, year=year, month=month)
    clients = db.execute(
        select(Client.id, Client.name, Client.business_division).order_by(Client.priority, Client.name)
    ).all()

    client_items: List[ClientBreakdown] = []
    dept_acc: Dict[str, Dict[str, Decimal]] = defaultdict(
        lambda: {"budget": Decimal("0"), "spend": Decimal("0"), "result": Decimal("0")}
    )
    dept_clients: Dict[str, int] = defaultdict(int)

    for client_id, name, division in clients:
        s = sums.get(client_id)
        department = division or UNASSIGNED_DEPARTMENT
        dept_clients[department] += 1
        if s is None:
            continue
        client_items.append(
            ClientBreakdown(
                client_id=client_id,
                client_name=name,
                business_division=division,
                budget=s["budget"],
                spend=s["spend"],
                result=s["result"],
                efficiency=safe_ratio(s["result"], s["spend"]),
            )
        )
        for k in ("budget", "spend", "result"):
            dept_acc[department][k] += s[k]

    client_items.sort(key=lambda x: (-x.spend, x.client_name))

    dept_items = [
        DepartmentBreakdown(
            department=dept,
            client_count=count,
            budget=dept_acc[dept]["budget"],
            spend=dept_acc[dept]["spend"],
            result=dept_acc[dept]["result"],
            efficiency=safe_ratio(dept_acc[dept]["result"], dept_acc[dept]["spend"]),
        )
        for dept, count in dept_clients.items()
    ]
    dept_items.sort(key=lambda x: (-x.budget, x.department))
    return client_items, dept_items


# ------------------------------------------------------------------
# 4) 월별 추이
# ------------------------------------------------------------------
def _build_trends(db: Session, *, today: date) -> List[MonthlyTrendPoint]:
    months = recent_months(today)
    first_year = months[0][0]

    budget_rows = db.execute(
        select(Budget.year, Budget.month, func.coalesce(func.sum(Budget.amount), 0))
        .where(Budget.year >= first_year)
        .group_by(Budget.year, Budget.month)
    ).all()
    result_rows = db.execute(
        select(
            Result.year,
            Result.month,
            func.coalesce(func.sum(Result.actual_spend), 0),
            func.coalesce(func.sum(Result.actual_result), 0),
        )
        .where(Result.year >= first_year)
        .group_by(Result.year, Result.month)
    ).all()

    budget_map = {(y, m): _d(v) for y, m, v in budget_rows}
    result_map = {(y, m): (_d(s), _d(r)) for y, m, s, r in result_rows}

    return [
        MonthlyTrendPoint(
            year=y,
            month=m,
            budget=budget_map.get((y, m), Decimal("0")),
            spend=result_map.get((y, m), (Decimal("0"), Decimal("0")))[0],
            result=result_map.get((y, m), (Decimal("0"), Decimal("0")))[1],
        )
        for y, m in months
    ]


def get_dashboard_stats(
    db: Session,
    *,
    year: Optional[int] = None,
    month: Optional[int] = None,
    today: Optional[date] = None,
) -> DashboardStatsResponse:
    today = today or date.today()
    clients, departments = _build_clients_and_departments(db, year=year, month=month)
    return DashboardStatsResponse(
        totals=_build_totals(db, year=year, month=month, today=today),
        platforms=_build_platforms(db, year=year, month=month),
        clients=clients,
        departments=departments,
        monthly_trends=_build_trends(db, today=today),
    )
