# service/budget_result.py
"""예산·실적 통합 조회 / 등록 / CSV 내보내기."""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import polars as pl
from sqlalchemy.orm import Session

from crud.marketing.budget import budget_crud
from crud.marketing.campaign import campaign_crud
from crud.marketing.result import result_crud
from crud.marketing.team import budget_team_crud, team_crud
from schemas.marketing.budget_result import BudgetResultCreate
from service.reconciliation import (
    BudgetResultKey,
    BudgetRow,
    LineItem,
    ResultRow,
    Summary,
    normalize_budget,
    normalize_result,
    reconcile,
    summarize,
)

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "campaignId",
    "campaignName",
    "clientName",
    "year",
    "month",
    "platform",
    "operationType",
    "budgetType",
    "budgetAmount",
    "targetKpi",
    "targetValue",
    "actualSpend",
    "actualResult",
    "budgetUtilization",
    "roi",
    "variance",
]


@dataclass
class BudgetResultFilter:
    year: Optional[int] = None
    month: Optional[int] = None
    client_id: Optional[int] = None
    platform: Optional[str] = None
    operation_type: Optional[str] = None
    department: Optional[str] = None

    def as_kwargs(self) -> Dict[str, Any]:
        # "all" / 빈 문자열은 필터 없음
        return {
            k: v for k, v in asdict(self).items()
            if v is not None and not (isinstance(v, str) and v.strip().lower() in {"", "all"})
        }


# ------------------------------------------------------------------
# 조회
# ------------------------------------------------------------------
def fetch_rows(
    db: Session,
    filters: BudgetResultFilter,
) -> Tuple[List[BudgetRow], List[ResultRow]]:
    """필터에 맞는 예산/실적 조회 후 Decimal 로 정규화 (campaign → client 포함)."""
    kwargs = filters.as_kwargs()
    budgets = [normalize_budget(b) for b in budget_crud.fetch_all(db, **kwargs)]
    results = [normalize_result(r) for r in result_crud.fetch_all(db, **kwargs)]
    return budgets, results


def build_budget_results(
    db: Session,
    filters: BudgetResultFilter,
) -> Tuple[List[LineItem], Summary]:
    budgets, results = fetch_rows(db, filters)

    items = reconcile(budgets, results)
    summary = summarize(items)
    logger.info(
        "budget-results: filters=%s budgets=%d results=%d items=%d",
        filters.as_kwargs(), len(budgets), len(results), len(items),
    )
    return items, summary


def monthly_overview(db: Session, *, year: int, month: int) -> Tuple[List[LineItem], Summary]:
    return build_budget_results(db, BudgetResultFilter(year=year, month=month))


def parse_year_month(value: str) -> Tuple[int, int]:
    """'YYYY-MM' → (year, month). 형식 오류는 ValueError."""
    try:
        year_str, month_str = value.strip().split("-", 1)
        year, month = int(year_str), int(month_str)
    except (AttributeError, ValueError):
        raise ValueError(f"invalid month: {value!r} (expected YYYY-MM)")
    if not 1 <= month <= 12:
        raise ValueError(f"invalid month: {value!r} (expected YYYY-MM)")
    return year, month


# ------------------------------------------------------------------
# 등록 (예산 + 실적 한 트랜잭션)
# ------------------------------------------------------------------
def create_budget_result(db: Session, payload: BudgetResultCreate) -> Tuple[Optional[int], Optional[int]]:
    """
    같은 복합 키로 예산과 실적을 함께 등록.
    - budget_amount 가 있으면 예산 upsert
    - actual_spend / actual_result 가 있으면 실적 upsert
    - team_allocations 는 예산에 팀 배분으로 upsert (합계 100% 초과는 ValueError)
    - 캠페인이나 팀이 없으면 LookupError
    """
    if campaign_crud.get(db, payload.campaign_id) is None:
        raise LookupError(f"campaign not found: {payload.campaign_id}")

    key = BudgetResultKey(
        campaign_id=payload.campaign_id,
        year=payload.year,
        month=payload.month,
        platform=payload.platform.strip(),
        operation_type=payload.operation_type.strip(),
        budget_type=payload.budget_type.strip(),
    )

    budget_id = result_id = None
    try:
        if payload.budget_amount is not None:
            budget, _ = budget_crud.upsert_by_key(
                db,
                key=key,
                amount=payload.budget_amount,
                target_kpi=payload.target_kpi or None,
                target_value=payload.target_value,
            )
            budget_id = budget.id

            for alloc in payload.team_allocations:
                if team_crud.get(db, alloc.team_id) is None:
                    raise LookupError(f"team not found: {alloc.team_id}")
                budget_team_crud.upsert(
                    db,
                    budget_id=budget.id,
                    team_id=alloc.team_id,
                    allocation=alloc.allocation,
                )

        if payload.actual_spend is not None or payload.actual_result is not None:
            result, _ = result_crud.upsert_by_key(
                db,
                key=key,
                actual_spend=payload.actual_spend,
                actual_result=payload.actual_result,
            )
            result_id = result.id

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("budget-result saved: key=%s budget_id=%s result_id=%s", key, budget_id, result_id)
    return budget_id, result_id


# ------------------------------------------------------------------
# CSV 내보내기
# ------------------------------------------------------------------
def _fmt_number(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return format(value.normalize(), "f") if value == value.to_integral() else format(value, "f")


def _fmt_metric(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.2f}"


def line_items_to_csv(items: List[LineItem]) -> str:
    """
    통합 데이터 → CSV 문자열.
    - 계산값은 소수 2자리, 값이 없으면 빈 칸 (null)
    """
    rows = [
        {
            "campaignId": str(item.campaign_id),
            "campaignName": item.campaign.name,
            "clientName": item.campaign.client.name,
            "year": str(item.year),
            "month": str(item.month),
            "platform": item.platform,
            "operationType": item.operation_type,
            "budgetType": item.budget_type,
            "budgetAmount": _fmt_number(item.budget_amount),
            "targetKpi": item.target_kpi,
            "targetValue": _fmt_number(item.target_value),
            "actualSpend": _fmt_number(item.actual_spend),
            "actualResult": _fmt_number(item.actual_result),
            "budgetUtilization": _fmt_metric(item.budget_utilization),
            "roi": _fmt_metric(item.roi),
            "variance": _fmt_metric(item.variance),
        }
        for item in items
    ]
    frame = pl.DataFrame(
        rows or None,
        schema={col: pl.Utf8 for col in CSV_COLUMNS},
    )
    return frame.write_csv()
