# service/reconciliation.py
"""Budget / result reconciliation.

Budgets (planned spend) and results (actual spend and outcome) are recorded
independently for the same composite key
``(campaign_id, year, month, platform, operation_type, budget_type)``.
This module merges them into one line item per key and fills in the derived
metrics. It is a pure transform: no DB access, no module-level state.

ROI contract: ``roi = (actual_result - actual_spend) / actual_spend * 100``.
The ratio form ``actual_result / actual_spend`` is reported separately as
``efficiency`` on the summary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, NamedTuple, Optional, Tuple

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# ------------------------------------------------------------------
# 타입
# ------------------------------------------------------------------
class BudgetResultKey(NamedTuple):
    campaign_id: int
    year: int
    month: int
    platform: str
    operation_type: str
    budget_type: str


@dataclass(frozen=True)
class ClientRef:
    id: int
    name: str
    business_division: Optional[str] = None


@dataclass(frozen=True)
class CampaignRef:
    id: int
    name: str
    client: ClientRef


@dataclass(frozen=True)
class TeamAllocation:
    id: int
    team_id: int
    team_name: str
    allocation: Decimal  # %
    color: Optional[str] = None


@dataclass(frozen=True)
class BudgetRow:
    id: int
    key: BudgetResultKey
    amount: Decimal
    campaign: CampaignRef
    target_kpi: Optional[str] = None
    target_value: Optional[Decimal] = None
    team_allocations: Tuple[TeamAllocation, ...] = ()


@dataclass(frozen=True)
class ResultRow:
    id: int
    key: BudgetResultKey
    actual_spend: Decimal
    actual_result: Decimal
    campaign: CampaignRef


@dataclass
class LineItem:
    key: BudgetResultKey
    campaign: CampaignRef

    # 예산 측 (없으면 None)
    budget_id: Optional[int] = None
    budget_amount: Optional[Decimal] = None
    target_kpi: Optional[str] = None
    target_value: Optional[Decimal] = None
    team_allocations: List[TeamAllocation] = field(default_factory=list)

    # 실적 측 (없으면 None)
    result_id: Optional[int] = None
    actual_spend: Optional[Decimal] = None
    actual_result: Optional[Decimal] = None

    # 계산값
    budget_utilization: Decimal = ZERO
    roi: Decimal = ZERO
    variance: Decimal = ZERO
    achievement_rate: Decimal = ZERO

    @property
    def id(self) -> str:
        return "-".join(str(part) for part in self.key)

    @property
    def campaign_id(self) -> int:
        return self.key.campaign_id

    @property
    def year(self) -> int:
        return self.key.year

    @property
    def month(self) -> int:
        return self.key.month

    @property
    def platform(self) -> str:
        return self.key.platform

    @property
    def operation_type(self) -> str:
        return self.key.operation_type

    @property
    def budget_type(self) -> str:
        return self.key.budget_type

    @property
    def has_budget(self) -> bool:
        return self.budget_id is not None or self.budget_amount is not None

    @property
    def has_result(self) -> bool:
        return self.result_id is not None or self.actual_spend is not None


@dataclass
class Summary:
    total_budget: Decimal = ZERO
    total_spend: Decimal = ZERO
    total_result: Decimal = ZERO
    item_count: int = 0
    budget_item_count: int = 0
    result_item_count: int = 0
    efficiency: Decimal = ZERO
    roi: Decimal = ZERO


# ------------------------------------------------------------------
# 수치 정규화 (store 경계에서 1회)
# ------------------------------------------------------------------
def to_decimal(value: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """ORM Numeric / float / int / str → Decimal. NaN, Infinity, 빈 값은 default."""
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    if not d.is_finite():
        return default
    return d


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def campaign_ref(campaign: Any) -> CampaignRef:
    client = getattr(campaign, "client", None)
    return CampaignRef(
        id=campaign.id,
        name=campaign.name or "",
        client=ClientRef(
            id=client.id if client is not None else 0,
            name=(client.name or "") if client is not None else "",
            business_division=getattr(client, "business_division", None),
        ),
    )


def make_key(row: Any) -> BudgetResultKey:
    return BudgetResultKey(
        campaign_id=int(row.campaign_id),
        year=int(row.year),
        month=int(row.month),
        platform=(row.platform or "").strip(),
        operation_type=(row.operation_type or "").strip(),
        budget_type=(row.budget_type or "").strip(),
    )


def team_allocation(row: Any) -> TeamAllocation:
    team = getattr(row, "team", None)
    return TeamAllocation(
        id=row.id,
        team_id=int(row.team_id),
        team_name=(team.name or "") if team is not None else "",
        allocation=to_decimal(row.allocation),
        color=_clean_text(getattr(team, "color", None)),
    )


def normalize_budget(budget: Any) -> BudgetRow:
    return BudgetRow(
        id=budget.id,
        key=make_key(budget),
        amount=to_decimal(budget.amount),
        campaign=campaign_ref(budget.campaign),
        target_kpi=_clean_text(budget.target_kpi),
        target_value=to_decimal(budget.target_value, default=None),
        team_allocations=tuple(
            team_allocation(a) for a in (getattr(budget, "team_allocations", None) or ())
        ),
    )


def normalize_result(result: Any) -> ResultRow:
    return ResultRow(
        id=result.id,
        key=make_key(result),
        actual_spend=to_decimal(result.actual_spend),
        actual_result=to_decimal(result.actual_result),
        campaign=campaign_ref(result.campaign),
    )


# ------------------------------------------------------------------
# 계산
# ------------------------------------------------------------------
def safe_ratio(numerator: Optional[Decimal], denominator: Optional[Decimal]) -> Decimal:
    """분모가 없거나 0 이면 0."""
    if numerator is None or not denominator:
        return ZERO
    return numerator / denominator


def compute_metrics(item: LineItem) -> LineItem:
    spend = item.actual_spend or ZERO
    result = item.actual_result or ZERO

    item.budget_utilization = safe_ratio(spend, item.budget_amount) * HUNDRED
    item.roi = safe_ratio(result - spend, item.actual_spend) * HUNDRED
    item.variance = item.budget_amount - spend if item.budget_amount else ZERO
    item.achievement_rate = safe_ratio(result, item.target_value) * HUNDRED
    return item


def sort_key(item: LineItem):
    return (
        -item.year,
        -item.month,
        item.campaign.name,
        item.platform,
        item.operation_type,
        item.budget_type,
        item.campaign_id,
    )


def reconcile(
    budgets: Iterable[BudgetRow],
    results: Iterable[ResultRow],
) -> List[LineItem]:
    """Merge budgets and results into one line item per composite key.

    Keys seen on either side appear exactly once. Rows repeating a key on the
    same side are summed into the existing item.
    """
    items: dict[BudgetResultKey, LineItem] = {}

    for budget in budgets:
        item = items.get(budget.key)
        if item is None:
            items[budget.key] = LineItem(
                key=budget.key,
                campaign=budget.campaign,
                budget_id=budget.id,
                budget_amount=budget.amount,
                target_kpi=budget.target_kpi,
                target_value=budget.target_value,
                team_allocations=list(budget.team_allocations),
            )
            continue
        item.budget_amount = (item.budget_amount or ZERO) + budget.amount
        if item.target_kpi is None:
            item.target_kpi = budget.target_kpi
        if budget.target_value is not None:
            item.target_value = (item.target_value or ZERO) + budget.target_value
        item.team_allocations.extend(budget.team_allocations)

    for result in results:
        item = items.get(result.key)
        if item is None:
            item = items[result.key] = LineItem(key=result.key, campaign=result.campaign)
        if item.result_id is None:
            item.result_id = result.id
        item.actual_spend = (item.actual_spend or ZERO) + result.actual_spend
        item.actual_result = (item.actual_result or ZERO) + result.actual_result

    return sorted((compute_metrics(item) for item in items.values()), key=sort_key)


def summarize(items: Iterable[LineItem]) -> Summary:
    summary = Summary()
    for item in items:
        summary.total_budget += item.budget_amount or ZERO
        summary.total_spend += item.actual_spend or ZERO
        summary.total_result += item.actual_result or ZERO
        summary.item_count += 1
        if item.has_budget:
            summary.budget_item_count += 1
        if item.has_result:
            summary.result_item_count += 1

    summary.efficiency = safe_ratio(summary.total_result, summary.total_spend)
    summary.roi = safe_ratio(summary.total_result - summary.total_spend, summary.total_spend) * HUNDRED
    return summary
