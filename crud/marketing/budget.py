# crud/marketing/budget.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from crud.marketing.scope import key_conditions
from models.marketing.budget import Budget
from models.marketing.campaign import Campaign
from models.marketing.team import BudgetTeam
from schemas.marketing.budget import BudgetCreate, BudgetUpdate
from service.reconciliation import BudgetResultKey

_EAGER = (
    selectinload(Budget.campaign).selectinload(Campaign.client),
    selectinload(Budget.team_allocations).selectinload(BudgetTeam.team),
)


class CRUDBudget(CRUDBase[Budget, BudgetCreate, BudgetUpdate]):
    def list_budgets(
        self,
        db: Session,
        *,
        offset: int = 0,
        limit: int = 50,
        **filters,
    ) -> Tuple[List[Budget], int]:
        return self.list_page(
            db,
            conditions=key_conditions(Budget, **filters),
            offset=offset,
            limit=limit,
            order_by=["-year", "-month", "platform", "id"],
            options=_EAGER,
        )

    def fetch_all(self, db: Session, **filters) -> List[Budget]:
        """페이지 없이 필터 조건에 맞는 전체 예산 (campaign/client eager load)."""
        stmt = (
            select(Budget)
            .where(*key_conditions(Budget, **filters))
            .options(*_EAGER)
            .order_by(Budget.year.desc(), Budget.month.desc(), Budget.platform.asc(), Budget.id.asc())
        )
        return list(db.execute(stmt).scalars().all())

    def get_by_key(self, db: Session, key: BudgetResultKey) -> Optional[Budget]:
        stmt = select(Budget).where(
            Budget.campaign_id == key.campaign_id,
            Budget.year == key.year,
            Budget.month == key.month,
            Budget.platform == key.platform,
            Budget.operation_type == key.operation_type,
            Budget.budget_type == key.budget_type,
        )
        return db.execute(stmt).scalars().first()

    def upsert_by_key(
        self,
        db: Session,
        *,
        key: BudgetResultKey,
        amount: Decimal,
        target_kpi: Optional[str] = None,
        target_value: Optional[Decimal] = None,
    ) -> Tuple[Budget, bool]:
        """
        복합 키 기준 upsert. (budget, created) 반환.
        - commit 은 호출하는 쪽에서
        """
        budget = self.get_by_key(db, key)
        created = budget is None
        if created:
            budget = Budget(**key._asdict())
            db.add(budget)
        budget.amount = amount
        if target_kpi is not None:
            budget.target_kpi = target_kpi
        if target_value is not None:
            budget.target_value = target_value
        db.flush()
        return budget, created


budget_crud = CRUDBudget(Budget)
