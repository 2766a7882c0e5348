# crud/marketing/result.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from crud.marketing.scope import key_conditions
from models.marketing.campaign import Campaign
from models.marketing.result import Result
from schemas.marketing.result import ResultCreate, ResultUpdate
from service.reconciliation import BudgetResultKey

_EAGER = (selectinload(Result.campaign).selectinload(Campaign.client),)


class CRUDResult(CRUDBase[Result, ResultCreate, ResultUpdate]):
    def list_results(
        self,
        db: Session,
        *,
        offset: int = 0,
        limit: int = 50,
        **filters,
    ) -> Tuple[List[Result], int]:
        return self.list_page(
            db,
            conditions=key_conditions(Result, **filters),
            offset=offset,
            limit=limit,
            order_by=["-year", "-month", "platform", "id"],
            options=_EAGER,
        )

    def fetch_all(self, db: Session, **filters) -> List[Result]:
        stmt = (
            select(Result)
            .where(*key_conditions(Result, **filters))
            .options(*_EAGER)
            .order_by(Result.year.desc(), Result.month.desc(), Result.platform.asc(), Result.id.asc())
        )
        return list(db.execute(stmt).scalars().all())

    def get_by_key(self, db: Session, key: BudgetResultKey) -> Optional[Result]:
        stmt = select(Result).where(
            Result.campaign_id == key.campaign_id,
            Result.year == key.year,
            Result.month == key.month,
            Result.platform == key.platform,
            Result.operation_type == key.operation_type,
            Result.budget_type == key.budget_type,
        )
        return db.execute(stmt).scalars().first()

    def upsert_by_key(
        self,
        db: Session,
        *,
        key: BudgetResultKey,
        actual_spend: Optional[Decimal] = None,
        actual_result: Optional[Decimal] = None,
    ) -> Tuple[Result, bool]:
        """
        복합 키 기준 upsert. 넘어온 값만 갱신, 신규면 빠진 값은 0.
        - commit 은 호출하는 쪽에서
        """
        result = self.get_by_key(db, key)
        created = result is None
        if created:
            result = Result(
                **key._asdict(),
                actual_spend=Decimal("0"),
                actual_result=Decimal("0"),
            )
            db.add(result)
        if actual_spend is not None:
            result.actual_spend = actual_spend
        if actual_result is not None:
            result.actual_result = actual_result
        db.flush()
        return result, created


result_crud = CRUDResult(Result)
