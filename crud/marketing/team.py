# crud/marketing/team.py
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from models.marketing.budget import Budget
from models.marketing.campaign import Campaign
from models.marketing.team import BudgetTeam, Team
from schemas.marketing.team import BudgetTeamCreate, TeamCreate, TeamUpdate

HUNDRED = Decimal("100")


class CRUDTeam(CRUDBase[Team, TeamCreate, TeamUpdate]):
    def get_by_name(self, db: Session, name: str) -> Optional[Team]:
        stmt = select(Team).where(func.lower(Team.name) == name.strip().lower())
        return db.execute(stmt).scalars().first()

    def list_teams(
        self,
        db: Session,
        *,
        include_inactive: bool = False,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Team], int]:
        conds = [] if include_inactive else [Team.is_active.is_(True)]
        return self.list_page(db, conditions=conds, offset=offset, limit=limit, order_by=["name"])

    def stats_by_team(self, db: Session, team_ids: Iterable[int]) -> Dict[int, dict]:
        """team_id → 배분 건수 / 비율 합계 / 배분 금액 / 캠페인 수 / 클라이언트 수."""
        ids = list(team_ids)
        if not ids:
            return {}

        rows = db.execute(
            select(
                BudgetTeam.team_id,
                func.count(BudgetTeam.id),
                func.coalesce(func.sum(BudgetTeam.allocation), 0),
                func.coalesce(func.sum(Budget.amount * BudgetTeam.allocation), 0),
                func.count(distinct(Budget.campaign_id)),
                func.count(distinct(Campaign.client_id)),
            )
            .join(Budget, BudgetTeam.budget_id == Budget.id)
            .join(Campaign, Budget.campaign_id == Campaign.id)
            .where(BudgetTeam.team_id.in_(ids))
            .group_by(BudgetTeam.team_id)
        ).all()

        out: Dict[int, dict] = {}
        for team_id, count, total_pct, weighted, campaigns, clients in rows:
            out[team_id] = {
                "budget_item_count": int(count or 0),
                "total_allocation": Decimal(str(total_pct or 0)),
                "allocated_amount": Decimal(str(weighted or 0)) / HUNDRED,
                "campaign_count": int(campaigns or 0),
                "client_count": int(clients or 0),
            }
        return out

    def has_allocations(self, db: Session, team_id: int) -> bool:
        stmt = select(BudgetTeam.id).where(BudgetTeam.team_id == team_id).limit(1)
        return db.execute(stmt).first() is not None


class CRUDBudgetTeam(CRUDBase[BudgetTeam, BudgetTeamCreate, BudgetTeamCreate]):
    def list_allocations(self, db: Session, *, budget_id: Optional[int] = None) -> List[BudgetTeam]:
        stmt = select(BudgetTeam).options(
            selectinload(BudgetTeam.team),
            selectinload(BudgetTeam.budget).selectinload(Budget.campaign).selectinload(Campaign.client),
        )
        if budget_id is not None:
            stmt = stmt.where(BudgetTeam.budget_id == budget_id)
        stmt = stmt.order_by(BudgetTeam.budget_id.asc(), BudgetTeam.id.asc())
        return list(db.execute(stmt).scalars().all())

    def get_pair(self, db: Session, *, budget_id: int, team_id: int) -> Optional[BudgetTeam]:
        stmt = select(BudgetTeam).where(
            BudgetTeam.budget_id == budget_id,
            BudgetTeam.team_id == team_id,
        )
        return db.execute(stmt).scalars().first()

    def allocated_total(self, db: Session, *, budget_id: int, exclude_team_id: Optional[int] = None) -> Decimal:
        """예산 1건에 이미 배분된 비율 합계 (exclude_team_id 는 제외)."""
        stmt = select(func.coalesce(func.sum(BudgetTeam.allocation), 0)).where(
            BudgetTeam.budget_id == budget_id
        )
        if exclude_team_id is not None:
            stmt = stmt.where(BudgetTeam.team_id != exclude_team_id)
        return Decimal(str(db.execute(stmt).scalar_one() or 0))

    def upsert(
        self,
        db: Session,
        *,
        budget_id: int,
        team_id: int,
        allocation: Decimal,
    ) -> Tuple[BudgetTeam, bool]:
        """
        (budget_id, team_id) 기준 upsert. (row, created) 반환.
        - 합계 100% 초과는 ValueError
        - commit 은 호출하는 쪽에서
        """
        others = self.allocated_total(db, budget_id=budget_id, exclude_team_id=team_id)
        if others + allocation > HUNDRED:
            raise ValueError(
                f"allocations for budget {budget_id} would total {others + allocation}% (max 100%)"
            )

        row = self.get_pair(db, budget_id=budget_id, team_id=team_id)
        created = row is None
        if created:
            row = BudgetTeam(budget_id=budget_id, team_id=team_id)
            db.add(row)
        row.allocation = allocation
        db.flush()
        return row, created


team_crud = CRUDTeam(Team)
budget_team_crud = CRUDBudgetTeam(BudgetTeam)
