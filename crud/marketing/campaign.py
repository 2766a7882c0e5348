# crud/marketing/campaign.py
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from models.marketing.budget import Budget
from models.marketing.campaign import Campaign
from models.marketing.result import Result
from schemas.marketing.campaign import CampaignCreate, CampaignUpdate


class CRUDCampaign(CRUDBase[Campaign, CampaignCreate, CampaignUpdate]):
    def list_campaigns(
        self,
        db: Session,
        *,
        client_id: Optional[int] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Campaign], int]:
        conds = []
        if client_id is not None:
            conds.append(Campaign.client_id == client_id)
        if search:
            conds.append(Campaign.name.ilike(f"%{search}%"))
        return self.list_page(
            db,
            conditions=conds,
            offset=offset,
            limit=limit,
            order_by=["-start_year", "-start_month", "name"],
            options=[selectinload(Campaign.client)],
        )

    def totals_by_campaign(
        self,
        db: Session,
        campaign_ids: Iterable[int],
    ) -> Dict[int, Tuple[Decimal, Decimal]]:
        """campaign_id → (예산 합계, 실적 지출 합계)."""
        ids = list(campaign_ids)
        if not ids:
            return {}

        budget_rows = db.execute(
            select(Budget.campaign_id, func.coalesce(func.sum(Budget.amount), 0))
            .where(Budget.campaign_id.in_(ids))
            .group_by(Budget.campaign_id)
        ).all()
        spend_rows = db.execute(
            select(Result.campaign_id, func.coalesce(func.sum(Result.actual_spend), 0))
            .where(Result.campaign_id.in_(ids))
            .group_by(Result.campaign_id)
        ).all()

        budget_map = {cid: Decimal(str(v or 0)) for cid, v in budget_rows}
        spend_map = {cid: Decimal(str(v or 0)) for cid, v in spend_rows}
        return {
            cid: (budget_map.get(cid, Decimal("0")), spend_map.get(cid, Decimal("0")))
            for cid in ids
        }


campaign_crud = CRUDCampaign(Campaign)
