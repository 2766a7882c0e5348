# crud/marketing/scope.py
"""Budget / Result 공통 필터 조건."""
from __future__ import annotations

from typing import Any, List, Optional

from models.marketing.campaign import Campaign
from models.marketing.client import Client


def key_conditions(
    model,
    *,
    year: Optional[int] = None,
    month: Optional[int] = None,
    campaign_id: Optional[int] = None,
    client_id: Optional[int] = None,
    platform: Optional[str] = None,
    operation_type: Optional[str] = None,
    department: Optional[str] = None,
) -> List[Any]:
    """
    Budget/Result 모델 공통 where 조건.
    - client_id / department 는 campaign → client 관계를 통해 필터
    - department = Client.business_division
    """
    conds: List[Any] = []
    if year is not None:
        conds.append(model.year == year)
    if month is not None:
        conds.append(model.month == month)
    if campaign_id is not None:
        conds.append(model.campaign_id == campaign_id)
    if platform:
        conds.append(model.platform == platform)
    if operation_type:
        conds.append(model.operation_type == operation_type)
    if client_id is not None:
        conds.append(model.campaign.has(Campaign.client_id == client_id))
    if department:
        conds.append(
            model.campaign.has(
                Campaign.client.has(Client.business_division == department)
            )
        )
    return conds
