# crud/marketing/client.py
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from crud.base import CRUDBase
from models.marketing.client import Client
from schemas.marketing.client import ClientCreate, ClientUpdate


class CRUDClient(CRUDBase[Client, ClientCreate, ClientUpdate]):
    def list_clients(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        priority: Optional[int] = None,
        business_division: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Client], int]:
        conds = []
        if search:
            pattern = f"%{search}%"
            conds.append(or_(Client.name.ilike(pattern), Client.manager.ilike(pattern)))
        if priority is not None:
            conds.append(Client.priority == priority)
        if business_division:
            conds.append(Client.business_division == business_division)
        return self.list_page(
            db,
            conditions=conds,
            offset=offset,
            limit=limit,
            order_by=["priority", "name"],
        )


client_crud = CRUDClient(Client)
