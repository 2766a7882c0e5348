# models/marketing/client.py
from sqlalchemy import Column, Integer, Text, Index, text
from sqlalchemy.orm import relationship

from models.base import Base, BigIntPK, TimeStampMixin


# ========== clients ==========
class Client(TimeStampMixin, Base):
    __tablename__ = "clients"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    name = Column(Text, nullable=False)
    manager = Column(Text, nullable=True)  # 営業担当
    business_division = Column(Text, nullable=True)  # 事業部 (부서 필터 기준)
    sales_department = Column(Text, nullable=True)
    priority = Column(Integer, nullable=False, server_default=text("999"))

    campaigns = relationship(
        "Campaign",
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_clients_priority_name", "priority", "name"),
        Index("idx_clients_business_division", "business_division"),
    )
