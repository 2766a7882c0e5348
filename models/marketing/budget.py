# models/marketing/budget.py
from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    Text,
    Numeric,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
    text,
)
from sqlalchemy.orm import relationship

from models.base import Base, BigIntPK, TimeStampMixin


# ========== budgets ==========
# (campaign_id, year, month, platform, operation_type, budget_type) 당 1행
class Budget(TimeStampMixin, Base):
    __tablename__ = "budgets"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    campaign_id = Column(
        BigInteger,
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    platform = Column(Text, nullable=False)  # e.g. Google, Meta
    operation_type = Column(Text, nullable=False)  # e.g. 運用代行
    budget_type = Column(Text, nullable=False)  # e.g. 月次予算

    amount = Column(Numeric(14, 2), nullable=False, server_default=text("0"))
    target_kpi = Column(Text, nullable=True)
    target_value = Column(Numeric(18, 4), nullable=True)

    campaign = relationship("Campaign", back_populates="budgets")
    team_allocations = relationship(
        "BudgetTeam",
        back_populates="budget",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BudgetTeam.id",
    )

    __table_args__ = (
        UniqueConstraint(
            "campaign_id", "year", "month", "platform", "operation_type", "budget_type",
            name="uq_budgets_composite_key",
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="chk_budgets_month"),
        Index("idx_budgets_year_month", "year", "month"),
        Index("idx_budgets_platform", "platform"),
    )

    @property
    def campaign_name(self):
        return self.campaign.name if self.campaign is not None else None

    @property
    def client_name(self):
        if self.campaign is None or self.campaign.client is None:
            return None
        return self.campaign.client.name
