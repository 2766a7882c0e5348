# models/marketing/result.py
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


# ========== results ==========
# budgets 와 같은 키 구조지만 독립적으로 기록됨 (예산 없이 실적만 있을 수 있음)
class Result(TimeStampMixin, Base):
    __tablename__ = "results"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    campaign_id = Column(
        BigInteger,
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    platform = Column(Text, nullable=False)
    operation_type = Column(Text, nullable=False)
    budget_type = Column(Text, nullable=False)

    actual_spend = Column(Numeric(14, 2), nullable=False, server_default=text("0"))
    actual_result = Column(Numeric(18, 4), nullable=False, server_default=text("0"))  # CV 수, 매출 등

    campaign = relationship("Campaign", back_populates="results")

    __table_args__ = (
        UniqueConstraint(
            "campaign_id", "year", "month", "platform", "operation_type", "budget_type",
            name="uq_results_composite_key",
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="chk_results_month"),
        Index("idx_results_year_month", "year", "month"),
        Index("idx_results_platform", "platform"),
    )

    @property
    def campaign_name(self):
        return self.campaign.name if self.campaign is not None else None

    @property
    def client_name(self):
        if self.campaign is None or self.campaign.client is None:
            return None
        return self.campaign.client.name
