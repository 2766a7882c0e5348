# models/marketing/campaign.py
from datetime import date

from sqlalchemy import (
    Column,
    and_,
    or_,
    BigInteger,
    Integer,
    Text,
    Numeric,
    ForeignKey,
    CheckConstraint,
    Index,
    text,
)
from sqlalchemy.orm import relationship

from models.base import Base, BigIntPK, TimeStampMixin


# ========== campaigns ==========
class Campaign(TimeStampMixin, Base):
    __tablename__ = "campaigns"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    client_id = Column(
        BigInteger,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(Text, nullable=False)
    purpose = Column(Text, nullable=True)
    total_budget = Column(Numeric(14, 2), nullable=False, server_default=text("0"))

    start_year = Column(Integer, nullable=False)
    start_month = Column(Integer, nullable=False)
    # 둘 다 NULL 이면 진행 중
    end_year = Column(Integer, nullable=True)
    end_month = Column(Integer, nullable=True)

    client = relationship("Client", back_populates="campaigns")

    budgets = relationship(
        "Budget",
        back_populates="campaign",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    results = relationship(
        "Result",
        back_populates="campaign",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("start_month BETWEEN 1 AND 12", name="chk_campaigns_start_month"),
        CheckConstraint(
            "end_month IS NULL OR end_month BETWEEN 1 AND 12",
            name="chk_campaigns_end_month",
        ),
        CheckConstraint(
            "(end_year IS NULL) = (end_month IS NULL)",
            name="chk_campaigns_end_period_pair",
        ),
        CheckConstraint("total_budget >= 0", name="chk_campaigns_total_budget_nonneg"),
        Index("idx_campaigns_client", "client_id"),
    )

    @property
    def client_name(self):
        return self.client.name if self.client is not None else None

    def is_active_in(self, year: int, month: int) -> bool:
        """종료 연월이 없거나 (year, month) 이후면 진행 중."""
        if self.end_year is None or self.end_month is None:
            return True
        return (self.end_year, self.end_month) >= (year, month)

    @classmethod
    def active_in_clause(cls, year: int, month: int):
        """is_active_in 과 같은 조건의 SQL 식."""
        return or_(
            cls.end_year.is_(None),
            cls.end_month.is_(None),
            cls.end_year > year,
            and_(cls.end_year == year, cls.end_month >= month),
        )

    @property
    def status(self) -> str:
        today = date.today()
        return "active" if self.is_active_in(today.year, today.month) else "ended"
