# models/marketing/team.py
from sqlalchemy import (
    Column,
    BigInteger,
    Boolean,
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


# ========== teams ==========
class Team(TimeStampMixin, Base):
    __tablename__ = "teams"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    color = Column(Text, nullable=True)  # UI 표시용 (#RRGGBB)
    is_active = Column(Boolean, nullable=False, server_default=text("true"))

    budget_teams = relationship(
        "BudgetTeam",
        back_populates="team",
        passive_deletes=True,
    )


# ========== budget_teams ==========
# 예산 1건을 팀별로 나눈 비율(%)
class BudgetTeam(TimeStampMixin, Base):
    __tablename__ = "budget_teams"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    budget_id = Column(
        BigInteger,
        ForeignKey("budgets.id", ondelete="CASCADE"),
        nullable=False,
    )
    # 배분이 남아 있는 팀은 삭제 불가
    team_id = Column(
        BigInteger,
        ForeignKey("teams.id", ondelete="RESTRICT"),
        nullable=False,
    )
    allocation = Column(Numeric(5, 2), nullable=False)

    budget = relationship("Budget", back_populates="team_allocations")
    team = relationship("Team", back_populates="budget_teams")

    __table_args__ = (
        UniqueConstraint("budget_id", "team_id", name="uq_budget_teams_budget_team"),
        CheckConstraint(
            "allocation > 0 AND allocation <= 100",
            name="chk_budget_teams_allocation_range",
        ),
        Index("idx_budget_teams_team", "team_id"),
    )

    @property
    def team_name(self):
        return self.team.name if self.team is not None else None

    @property
    def team_color(self):
        return self.team.color if self.team is not None else None
