"""add teams and budget team allocations

Revision ID: 9e27f4b1c6d3
Revises: 4c1d2e8a9b10
Create Date: 2026-10-17 15:40:08.551930
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "9e27f4b1c6d3"
down_revision: Union[str, Sequence[str], None] = "4c1d2e8a9b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) teams
    op.create_table(
        "teams",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_teams"),
        sa.UniqueConstraint("name", name="uq_teams_name"),
    )

    # 2) budget_teams
    op.create_table(
        "budget_teams",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("budget_id", sa.BigInteger(), nullable=False),
        sa.Column("team_id", sa.BigInteger(), nullable=False),
        sa.Column("allocation", sa.Numeric(5, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "allocation > 0 AND allocation <= 100",
            name="chk_budget_teams_allocation_range",
        ),
        sa.ForeignKeyConstraint(
            ["budget_id"], ["budgets.id"],
            name="fk_budget_teams_budget_id_budgets",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"],
            name="fk_budget_teams_team_id_teams",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_budget_teams"),
        sa.UniqueConstraint("budget_id", "team_id", name="uq_budget_teams_budget_team"),
    )
    op.create_index("idx_budget_teams_team", "budget_teams", ["team_id"])

    # 3) campaigns: 종료 연/월은 둘 다 있거나 둘 다 없음
    op.create_check_constraint(
        op.f("ck_campaigns_chk_campaigns_end_period_pair"),
        "campaigns",
        "(end_year IS NULL) = (end_month IS NULL)",
    )


def downgrade() -> None:
    op.drop_constraint(op.f("ck_campaigns_chk_campaigns_end_period_pair"), "campaigns", type_="check")

    op.drop_index("idx_budget_teams_team", table_name="budget_teams")
    op.drop_table("budget_teams")
    op.drop_table("teams")
