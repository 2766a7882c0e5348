"""initial marketing tables

Revision ID: 4c1d2e8a9b10
Revises:
Create Date: 2026-10-17 10:12:31.402118
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "4c1d2e8a9b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _key_columns():
    return [
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("platform", sa.Text(), nullable=False),
        sa.Column("operation_type", sa.Text(), nullable=False),
        sa.Column("budget_type", sa.Text(), nullable=False),
    ]


def upgrade() -> None:
    # 1) users
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), server_default=sa.text("'member'"), nullable=False),
        sa.Column("status", sa.Text(), server_default=sa.text("'active'"), nullable=False),
        sa.Column("department", sa.Text(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'manager', 'member')", name="chk_users_role"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # 2) clients
    op.create_table(
        "clients",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("manager", sa.Text(), nullable=True),
        sa.Column("business_division", sa.Text(), nullable=True),
        sa.Column("sales_department", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), server_default=sa.text("999"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_clients"),
    )
    op.create_index("idx_clients_priority_name", "clients", ["priority", "name"])
    op.create_index("idx_clients_business_division", "clients", ["business_division"])

    # 3) campaigns
    op.create_table(
        "campaigns",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("purpose", sa.Text(), nullable=True),
        sa.Column("total_budget", sa.Numeric(14, 2), server_default=sa.text("0"), nullable=False),
        sa.Column("start_year", sa.Integer(), nullable=False),
        sa.Column("start_month", sa.Integer(), nullable=False),
        sa.Column("end_year", sa.Integer(), nullable=True),
        sa.Column("end_month", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("start_month BETWEEN 1 AND 12", name="chk_campaigns_start_month"),
        sa.CheckConstraint(
            "end_month IS NULL OR end_month BETWEEN 1 AND 12",
            name="chk_campaigns_end_month",
        ),
        sa.CheckConstraint("total_budget >= 0", name="chk_campaigns_total_budget_nonneg"),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"],
            name="fk_campaigns_client_id_clients",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_campaigns"),
    )
    op.create_index("idx_campaigns_client", "campaigns", ["client_id"])

    # 4) budgets / results (같은 복합 키)
    for table, value_columns in (
        (
            "budgets",
            [
                sa.Column("amount", sa.Numeric(14, 2), server_default=sa.text("0"), nullable=False),
                sa.Column("target_kpi", sa.Text(), nullable=True),
                sa.Column("target_value", sa.Numeric(18, 4), nullable=True),
            ],
        ),
        (
            "results",
            [
                sa.Column("actual_spend", sa.Numeric(14, 2), server_default=sa.text("0"), nullable=False),
                sa.Column("actual_result", sa.Numeric(18, 4), server_default=sa.text("0"), nullable=False),
            ],
        ),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
            *_key_columns(),
            *value_columns,
            *_timestamps(),
            sa.CheckConstraint("month BETWEEN 1 AND 12", name=f"chk_{table}_month"),
            sa.ForeignKeyConstraint(
                ["campaign_id"], ["campaigns.id"],
                name=f"fk_{table}_campaign_id_campaigns",
                ondelete="CASCADE",
            ),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table}"),
            sa.UniqueConstraint(
                "campaign_id", "year", "month", "platform", "operation_type", "budget_type",
                name=f"uq_{table}_composite_key",
            ),
        )
        op.create_index(f"idx_{table}_year_month", table, ["year", "month"])
        op.create_index(f"idx_{table}_platform", table, ["platform"])


def downgrade() -> None:
    for table in ("results", "budgets"):
        op.drop_index(f"idx_{table}_platform", table_name=table)
        op.drop_index(f"idx_{table}_year_month", table_name=table)
        op.drop_table(table)

    op.drop_index("idx_campaigns_client", table_name="campaigns")
    op.drop_table("campaigns")

    op.drop_index("idx_clients_business_division", table_name="clients")
    op.drop_index("idx_clients_priority_name", table_name="clients")
    op.drop_table("clients")

    op.drop_table("users")
