"""init tables

Revision ID: 0001_init
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


NOW = sa.text("CURRENT_TIMESTAMP")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("tg_user_id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.Enum("user", "admin", name="user_role"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.UniqueConstraint("tg_user_id", name="uq_users_tg_user_id"),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_members_user_name"),
    )
    op.create_index("ix_members_user_id", "members", ["user_id"])

    op.create_table(
        "meetings",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
    )
    op.create_index("ix_meetings_user_id", "meetings", ["user_id"])

    op.create_table(
        "meeting_members",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("meeting_id", sa.BigInteger(), sa.ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("member_name", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_meeting_members_meeting_id", "meeting_members", ["meeting_id"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("meeting_id", sa.BigInteger(), sa.ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("payer", sa.String(length=100), nullable=False),
        sa.Column("memo", sa.Text(), server_default="", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=False),
    )
    op.create_index("ix_expenses_meeting_date", "expenses", ["meeting_id", "date"])

    op.create_table(
        "expense_splits",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("expense_id", sa.BigInteger(), sa.ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("member_name", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_expense_splits_expense_id", "expense_splits", ["expense_id"])


def downgrade() -> None:
    op.drop_index("ix_expense_splits_expense_id", table_name="expense_splits")
    op.drop_table("expense_splits")

    op.drop_index("ix_expenses_meeting_date", table_name="expenses")
    op.drop_table("expenses")

    op.drop_index("ix_meeting_members_meeting_id", table_name="meeting_members")
    op.drop_table("meeting_members")

    op.drop_index("ix_meetings_user_id", table_name="meetings")
    op.drop_table("meetings")

    op.drop_index("ix_members_user_id", table_name="members")
    op.drop_table("members")

    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
