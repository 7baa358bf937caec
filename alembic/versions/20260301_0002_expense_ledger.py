"""versioned expense ledger

Revision ID: 20260301_0002
Revises: 20260301_0001
Create Date: 2026-03-01 10:10:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301_0002"
down_revision: Union[str, Sequence[str], None] = "20260301_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_MODES = ("CASH", "UPI", "CARD", "BANK", "OTHER")


def upgrade() -> None:
    bind = op.get_bind()
    sa.Enum(*PAYMENT_MODES, name="paymentmode").create(bind, checkfirst=True)

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("current_version_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_expenses_id"), "expenses", ["id"], unique=False)
    op.create_index(op.f("ix_expenses_current_version_id"), "expenses", ["current_version_id"], unique=False)

    op.create_table(
        "expense_versions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("expense_id", sa.Integer(), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("vendor", sa.String(length=160), nullable=True),
        sa.Column(
            "payment_mode",
            postgresql.ENUM(*PAYMENT_MODES, name="paymentmode", create_type=False),
            nullable=False,
        ),
        sa.Column("paid_by", sa.String(length=120), nullable=True),
        sa.Column("reference", sa.String(length=160), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["expense_id"], ["expenses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("expense_id", "version_number", name="uq_expense_versions_expense_number"),
    )
    op.create_index(op.f("ix_expense_versions_id"), "expense_versions", ["id"], unique=False)
    op.create_index(op.f("ix_expense_versions_expense_id"), "expense_versions", ["expense_id"], unique=False)
    op.create_index(op.f("ix_expense_versions_date"), "expense_versions", ["date"], unique=False)
    op.create_index(op.f("ix_expense_versions_category"), "expense_versions", ["category"], unique=False)
    op.create_index(op.f("ix_expense_versions_paid_by"), "expense_versions", ["paid_by"], unique=False)
    op.create_index(
        op.f("ix_expense_versions_created_by_user_id"),
        "expense_versions",
        ["created_by_user_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_expense_versions_created_by_user_id"), table_name="expense_versions")
    op.drop_index(op.f("ix_expense_versions_paid_by"), table_name="expense_versions")
    op.drop_index(op.f("ix_expense_versions_category"), table_name="expense_versions")
    op.drop_index(op.f("ix_expense_versions_date"), table_name="expense_versions")
    op.drop_index(op.f("ix_expense_versions_expense_id"), table_name="expense_versions")
    op.drop_index(op.f("ix_expense_versions_id"), table_name="expense_versions")
    op.drop_table("expense_versions")

    op.drop_index(op.f("ix_expenses_current_version_id"), table_name="expenses")
    op.drop_index(op.f("ix_expenses_id"), table_name="expenses")
    op.drop_table("expenses")

    bind = op.get_bind()
    sa.Enum(name="paymentmode").drop(bind, checkfirst=True)
