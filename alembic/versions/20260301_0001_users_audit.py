"""users and audit log

Revision ID: 20260301_0001
Revises:
Create Date: 2026-03-01 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

AUDIT_ENTITIES = (
    "EMPLOYEE",
    "ADVANCE",
    "ATTENDANCE",
    "PAYROLL_PERIOD",
    "PAYSLIP",
    "SALE",
    "EXPENSE",
    "INVENTORY_ITEM",
    "STOCK_TRANSACTION",
    "VEHICLE",
    "JOB_CARD",
    "JOB_PAYMENT",
    "JOB_CARD_TEMPLATE",
    "VENDOR",
    "VENDOR_PAYMENT",
)
AUDIT_ACTIONS = ("CREATE", "UPDATE", "DELETE", "PAY", "UNPAY", "CLOSE", "REOPEN", "GENERATE")


def upgrade() -> None:
    bind = op.get_bind()
    sa.Enum(*AUDIT_ENTITIES, name="auditentity").create(bind, checkfirst=True)
    sa.Enum(*AUDIT_ACTIONS, name="auditaction").create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column(
            "entity_type",
            postgresql.ENUM(*AUDIT_ENTITIES, name="auditentity", create_type=False),
            nullable=False,
        ),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column(
            "action",
            postgresql.ENUM(*AUDIT_ACTIONS, name="auditaction", create_type=False),
            nullable=False,
        ),
        sa.Column("summary", sa.String(length=255), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_audit_logs_created_at"), "audit_logs", ["created_at"], unique=False)
    op.create_index(op.f("ix_audit_logs_entity_type"), "audit_logs", ["entity_type"], unique=False)
    op.create_index(op.f("ix_audit_logs_id"), "audit_logs", ["id"], unique=False)
    op.create_index(op.f("ix_audit_logs_user_id"), "audit_logs", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_audit_logs_user_id"), table_name="audit_logs")
    op.drop_index(op.f("ix_audit_logs_id"), table_name="audit_logs")
    op.drop_index(op.f("ix_audit_logs_entity_type"), table_name="audit_logs")
    op.drop_index(op.f("ix_audit_logs_created_at"), table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    sa.Enum(name="auditaction").drop(bind, checkfirst=True)
    sa.Enum(name="auditentity").drop(bind, checkfirst=True)
