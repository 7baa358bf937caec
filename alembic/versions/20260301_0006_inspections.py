"""inspection templates and job card inspections

Revision ID: 20260301_0006
Revises: 20260301_0005
Create Date: 2026-03-01 11:20:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301_0006"
down_revision: Union[str, Sequence[str], None] = "20260301_0005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TEMPLATE_KINDS = ("GENERAL_SERVICE", "AC_SERVICE", "BRAKE_JOB", "CUSTOM")
INSPECTION_TYPES = ("ARRIVAL", "DELIVERY", "OTHER")
ITEM_STATUSES = ("OK", "NOT_OK", "NA", "ATTENTION")
NEW_AUDIT_ENTITIES = ("INSPECTION_TEMPLATE", "JOB_INSPECTION")


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        with op.get_context().autocommit_block():
            for value in NEW_AUDIT_ENTITIES:
                op.execute(f"ALTER TYPE auditentity ADD VALUE IF NOT EXISTS '{value}'")

    sa.Enum(*TEMPLATE_KINDS, name="inspectiontemplatekind").create(bind, checkfirst=True)
    sa.Enum(*INSPECTION_TYPES, name="inspectiontype").create(bind, checkfirst=True)
    sa.Enum(*ITEM_STATUSES, name="inspectionitemstatus").create(bind, checkfirst=True)

    op.create_table(
        "inspection_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column(
            "kind",
            postgresql.ENUM(*TEMPLATE_KINDS, name="inspectiontemplatekind", create_type=False),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_inspection_templates_id"), "inspection_templates", ["id"], unique=False)
    op.create_index(op.f("ix_inspection_templates_kind"), "inspection_templates", ["kind"], unique=False)

    op.create_table(
        "inspection_template_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("section", sa.String(length=80), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_critical", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["template_id"], ["inspection_templates.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_inspection_template_items_id"), "inspection_template_items", ["id"], unique=False)
    op.create_index(
        op.f("ix_inspection_template_items_template_id"),
        "inspection_template_items",
        ["template_id"],
        unique=False,
    )

    op.create_table(
        "job_inspections",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_card_id", sa.Integer(), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=160), nullable=True),
        sa.Column(
            "type",
            postgresql.ENUM(*INSPECTION_TYPES, name="inspectiontype", create_type=False),
            nullable=True,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["job_card_id"], ["job_cards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["template_id"], ["inspection_templates.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_inspections_id"), "job_inspections", ["id"], unique=False)
    op.create_index(op.f("ix_job_inspections_job_card_id"), "job_inspections", ["job_card_id"], unique=False)

    op.create_table(
        "job_inspection_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_inspection_id", sa.Integer(), nullable=False),
        sa.Column("template_item_id", sa.Integer(), nullable=True),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("section", sa.String(length=80), nullable=True),
        sa.Column("is_critical", sa.Boolean(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(*ITEM_STATUSES, name="inspectionitemstatus", create_type=False),
            nullable=False,
        ),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["job_inspection_id"], ["job_inspections.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["template_item_id"], ["inspection_template_items.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_inspection_items_id"), "job_inspection_items", ["id"], unique=False)
    op.create_index(
        op.f("ix_job_inspection_items_job_inspection_id"),
        "job_inspection_items",
        ["job_inspection_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_job_inspection_items_job_inspection_id"), table_name="job_inspection_items")
    op.drop_index(op.f("ix_job_inspection_items_id"), table_name="job_inspection_items")
    op.drop_table("job_inspection_items")

    op.drop_index(op.f("ix_job_inspections_job_card_id"), table_name="job_inspections")
    op.drop_index(op.f("ix_job_inspections_id"), table_name="job_inspections")
    op.drop_table("job_inspections")

    op.drop_index(op.f("ix_inspection_template_items_template_id"), table_name="inspection_template_items")
    op.drop_index(op.f("ix_inspection_template_items_id"), table_name="inspection_template_items")
    op.drop_table("inspection_template_items")

    op.drop_index(op.f("ix_inspection_templates_kind"), table_name="inspection_templates")
    op.drop_index(op.f("ix_inspection_templates_id"), table_name="inspection_templates")
    op.drop_table("inspection_templates")

    bind = op.get_bind()
    sa.Enum(name="inspectionitemstatus").drop(bind, checkfirst=True)
    sa.Enum(name="inspectiontype").drop(bind, checkfirst=True)
    sa.Enum(name="inspectiontemplatekind").drop(bind, checkfirst=True)
    # PostgreSQL cannot drop enum values; INSPECTION_TEMPLATE and JOB_INSPECTION stay on auditentity
