"""vehicles, job cards, templates and versioned sales

Revision ID: 20260301_0005
Revises: 20260301_0004
Create Date: 2026-03-01 10:40:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301_0005"
down_revision: Union[str, Sequence[str], None] = "20260301_0004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_MODES = ("CASH", "UPI", "CARD", "BANK", "OTHER")
JOB_STATUSES = ("OPEN", "IN_PROGRESS", "READY", "DELIVERED", "CANCELLED")
JOB_LINE_TYPES = ("LABOUR", "PART", "OTHER")
JOB_PAYMENT_TYPES = ("ADVANCE", "FINAL", "REFUND")
TEMPLATE_CATEGORIES = ("WASHING", "DECOR", "MECHANICAL", "DENTING_PAINTING", "GENERAL", "CUSTOM")


def _payment_mode() -> postgresql.ENUM:
    return postgresql.ENUM(*PAYMENT_MODES, name="paymentmode", create_type=False)


def _line_type() -> postgresql.ENUM:
    return postgresql.ENUM(*JOB_LINE_TYPES, name="joblinetype", create_type=False)


def _template_category() -> postgresql.ENUM:
    return postgresql.ENUM(*TEMPLATE_CATEGORIES, name="jobcardtemplatecategory", create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    sa.Enum(*JOB_STATUSES, name="jobstatus").create(bind, checkfirst=True)
    sa.Enum(*JOB_LINE_TYPES, name="joblinetype").create(bind, checkfirst=True)
    sa.Enum(*JOB_PAYMENT_TYPES, name="jobpaymenttype").create(bind, checkfirst=True)
    sa.Enum(*TEMPLATE_CATEGORIES, name="jobcardtemplatecategory").create(bind, checkfirst=True)

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("reg_number", sa.String(length=32), nullable=False),
        sa.Column("make", sa.String(length=80), nullable=True),
        sa.Column("model", sa.String(length=80), nullable=True),
        sa.Column("variant", sa.String(length=80), nullable=True),
        sa.Column("fuel_type", sa.String(length=32), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("color", sa.String(length=40), nullable=True),
        sa.Column("owner_name", sa.String(length=120), nullable=False),
        sa.Column("owner_phone", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_vehicles_id"), "vehicles", ["id"], unique=False)
    op.create_index(op.f("ix_vehicles_reg_number"), "vehicles", ["reg_number"], unique=True)

    op.create_table(
        "job_cards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_number", sa.String(length=32), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(length=120), nullable=False),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("in_date", sa.DateTime(), nullable=False),
        sa.Column("promised_date", sa.DateTime(), nullable=True),
        sa.Column("out_date", sa.DateTime(), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(*JOB_STATUSES, name="jobstatus", create_type=False),
            nullable=False,
        ),
        sa.Column("odometer", sa.Integer(), nullable=True),
        sa.Column("fuel_level", sa.String(length=32), nullable=True),
        sa.Column("complaints", sa.Text(), nullable=True),
        sa.Column("diagnostics", sa.Text(), nullable=True),
        sa.Column("recommendations", sa.Text(), nullable=True),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("labour_total_paise", sa.Integer(), nullable=False),
        sa.Column("parts_total_paise", sa.Integer(), nullable=False),
        sa.Column("discount_paise", sa.Integer(), nullable=False),
        sa.Column("tax_paise", sa.Integer(), nullable=False),
        sa.Column("grand_total_paise", sa.Integer(), nullable=False),
        sa.Column("advance_paid_paise", sa.Integer(), nullable=False),
        sa.Column("pending_amount_paise", sa.Integer(), nullable=False),
        sa.Column("final_payment_mode", _payment_mode(), nullable=True),
        sa.Column("invoice_number", sa.String(length=64), nullable=True),
        sa.Column("template_used", _template_category(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_cards_id"), "job_cards", ["id"], unique=False)
    op.create_index(op.f("ix_job_cards_job_number"), "job_cards", ["job_number"], unique=True)
    op.create_index(op.f("ix_job_cards_vehicle_id"), "job_cards", ["vehicle_id"], unique=False)
    op.create_index(op.f("ix_job_cards_in_date"), "job_cards", ["in_date"], unique=False)
    op.create_index(op.f("ix_job_cards_status"), "job_cards", ["status"], unique=False)

    op.create_table(
        "job_line_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_card_id", sa.Integer(), nullable=False),
        sa.Column("line_type", _line_type(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit_price_paise", sa.Integer(), nullable=False),
        sa.Column("total_paise", sa.Integer(), nullable=False),
        sa.Column("inventory_item_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["job_card_id"], ["job_cards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inventory_item_id"], ["inventory_items.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_line_items_id"), "job_line_items", ["id"], unique=False)
    op.create_index(op.f("ix_job_line_items_job_card_id"), "job_line_items", ["job_card_id"], unique=False)

    op.create_table(
        "job_payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_card_id", sa.Integer(), nullable=False),
        sa.Column(
            "payment_type",
            postgresql.ENUM(*JOB_PAYMENT_TYPES, name="jobpaymenttype", create_type=False),
            nullable=False,
        ),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("payment_mode", _payment_mode(), nullable=False),
        sa.Column("received_by", sa.String(length=120), nullable=True),
        sa.Column("reference", sa.String(length=160), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["job_card_id"], ["job_cards.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_payments_id"), "job_payments", ["id"], unique=False)
    op.create_index(op.f("ix_job_payments_job_card_id"), "job_payments", ["job_card_id"], unique=False)

    op.create_table(
        "job_card_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("category", _template_category(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_card_templates_id"), "job_card_templates", ["id"], unique=False)
    op.create_index(op.f("ix_job_card_templates_category"), "job_card_templates", ["category"], unique=False)

    op.create_table(
        "job_card_template_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("line_type", _line_type(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit_price_paise", sa.Integer(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("inventory_item_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["template_id"], ["job_card_templates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inventory_item_id"], ["inventory_items.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_card_template_items_id"), "job_card_template_items", ["id"], unique=False)
    op.create_index(
        op.f("ix_job_card_template_items_template_id"),
        "job_card_template_items",
        ["template_id"],
        unique=False,
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("current_version_id", sa.Integer(), nullable=True),
        sa.Column("job_card_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["job_card_id"], ["job_cards.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sales_id"), "sales", ["id"], unique=False)
    op.create_index(op.f("ix_sales_current_version_id"), "sales", ["current_version_id"], unique=False)
    op.create_index(op.f("ix_sales_job_card_id"), "sales", ["job_card_id"], unique=False)

    op.create_table(
        "sale_versions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("payment_mode", _payment_mode(), nullable=False),
        sa.Column("received_by", sa.String(length=120), nullable=True),
        sa.Column("reference", sa.String(length=160), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sale_id", "version_number", name="uq_sale_versions_sale_number"),
    )
    op.create_index(op.f("ix_sale_versions_id"), "sale_versions", ["id"], unique=False)
    op.create_index(op.f("ix_sale_versions_sale_id"), "sale_versions", ["sale_id"], unique=False)
    op.create_index(op.f("ix_sale_versions_date"), "sale_versions", ["date"], unique=False)
    op.create_index(op.f("ix_sale_versions_category"), "sale_versions", ["category"], unique=False)
    op.create_index(op.f("ix_sale_versions_received_by"), "sale_versions", ["received_by"], unique=False)
    op.create_index(
        op.f("ix_sale_versions_created_by_user_id"),
        "sale_versions",
        ["created_by_user_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_sale_versions_created_by_user_id"), table_name="sale_versions")
    op.drop_index(op.f("ix_sale_versions_received_by"), table_name="sale_versions")
    op.drop_index(op.f("ix_sale_versions_category"), table_name="sale_versions")
    op.drop_index(op.f("ix_sale_versions_date"), table_name="sale_versions")
    op.drop_index(op.f("ix_sale_versions_sale_id"), table_name="sale_versions")
    op.drop_index(op.f("ix_sale_versions_id"), table_name="sale_versions")
    op.drop_table("sale_versions")

    op.drop_index(op.f("ix_sales_job_card_id"), table_name="sales")
    op.drop_index(op.f("ix_sales_current_version_id"), table_name="sales")
    op.drop_index(op.f("ix_sales_id"), table_name="sales")
    op.drop_table("sales")

    op.drop_index(op.f("ix_job_card_template_items_template_id"), table_name="job_card_template_items")
    op.drop_index(op.f("ix_job_card_template_items_id"), table_name="job_card_template_items")
    op.drop_table("job_card_template_items")

    op.drop_index(op.f("ix_job_card_templates_category"), table_name="job_card_templates")
    op.drop_index(op.f("ix_job_card_templates_id"), table_name="job_card_templates")
    op.drop_table("job_card_templates")

    op.drop_index(op.f("ix_job_payments_job_card_id"), table_name="job_payments")
    op.drop_index(op.f("ix_job_payments_id"), table_name="job_payments")
    op.drop_table("job_payments")

    op.drop_index(op.f("ix_job_line_items_job_card_id"), table_name="job_line_items")
    op.drop_index(op.f("ix_job_line_items_id"), table_name="job_line_items")
    op.drop_table("job_line_items")

    op.drop_index(op.f("ix_job_cards_status"), table_name="job_cards")
    op.drop_index(op.f("ix_job_cards_in_date"), table_name="job_cards")
    op.drop_index(op.f("ix_job_cards_vehicle_id"), table_name="job_cards")
    op.drop_index(op.f("ix_job_cards_job_number"), table_name="job_cards")
    op.drop_index(op.f("ix_job_cards_id"), table_name="job_cards")
    op.drop_table("job_cards")

    op.drop_index(op.f("ix_vehicles_reg_number"), table_name="vehicles")
    op.drop_index(op.f("ix_vehicles_id"), table_name="vehicles")
    op.drop_table("vehicles")

    bind = op.get_bind()
    sa.Enum(name="jobcardtemplatecategory").drop(bind, checkfirst=True)
    sa.Enum(name="jobpaymenttype").drop(bind, checkfirst=True)
    sa.Enum(name="joblinetype").drop(bind, checkfirst=True)
    sa.Enum(name="jobstatus").drop(bind, checkfirst=True)
