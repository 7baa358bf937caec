"""vendors, vendor payments and inventory

Revision ID: 20260301_0004
Revises: 20260301_0003
Create Date: 2026-03-01 10:30:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301_0004"
down_revision: Union[str, Sequence[str], None] = "20260301_0003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_MODES = ("CASH", "UPI", "CARD", "BANK", "OTHER")
VENDOR_PAYMENT_STATUSES = ("PENDING", "PARTIAL", "PAID")
STOCK_TRANSACTION_TYPES = ("IN", "OUT")


def upgrade() -> None:
    bind = op.get_bind()
    sa.Enum(*VENDOR_PAYMENT_STATUSES, name="vendorpaymentstatus").create(bind, checkfirst=True)
    sa.Enum(*STOCK_TRANSACTION_TYPES, name="stocktransactiontype").create(bind, checkfirst=True)

    op.create_table(
        "vendors",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("contact_name", sa.String(length=120), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("gst_number", sa.String(length=32), nullable=True),
        sa.Column("total_due_paise", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_vendors_id"), "vendors", ["id"], unique=False)
    op.create_index(op.f("ix_vendors_name"), "vendors", ["name"], unique=False)

    op.create_table(
        "vendor_payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("vendor_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        sa.Column("amount_paid_paise", sa.Integer(), nullable=False),
        sa.Column(
            "payment_mode",
            postgresql.ENUM(*PAYMENT_MODES, name="paymentmode", create_type=False),
            nullable=True,
        ),
        sa.Column("paid_by", sa.String(length=120), nullable=True),
        sa.Column("invoice_number", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(*VENDOR_PAYMENT_STATUSES, name="vendorpaymentstatus", create_type=False),
            nullable=False,
        ),
        sa.Column("related_expense_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["vendor_id"], ["vendors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["related_expense_id"], ["expenses.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("related_expense_id"),
    )
    op.create_index(op.f("ix_vendor_payments_id"), "vendor_payments", ["id"], unique=False)
    op.create_index(op.f("ix_vendor_payments_vendor_id"), "vendor_payments", ["vendor_id"], unique=False)
    op.create_index(op.f("ix_vendor_payments_date"), "vendor_payments", ["date"], unique=False)
    op.create_index(op.f("ix_vendor_payments_status"), "vendor_payments", ["status"], unique=False)

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("sku", sa.String(length=64), nullable=True),
        sa.Column("brand", sa.String(length=120), nullable=True),
        sa.Column("unit", sa.String(length=24), nullable=False),
        sa.Column("min_stock", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sku"),
    )
    op.create_index(op.f("ix_inventory_items_id"), "inventory_items", ["id"], unique=False)
    op.create_index(op.f("ix_inventory_items_name"), "inventory_items", ["name"], unique=False)
    op.create_index(op.f("ix_inventory_items_category"), "inventory_items", ["category"], unique=False)

    op.create_table(
        "stock_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column(
            "type",
            postgresql.ENUM(*STOCK_TRANSACTION_TYPES, name="stocktransactiontype", create_type=False),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price_paise", sa.Integer(), nullable=True),
        sa.Column("reason", sa.String(length=255), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("related_expense_id", sa.Integer(), nullable=True),
        sa.Column("created_by_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["item_id"], ["inventory_items.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["related_expense_id"], ["expenses.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stock_transactions_id"), "stock_transactions", ["id"], unique=False)
    op.create_index(op.f("ix_stock_transactions_item_id"), "stock_transactions", ["item_id"], unique=False)
    op.create_index(op.f("ix_stock_transactions_date"), "stock_transactions", ["date"], unique=False)
    op.create_index(
        op.f("ix_stock_transactions_created_by_user_id"),
        "stock_transactions",
        ["created_by_user_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_stock_transactions_created_by_user_id"), table_name="stock_transactions")
    op.drop_index(op.f("ix_stock_transactions_date"), table_name="stock_transactions")
    op.drop_index(op.f("ix_stock_transactions_item_id"), table_name="stock_transactions")
    op.drop_index(op.f("ix_stock_transactions_id"), table_name="stock_transactions")
    op.drop_table("stock_transactions")

    op.drop_index(op.f("ix_inventory_items_category"), table_name="inventory_items")
    op.drop_index(op.f("ix_inventory_items_name"), table_name="inventory_items")
    op.drop_index(op.f("ix_inventory_items_id"), table_name="inventory_items")
    op.drop_table("inventory_items")

    op.drop_index(op.f("ix_vendor_payments_status"), table_name="vendor_payments")
    op.drop_index(op.f("ix_vendor_payments_date"), table_name="vendor_payments")
    op.drop_index(op.f("ix_vendor_payments_vendor_id"), table_name="vendor_payments")
    op.drop_index(op.f("ix_vendor_payments_id"), table_name="vendor_payments")
    op.drop_table("vendor_payments")

    op.drop_index(op.f("ix_vendors_name"), table_name="vendors")
    op.drop_index(op.f("ix_vendors_id"), table_name="vendors")
    op.drop_table("vendors")

    bind = op.get_bind()
    sa.Enum(name="stocktransactiontype").drop(bind, checkfirst=True)
    sa.Enum(name="vendorpaymentstatus").drop(bind, checkfirst=True)
