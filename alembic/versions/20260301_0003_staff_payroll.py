"""employees, advances, attendance and payroll

Revision ID: 20260301_0003
Revises: 20260301_0002
Create Date: 2026-03-01 10:20:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301_0003"
down_revision: Union[str, Sequence[str], None] = "20260301_0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_MODES = ("CASH", "UPI", "CARD", "BANK", "OTHER")
ATTENDANCE_STATUSES = ("PRESENT", "ABSENT", "UNPAID_LEAVE", "PAID_LEAVE")
PAYROLL_STATUSES = ("OPEN", "CLOSED")


def _payment_mode() -> postgresql.ENUM:
    return postgresql.ENUM(*PAYMENT_MODES, name="paymentmode", create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    sa.Enum(*ATTENDANCE_STATUSES, name="attendancestatus").create(bind, checkfirst=True)
    sa.Enum(*PAYROLL_STATUSES, name="payrollstatus").create(bind, checkfirst=True)

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("role", sa.String(length=80), nullable=True),
        sa.Column("base_salary_paise", sa.Integer(), nullable=False),
        sa.Column("join_date", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_employees_id"), "employees", ["id"], unique=False)
    op.create_index(op.f("ix_employees_name"), "employees", ["name"], unique=False)
    op.create_index(op.f("ix_employees_is_active"), "employees", ["is_active"], unique=False)

    op.create_table(
        "advances",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        sa.Column("payment_mode", _payment_mode(), nullable=False),
        sa.Column("paid_by", sa.String(length=120), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("related_expense_id", sa.Integer(), nullable=True),
        sa.Column("created_by_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["related_expense_id"], ["expenses.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("related_expense_id"),
    )
    op.create_index(op.f("ix_advances_id"), "advances", ["id"], unique=False)
    op.create_index(op.f("ix_advances_employee_id"), "advances", ["employee_id"], unique=False)
    op.create_index(op.f("ix_advances_date"), "advances", ["date"], unique=False)
    op.create_index(op.f("ix_advances_created_by_user_id"), "advances", ["created_by_user_id"], unique=False)

    op.create_table(
        "attendance",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(*ATTENDANCE_STATUSES, name="attendancestatus", create_type=False),
            nullable=False,
        ),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
    )
    op.create_index(op.f("ix_attendance_id"), "attendance", ["id"], unique=False)
    op.create_index(op.f("ix_attendance_employee_id"), "attendance", ["employee_id"], unique=False)
    op.create_index(op.f("ix_attendance_date"), "attendance", ["date"], unique=False)
    op.create_index(op.f("ix_attendance_status"), "attendance", ["status"], unique=False)

    op.create_table(
        "payroll_periods",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(*PAYROLL_STATUSES, name="payrollstatus", create_type=False),
            nullable=False,
        ),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        sa.Column("closed_by_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["closed_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payroll_periods_id"), "payroll_periods", ["id"], unique=False)
    op.create_index(op.f("ix_payroll_periods_name"), "payroll_periods", ["name"], unique=True)

    op.create_table(
        "payslips",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("payroll_period_id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("gross_salary_paise", sa.Integer(), nullable=False),
        sa.Column("total_advances_paise", sa.Integer(), nullable=False),
        sa.Column("unpaid_leave_days", sa.Integer(), nullable=False),
        sa.Column("unpaid_leave_deduction_paise", sa.Integer(), nullable=False),
        sa.Column("allowances_paise", sa.Integer(), nullable=False),
        sa.Column("net_pay_paise", sa.Integer(), nullable=False),
        sa.Column("generated_at", sa.DateTime(), nullable=False),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("payment_mode", _payment_mode(), nullable=True),
        sa.Column("paid_by", sa.String(length=120), nullable=True),
        sa.Column("payment_note", sa.Text(), nullable=True),
        sa.Column("related_expense_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["payroll_period_id"], ["payroll_periods.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["related_expense_id"], ["expenses.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("payroll_period_id", "employee_id", name="uq_payslips_period_employee"),
        sa.UniqueConstraint("related_expense_id"),
    )
    op.create_index(op.f("ix_payslips_id"), "payslips", ["id"], unique=False)
    op.create_index(op.f("ix_payslips_payroll_period_id"), "payslips", ["payroll_period_id"], unique=False)
    op.create_index(op.f("ix_payslips_employee_id"), "payslips", ["employee_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_payslips_employee_id"), table_name="payslips")
    op.drop_index(op.f("ix_payslips_payroll_period_id"), table_name="payslips")
    op.drop_index(op.f("ix_payslips_id"), table_name="payslips")
    op.drop_table("payslips")

    op.drop_index(op.f("ix_payroll_periods_name"), table_name="payroll_periods")
    op.drop_index(op.f("ix_payroll_periods_id"), table_name="payroll_periods")
    op.drop_table("payroll_periods")

    op.drop_index(op.f("ix_attendance_status"), table_name="attendance")
    op.drop_index(op.f("ix_attendance_date"), table_name="attendance")
    op.drop_index(op.f("ix_attendance_employee_id"), table_name="attendance")
    op.drop_index(op.f("ix_attendance_id"), table_name="attendance")
    op.drop_table("attendance")

    op.drop_index(op.f("ix_advances_created_by_user_id"), table_name="advances")
    op.drop_index(op.f("ix_advances_date"), table_name="advances")
    op.drop_index(op.f("ix_advances_employee_id"), table_name="advances")
    op.drop_index(op.f("ix_advances_id"), table_name="advances")
    op.drop_table("advances")

    op.drop_index(op.f("ix_employees_is_active"), table_name="employees")
    op.drop_index(op.f("ix_employees_name"), table_name="employees")
    op.drop_index(op.f("ix_employees_id"), table_name="employees")
    op.drop_table("employees")

    bind = op.get_bind()
    sa.Enum(name="payrollstatus").drop(bind, checkfirst=True)
    sa.Enum(name="attendancestatus").drop(bind, checkfirst=True)
