import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.staff import Advance, Attendance, AttendanceStatus, Employee, PayrollPeriod, Payslip

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayslipFigures:
    gross_salary_paise: int
    total_advances_paise: int
    unpaid_leave_days: int
    unpaid_leave_deduction_paise: int
    allowances_paise: int
    net_pay_paise: int


def compute_payslip(
    base_salary_paise: int,
    total_advances_paise: int,
    unpaid_leave_days: int,
    allowances_paise: int = 0,
    days_per_month: int | None = None,
) -> PayslipFigures:
    days = days_per_month or settings.payroll_days_per_month
    per_day_paise = base_salary_paise // days
    deduction = unpaid_leave_days * per_day_paise
    net = max(0, base_salary_paise - total_advances_paise - deduction + allowances_paise)
    return PayslipFigures(
        gross_salary_paise=base_salary_paise,
        total_advances_paise=total_advances_paise,
        unpaid_leave_days=unpaid_leave_days,
        unpaid_leave_deduction_paise=deduction,
        allowances_paise=allowances_paise,
        net_pay_paise=net,
    )


def advances_in_range(db: Session, employee_id: int, start: datetime, end: datetime) -> list[Advance]:
    return list(
        db.scalars(
            select(Advance)
            .where(
                Advance.employee_id == employee_id,
                Advance.date >= start,
                Advance.date <= end,
            )
            .order_by(Advance.date.asc())
        ).all()
    )


def _advance_totals(db: Session, start: datetime, end: datetime) -> dict[int, int]:
    rows = db.execute(
        select(Advance.employee_id, func.coalesce(func.sum(Advance.amount_paise), 0))
        .where(Advance.date >= start, Advance.date <= end)
        .group_by(Advance.employee_id)
    ).all()
    return {int(employee_id): int(total) for employee_id, total in rows}


def _unpaid_leave_counts(db: Session, start: datetime, end: datetime) -> dict[int, int]:
    rows = db.execute(
        select(Attendance.employee_id, func.count(Attendance.id))
        .where(
            Attendance.status == AttendanceStatus.UNPAID_LEAVE,
            Attendance.date >= start,
            Attendance.date <= end,
        )
        .group_by(Attendance.employee_id)
    ).all()
    return {int(employee_id): int(count) for employee_id, count in rows}


def generate_payslips(db: Session, period: PayrollPeriod) -> list[Payslip]:
    """Upsert one payslip per active, salaried employee. Paid payslips are kept as is."""
    employees = db.scalars(
        select(Employee).where(Employee.is_active.is_(True), Employee.base_salary_paise > 0).order_by(Employee.name)
    ).all()
    advances = _advance_totals(db, period.start_date, period.end_date)
    unpaid_days = _unpaid_leave_counts(db, period.start_date, period.end_date)
    existing = {
        payslip.employee_id: payslip
        for payslip in db.scalars(select(Payslip).where(Payslip.payroll_period_id == period.id)).all()
    }

    payslips: list[Payslip] = []
    skipped_paid = 0
    for employee in employees:
        payslip = existing.get(employee.id)
        if payslip is not None and payslip.paid_at is not None:
            skipped_paid += 1
            payslips.append(payslip)
            continue

        figures = compute_payslip(
            employee.base_salary_paise,
            advances.get(employee.id, 0),
            unpaid_days.get(employee.id, 0),
        )
        if payslip is None:
            payslip = Payslip(payroll_period_id=period.id, employee_id=employee.id)
            db.add(payslip)
        payslip.gross_salary_paise = figures.gross_salary_paise
        payslip.total_advances_paise = figures.total_advances_paise
        payslip.unpaid_leave_days = figures.unpaid_leave_days
        payslip.unpaid_leave_deduction_paise = figures.unpaid_leave_deduction_paise
        payslip.allowances_paise = figures.allowances_paise
        payslip.net_pay_paise = figures.net_pay_paise
        payslip.generated_at = datetime.utcnow()
        payslips.append(payslip)

    db.flush()
    logger.info(
        "Generated %d payslips for period %s (%d already paid)",
        len(payslips) - skipped_paid,
        period.name,
        skipped_paid,
    )
    return payslips
