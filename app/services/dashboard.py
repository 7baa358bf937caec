"""Dashboard snapshot over every ledger for one date range.

Everything is summed in paise and converted once, when the response
objects are built.
"""

from collections import defaultdict
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.money import from_paise, percent
from app.models.audit import AuditLog
from app.models.garage import JobCard, Vehicle
from app.models.inventory import InventoryItem
from app.models.ledger import Expense, ExpenseVersion, Sale, SaleVersion
from app.models.staff import Advance, Attendance, Employee
from app.models.vendor import Vendor, VendorPayment
from app.schemas.audit import AuditLogOut
from app.schemas.common import BreakdownItemOut
from app.schemas.dashboard import (
    AdvancesSummaryOut,
    CashFlowEntryOut,
    DailyTrendPointOut,
    DashboardOut,
    EmployeesSummaryOut,
    ExpensesSummaryOut,
    InventorySummaryOut,
    JobCardsSummaryOut,
    KpisOut,
    SalesSummaryOut,
    VendorsSummaryOut,
)
from app.services.inventory import stock_levels
from app.services.reconciliation import EMPLOYEE_ADVANCE_CATEGORY

UNTRACKED = "Untracked"
GENERAL = "General"
UNKNOWN = "Unknown"


class _Tally:
    """Running amount and row count per label."""

    def __init__(self) -> None:
        self.amounts: dict[str, int] = defaultdict(int)
        self.counts: dict[str, int] = defaultdict(int)

    def add(self, label: str, amount_paise: int) -> None:
        self.amounts[label] += amount_paise
        self.counts[label] += 1

    def total(self) -> int:
        return sum(self.amounts.values())

    def breakdown(self, limit: int | None = None) -> list[BreakdownItemOut]:
        whole = self.total()
        ranked = sorted(self.amounts.items(), key=lambda item: (-item[1], item[0]))
        if limit is not None:
            ranked = ranked[:limit]
        return [
            BreakdownItemOut(
                label=label,
                amount=from_paise(amount),
                count=self.counts[label],
                share_percent=percent(amount, whole),
            )
            for label, amount in ranked
        ]


def current_sale_rows(db: Session, start: datetime, end: datetime):
    return db.execute(
        select(
            SaleVersion.date,
            SaleVersion.amount_paise,
            SaleVersion.payment_mode,
            SaleVersion.received_by,
            SaleVersion.category,
        )
        .join(Sale, Sale.current_version_id == SaleVersion.id)
        .where(SaleVersion.date >= start, SaleVersion.date <= end)
    ).all()


def current_expense_rows(db: Session, start: datetime, end: datetime):
    return db.execute(
        select(
            ExpenseVersion.date,
            ExpenseVersion.amount_paise,
            ExpenseVersion.category,
            ExpenseVersion.vendor,
            ExpenseVersion.paid_by,
        )
        .join(Expense, Expense.current_version_id == ExpenseVersion.id)
        .where(ExpenseVersion.date >= start, ExpenseVersion.date <= end)
    ).all()


def build_dashboard(db: Session, start: datetime, end: datetime, recent_limit: int = 20) -> DashboardOut:
    daily_sales: dict[str, int] = defaultdict(int)
    daily_expenses: dict[str, int] = defaultdict(int)
    received: dict[str, int] = defaultdict(int)
    paid: dict[str, int] = defaultdict(int)

    # sales
    by_mode, by_receiver, by_sale_category = _Tally(), _Tally(), _Tally()
    sale_rows = current_sale_rows(db, start, end)
    for day, amount, mode, receiver, category in sale_rows:
        by_mode.add(mode.value if mode else UNKNOWN, amount)
        by_receiver.add(receiver or UNTRACKED, amount)
        by_sale_category.add(category or GENERAL, amount)
        daily_sales[day.strftime("%Y-%m-%d")] += amount
        received[receiver or UNTRACKED] += amount
    sales_total = by_mode.total()
    sales_count = len(sale_rows)

    # expenses; advances are money out but not an operating cost
    by_expense_category, by_payer, by_vendor = _Tally(), _Tally(), _Tally()
    expense_count = 0
    for day, amount, category, vendor, paid_by in current_expense_rows(db, start, end):
        paid[paid_by or UNTRACKED] += amount
        if category == EMPLOYEE_ADVANCE_CATEGORY:
            continue
        expense_count += 1
        by_expense_category.add(category, amount)
        by_payer.add(paid_by or UNTRACKED, amount)
        if vendor:
            by_vendor.add(vendor, amount)
        daily_expenses[day.strftime("%Y-%m-%d")] += amount
    expenses_total = by_expense_category.total()

    advances = _advances_summary(db, start, end)

    people = sorted(set(received) | set(paid))
    cash_flow = [
        CashFlowEntryOut(
            person=person,
            received=from_paise(received.get(person, 0)),
            paid=from_paise(paid.get(person, 0)),
            net=from_paise(received.get(person, 0) - paid.get(person, 0)),
        )
        for person in people
    ]

    daily_trends = [
        DailyTrendPointOut(
            date=day,
            sales=from_paise(daily_sales.get(day, 0)),
            expenses=from_paise(daily_expenses.get(day, 0)),
            profit=from_paise(daily_sales.get(day, 0) - daily_expenses.get(day, 0)),
        )
        for day in sorted(set(daily_sales) | set(daily_expenses))
    ]

    gross_profit = sales_total - expenses_total
    recent = db.scalars(select(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(recent_limit))

    return DashboardOut(
        period_from=start,
        period_to=end,
        sales=SalesSummaryOut(
            total=from_paise(sales_total),
            count=sales_count,
            average=from_paise(sales_total // sales_count if sales_count else 0),
            by_payment_mode=by_mode.breakdown(),
            by_receiver=by_receiver.breakdown(),
            by_category=by_sale_category.breakdown(),
        ),
        expenses=ExpensesSummaryOut(
            total=from_paise(expenses_total),
            count=expense_count,
            by_category=by_expense_category.breakdown(),
            by_payer=by_payer.breakdown(),
            top_vendors=by_vendor.breakdown(limit=10),
        ),
        advances=AdvancesSummaryOut(
            total=from_paise(advances.total()),
            count=sum(advances.counts.values()),
            by_employee=advances.breakdown(),
        ),
        cash_flow=cash_flow,
        job_cards=_job_cards_summary(db, start, end),
        vendors=_vendors_summary(db, start, end),
        employees=_employees_summary(db, start, end, advances),
        inventory=_inventory_summary(db),
        daily_trends=daily_trends,
        recent_activity=[AuditLogOut.model_validate(entry) for entry in recent],
        kpis=KpisOut(
            gross_profit=from_paise(gross_profit),
            profit_margin_percent=percent(gross_profit, sales_total),
            expense_ratio_percent=percent(expenses_total, sales_total),
        ),
    )


def _advances_summary(db: Session, start: datetime, end: datetime) -> _Tally:
    tally = _Tally()
    rows = db.execute(
        select(Employee.name, Advance.amount_paise)
        .join(Employee, Employee.id == Advance.employee_id)
        .where(Advance.date >= start, Advance.date <= end)
    ).all()
    for name, amount in rows:
        tally.add(name, amount)
    return tally


def _job_cards_summary(db: Session, start: datetime, end: datetime) -> JobCardsSummaryOut:
    rows = db.execute(
        select(
            JobCard.status,
            JobCard.customer_name,
            JobCard.labour_total_paise,
            JobCard.parts_total_paise,
            JobCard.grand_total_paise,
            JobCard.advance_paid_paise,
            JobCard.pending_amount_paise,
            Vehicle.make,
        )
        .join(Vehicle, Vehicle.id == JobCard.vehicle_id)
        .where(JobCard.in_date >= start, JobCard.in_date <= end)
    ).all()

    by_status: dict[str, int] = defaultdict(int)
    makes, customers = _Tally(), _Tally()
    labour = parts = revenue = collected = pending = 0
    for status, customer, labour_paise, parts_paise, grand, advance_paid, pending_paise, make in rows:
        by_status[status.value] += 1
        labour += labour_paise
        parts += parts_paise
        revenue += grand
        collected += advance_paid
        pending += pending_paise
        makes.add(make or UNKNOWN, grand)
        customers.add(customer, grand)

    composition = labour + parts
    return JobCardsSummaryOut(
        total=len(rows),
        by_status=dict(by_status),
        revenue=from_paise(revenue),
        collected=from_paise(collected),
        pending=from_paise(pending),
        average_job_value=from_paise(revenue // len(rows) if rows else 0),
        labour_total=from_paise(labour),
        parts_total=from_paise(parts),
        labour_percent=percent(labour, composition),
        parts_percent=percent(parts, composition),
        top_makes=makes.breakdown(limit=5),
        top_customers=customers.breakdown(limit=10),
    )


def _vendors_summary(db: Session, start: datetime, end: datetime) -> VendorsSummaryOut:
    vendors = db.scalars(select(Vendor)).all()
    payments = db.scalars(select(VendorPayment).where(VendorPayment.date >= start, VendorPayment.date <= end)).all()

    by_status: dict[str, int] = defaultdict(int)
    for payment in payments:
        by_status[payment.status.value] += 1

    dues = _Tally()
    for vendor in vendors:
        if vendor.total_due_paise > 0:
            dues.add(vendor.name, vendor.total_due_paise)

    return VendorsSummaryOut(
        active=sum(1 for vendor in vendors if vendor.is_active),
        inactive=sum(1 for vendor in vendors if not vendor.is_active),
        total_due=from_paise(sum(vendor.total_due_paise for vendor in vendors)),
        paid_in_range=from_paise(sum(payment.amount_paid_paise for payment in payments)),
        payments_by_status=dict(by_status),
        top_due=dues.breakdown(limit=5),
    )


def _employees_summary(db: Session, start: datetime, end: datetime, advances: _Tally) -> EmployeesSummaryOut:
    counts = dict(db.execute(select(Employee.is_active, func.count(Employee.id)).group_by(Employee.is_active)).all())
    liability = db.scalar(
        select(func.coalesce(func.sum(Employee.base_salary_paise), 0)).where(Employee.is_active.is_(True))
    )
    attendance = db.execute(
        select(Attendance.status, func.count(Attendance.id))
        .where(Attendance.date >= start, Attendance.date <= end)
        .group_by(Attendance.status)
    ).all()

    return EmployeesSummaryOut(
        active=int(counts.get(True, 0)),
        inactive=int(counts.get(False, 0)),
        monthly_salary_liability=from_paise(int(liability or 0)),
        advances_by_employee=advances.breakdown(),
        attendance_by_status={status.value: int(count) for status, count in attendance},
    )


def _inventory_summary(db: Session) -> InventorySummaryOut:
    items = db.scalars(select(InventoryItem)).all()
    levels = stock_levels(db)

    out_of_stock = low_stock = 0
    by_category: dict[str, int] = defaultdict(int)
    for item in items:
        stock = levels.get(item.id, 0)
        if stock <= 0:
            out_of_stock += 1
        elif stock <= item.min_stock:
            low_stock += 1
        by_category[item.category or GENERAL] += 1

    return InventorySummaryOut(
        total_items=len(items),
        out_of_stock=out_of_stock,
        low_stock=low_stock,
        by_category=dict(by_category),
    )
