from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from app.schemas.audit import AuditLogOut
from app.schemas.common import BreakdownItemOut


class SalesSummaryOut(BaseModel):
    total: Decimal
    count: int
    average: Decimal
    by_payment_mode: list[BreakdownItemOut]
    by_receiver: list[BreakdownItemOut]
    by_category: list[BreakdownItemOut]


class ExpensesSummaryOut(BaseModel):
    total: Decimal
    count: int
    by_category: list[BreakdownItemOut]
    by_payer: list[BreakdownItemOut]
    top_vendors: list[BreakdownItemOut]


class AdvancesSummaryOut(BaseModel):
    total: Decimal
    count: int
    by_employee: list[BreakdownItemOut]


class CashFlowEntryOut(BaseModel):
    person: str
    received: Decimal
    paid: Decimal
    net: Decimal


class JobCardsSummaryOut(BaseModel):
    total: int
    by_status: dict[str, int]
    revenue: Decimal
    collected: Decimal
    pending: Decimal
    average_job_value: Decimal
    labour_total: Decimal
    parts_total: Decimal
    labour_percent: Decimal
    parts_percent: Decimal
    top_makes: list[BreakdownItemOut]
    top_customers: list[BreakdownItemOut]


class VendorsSummaryOut(BaseModel):
    active: int
    inactive: int
    total_due: Decimal
    paid_in_range: Decimal
    payments_by_status: dict[str, int]
    top_due: list[BreakdownItemOut]


class EmployeesSummaryOut(BaseModel):
    active: int
    inactive: int
    monthly_salary_liability: Decimal
    advances_by_employee: list[BreakdownItemOut]
    attendance_by_status: dict[str, int]


class InventorySummaryOut(BaseModel):
    total_items: int
    out_of_stock: int
    low_stock: int
    by_category: dict[str, int]


class DailyTrendPointOut(BaseModel):
    date: str
    sales: Decimal
    expenses: Decimal
    profit: Decimal


class KpisOut(BaseModel):
    gross_profit: Decimal
    profit_margin_percent: Decimal
    expense_ratio_percent: Decimal


class DashboardOut(BaseModel):
    period_from: datetime
    period_to: datetime
    sales: SalesSummaryOut
    expenses: ExpensesSummaryOut
    advances: AdvancesSummaryOut
    cash_flow: list[CashFlowEntryOut]
    job_cards: JobCardsSummaryOut
    vendors: VendorsSummaryOut
    employees: EmployeesSummaryOut
    inventory: InventorySummaryOut
    daily_trends: list[DailyTrendPointOut]
    recent_activity: list[AuditLogOut]
    kpis: KpisOut
