from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.core.money import Rupees
from app.models.ledger import PaymentMode
from app.models.staff import AttendanceStatus, PayrollStatus
from app.schemas.common import NaiveDateTime, OrmOut, PaymentModeIn, PositiveAmount, normalized_enum

AttendanceStatusIn = normalized_enum(AttendanceStatus)


class EmployeeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    phone: str | None = Field(default=None, max_length=32)
    role: str | None = Field(default=None, max_length=80)
    base_salary: Decimal = Field(default=Decimal("0"), ge=0)
    join_date: date | None = None


class EmployeeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    phone: str | None = Field(default=None, max_length=32)
    role: str | None = Field(default=None, max_length=80)
    base_salary: Decimal | None = Field(default=None, ge=0)
    join_date: date | None = None
    is_active: bool | None = None


class EmployeeStatusUpdate(BaseModel):
    is_active: bool


class EmployeeOut(OrmOut):
    id: int
    name: str
    phone: str | None
    role: str | None
    base_salary: Rupees = Field(validation_alias="base_salary_paise")
    join_date: datetime | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AdvanceCreate(BaseModel):
    employee_id: int
    amount: PositiveAmount
    date: NaiveDateTime | None = None
    payment_mode: PaymentModeIn
    paid_by: str | None = Field(default=None, max_length=120)
    note: str | None = None


class AdvanceUpdate(BaseModel):
    employee_id: int | None = None
    amount: PositiveAmount | None = None
    date: NaiveDateTime | None = None
    payment_mode: PaymentModeIn | None = None
    paid_by: str | None = Field(default=None, max_length=120)
    note: str | None = None


class AdvanceOut(OrmOut):
    id: int
    employee_id: int
    employee_name: str | None = None
    amount: Rupees = Field(validation_alias="amount_paise")
    date: datetime
    payment_mode: PaymentMode
    paid_by: str | None
    note: str | None
    related_expense_id: int | None
    created_by_user_id: int | None
    created_at: datetime


class AttendanceCreate(BaseModel):
    employee_id: int
    date: NaiveDateTime
    status: AttendanceStatusIn
    note: str | None = None


class AttendanceUpdate(BaseModel):
    date: NaiveDateTime | None = None
    status: AttendanceStatusIn | None = None
    note: str | None = None


class AttendanceOut(OrmOut):
    id: int
    employee_id: int
    employee_name: str | None = None
    date: datetime
    status: AttendanceStatus
    note: str | None
    created_at: datetime
    updated_at: datetime


class PayrollPeriodCreate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=64)
    start_date: date | None = None
    end_date: date | None = None


class PayrollPeriodOut(OrmOut):
    id: int
    name: str
    start_date: datetime
    end_date: datetime
    status: PayrollStatus
    closed_at: datetime | None
    closed_by_user_id: int | None
    created_at: datetime


class PayslipOut(OrmOut):
    id: int
    payroll_period_id: int
    employee_id: int
    employee_name: str | None = None
    gross_salary: Rupees = Field(validation_alias="gross_salary_paise")
    total_advances: Rupees = Field(validation_alias="total_advances_paise")
    unpaid_leave_days: int
    unpaid_leave_deduction: Rupees = Field(validation_alias="unpaid_leave_deduction_paise")
    allowances: Rupees = Field(validation_alias="allowances_paise")
    net_pay: Rupees = Field(validation_alias="net_pay_paise")
    generated_at: datetime
    is_paid: bool = False
    paid_at: datetime | None
    payment_mode: PaymentMode | None
    paid_by: str | None
    payment_note: str | None
    related_expense_id: int | None
    advances: list[AdvanceOut] = Field(default_factory=list)


class PayslipDetailOut(BaseModel):
    period: PayrollPeriodOut
    employee: EmployeeOut
    payslip: PayslipOut


class PayslipPayRequest(BaseModel):
    payment_mode: PaymentModeIn
    paid_by: str | None = Field(default=None, max_length=120)
    note: str | None = None
    create_expense: bool = True


class PayslipPayOut(BaseModel):
    message: str
    payslip: PayslipOut
    expense_id: int | None = None
