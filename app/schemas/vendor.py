from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.core.money import Rupees
from app.models.ledger import PaymentMode
from app.models.vendor import VendorPaymentStatus
from app.schemas.common import NaiveDateTime, OrmOut, PaymentModeIn, PositiveAmount


class VendorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    contact_name: str | None = Field(default=None, max_length=120)
    phone: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=320)
    address: str | None = None
    gst_number: str | None = Field(default=None, max_length=32)


class VendorUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    contact_name: str | None = Field(default=None, max_length=120)
    phone: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=320)
    address: str | None = None
    gst_number: str | None = Field(default=None, max_length=32)
    is_active: bool | None = None


class VendorOut(OrmOut):
    id: int
    name: str
    contact_name: str | None
    phone: str | None
    email: str | None
    address: str | None
    gst_number: str | None
    total_due: Rupees = Field(validation_alias="total_due_paise")
    is_active: bool
    created_at: datetime
    updated_at: datetime


class VendorPaymentCreate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    payment_mode: PaymentModeIn | None = None
    paid_by: str | None = Field(default=None, max_length=120)
    invoice_number: str | None = Field(default=None, max_length=64)
    description: str | None = None
    due_date: NaiveDateTime | None = None
    create_expense: bool = True


class VendorPaymentUpdate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0)
    payment_mode: PaymentModeIn | None = None
    paid_by: str | None = Field(default=None, max_length=120)
    invoice_number: str | None = Field(default=None, max_length=64)
    description: str | None = None
    due_date: NaiveDateTime | None = None
    create_expense: bool = True


class VendorPaymentOut(OrmOut):
    id: int
    vendor_id: int
    date: datetime
    amount: Rupees = Field(validation_alias="amount_paise")
    amount_paid: Rupees = Field(validation_alias="amount_paid_paise")
    payment_mode: PaymentMode | None
    paid_by: str | None
    invoice_number: str | None
    description: str | None
    due_date: datetime | None
    status: VendorPaymentStatus
    related_expense_id: int | None
    created_at: datetime
    updated_at: datetime


class VendorSummaryOut(BaseModel):
    total_billed: Decimal
    total_paid: Decimal
    total_due: Decimal
    pending_payments: int


class VendorDetailOut(VendorOut):
    payments: list[VendorPaymentOut] = Field(default_factory=list)
    summary: VendorSummaryOut | None = None
