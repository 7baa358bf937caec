from datetime import datetime

from pydantic import BaseModel, Field

from app.core.money import Rupees
from app.models.ledger import PaymentMode
from app.schemas.common import NaiveDateTime, OrmOut, PaymentModeIn, PositiveAmount


class ExpenseCreate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount
    category: str = Field(min_length=1, max_length=120)
    vendor: str | None = Field(default=None, max_length=160)
    payment_mode: PaymentModeIn
    paid_by: str | None = Field(default=None, max_length=120)
    reference: str | None = Field(default=None, max_length=160)
    note: str | None = None


class ExpenseUpdate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount | None = None
    category: str | None = Field(default=None, min_length=1, max_length=120)
    vendor: str | None = Field(default=None, max_length=160)
    payment_mode: PaymentModeIn | None = None
    paid_by: str | None = Field(default=None, max_length=120)
    reference: str | None = Field(default=None, max_length=160)
    note: str | None = None


class ExpenseVersionOut(OrmOut):
    id: int
    expense_id: int
    version_number: int
    date: datetime
    amount: Rupees = Field(validation_alias="amount_paise")
    category: str
    vendor: str | None
    payment_mode: PaymentMode
    paid_by: str | None
    reference: str | None
    note: str | None
    created_by_user_id: int | None
    created_at: datetime


class ExpenseOut(OrmOut):
    id: int
    current_version_id: int | None
    version_number: int
    date: datetime
    amount: Rupees = Field(validation_alias="amount_paise")
    category: str
    vendor: str | None
    payment_mode: PaymentMode
    paid_by: str | None
    reference: str | None
    note: str | None
    created_at: datetime
    updated_at: datetime


class ExpenseDetailOut(ExpenseOut):
    versions: list[ExpenseVersionOut]


class SaleCreate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount
    category: str | None = Field(default=None, max_length=120)
    payment_mode: PaymentModeIn
    received_by: str | None = Field(default=None, max_length=120)
    reference: str | None = Field(default=None, max_length=160)
    note: str | None = None


class SaleUpdate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount
    category: str | None = Field(default=None, max_length=120)
    payment_mode: PaymentModeIn
    received_by: str | None = Field(default=None, max_length=120)
    reference: str | None = Field(default=None, max_length=160)
    note: str | None = None


class SaleVersionOut(OrmOut):
    id: int
    sale_id: int
    version_number: int
    date: datetime
    amount: Rupees = Field(validation_alias="amount_paise")
    category: str | None
    payment_mode: PaymentMode
    received_by: str | None
    reference: str | None
    note: str | None
    created_by_user_id: int | None
    created_at: datetime


class SaleOut(OrmOut):
    id: int
    current_version_id: int | None
    job_card_id: int | None
    version_number: int
    date: datetime
    amount: Rupees = Field(validation_alias="amount_paise")
    category: str | None
    payment_mode: PaymentMode
    received_by: str | None
    reference: str | None
    note: str | None
    created_at: datetime
    updated_at: datetime


class SaleDetailOut(SaleOut):
    versions: list[SaleVersionOut]
