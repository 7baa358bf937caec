from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, model_validator

from app.core.money import Rupees
from app.models.garage import JobCardTemplateCategory, JobLineType, JobPaymentType, JobStatus
from app.models.ledger import PaymentMode
from app.schemas.common import NaiveDateTime, OrmOut, PaymentModeIn, PositiveAmount, normalized_enum

JobStatusIn = normalized_enum(JobStatus)
JobLineTypeIn = normalized_enum(JobLineType)
JobPaymentTypeIn = normalized_enum(JobPaymentType)
TemplateCategoryIn = normalized_enum(JobCardTemplateCategory)


class VehicleCreate(BaseModel):
    reg_number: str = Field(min_length=1, max_length=32)
    make: str | None = Field(default=None, max_length=80)
    model: str | None = Field(default=None, max_length=80)
    variant: str | None = Field(default=None, max_length=80)
    fuel_type: str | None = Field(default=None, max_length=32)
    year: int | None = Field(default=None, ge=1900, le=2100)
    color: str | None = Field(default=None, max_length=40)
    owner_name: str = Field(min_length=1, max_length=120)
    owner_phone: str | None = Field(default=None, max_length=32)


class VehicleUpdate(BaseModel):
    reg_number: str | None = Field(default=None, min_length=1, max_length=32)
    make: str | None = Field(default=None, max_length=80)
    model: str | None = Field(default=None, max_length=80)
    variant: str | None = Field(default=None, max_length=80)
    fuel_type: str | None = Field(default=None, max_length=32)
    year: int | None = Field(default=None, ge=1900, le=2100)
    color: str | None = Field(default=None, max_length=40)
    owner_name: str | None = Field(default=None, min_length=1, max_length=120)
    owner_phone: str | None = Field(default=None, max_length=32)


class VehicleOut(OrmOut):
    id: int
    reg_number: str
    make: str | None
    model: str | None
    variant: str | None
    fuel_type: str | None
    year: int | None
    color: str | None
    owner_name: str
    owner_phone: str | None
    created_at: datetime
    updated_at: datetime


class JobCardCreate(BaseModel):
    vehicle_id: int | None = None
    reg_number: str | None = Field(
        default=None,
        max_length=32,
        validation_alias=AliasChoices("reg_number", "vehicle_number", "car_number"),
    )
    vehicle_make: str | None = Field(default=None, max_length=80)
    vehicle_model: str | None = Field(default=None, max_length=80)
    customer_name: str | None = Field(
        default=None,
        max_length=120,
        validation_alias=AliasChoices("customer_name", "owner_name"),
    )
    customer_phone: str | None = Field(
        default=None,
        max_length=32,
        validation_alias=AliasChoices("customer_phone", "owner_phone"),
    )
    in_date: NaiveDateTime | None = None
    promised_date: NaiveDateTime | None = None
    odometer: int | None = Field(default=None, ge=0)
    fuel_level: str | None = Field(default=None, max_length=32)
    complaints: str | None = None
    additional_notes: str | None = None

    @model_validator(mode="after")
    def require_vehicle_reference(self):
        if self.vehicle_id is None:
            if not (self.reg_number or "").strip() or not (self.customer_name or "").strip():
                raise ValueError("reg_number and customer_name are required when vehicle_id is not given")
        return self


class JobCardUpdate(BaseModel):
    in_date: NaiveDateTime | None = None
    promised_date: NaiveDateTime | None = None
    status: JobStatusIn | None = None
    customer_name: str | None = Field(default=None, min_length=1, max_length=120)
    customer_phone: str | None = Field(default=None, max_length=32)
    odometer: int | None = Field(default=None, ge=0)
    fuel_level: str | None = Field(default=None, max_length=32)
    complaints: str | None = None
    diagnostics: str | None = Field(default=None, validation_alias=AliasChoices("diagnostics", "diagnosis"))
    recommendations: str | None = Field(
        default=None,
        validation_alias=AliasChoices("recommendations", "work_recommended"),
    )
    additional_notes: str | None = Field(default=None, validation_alias=AliasChoices("additional_notes", "notes"))
    discount: Decimal | None = Field(default=None, ge=0)
    tax: Decimal | None = Field(default=None, ge=0)
    invoice_number: str | None = Field(default=None, max_length=64)
    final_payment_mode: PaymentModeIn | None = None


class JobLineItemCreate(BaseModel):
    line_type: JobLineTypeIn = Field(validation_alias=AliasChoices("line_type", "type"))
    description: str = Field(min_length=1, max_length=255)
    quantity: float = Field(default=1, gt=0)
    unit_price: Decimal = Field(ge=0)
    inventory_item_id: int | None = None


class JobLineItemUpdate(BaseModel):
    line_type: JobLineTypeIn | None = None
    description: str | None = Field(default=None, min_length=1, max_length=255)
    quantity: float | None = Field(default=None, gt=0)
    unit_price: Decimal | None = Field(default=None, ge=0)
    inventory_item_id: int | None = None


class JobLineItemOut(OrmOut):
    id: int
    job_card_id: int
    line_type: JobLineType
    description: str
    quantity: float
    unit_price: Rupees = Field(validation_alias="unit_price_paise")
    total: Rupees = Field(validation_alias="total_paise")
    inventory_item_id: int | None
    created_at: datetime


class JobPaymentCreate(BaseModel):
    date: NaiveDateTime | None = None
    amount: PositiveAmount
    payment_mode: PaymentModeIn
    payment_type: JobPaymentTypeIn = JobPaymentType.ADVANCE
    received_by: str | None = Field(default=None, max_length=120)
    reference: str | None = Field(default=None, max_length=160)
    note: str | None = None


class JobPaymentUpdate(BaseModel):
    date: NaiveDateTime | None = None
    amount: Decimal | None = Field(default=None, ge=0)
    payment_mode: PaymentModeIn | None = None
    payment_type: JobPaymentTypeIn | None = None
    received_by: str | None = Field(default=None, max_length=120)
    reference: str | None = Field(default=None, max_length=160)
    note: str | None = None


class JobPaymentOut(OrmOut):
    id: int
    job_card_id: int
    payment_type: JobPaymentType
    amount: Rupees = Field(validation_alias="amount_paise")
    date: datetime
    payment_mode: PaymentMode
    received_by: str | None
    reference: str | None
    note: str | None
    created_at: datetime


class JobCardClose(BaseModel):
    out_date: NaiveDateTime | None = None
    note: str | None = None
    final_payment_mode: PaymentModeIn | None = None
    invoice_number: str | None = Field(default=None, max_length=64)


class JobCardOut(OrmOut):
    id: int
    job_number: str
    status: JobStatus
    vehicle_id: int
    in_date: datetime
    promised_date: datetime | None
    out_date: datetime | None
    customer_name: str
    customer_phone: str | None
    odometer: int | None
    fuel_level: str | None
    complaints: str | None
    diagnostics: str | None
    recommendations: str | None
    additional_notes: str | None
    labour_total: Rupees = Field(validation_alias="labour_total_paise")
    parts_total: Rupees = Field(validation_alias="parts_total_paise")
    discount: Rupees = Field(validation_alias="discount_paise")
    tax: Rupees = Field(validation_alias="tax_paise")
    grand_total: Rupees = Field(validation_alias="grand_total_paise")
    advance_paid: Rupees = Field(validation_alias="advance_paid_paise")
    pending_amount: Rupees = Field(validation_alias="pending_amount_paise")
    final_payment_mode: PaymentMode | None
    invoice_number: str | None
    template_used: JobCardTemplateCategory | None
    created_at: datetime
    updated_at: datetime
    vehicle: VehicleOut | None = None


class JobCardDetailOut(JobCardOut):
    line_items: list[JobLineItemOut] = Field(default_factory=list)
    payments: list[JobPaymentOut] = Field(default_factory=list)
    sale_ids: list[int] = Field(default_factory=list)


class VehicleHistoryOut(BaseModel):
    vehicle: VehicleOut
    job_cards: list[JobCardOut]


class TemplateItemCreate(BaseModel):
    line_type: JobLineTypeIn
    description: str = Field(min_length=1, max_length=255)
    quantity: float = Field(default=1, gt=0)
    unit_price: Decimal = Field(ge=0)
    sort_order: int | None = None
    inventory_item_id: int | None = None


class TemplateItemUpdate(BaseModel):
    line_type: JobLineTypeIn | None = None
    description: str | None = Field(default=None, min_length=1, max_length=255)
    quantity: float | None = Field(default=None, gt=0)
    unit_price: Decimal | None = Field(default=None, ge=0)
    sort_order: int | None = None
    inventory_item_id: int | None = None


class TemplateItemOut(OrmOut):
    id: int
    template_id: int
    line_type: JobLineType
    description: str
    quantity: float
    unit_price: Rupees = Field(validation_alias="unit_price_paise")
    sort_order: int
    inventory_item_id: int | None


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    category: TemplateCategoryIn
    description: str | None = None
    items: list[TemplateItemCreate] = Field(default_factory=list)


class TemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    category: TemplateCategoryIn | None = None
    description: str | None = None
    is_active: bool | None = None


class TemplateOut(OrmOut):
    id: int
    name: str
    category: JobCardTemplateCategory
    description: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    items: list[TemplateItemOut] = Field(default_factory=list)
    estimated_total: Decimal = Decimal("0.00")
