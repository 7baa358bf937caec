from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base
from app.models.ledger import PaymentMode


class JobStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class JobLineType(str, Enum):
    LABOUR = "LABOUR"
    PART = "PART"
    OTHER = "OTHER"


class JobPaymentType(str, Enum):
    ADVANCE = "ADVANCE"
    FINAL = "FINAL"
    REFUND = "REFUND"


class JobCardTemplateCategory(str, Enum):
    WASHING = "WASHING"
    DECOR = "DECOR"
    MECHANICAL = "MECHANICAL"
    DENTING_PAINTING = "DENTING_PAINTING"
    GENERAL = "GENERAL"
    CUSTOM = "CUSTOM"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    reg_number: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    make: Mapped[str | None] = mapped_column(String(80), nullable=True)
    model: Mapped[str | None] = mapped_column(String(80), nullable=True)
    variant: Mapped[str | None] = mapped_column(String(80), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    color: Mapped[str | None] = mapped_column(String(40), nullable=True)
    owner_name: Mapped[str] = mapped_column(String(120), nullable=False)
    owner_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class JobCard(Base):
    __tablename__ = "job_cards"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    job_number: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id", ondelete="RESTRICT"), index=True, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(120), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    in_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    promised_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    out_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[JobStatus] = mapped_column(SQLEnum(JobStatus), default=JobStatus.OPEN, nullable=False, index=True)
    odometer: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fuel_level: Mapped[str | None] = mapped_column(String(32), nullable=True)
    complaints: Mapped[str | None] = mapped_column(Text, nullable=True)
    diagnostics: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendations: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    labour_total_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    parts_total_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    discount_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tax_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    grand_total_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    advance_paid_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    pending_amount_paise: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    final_payment_mode: Mapped[PaymentMode | None] = mapped_column(SQLEnum(PaymentMode), nullable=True)
    invoice_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    template_used: Mapped[JobCardTemplateCategory | None] = mapped_column(
        SQLEnum(JobCardTemplateCategory),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class JobLineItem(Base):
    __tablename__ = "job_line_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    job_card_id: Mapped[int] = mapped_column(ForeignKey("job_cards.id", ondelete="CASCADE"), index=True, nullable=False)
    line_type: Mapped[JobLineType] = mapped_column(SQLEnum(JobLineType), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, default=1, nullable=False)
    unit_price_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    total_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    inventory_item_id: Mapped[int | None] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class JobPayment(Base):
    __tablename__ = "job_payments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    job_card_id: Mapped[int] = mapped_column(ForeignKey("job_cards.id", ondelete="CASCADE"), index=True, nullable=False)
    payment_type: Mapped[JobPaymentType] = mapped_column(
        SQLEnum(JobPaymentType),
        default=JobPaymentType.ADVANCE,
        nullable=False,
    )
    amount_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    payment_mode: Mapped[PaymentMode] = mapped_column(SQLEnum(PaymentMode), nullable=False)
    received_by: Mapped[str | None] = mapped_column(String(120), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(160), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class JobCardTemplate(Base):
    __tablename__ = "job_card_templates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    category: Mapped[JobCardTemplateCategory] = mapped_column(
        SQLEnum(JobCardTemplateCategory),
        index=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class JobCardTemplateItem(Base):
    __tablename__ = "job_card_template_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    template_id: Mapped[int] = mapped_column(
        ForeignKey("job_card_templates.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    line_type: Mapped[JobLineType] = mapped_column(SQLEnum(JobLineType), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, default=1, nullable=False)
    unit_price_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    inventory_item_id: Mapped[int | None] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="SET NULL"),
        nullable=True,
    )
