from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class InspectionTemplateKind(str, Enum):
    GENERAL_SERVICE = "GENERAL_SERVICE"
    AC_SERVICE = "AC_SERVICE"
    BRAKE_JOB = "BRAKE_JOB"
    CUSTOM = "CUSTOM"


class InspectionType(str, Enum):
    ARRIVAL = "ARRIVAL"
    DELIVERY = "DELIVERY"
    OTHER = "OTHER"


class InspectionItemStatus(str, Enum):
    OK = "OK"
    NOT_OK = "NOT_OK"
    NA = "NA"
    ATTENTION = "ATTENTION"


class InspectionTemplate(Base):
    __tablename__ = "inspection_templates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    kind: Mapped[InspectionTemplateKind] = mapped_column(SQLEnum(InspectionTemplateKind), index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class InspectionTemplateItem(Base):
    __tablename__ = "inspection_template_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    template_id: Mapped[int] = mapped_column(
        ForeignKey("inspection_templates.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    section: Mapped[str | None] = mapped_column(String(80), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_critical: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class JobInspection(Base):
    __tablename__ = "job_inspections"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    job_card_id: Mapped[int] = mapped_column(ForeignKey("job_cards.id", ondelete="CASCADE"), index=True, nullable=False)
    template_id: Mapped[int | None] = mapped_column(
        ForeignKey("inspection_templates.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str | None] = mapped_column(String(160), nullable=True)
    type: Mapped[InspectionType | None] = mapped_column(SQLEnum(InspectionType), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class JobInspectionItem(Base):
    __tablename__ = "job_inspection_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    job_inspection_id: Mapped[int] = mapped_column(
        ForeignKey("job_inspections.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    template_item_id: Mapped[int | None] = mapped_column(
        ForeignKey("inspection_template_items.id", ondelete="SET NULL"),
        nullable=True,
    )
    # label, section and criticality are copied so later template edits leave the record intact
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    section: Mapped[str | None] = mapped_column(String(80), nullable=True)
    is_critical: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[InspectionItemStatus] = mapped_column(
        SQLEnum(InspectionItemStatus),
        default=InspectionItemStatus.OK,
        nullable=False,
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
