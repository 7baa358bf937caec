from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class AuditEntity(str, Enum):
    EMPLOYEE = "EMPLOYEE"
    ADVANCE = "ADVANCE"
    ATTENDANCE = "ATTENDANCE"
    PAYROLL_PERIOD = "PAYROLL_PERIOD"
    PAYSLIP = "PAYSLIP"
    SALE = "SALE"
    EXPENSE = "EXPENSE"
    INVENTORY_ITEM = "INVENTORY_ITEM"
    STOCK_TRANSACTION = "STOCK_TRANSACTION"
    VEHICLE = "VEHICLE"
    JOB_CARD = "JOB_CARD"
    JOB_PAYMENT = "JOB_PAYMENT"
    JOB_CARD_TEMPLATE = "JOB_CARD_TEMPLATE"
    INSPECTION_TEMPLATE = "INSPECTION_TEMPLATE"
    JOB_INSPECTION = "JOB_INSPECTION"
    VENDOR = "VENDOR"
    VENDOR_PAYMENT = "VENDOR_PAYMENT"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    PAY = "PAY"
    UNPAY = "UNPAY"
    CLOSE = "CLOSE"
    REOPEN = "REOPEN"
    GENERATE = "GENERATE"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True)
    entity_type: Mapped[AuditEntity] = mapped_column(SQLEnum(AuditEntity), index=True, nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[AuditAction] = mapped_column(SQLEnum(AuditAction), nullable=False)
    summary: Mapped[str | None] = mapped_column(String(255), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
