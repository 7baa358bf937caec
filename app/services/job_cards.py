import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.garage import JobCard, JobLineItem, JobLineType, JobPayment, JobPaymentType
from app.models.ledger import PaymentMode, Sale
from app.services.ledger import create_sale, delete_sales

logger = logging.getLogger(__name__)

SERVICE_SALE_CATEGORY = "Service"
COLLECTED_PAYMENT_TYPES = (JobPaymentType.ADVANCE, JobPaymentType.FINAL)


def normalize_reg_number(value: str) -> str:
    return value.strip().upper()


def next_job_number(db: Session, now: datetime | None = None) -> str:
    now = now or datetime.utcnow()
    prefix = f"JC-{now.year}-{now.month:02d}-"
    numbers = db.scalars(select(JobCard.job_number).where(JobCard.job_number.like(f"{prefix}%"))).all()
    sequence = 0
    for number in numbers:
        tail = number[len(prefix):]
        if tail.isdigit():
            sequence = max(sequence, int(tail))
    return f"{prefix}{sequence + 1:04d}"


def line_total_paise(quantity: float, unit_price_paise: int) -> int:
    total = Decimal(str(quantity)) * Decimal(unit_price_paise)
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def recalc_job_financials(db: Session, job: JobCard) -> JobCard:
    line_items = db.scalars(select(JobLineItem).where(JobLineItem.job_card_id == job.id)).all()
    payments = db.scalars(select(JobPayment).where(JobPayment.job_card_id == job.id)).all()

    labour = sum(item.total_paise for item in line_items if item.line_type == JobLineType.LABOUR)
    parts = sum(item.total_paise for item in line_items if item.line_type != JobLineType.LABOUR)
    collected = sum(p.amount_paise for p in payments if p.payment_type in COLLECTED_PAYMENT_TYPES)
    refunded = sum(p.amount_paise for p in payments if p.payment_type == JobPaymentType.REFUND)

    grand = labour + parts - (job.discount_paise or 0) + (job.tax_paise or 0)
    paid = collected - refunded

    job.labour_total_paise = labour
    job.parts_total_paise = parts
    job.grand_total_paise = grand
    job.advance_paid_paise = paid
    job.pending_amount_paise = max(0, grand - paid)
    db.flush()
    return job


def sync_job_sales(db: Session, job: JobCard, user_id: int | None) -> list[Sale]:
    """Rebuild the job's sales: one per receiver over its advance and final payments."""
    existing_ids = list(db.scalars(select(Sale.id).where(Sale.job_card_id == job.id)).all())
    delete_sales(db, existing_ids)

    payments = db.scalars(
        select(JobPayment).where(
            JobPayment.job_card_id == job.id,
            JobPayment.payment_type.in_(COLLECTED_PAYMENT_TYPES),
        )
    ).all()

    groups: dict[str | None, list[JobPayment]] = {}
    for payment in payments:
        groups.setdefault(payment.received_by or None, []).append(payment)

    sales: list[Sale] = []
    for received_by, group in groups.items():
        latest = max(group, key=lambda p: (p.date, p.id))
        sale, _ = create_sale(
            db,
            date=latest.date,
            amount_paise=sum(p.amount_paise for p in group),
            category=SERVICE_SALE_CATEGORY,
            payment_mode=latest.payment_mode or PaymentMode.CASH,
            received_by=received_by,
            reference=job.job_number,
            job_card_id=job.id,
            user_id=user_id,
        )
        sales.append(sale)

    logger.info("Synced %d sales for job %s", len(sales), job.job_number)
    return sales
