from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.routes.vehicles import get_vehicle_or_404
from app.core.dates import resolve_range
from app.core.money import to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.garage import (
    JobCard,
    JobCardTemplate,
    JobCardTemplateItem,
    JobLineItem,
    JobPayment,
    JobStatus,
    Vehicle,
)
from app.models.inventory import InventoryItem
from app.models.ledger import Sale
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.garage import (
    JobCardClose,
    JobCardCreate,
    JobCardDetailOut,
    JobCardOut,
    JobCardUpdate,
    JobLineItemCreate,
    JobLineItemOut,
    JobLineItemUpdate,
    JobPaymentCreate,
    JobPaymentOut,
    JobPaymentUpdate,
    VehicleOut,
)
from app.services.audit import log_audit
from app.services.inspections import delete_job_inspections
from app.services.job_cards import (
    line_total_paise,
    next_job_number,
    normalize_reg_number,
    recalc_job_financials,
    sync_job_sales,
)
from app.services.ledger import delete_sales

router = APIRouter(prefix="/jobcards", tags=["Job Cards"])

TEXT_FIELDS = ("complaints", "diagnostics", "recommendations", "additional_notes", "fuel_level")


def get_job_or_404(db: Session, job_id: int) -> JobCard:
    job = db.get(JobCard, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job card not found")
    return job


def _get_line_or_404(db: Session, job: JobCard, line_id: int) -> JobLineItem:
    line = db.get(JobLineItem, line_id)
    if not line or line.job_card_id != job.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Line item not found")
    return line


def _get_payment_or_404(db: Session, job: JobCard, payment_id: int) -> JobPayment:
    payment = db.get(JobPayment, payment_id)
    if not payment or payment.job_card_id != job.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


def _check_inventory_item(db: Session, inventory_item_id: int | None) -> None:
    if inventory_item_id is not None and not db.get(InventoryItem, inventory_item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")


def job_card_out(job: JobCard, vehicle: Vehicle | None) -> JobCardOut:
    out = JobCardOut.model_validate(job)
    if vehicle is not None:
        out = out.model_copy(update={"vehicle": VehicleOut.model_validate(vehicle)})
    return out


def job_card_detail(db: Session, job: JobCard) -> JobCardDetailOut:
    line_items = db.scalars(
        select(JobLineItem).where(JobLineItem.job_card_id == job.id).order_by(JobLineItem.id.asc())
    ).all()
    payments = db.scalars(
        select(JobPayment).where(JobPayment.job_card_id == job.id).order_by(JobPayment.date.asc(), JobPayment.id.asc())
    ).all()
    sale_ids = db.scalars(select(Sale.id).where(Sale.job_card_id == job.id).order_by(Sale.id.asc())).all()
    vehicle = db.get(Vehicle, job.vehicle_id)
    return JobCardDetailOut(
        **job_card_out(job, vehicle).model_dump(),
        line_items=[JobLineItemOut.model_validate(line) for line in line_items],
        payments=[JobPaymentOut.model_validate(payment) for payment in payments],
        sale_ids=list(sale_ids),
    )


def _resolve_vehicle(db: Session, payload: JobCardCreate) -> Vehicle:
    if payload.vehicle_id is not None:
        return get_vehicle_or_404(db, payload.vehicle_id)

    reg_number = normalize_reg_number(payload.reg_number or "")
    vehicle = db.scalar(select(Vehicle).where(Vehicle.reg_number == reg_number))
    if vehicle is None:
        vehicle = Vehicle(reg_number=reg_number, owner_name=payload.customer_name.strip())
        db.add(vehicle)

    # walk-in details refresh the vehicle record
    vehicle.owner_name = payload.customer_name.strip()
    if clean_text(payload.customer_phone):
        vehicle.owner_phone = clean_text(payload.customer_phone)
    if clean_text(payload.vehicle_make):
        vehicle.make = clean_text(payload.vehicle_make)
    if clean_text(payload.vehicle_model):
        vehicle.model = clean_text(payload.vehicle_model)
    db.flush()
    return vehicle


@router.post("", response_model=JobCardDetailOut, status_code=status.HTTP_201_CREATED)
def create_job_card(
    payload: JobCardCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vehicle = _resolve_vehicle(db, payload)

    job = JobCard(
        job_number=next_job_number(db),
        vehicle_id=vehicle.id,
        customer_name=clean_text(payload.customer_name) or vehicle.owner_name,
        customer_phone=clean_text(payload.customer_phone) or vehicle.owner_phone,
        in_date=payload.in_date or datetime.utcnow(),
        promised_date=payload.promised_date,
        odometer=payload.odometer,
        fuel_level=clean_text(payload.fuel_level),
        complaints=clean_text(payload.complaints),
        additional_notes=clean_text(payload.additional_notes),
    )
    db.add(job)
    db.flush()
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Opened {job.job_number} for {vehicle.reg_number}",
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.get("", response_model=list[JobCardOut])
def list_job_cards(
    status_filter: JobStatus | None = Query(default=None, alias="status"),
    reg: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end = resolve_range(date_from, date_to)
    query = (
        select(JobCard, Vehicle)
        .join(Vehicle, Vehicle.id == JobCard.vehicle_id)
        .order_by(JobCard.in_date.desc(), JobCard.id.desc())
    )
    if status_filter is not None:
        query = query.where(JobCard.status == status_filter)
    if reg and reg.strip():
        query = query.where(Vehicle.reg_number.ilike(f"%{normalize_reg_number(reg)}%"))
    if start is not None:
        query = query.where(JobCard.in_date >= start)
    if end is not None:
        query = query.where(JobCard.in_date <= end)
    return [job_card_out(job, vehicle) for job, vehicle in db.execute(query).all()]


@router.get("/{job_id}", response_model=JobCardDetailOut)
def get_job_card(
    job_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return job_card_detail(db, get_job_or_404(db, job_id))


@router.put("/{job_id}", response_model=JobCardDetailOut)
def update_job_card(
    job_id: int,
    payload: JobCardUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)

    if payload.in_date is not None:
        job.in_date = payload.in_date
    if "promised_date" in payload.model_fields_set:
        job.promised_date = payload.promised_date
    if payload.status is not None:
        job.status = payload.status
    if payload.customer_name is not None:
        job.customer_name = payload.customer_name.strip()
    if "customer_phone" in payload.model_fields_set:
        job.customer_phone = clean_text(payload.customer_phone)
    if "odometer" in payload.model_fields_set:
        job.odometer = payload.odometer
    for field in TEXT_FIELDS:
        if field in payload.model_fields_set:
            setattr(job, field, clean_text(getattr(payload, field)))
    if payload.discount is not None:
        job.discount_paise = to_paise(payload.discount)
    if payload.tax is not None:
        job.tax_paise = to_paise(payload.tax)
    if "invoice_number" in payload.model_fields_set:
        job.invoice_number = clean_text(payload.invoice_number)
    if "final_payment_mode" in payload.model_fields_set:
        job.final_payment_mode = payload.final_payment_mode

    recalc_job_financials(db, job)
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Updated {job.job_number}",
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.delete("/{job_id}", response_model=MessageOut)
def delete_job_card(
    job_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    delete_sales(db, list(db.scalars(select(Sale.id).where(Sale.job_card_id == job.id)).all()))
    db.execute(delete(JobLineItem).where(JobLineItem.job_card_id == job.id))
    db.execute(delete(JobPayment).where(JobPayment.job_card_id == job.id))
    delete_job_inspections(db, job.id)
    log_audit(db, AuditEntity.JOB_CARD, job.id, AuditAction.DELETE, current_user.id, summary=f"Deleted {job.job_number}")
    db.delete(job)
    db.commit()
    return MessageOut(message="Job card deleted")


@router.post("/{job_id}/line-items", response_model=JobCardDetailOut, status_code=status.HTTP_201_CREATED)
def add_line_item(
    job_id: int,
    payload: JobLineItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    _check_inventory_item(db, payload.inventory_item_id)

    unit_price = to_paise(payload.unit_price)
    line = JobLineItem(
        job_card_id=job.id,
        line_type=payload.line_type,
        description=payload.description.strip(),
        quantity=payload.quantity,
        unit_price_paise=unit_price,
        total_paise=line_total_paise(payload.quantity, unit_price),
        inventory_item_id=payload.inventory_item_id,
    )
    db.add(line)
    db.flush()
    recalc_job_financials(db, job)
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Added {line.line_type.value} line to {job.job_number}",
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.put("/{job_id}/line-items/{line_id}", response_model=JobCardDetailOut)
def update_line_item(
    job_id: int,
    line_id: int,
    payload: JobLineItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    line = _get_line_or_404(db, job, line_id)

    if payload.line_type is not None:
        line.line_type = payload.line_type
    if payload.description is not None:
        line.description = payload.description.strip()
    if payload.quantity is not None:
        line.quantity = payload.quantity
    if payload.unit_price is not None:
        line.unit_price_paise = to_paise(payload.unit_price)
    if "inventory_item_id" in payload.model_fields_set:
        _check_inventory_item(db, payload.inventory_item_id)
        line.inventory_item_id = payload.inventory_item_id
    line.total_paise = line_total_paise(line.quantity, line.unit_price_paise)

    recalc_job_financials(db, job)
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Updated line {line.id} on {job.job_number}",
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.delete("/{job_id}/line-items/{line_id}", response_model=JobCardDetailOut)
def delete_line_item(
    job_id: int,
    line_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    line = _get_line_or_404(db, job, line_id)
    db.delete(line)
    db.flush()
    recalc_job_financials(db, job)
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Removed line {line_id} from {job.job_number}",
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.post("/{job_id}/payments", response_model=JobCardDetailOut, status_code=status.HTTP_201_CREATED)
def add_payment(
    job_id: int,
    payload: JobPaymentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    payment = JobPayment(
        job_card_id=job.id,
        payment_type=payload.payment_type,
        amount_paise=to_paise(payload.amount),
        date=payload.date or datetime.utcnow(),
        payment_mode=payload.payment_mode,
        received_by=clean_text(payload.received_by),
        reference=clean_text(payload.reference),
        note=clean_text(payload.note),
    )
    db.add(payment)
    db.flush()
    recalc_job_financials(db, job)
    sync_job_sales(db, job, current_user.id)
    log_audit(
        db,
        AuditEntity.JOB_PAYMENT,
        payment.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"{payment.payment_type.value} of {payload.amount} on {job.job_number}",
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.put("/{job_id}/payments/{payment_id}", response_model=JobCardDetailOut)
def update_payment(
    job_id: int,
    payment_id: int,
    payload: JobPaymentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    payment = _get_payment_or_404(db, job, payment_id)

    if payload.date is not None:
        payment.date = payload.date
    if payload.amount is not None:
        payment.amount_paise = to_paise(payload.amount)
    if payload.payment_mode is not None:
        payment.payment_mode = payload.payment_mode
    if payload.payment_type is not None:
        payment.payment_type = payload.payment_type
    for field in ("received_by", "reference", "note"):
        if field in payload.model_fields_set:
            setattr(payment, field, clean_text(getattr(payload, field)))

    db.flush()
    recalc_job_financials(db, job)
    sync_job_sales(db, job, current_user.id)
    log_audit(
        db,
        AuditEntity.JOB_PAYMENT,
        payment.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.delete("/{job_id}/payments/{payment_id}", response_model=JobCardDetailOut)
def delete_payment(
    job_id: int,
    payment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    payment = _get_payment_or_404(db, job, payment_id)
    log_audit(db, AuditEntity.JOB_PAYMENT, payment.id, AuditAction.DELETE, current_user.id)
    db.delete(payment)
    db.flush()
    recalc_job_financials(db, job)
    sync_job_sales(db, job, current_user.id)
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.post("/{job_id}/close", response_model=JobCardDetailOut)
def close_job_card(
    job_id: int,
    payload: JobCardClose,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    if job.status == JobStatus.CANCELLED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cancelled job cards cannot be closed")

    job.status = JobStatus.DELIVERED
    job.out_date = payload.out_date or datetime.utcnow()
    if payload.final_payment_mode is not None:
        job.final_payment_mode = payload.final_payment_mode
    if clean_text(payload.invoice_number):
        job.invoice_number = clean_text(payload.invoice_number)
    note = clean_text(payload.note)
    if note:
        job.additional_notes = f"{job.additional_notes}\n{note}" if job.additional_notes else note

    recalc_job_financials(db, job)
    sync_job_sales(db, job, current_user.id)
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.CLOSE,
        current_user.id,
        summary=f"Delivered {job.job_number}",
        details={"pending_amount_paise": job.pending_amount_paise},
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)


@router.post("/{job_id}/apply-template/{template_id}", response_model=JobCardDetailOut)
def apply_template(
    job_id: int,
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    template = db.get(JobCardTemplate, template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    if not template.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Template is inactive")

    items = db.scalars(
        select(JobCardTemplateItem)
        .where(JobCardTemplateItem.template_id == template.id)
        .order_by(JobCardTemplateItem.sort_order.asc(), JobCardTemplateItem.id.asc())
    ).all()
    for item in items:
        db.add(
            JobLineItem(
                job_card_id=job.id,
                line_type=item.line_type,
                description=item.description,
                quantity=item.quantity,
                unit_price_paise=item.unit_price_paise,
                total_paise=line_total_paise(item.quantity, item.unit_price_paise),
                inventory_item_id=item.inventory_item_id,
            )
        )
    job.template_used = template.category
    db.flush()
    recalc_job_financials(db, job)
    log_audit(
        db,
        AuditEntity.JOB_CARD,
        job.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Applied template {template.name} to {job.job_number}",
        details={"template_id": template.id, "items": len(items)},
    )
    db.commit()
    db.refresh(job)
    return job_card_detail(db, job)
