from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.money import from_paise, to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.user import User
from app.models.vendor import Vendor, VendorPayment, VendorPaymentStatus
from app.schemas.common import MessageOut, clean_text
from app.schemas.vendor import (
    VendorCreate,
    VendorDetailOut,
    VendorOut,
    VendorPaymentCreate,
    VendorPaymentOut,
    VendorPaymentUpdate,
    VendorSummaryOut,
    VendorUpdate,
)
from app.services.audit import log_audit
from app.services.reconciliation import (
    outstanding_paise,
    remove_linked_expense,
    sync_vendor_payment_expense,
    vendor_payment_status,
)

router = APIRouter(prefix="/vendors", tags=["Vendors"])


def _get_vendor_or_404(db: Session, vendor_id: int) -> Vendor:
    vendor = db.get(Vendor, vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")
    return vendor


def _get_payment_or_404(db: Session, vendor: Vendor, payment_id: int) -> VendorPayment:
    payment = db.get(VendorPayment, payment_id)
    if not payment or payment.vendor_id != vendor.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor payment not found")
    return payment


def _vendor_payments(db: Session, vendor_id: int) -> list[VendorPayment]:
    return list(
        db.scalars(
            select(VendorPayment)
            .where(VendorPayment.vendor_id == vendor_id)
            .order_by(VendorPayment.date.desc(), VendorPayment.id.desc())
        ).all()
    )


def _vendor_detail(db: Session, vendor: Vendor) -> VendorDetailOut:
    payments = _vendor_payments(db, vendor.id)
    summary = VendorSummaryOut(
        total_billed=from_paise(sum(payment.amount_paise for payment in payments)),
        total_paid=from_paise(sum(payment.amount_paid_paise for payment in payments)),
        total_due=from_paise(vendor.total_due_paise),
        pending_payments=sum(1 for payment in payments if payment.status != VendorPaymentStatus.PAID),
    )
    return VendorDetailOut.model_validate(vendor).model_copy(
        update={
            "payments": [VendorPaymentOut.model_validate(payment) for payment in payments],
            "summary": summary,
        }
    )


@router.get("", response_model=list[VendorOut])
def list_vendors(
    include_inactive: bool = Query(default=False),
    q: str | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(Vendor).order_by(Vendor.name.asc())
    if not include_inactive:
        query = query.where(Vendor.is_active.is_(True))
    if q and q.strip():
        term = f"%{q.strip()}%"
        query = query.where(or_(Vendor.name.ilike(term), Vendor.contact_name.ilike(term), Vendor.phone.ilike(term)))
    return list(db.scalars(query).all())


@router.post("", response_model=VendorOut, status_code=status.HTTP_201_CREATED)
def create_vendor(
    payload: VendorCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vendor = Vendor(
        name=payload.name.strip(),
        contact_name=clean_text(payload.contact_name),
        phone=clean_text(payload.phone),
        email=clean_text(payload.email),
        address=clean_text(payload.address),
        gst_number=clean_text(payload.gst_number.upper() if payload.gst_number else None),
    )
    db.add(vendor)
    db.flush()
    log_audit(db, AuditEntity.VENDOR, vendor.id, AuditAction.CREATE, current_user.id, summary=f"Added vendor {vendor.name}")
    db.commit()
    db.refresh(vendor)
    return vendor


@router.get("/{vendor_id}", response_model=VendorDetailOut)
def get_vendor(
    vendor_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _vendor_detail(db, _get_vendor_or_404(db, vendor_id))


@router.put("/{vendor_id}", response_model=VendorOut)
def update_vendor(
    vendor_id: int,
    payload: VendorUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vendor = _get_vendor_or_404(db, vendor_id)

    if payload.name is not None:
        vendor.name = payload.name.strip()
    for field in ("contact_name", "phone", "email", "address"):
        if field in payload.model_fields_set:
            setattr(vendor, field, clean_text(getattr(payload, field)))
    if "gst_number" in payload.model_fields_set:
        vendor.gst_number = clean_text(payload.gst_number.upper() if payload.gst_number else None)
    if payload.is_active is not None:
        vendor.is_active = payload.is_active

    log_audit(
        db,
        AuditEntity.VENDOR,
        vendor.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(vendor)
    return vendor


@router.delete("/{vendor_id}", response_model=MessageOut)
def delete_vendor(
    vendor_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vendor = _get_vendor_or_404(db, vendor_id)
    payments = _vendor_payments(db, vendor.id)
    for payment in payments:
        remove_linked_expense(db, payment.related_expense_id)
    db.execute(delete(VendorPayment).where(VendorPayment.vendor_id == vendor.id))
    log_audit(
        db,
        AuditEntity.VENDOR,
        vendor.id,
        AuditAction.DELETE,
        current_user.id,
        summary=f"Deleted vendor {vendor.name} with {len(payments)} payments",
    )
    db.delete(vendor)
    db.commit()
    return MessageOut(message="Vendor deleted")


@router.post("/{vendor_id}/payments", response_model=VendorPaymentOut, status_code=status.HTTP_201_CREATED)
def add_vendor_payment(
    vendor_id: int,
    payload: VendorPaymentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vendor = _get_vendor_or_404(db, vendor_id)
    amount = to_paise(payload.amount)
    amount_paid = to_paise(payload.amount_paid)
    if amount_paid > amount:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="amount_paid cannot exceed amount")

    payment = VendorPayment(
        vendor_id=vendor.id,
        date=payload.date or datetime.utcnow(),
        amount_paise=amount,
        amount_paid_paise=amount_paid,
        payment_mode=payload.payment_mode,
        paid_by=clean_text(payload.paid_by),
        invoice_number=clean_text(payload.invoice_number),
        description=clean_text(payload.description),
        due_date=payload.due_date,
        status=vendor_payment_status(amount, amount_paid),
    )
    db.add(payment)
    db.flush()
    vendor.total_due_paise += outstanding_paise(payment)

    if payload.create_expense:
        sync_vendor_payment_expense(db, payment, vendor, current_user.id)

    log_audit(
        db,
        AuditEntity.VENDOR_PAYMENT,
        payment.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Bill of {payload.amount} from {vendor.name}, paid {payload.amount_paid}",
        details={"related_expense_id": payment.related_expense_id},
    )
    db.commit()
    db.refresh(payment)
    return payment


@router.put("/{vendor_id}/payments/{payment_id}", response_model=VendorPaymentOut)
def update_vendor_payment(
    vendor_id: int,
    payment_id: int,
    payload: VendorPaymentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vendor = _get_vendor_or_404(db, vendor_id)
    payment = _get_payment_or_404(db, vendor, payment_id)
    outstanding_before = outstanding_paise(payment)
    paid_before = payment.amount_paid_paise

    if payload.amount is not None:
        payment.amount_paise = to_paise(payload.amount)
    if payload.amount_paid is not None:
        payment.amount_paid_paise = to_paise(payload.amount_paid)
    if payment.amount_paid_paise > payment.amount_paise:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="amount_paid cannot exceed amount")
    if payload.date is not None:
        payment.date = payload.date
    if payload.payment_mode is not None:
        payment.payment_mode = payload.payment_mode
    for field in ("paid_by", "invoice_number", "description"):
        if field in payload.model_fields_set:
            setattr(payment, field, clean_text(getattr(payload, field)))
    if "due_date" in payload.model_fields_set:
        payment.due_date = payload.due_date

    payment.status = vendor_payment_status(payment.amount_paise, payment.amount_paid_paise)
    vendor.total_due_paise += outstanding_paise(payment) - outstanding_before

    if payload.create_expense and (payment.amount_paid_paise != paid_before or payment.related_expense_id):
        sync_vendor_payment_expense(db, payment, vendor, current_user.id)

    log_audit(
        db,
        AuditEntity.VENDOR_PAYMENT,
        payment.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(payment)
    return payment


@router.delete("/{vendor_id}/payments/{payment_id}", response_model=MessageOut)
def delete_vendor_payment(
    vendor_id: int,
    payment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vendor = _get_vendor_or_404(db, vendor_id)
    payment = _get_payment_or_404(db, vendor, payment_id)

    remove_linked_expense(db, payment.related_expense_id)
    vendor.total_due_paise -= outstanding_paise(payment)
    log_audit(db, AuditEntity.VENDOR_PAYMENT, payment.id, AuditAction.DELETE, current_user.id)
    db.delete(payment)
    db.commit()
    return MessageOut(message="Vendor payment deleted")
