from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.dates import resolve_range
from app.core.money import to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.ledger import Sale, SaleVersion
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.ledger import SaleCreate, SaleDetailOut, SaleOut, SaleUpdate, SaleVersionOut
from app.services.audit import log_audit
from app.services.ledger import append_sale_version, create_sale, current_sale_version, delete_sales, list_sale_versions

router = APIRouter(prefix="/sales", tags=["Sales"])


def sale_out(sale: Sale, version: SaleVersion) -> SaleOut:
    return SaleOut(
        id=sale.id,
        current_version_id=sale.current_version_id,
        job_card_id=sale.job_card_id,
        version_number=version.version_number,
        date=version.date,
        amount_paise=version.amount_paise,
        category=version.category,
        payment_mode=version.payment_mode,
        received_by=version.received_by,
        reference=version.reference,
        note=version.note,
        created_at=sale.created_at,
        updated_at=sale.updated_at,
    )


def _get_sale_or_404(db: Session, sale_id: int) -> Sale:
    sale = db.get(Sale, sale_id)
    if not sale:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return sale


def _sale_detail(db: Session, sale: Sale) -> SaleDetailOut:
    version = current_sale_version(db, sale)
    if version is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale has no versions")
    versions = [SaleVersionOut.model_validate(item) for item in list_sale_versions(db, sale.id)]
    return SaleDetailOut(**sale_out(sale, version).model_dump(), versions=versions)


@router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def add_sale(
    payload: SaleCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sale, version = create_sale(
        db,
        date=payload.date,
        amount_paise=to_paise(payload.amount),
        category=clean_text(payload.category),
        payment_mode=payload.payment_mode,
        received_by=clean_text(payload.received_by),
        reference=clean_text(payload.reference),
        note=clean_text(payload.note),
        user_id=current_user.id,
    )
    log_audit(db, AuditEntity.SALE, sale.id, AuditAction.CREATE, current_user.id, summary=f"Sale of {payload.amount}")
    db.commit()
    db.refresh(sale)
    db.refresh(version)
    return sale_out(sale, version)


@router.get("", response_model=list[SaleOut])
def list_sales(
    category: str | None = Query(default=None),
    received_by: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end = resolve_range(date_from, date_to)
    query = select(Sale, SaleVersion).join(SaleVersion, Sale.current_version_id == SaleVersion.id)
    if category:
        query = query.where(func.lower(SaleVersion.category) == category.strip().lower())
    if received_by:
        query = query.where(func.lower(SaleVersion.received_by) == received_by.strip().lower())
    if start is not None:
        query = query.where(SaleVersion.date >= start)
    if end is not None:
        query = query.where(SaleVersion.date <= end)
    query = query.order_by(SaleVersion.date.desc(), Sale.id.desc())
    return [sale_out(sale, version) for sale, version in db.execute(query).all()]


@router.get("/{sale_id}", response_model=SaleDetailOut)
def get_sale(
    sale_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _sale_detail(db, _get_sale_or_404(db, sale_id))


@router.get("/{sale_id}/versions", response_model=list[SaleVersionOut])
def get_sale_versions(
    sale_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sale = _get_sale_or_404(db, sale_id)
    return list_sale_versions(db, sale.id)


@router.put("/{sale_id}", response_model=SaleDetailOut)
def update_sale(
    sale_id: int,
    payload: SaleUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sale = _get_sale_or_404(db, sale_id)

    changes: dict = {"amount_paise": to_paise(payload.amount), "payment_mode": payload.payment_mode}
    if payload.date is not None:
        changes["date"] = payload.date
    for field in ("category", "received_by", "reference", "note"):
        if field in payload.model_fields_set:
            changes[field] = clean_text(getattr(payload, field))

    version = append_sale_version(db, sale, user_id=current_user.id, **changes)
    log_audit(
        db,
        AuditEntity.SALE,
        sale.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Sale #{sale.id} now at version {version.version_number}",
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(sale)
    return _sale_detail(db, sale)


@router.delete("/{sale_id}", response_model=MessageOut)
def remove_sale(
    sale_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sale = _get_sale_or_404(db, sale_id)
    log_audit(db, AuditEntity.SALE, sale.id, AuditAction.DELETE, current_user.id)
    delete_sales(db, [sale.id])
    db.commit()
    return MessageOut(message="Sale deleted")
