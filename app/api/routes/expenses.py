from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.dates import resolve_range
from app.core.money import to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.ledger import Expense, ExpenseVersion
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.ledger import ExpenseCreate, ExpenseDetailOut, ExpenseOut, ExpenseUpdate, ExpenseVersionOut
from app.services.audit import log_audit
from app.services.ledger import (
    append_expense_version,
    create_expense,
    current_expense_version,
    delete_expense,
    list_expense_versions,
)

router = APIRouter(prefix="/expenses", tags=["Expenses"])


def expense_out(expense: Expense, version: ExpenseVersion) -> ExpenseOut:
    return ExpenseOut(
        id=expense.id,
        current_version_id=expense.current_version_id,
        version_number=version.version_number,
        date=version.date,
        amount_paise=version.amount_paise,
        category=version.category,
        vendor=version.vendor,
        payment_mode=version.payment_mode,
        paid_by=version.paid_by,
        reference=version.reference,
        note=version.note,
        created_at=expense.created_at,
        updated_at=expense.updated_at,
    )


def _expense_detail(db: Session, expense: Expense) -> ExpenseDetailOut:
    version = current_expense_version(db, expense)
    if version is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense has no versions")
    versions = [ExpenseVersionOut.model_validate(item) for item in list_expense_versions(db, expense.id)]
    return ExpenseDetailOut(**expense_out(expense, version).model_dump(), versions=versions)


def _get_expense_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def add_expense(
    payload: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expense, version = create_expense(
        db,
        date=payload.date,
        amount_paise=to_paise(payload.amount),
        category=payload.category.strip(),
        vendor=clean_text(payload.vendor),
        payment_mode=payload.payment_mode,
        paid_by=clean_text(payload.paid_by),
        reference=clean_text(payload.reference),
        note=clean_text(payload.note),
        user_id=current_user.id,
    )
    log_audit(
        db,
        AuditEntity.EXPENSE,
        expense.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"{version.category} expense of {payload.amount}",
    )
    db.commit()
    db.refresh(expense)
    db.refresh(version)
    return expense_out(expense, version)


@router.get("", response_model=list[ExpenseOut])
def list_expenses(
    category: str | None = Query(default=None),
    vendor: str | None = Query(default=None),
    paid_by: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end = resolve_range(date_from, date_to)
    query = select(Expense, ExpenseVersion).join(ExpenseVersion, Expense.current_version_id == ExpenseVersion.id)
    if category:
        query = query.where(func.lower(ExpenseVersion.category) == category.strip().lower())
    if vendor:
        query = query.where(ExpenseVersion.vendor.ilike(f"%{vendor.strip()}%"))
    if paid_by:
        query = query.where(func.lower(ExpenseVersion.paid_by) == paid_by.strip().lower())
    if start is not None:
        query = query.where(ExpenseVersion.date >= start)
    if end is not None:
        query = query.where(ExpenseVersion.date <= end)
    query = query.order_by(ExpenseVersion.date.desc(), Expense.id.desc())
    return [expense_out(expense, version) for expense, version in db.execute(query).all()]


@router.get("/{expense_id}", response_model=ExpenseDetailOut)
def get_expense(
    expense_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _expense_detail(db, _get_expense_or_404(db, expense_id))


@router.put("/{expense_id}", response_model=ExpenseDetailOut)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expense = _get_expense_or_404(db, expense_id)

    changes: dict = {}
    if payload.date is not None:
        changes["date"] = payload.date
    if payload.amount is not None:
        changes["amount_paise"] = to_paise(payload.amount)
    if payload.category is not None:
        changes["category"] = payload.category.strip()
    if payload.payment_mode is not None:
        changes["payment_mode"] = payload.payment_mode
    for field in ("vendor", "paid_by", "reference", "note"):
        if field in payload.model_fields_set:
            changes[field] = clean_text(getattr(payload, field))

    version = append_expense_version(db, expense, user_id=current_user.id, **changes)
    log_audit(
        db,
        AuditEntity.EXPENSE,
        expense.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Expense #{expense.id} now at version {version.version_number}",
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(expense)
    return _expense_detail(db, expense)


@router.delete("/{expense_id}", response_model=MessageOut)
def remove_expense(
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expense = _get_expense_or_404(db, expense_id)
    log_audit(db, AuditEntity.EXPENSE, expense.id, AuditAction.DELETE, current_user.id)
    delete_expense(db, expense.id)
    db.commit()
    return MessageOut(message="Expense deleted")
