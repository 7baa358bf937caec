from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.routes.employees import get_employee_or_404
from app.core.dates import resolve_range
from app.core.money import to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.staff import Advance, Employee
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.staff import AdvanceCreate, AdvanceOut, AdvanceUpdate
from app.services.audit import log_audit
from app.services.reconciliation import remove_linked_expense, sync_advance_expense

router = APIRouter(prefix="/advances", tags=["Advances"])


def advance_out(advance: Advance, employee_name: str | None) -> AdvanceOut:
    return AdvanceOut.model_validate(advance).model_copy(update={"employee_name": employee_name})


def _get_advance_or_404(db: Session, advance_id: int) -> Advance:
    advance = db.get(Advance, advance_id)
    if not advance:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advance not found")
    return advance


@router.get("", response_model=list[AdvanceOut])
def list_advances(
    employee_id: int | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end = resolve_range(date_from, date_to)
    query = (
        select(Advance, Employee.name)
        .join(Employee, Employee.id == Advance.employee_id)
        .order_by(Advance.date.desc(), Advance.id.desc())
    )
    if employee_id is not None:
        query = query.where(Advance.employee_id == employee_id)
    if start is not None:
        query = query.where(Advance.date >= start)
    if end is not None:
        query = query.where(Advance.date <= end)
    return [advance_out(advance, name) for advance, name in db.execute(query).all()]


@router.post("", response_model=AdvanceOut, status_code=status.HTTP_201_CREATED)
def create_advance(
    payload: AdvanceCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    employee = get_employee_or_404(db, payload.employee_id)

    advance = Advance(
        employee_id=employee.id,
        date=payload.date or datetime.utcnow(),
        amount_paise=to_paise(payload.amount),
        payment_mode=payload.payment_mode,
        paid_by=clean_text(payload.paid_by),
        note=clean_text(payload.note),
        created_by_user_id=current_user.id,
    )
    db.add(advance)
    db.flush()
    sync_advance_expense(db, advance, employee, current_user.id)
    log_audit(
        db,
        AuditEntity.ADVANCE,
        advance.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Advance of {payload.amount} to {employee.name}",
        details={"related_expense_id": advance.related_expense_id},
    )
    db.commit()
    db.refresh(advance)
    return advance_out(advance, employee.name)


@router.put("/{advance_id}", response_model=AdvanceOut)
def update_advance(
    advance_id: int,
    payload: AdvanceUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    advance = _get_advance_or_404(db, advance_id)

    if payload.employee_id is not None and payload.employee_id != advance.employee_id:
        advance.employee_id = get_employee_or_404(db, payload.employee_id).id
    if payload.amount is not None:
        advance.amount_paise = to_paise(payload.amount)
    if payload.date is not None:
        advance.date = payload.date
    if payload.payment_mode is not None:
        advance.payment_mode = payload.payment_mode
    if "paid_by" in payload.model_fields_set:
        advance.paid_by = clean_text(payload.paid_by)
    if "note" in payload.model_fields_set:
        advance.note = clean_text(payload.note)

    employee = get_employee_or_404(db, advance.employee_id)
    db.flush()
    sync_advance_expense(db, advance, employee, current_user.id)
    log_audit(
        db,
        AuditEntity.ADVANCE,
        advance.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Updated advance #{advance.id} for {employee.name}",
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(advance)
    return advance_out(advance, employee.name)


@router.delete("/{advance_id}", response_model=MessageOut)
def delete_advance(
    advance_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    advance = _get_advance_or_404(db, advance_id)
    remove_linked_expense(db, advance.related_expense_id)
    log_audit(
        db,
        AuditEntity.ADVANCE,
        advance.id,
        AuditAction.DELETE,
        current_user.id,
        summary=f"Deleted advance #{advance.id}",
    )
    db.delete(advance)
    db.commit()
    return MessageOut(message="Advance deleted")
