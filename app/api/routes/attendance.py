from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.routes.employees import get_employee_or_404
from app.core.dates import day_start, resolve_range
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.staff import Attendance, Employee
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.staff import AttendanceCreate, AttendanceOut, AttendanceUpdate
from app.services.audit import log_audit

router = APIRouter(prefix="/attendance", tags=["Attendance"])


def _attendance_out(record: Attendance, employee_name: str | None) -> AttendanceOut:
    return AttendanceOut.model_validate(record).model_copy(update={"employee_name": employee_name})


@router.post("", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
def mark_attendance(
    payload: AttendanceCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    employee = get_employee_or_404(db, payload.employee_id)
    day = day_start(payload.date)

    record = db.scalar(select(Attendance).where(Attendance.employee_id == employee.id, Attendance.date == day))
    if record:
        record.status = payload.status
        record.note = clean_text(payload.note)
        action = AuditAction.UPDATE
        response.status_code = status.HTTP_200_OK
    else:
        record = Attendance(employee_id=employee.id, date=day, status=payload.status, note=clean_text(payload.note))
        db.add(record)
        action = AuditAction.CREATE
    db.flush()

    log_audit(
        db,
        AuditEntity.ATTENDANCE,
        record.id,
        action,
        current_user.id,
        summary=f"{employee.name} {record.status.value} on {day:%Y-%m-%d}",
    )
    db.commit()
    db.refresh(record)
    return _attendance_out(record, employee.name)


@router.put("/{attendance_id}", response_model=AttendanceOut)
def update_attendance(
    attendance_id: int,
    payload: AttendanceUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = db.get(Attendance, attendance_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attendance record not found")

    if payload.date is not None:
        record.date = day_start(payload.date)
    if payload.status is not None:
        record.status = payload.status
    if "note" in payload.model_fields_set:
        record.note = clean_text(payload.note)

    log_audit(
        db,
        AuditEntity.ATTENDANCE,
        record.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Attendance already recorded for this employee on that date",
        ) from exc
    db.refresh(record)
    employee = db.get(Employee, record.employee_id)
    return _attendance_out(record, employee.name if employee else None)


@router.get("", response_model=list[AttendanceOut])
def list_attendance(
    employee_id: int | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    start, end = resolve_range(date_from, date_to)
    query = (
        select(Attendance, Employee.name)
        .join(Employee, Employee.id == Attendance.employee_id)
        .order_by(Attendance.date.desc(), Employee.name.asc())
    )
    if employee_id is not None:
        query = query.where(Attendance.employee_id == employee_id)
    if start is not None:
        query = query.where(Attendance.date >= start)
    if end is not None:
        query = query.where(Attendance.date <= end)
    return [_attendance_out(record, name) for record, name in db.execute(query).all()]


@router.delete("/{attendance_id}", response_model=MessageOut)
def delete_attendance(
    attendance_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = db.get(Attendance, attendance_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attendance record not found")
    log_audit(db, AuditEntity.ATTENDANCE, record.id, AuditAction.DELETE, current_user.id)
    db.delete(record)
    db.commit()
    return MessageOut(message="Attendance record deleted")
