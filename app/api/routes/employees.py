from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.dates import day_start
from app.core.money import to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.staff import Employee
from app.models.user import User
from app.schemas.common import clean_text
from app.schemas.staff import EmployeeCreate, EmployeeOut, EmployeeStatusUpdate, EmployeeUpdate
from app.services.audit import log_audit

router = APIRouter(prefix="/employees", tags=["Employees"])


def get_employee_or_404(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return employee


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    employee = Employee(
        name=payload.name.strip(),
        phone=clean_text(payload.phone),
        role=clean_text(payload.role),
        base_salary_paise=to_paise(payload.base_salary),
        join_date=day_start(payload.join_date) if payload.join_date else None,
    )
    db.add(employee)
    db.flush()
    log_audit(
        db,
        AuditEntity.EMPLOYEE,
        employee.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Added employee {employee.name}",
    )
    db.commit()
    db.refresh(employee)
    return employee


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    include_inactive: bool = Query(default=False),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(Employee).order_by(Employee.name.asc())
    if not include_inactive:
        query = query.where(Employee.is_active.is_(True))
    return list(db.scalars(query).all())


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_employee_or_404(db, employee_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    employee = get_employee_or_404(db, employee_id)

    if payload.name is not None:
        employee.name = payload.name.strip()
    if "phone" in payload.model_fields_set:
        employee.phone = clean_text(payload.phone)
    if "role" in payload.model_fields_set:
        employee.role = clean_text(payload.role)
    if payload.base_salary is not None:
        employee.base_salary_paise = to_paise(payload.base_salary)
    if "join_date" in payload.model_fields_set:
        employee.join_date = day_start(payload.join_date) if payload.join_date else None
    if payload.is_active is not None:
        employee.is_active = payload.is_active

    log_audit(
        db,
        AuditEntity.EMPLOYEE,
        employee.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Updated employee {employee.name}",
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(employee)
    return employee


@router.patch("/{employee_id}/status", response_model=EmployeeOut)
def set_employee_status(
    employee_id: int,
    payload: EmployeeStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    employee = get_employee_or_404(db, employee_id)
    employee.is_active = payload.is_active
    log_audit(
        db,
        AuditEntity.EMPLOYEE,
        employee.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"{'Activated' if payload.is_active else 'Deactivated'} employee {employee.name}",
    )
    db.commit()
    db.refresh(employee)
    return employee
