from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.routes.advances import advance_out
from app.api.routes.employees import get_employee_or_404
from app.core.dates import day_end, day_start, month_bounds
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.staff import Employee, PayrollPeriod, PayrollStatus, Payslip
from app.models.user import User
from app.schemas.common import clean_text
from app.schemas.staff import (
    EmployeeOut,
    PayrollPeriodCreate,
    PayrollPeriodOut,
    PayslipDetailOut,
    PayslipOut,
    PayslipPayOut,
    PayslipPayRequest,
)
from app.services.audit import log_audit
from app.services.payroll import advances_in_range, generate_payslips
from app.services.reconciliation import create_salary_expense, remove_linked_expense

router = APIRouter(prefix="/payroll", tags=["Payroll"])


def _get_period_or_404(db: Session, period_id: int) -> PayrollPeriod:
    period = db.get(PayrollPeriod, period_id)
    if not period:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payroll period not found")
    return period


def _get_payslip_or_404(db: Session, payslip_id: int) -> Payslip:
    payslip = db.get(Payslip, payslip_id)
    if not payslip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payslip not found")
    return payslip


def _payslip_out(db: Session, payslip: Payslip, period: PayrollPeriod, employee: Employee) -> PayslipOut:
    advances = advances_in_range(db, employee.id, period.start_date, period.end_date)
    return PayslipOut.model_validate(payslip).model_copy(
        update={
            "employee_name": employee.name,
            "is_paid": payslip.paid_at is not None,
            "advances": [advance_out(advance, employee.name) for advance in advances],
        }
    )


@router.post("/periods", response_model=PayrollPeriodOut, status_code=status.HTTP_201_CREATED)
def upsert_period(
    payload: PayrollPeriodCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    month_name, month_start, month_end = month_bounds()
    name = (payload.name or month_name).strip()

    period = db.scalar(select(PayrollPeriod).where(PayrollPeriod.name == name))
    if period:
        if payload.start_date is not None:
            period.start_date = day_start(payload.start_date)
        if payload.end_date is not None:
            period.end_date = day_end(payload.end_date)
        action = AuditAction.UPDATE
        response.status_code = status.HTTP_200_OK
    else:
        period = PayrollPeriod(
            name=name,
            start_date=day_start(payload.start_date) if payload.start_date else month_start,
            end_date=day_end(payload.end_date) if payload.end_date else month_end,
        )
        db.add(period)
        action = AuditAction.CREATE

    if period.start_date > period.end_date:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start_date must be before end_date")

    db.flush()
    log_audit(db, AuditEntity.PAYROLL_PERIOD, period.id, action, current_user.id, summary=f"Payroll period {name}")
    db.commit()
    db.refresh(period)
    return period


@router.get("/periods", response_model=list[PayrollPeriodOut])
def list_periods(
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return list(
        db.scalars(select(PayrollPeriod).order_by(PayrollPeriod.start_date.desc(), PayrollPeriod.id.desc())).all()
    )


@router.post("/periods/{period_id}/close", response_model=PayrollPeriodOut)
def close_period(
    period_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    period = _get_period_or_404(db, period_id)
    if period.status == PayrollStatus.CLOSED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payroll period is already closed")
    period.status = PayrollStatus.CLOSED
    period.closed_at = datetime.utcnow()
    period.closed_by_user_id = current_user.id
    log_audit(db, AuditEntity.PAYROLL_PERIOD, period.id, AuditAction.CLOSE, current_user.id, summary=period.name)
    db.commit()
    db.refresh(period)
    return period


@router.post("/periods/{period_id}/reopen", response_model=PayrollPeriodOut)
def reopen_period(
    period_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    period = _get_period_or_404(db, period_id)
    if period.status == PayrollStatus.OPEN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payroll period is already open")
    period.status = PayrollStatus.OPEN
    period.closed_at = None
    period.closed_by_user_id = None
    log_audit(db, AuditEntity.PAYROLL_PERIOD, period.id, AuditAction.REOPEN, current_user.id, summary=period.name)
    db.commit()
    db.refresh(period)
    return period


@router.post("/periods/{period_id}/generate", response_model=list[PayslipOut])
def generate_period_payslips(
    period_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    period = _get_period_or_404(db, period_id)
    if period.status == PayrollStatus.CLOSED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Closed payroll periods cannot be regenerated")

    payslips = generate_payslips(db, period)
    log_audit(
        db,
        AuditEntity.PAYROLL_PERIOD,
        period.id,
        AuditAction.GENERATE,
        current_user.id,
        summary=f"Generated {len(payslips)} payslips for {period.name}",
    )
    db.commit()
    return list_period_payslips(period.id, current_user, db)


@router.get("/periods/{period_id}/payslips", response_model=list[PayslipOut])
def list_period_payslips(
    period_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    period = _get_period_or_404(db, period_id)
    rows = db.execute(
        select(Payslip, Employee)
        .join(Employee, Employee.id == Payslip.employee_id)
        .where(Payslip.payroll_period_id == period.id)
        .order_by(Employee.name.asc())
    ).all()
    return [_payslip_out(db, payslip, period, employee) for payslip, employee in rows]


@router.get("/periods/{period_id}/payslips/{employee_id}", response_model=PayslipDetailOut)
def get_employee_payslip(
    period_id: int,
    employee_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    period = _get_period_or_404(db, period_id)
    employee = get_employee_or_404(db, employee_id)
    payslip = db.scalar(
        select(Payslip).where(Payslip.payroll_period_id == period.id, Payslip.employee_id == employee.id)
    )
    if not payslip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payslip has not been generated")
    return PayslipDetailOut(
        period=PayrollPeriodOut.model_validate(period),
        employee=EmployeeOut.model_validate(employee),
        payslip=_payslip_out(db, payslip, period, employee),
    )


@router.post("/payslips/{payslip_id}/pay", response_model=PayslipPayOut)
def pay_payslip(
    payslip_id: int,
    payload: PayslipPayRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    payslip = _get_payslip_or_404(db, payslip_id)
    if payslip.paid_at is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payslip is already paid")
    period = _get_period_or_404(db, payslip.payroll_period_id)
    employee = get_employee_or_404(db, payslip.employee_id)

    payslip.paid_at = datetime.utcnow()
    payslip.payment_mode = payload.payment_mode
    payslip.paid_by = clean_text(payload.paid_by)
    payslip.payment_note = clean_text(payload.note)

    expense = None
    if payload.create_expense:
        expense = create_salary_expense(db, payslip, employee, period, current_user.id, note=payslip.payment_note)
        if expense is not None:
            payslip.related_expense_id = expense.id

    log_audit(
        db,
        AuditEntity.PAYSLIP,
        payslip.id,
        AuditAction.PAY,
        current_user.id,
        summary=f"Paid salary of {employee.name} for {period.name}",
        details={"related_expense_id": payslip.related_expense_id},
    )
    db.commit()
    db.refresh(payslip)
    return PayslipPayOut(
        message="Payslip marked as paid",
        payslip=_payslip_out(db, payslip, period, employee),
        expense_id=expense.id if expense is not None else None,
    )


@router.post("/payslips/{payslip_id}/unpay", response_model=PayslipOut)
def unpay_payslip(
    payslip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    payslip = _get_payslip_or_404(db, payslip_id)
    if payslip.paid_at is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payslip is not paid")
    period = _get_period_or_404(db, payslip.payroll_period_id)
    employee = get_employee_or_404(db, payslip.employee_id)

    remove_linked_expense(db, payslip.related_expense_id)
    payslip.related_expense_id = None
    payslip.paid_at = None
    payslip.payment_mode = None
    payslip.paid_by = None
    payslip.payment_note = None

    log_audit(
        db,
        AuditEntity.PAYSLIP,
        payslip.id,
        AuditAction.UNPAY,
        current_user.id,
        summary=f"Reverted salary payment of {employee.name} for {period.name}",
    )
    db.commit()
    db.refresh(payslip)
    return _payslip_out(db, payslip, period, employee)
