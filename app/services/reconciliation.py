"""Linked expenses mirroring advances, salary payouts and vendor payments.

Each source record owns at most one expense through ``related_expense_id``.
Creating the source creates the expense, editing it appends an expense
version, deleting it removes the expense with its versions.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.models.ledger import Expense
from app.models.staff import Advance, Employee, PayrollPeriod, Payslip
from app.models.vendor import Vendor, VendorPayment, VendorPaymentStatus
from app.services.ledger import append_expense_version, create_expense, delete_expense

logger = logging.getLogger(__name__)

EMPLOYEE_ADVANCE_CATEGORY = "Employee Advance"
SALARY_PAYMENT_CATEGORY = "Salary Payment"
VENDOR_PAYMENT_CATEGORY = "Vendor Payment"


def _advance_expense_fields(advance: Advance, employee: Employee) -> dict:
    return {
        "date": advance.date,
        "amount_paise": advance.amount_paise,
        "category": EMPLOYEE_ADVANCE_CATEGORY,
        "vendor": employee.name,
        "payment_mode": advance.payment_mode,
        "paid_by": advance.paid_by,
        "reference": f"Advance #{advance.id}",
        "note": advance.note or f"Advance for {employee.name}",
    }


def sync_advance_expense(db: Session, advance: Advance, employee: Employee, user_id: int | None) -> Expense:
    fields = _advance_expense_fields(advance, employee)
    expense = db.get(Expense, advance.related_expense_id) if advance.related_expense_id else None
    if expense is None:
        expense, _ = create_expense(db, user_id=user_id, **fields)
        advance.related_expense_id = expense.id
        logger.info("Created expense %s for advance %s", expense.id, advance.id)
    else:
        append_expense_version(db, expense, user_id=user_id, **fields)
        logger.info("Appended expense version on %s for advance %s", expense.id, advance.id)
    return expense


def remove_linked_expense(db: Session, expense_id: int | None) -> bool:
    if expense_id is None:
        return False
    removed = delete_expense(db, expense_id)
    if removed:
        logger.info("Removed linked expense %s", expense_id)
    return removed


def create_salary_expense(
    db: Session,
    payslip: Payslip,
    employee: Employee,
    period: PayrollPeriod,
    user_id: int | None,
    note: str | None = None,
) -> Expense | None:
    if payslip.net_pay_paise <= 0 or payslip.payment_mode is None:
        return None
    expense, _ = create_expense(
        db,
        date=payslip.paid_at or datetime.utcnow(),
        amount_paise=payslip.net_pay_paise,
        category=SALARY_PAYMENT_CATEGORY,
        vendor=employee.name,
        payment_mode=payslip.payment_mode,
        paid_by=payslip.paid_by,
        reference=f"{period.name} - {employee.name}",
        note=note or f"Salary for {period.name}",
        user_id=user_id,
    )
    logger.info("Created salary expense %s for payslip %s", expense.id, payslip.id)
    return expense


def vendor_payment_status(amount_paise: int, amount_paid_paise: int) -> VendorPaymentStatus:
    if amount_paid_paise <= 0:
        return VendorPaymentStatus.PENDING
    if amount_paid_paise >= amount_paise:
        return VendorPaymentStatus.PAID
    return VendorPaymentStatus.PARTIAL


def outstanding_paise(payment: VendorPayment) -> int:
    return payment.amount_paise - payment.amount_paid_paise


def _vendor_expense_note(vendor: Vendor, payment: VendorPayment) -> str:
    if payment.description:
        return f"Payment to {vendor.name}: {payment.description}"
    return f"Payment to {vendor.name}"


def sync_vendor_payment_expense(
    db: Session,
    payment: VendorPayment,
    vendor: Vendor,
    user_id: int | None,
) -> Expense | None:
    """Mirror the paid part of a vendor bill into the expense ledger."""
    expense = db.get(Expense, payment.related_expense_id) if payment.related_expense_id else None

    if payment.amount_paid_paise <= 0 or payment.payment_mode is None:
        if expense is not None:
            remove_linked_expense(db, expense.id)
            payment.related_expense_id = None
        return None

    fields = {
        "date": payment.date,
        "amount_paise": payment.amount_paid_paise,
        "category": VENDOR_PAYMENT_CATEGORY,
        "vendor": vendor.name,
        "payment_mode": payment.payment_mode,
        "paid_by": payment.paid_by,
        "reference": payment.invoice_number,
        "note": _vendor_expense_note(vendor, payment),
    }
    if expense is None:
        expense, _ = create_expense(db, user_id=user_id, **fields)
        payment.related_expense_id = expense.id
        logger.info("Created expense %s for vendor payment %s", expense.id, payment.id)
    else:
        append_expense_version(db, expense, user_id=user_id, **fields)
        logger.info("Appended expense version on %s for vendor payment %s", expense.id, payment.id)
    return expense
