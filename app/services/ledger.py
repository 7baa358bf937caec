"""Append-only version bookkeeping for sales and expenses.

A Sale or Expense row is only a header. Every edit writes a new version row
numbered ``max + 1`` and repoints ``current_version_id`` at it. Nothing here
commits; callers own the transaction.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from app.models.inventory import StockTransaction
from app.models.ledger import Expense, ExpenseVersion, PaymentMode, Sale, SaleVersion
from app.models.staff import Advance, Payslip
from app.models.vendor import VendorPayment

logger = logging.getLogger(__name__)

EXPENSE_VERSION_FIELDS = (
    "date",
    "amount_paise",
    "category",
    "vendor",
    "payment_mode",
    "paid_by",
    "reference",
    "note",
)
SALE_VERSION_FIELDS = (
    "date",
    "amount_paise",
    "category",
    "payment_mode",
    "received_by",
    "reference",
    "note",
)


def _next_version_number(db: Session, version_model, parent_column, parent_id: int) -> int:
    current_max = db.scalar(select(func.max(version_model.version_number)).where(parent_column == parent_id))
    return int(current_max or 0) + 1


def current_expense_version(db: Session, expense: Expense) -> ExpenseVersion | None:
    if expense.current_version_id is None:
        return None
    return db.get(ExpenseVersion, expense.current_version_id)


def list_expense_versions(db: Session, expense_id: int) -> list[ExpenseVersion]:
    return list(
        db.scalars(
            select(ExpenseVersion)
            .where(ExpenseVersion.expense_id == expense_id)
            .order_by(ExpenseVersion.version_number.desc())
        ).all()
    )


def create_expense(
    db: Session,
    *,
    amount_paise: int,
    category: str,
    payment_mode: PaymentMode,
    user_id: int | None,
    date: datetime | None = None,
    vendor: str | None = None,
    paid_by: str | None = None,
    reference: str | None = None,
    note: str | None = None,
) -> tuple[Expense, ExpenseVersion]:
    expense = Expense()
    db.add(expense)
    db.flush()

    version = ExpenseVersion(
        expense_id=expense.id,
        version_number=1,
        date=date or datetime.utcnow(),
        amount_paise=amount_paise,
        category=category,
        vendor=vendor,
        payment_mode=payment_mode,
        paid_by=paid_by,
        reference=reference,
        note=note,
        created_by_user_id=user_id,
    )
    db.add(version)
    db.flush()
    expense.current_version_id = version.id
    return expense, version


def append_expense_version(db: Session, expense: Expense, *, user_id: int | None, **changes) -> ExpenseVersion:
    """Write a new version; fields not given are carried over from the current one."""
    unknown = set(changes) - set(EXPENSE_VERSION_FIELDS)
    if unknown:
        raise ValueError(f"Unknown expense fields: {', '.join(sorted(unknown))}")

    current = current_expense_version(db, expense)
    values = {field: getattr(current, field) if current else None for field in EXPENSE_VERSION_FIELDS}
    values.update(changes)
    if values["date"] is None:
        values["date"] = datetime.utcnow()

    version = ExpenseVersion(
        expense_id=expense.id,
        version_number=_next_version_number(db, ExpenseVersion, ExpenseVersion.expense_id, expense.id),
        created_by_user_id=user_id,
        **values,
    )
    db.add(version)
    db.flush()
    expense.current_version_id = version.id
    expense.updated_at = datetime.utcnow()
    return version


def delete_expense(db: Session, expense_id: int) -> bool:
    """Drop an expense with all its versions and unlink whatever pointed at it."""
    expense = db.get(Expense, expense_id)
    if expense is None:
        return False

    for model in (Advance, VendorPayment, Payslip, StockTransaction):
        db.execute(
            update(model)
            .where(model.related_expense_id == expense_id)
            .values(related_expense_id=None)
            .execution_options(synchronize_session="fetch")
        )
    db.execute(delete(ExpenseVersion).where(ExpenseVersion.expense_id == expense_id))
    db.delete(expense)
    db.flush()
    return True


def current_sale_version(db: Session, sale: Sale) -> SaleVersion | None:
    if sale.current_version_id is None:
        return None
    return db.get(SaleVersion, sale.current_version_id)


def list_sale_versions(db: Session, sale_id: int) -> list[SaleVersion]:
    return list(
        db.scalars(
            select(SaleVersion)
            .where(SaleVersion.sale_id == sale_id)
            .order_by(SaleVersion.version_number.desc())
        ).all()
    )


def create_sale(
    db: Session,
    *,
    amount_paise: int,
    payment_mode: PaymentMode,
    user_id: int | None,
    date: datetime | None = None,
    category: str | None = None,
    received_by: str | None = None,
    reference: str | None = None,
    note: str | None = None,
    job_card_id: int | None = None,
) -> tuple[Sale, SaleVersion]:
    sale = Sale(job_card_id=job_card_id)
    db.add(sale)
    db.flush()

    version = SaleVersion(
        sale_id=sale.id,
        version_number=1,
        date=date or datetime.utcnow(),
        amount_paise=amount_paise,
        category=category,
        payment_mode=payment_mode,
        received_by=received_by,
        reference=reference,
        note=note,
        created_by_user_id=user_id,
    )
    db.add(version)
    db.flush()
    sale.current_version_id = version.id
    return sale, version


def append_sale_version(db: Session, sale: Sale, *, user_id: int | None, **changes) -> SaleVersion:
    unknown = set(changes) - set(SALE_VERSION_FIELDS)
    if unknown:
        raise ValueError(f"Unknown sale fields: {', '.join(sorted(unknown))}")

    current = current_sale_version(db, sale)
    values = {field: getattr(current, field) if current else None for field in SALE_VERSION_FIELDS}
    values.update(changes)
    if values["date"] is None:
        values["date"] = datetime.utcnow()

    version = SaleVersion(
        sale_id=sale.id,
        version_number=_next_version_number(db, SaleVersion, SaleVersion.sale_id, sale.id),
        created_by_user_id=user_id,
        **values,
    )
    db.add(version)
    db.flush()
    sale.current_version_id = version.id
    sale.updated_at = datetime.utcnow()
    return version


def delete_sales(db: Session, sale_ids: list[int]) -> int:
    if not sale_ids:
        return 0
    db.execute(delete(SaleVersion).where(SaleVersion.sale_id.in_(sale_ids)))
    db.execute(delete(Sale).where(Sale.id.in_(sale_ids)).execution_options(synchronize_session="fetch"))
    db.flush()
    logger.debug("Deleted sales %s", sale_ids)
    return len(sale_ids)
