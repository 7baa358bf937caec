from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.money import to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.inventory import InventoryItem, StockTransaction, StockTransactionType
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemDetailOut,
    InventoryItemOut,
    InventoryItemUpdate,
    StockTransactionCreate,
    StockTransactionListOut,
    StockTransactionOut,
)
from app.services.audit import log_audit
from app.services.inventory import current_stock, is_low_stock, stock_levels

router = APIRouter(prefix="/inventory", tags=["Inventory"])


def _get_item_or_404(db: Session, item_id: int) -> InventoryItem:
    item = db.get(InventoryItem, item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item


def _item_out(item: InventoryItem, stock: int) -> InventoryItemOut:
    return InventoryItemOut.model_validate(item).model_copy(
        update={"current_stock": stock, "is_low_stock": is_low_stock(item, stock)}
    )


def _item_transactions(db: Session, item_id: int) -> list[StockTransaction]:
    return list(
        db.scalars(
            select(StockTransaction)
            .where(StockTransaction.item_id == item_id)
            .order_by(StockTransaction.date.desc(), StockTransaction.id.desc())
        ).all()
    )


def _normalize_sku(value: str | None) -> str | None:
    cleaned = clean_text(value)
    return cleaned.upper() if cleaned else None


@router.post("", response_model=InventoryItemOut, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: InventoryItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = InventoryItem(
        name=payload.name.strip(),
        category=clean_text(payload.category),
        sku=_normalize_sku(payload.sku),
        brand=clean_text(payload.brand),
        unit=payload.unit.strip(),
        min_stock=payload.min_stock,
    )
    db.add(item)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="SKU already exists") from exc
    log_audit(db, AuditEntity.INVENTORY_ITEM, item.id, AuditAction.CREATE, current_user.id, summary=item.name)
    db.commit()
    db.refresh(item)
    return _item_out(item, 0)


@router.get("", response_model=list[InventoryItemOut])
def list_items(
    q: str | None = Query(default=None),
    category: str | None = Query(default=None),
    low_stock_only: bool = Query(default=False),
    include_inactive: bool = Query(default=True),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(InventoryItem).order_by(InventoryItem.name.asc())
    if q and q.strip():
        term = f"%{q.strip()}%"
        query = query.where(or_(InventoryItem.name.ilike(term), InventoryItem.sku.ilike(term)))
    if category:
        query = query.where(func.lower(InventoryItem.category) == category.strip().lower())
    if not include_inactive:
        query = query.where(InventoryItem.is_active.is_(True))

    levels = stock_levels(db)
    items = [_item_out(item, levels.get(item.id, 0)) for item in db.scalars(query).all()]
    if low_stock_only:
        items = [item for item in items if item.is_low_stock]
    return items


@router.get("/{item_id}", response_model=InventoryItemDetailOut)
def get_item(
    item_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    transactions = [StockTransactionOut.model_validate(tx) for tx in _item_transactions(db, item.id)]
    return InventoryItemDetailOut(
        **_item_out(item, current_stock(db, item.id)).model_dump(),
        transactions=transactions,
    )


@router.put("/{item_id}", response_model=InventoryItemOut)
def update_item(
    item_id: int,
    payload: InventoryItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)

    if payload.name is not None:
        item.name = payload.name.strip()
    if "category" in payload.model_fields_set:
        item.category = clean_text(payload.category)
    if "sku" in payload.model_fields_set:
        item.sku = _normalize_sku(payload.sku)
    if "brand" in payload.model_fields_set:
        item.brand = clean_text(payload.brand)
    if payload.unit is not None:
        item.unit = payload.unit.strip()
    if payload.min_stock is not None:
        item.min_stock = payload.min_stock
    if payload.is_active is not None:
        item.is_active = payload.is_active

    log_audit(
        db,
        AuditEntity.INVENTORY_ITEM,
        item.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="SKU already exists") from exc
    db.refresh(item)
    return _item_out(item, current_stock(db, item.id))


@router.delete("/{item_id}", response_model=MessageOut)
def delete_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    tx_count = db.scalar(select(func.count(StockTransaction.id)).where(StockTransaction.item_id == item.id))
    if tx_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete item with existing stock transactions. Delete transactions first.",
        )
    log_audit(db, AuditEntity.INVENTORY_ITEM, item.id, AuditAction.DELETE, current_user.id, summary=item.name)
    db.delete(item)
    db.commit()
    return MessageOut(message="Item deleted")


@router.post("/{item_id}/stock", response_model=StockTransactionOut, status_code=status.HTTP_201_CREATED)
def add_stock_transaction(
    item_id: int,
    payload: StockTransactionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    if payload.type == StockTransactionType.OUT:
        available = current_stock(db, item.id)
        if payload.quantity > available:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Insufficient stock: {available} {item.unit} available",
            )

    tx = StockTransaction(
        item_id=item.id,
        type=payload.type,
        quantity=payload.quantity,
        unit_price_paise=to_paise(payload.unit_price) if payload.unit_price is not None else None,
        reason=clean_text(payload.reason),
        date=payload.date or datetime.utcnow(),
        created_by_user_id=current_user.id,
    )
    db.add(tx)
    db.flush()
    log_audit(
        db,
        AuditEntity.STOCK_TRANSACTION,
        tx.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"{tx.type.value} {tx.quantity} {item.unit} of {item.name}",
    )
    db.commit()
    db.refresh(tx)
    return tx


@router.get("/{item_id}/stock-transactions", response_model=StockTransactionListOut)
def list_stock_transactions(
    item_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    return StockTransactionListOut(
        item=_item_out(item, current_stock(db, item.id)),
        transactions=[StockTransactionOut.model_validate(tx) for tx in _item_transactions(db, item.id)],
    )


@router.delete("/{item_id}/stock/{tx_id}", response_model=MessageOut)
def delete_stock_transaction(
    item_id: int,
    tx_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tx = db.get(StockTransaction, tx_id)
    if not tx or tx.item_id != item_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock transaction not found")
    log_audit(db, AuditEntity.STOCK_TRANSACTION, tx.id, AuditAction.DELETE, current_user.id)
    db.delete(tx)
    db.commit()
    return MessageOut(message="Stock transaction deleted")
