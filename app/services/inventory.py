from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.models.inventory import InventoryItem, StockTransaction, StockTransactionType


def _signed_quantity():
    return case(
        (StockTransaction.type == StockTransactionType.IN, StockTransaction.quantity),
        else_=-StockTransaction.quantity,
    )


def stock_levels(db: Session) -> dict[int, int]:
    """Current stock per item id, Σ IN − Σ OUT. Items without movements are absent."""
    rows = db.execute(
        select(StockTransaction.item_id, func.coalesce(func.sum(_signed_quantity()), 0)).group_by(
            StockTransaction.item_id
        )
    ).all()
    return {int(item_id): int(stock) for item_id, stock in rows}


def current_stock(db: Session, item_id: int) -> int:
    stock = db.scalar(
        select(func.coalesce(func.sum(_signed_quantity()), 0)).where(StockTransaction.item_id == item_id)
    )
    return int(stock or 0)


def is_low_stock(item: InventoryItem, stock: int) -> bool:
    return stock <= item.min_stock
