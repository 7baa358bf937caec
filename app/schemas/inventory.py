from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.core.money import Rupees
from app.models.inventory import StockTransactionType
from app.schemas.common import NaiveDateTime, OrmOut, normalized_enum

StockTransactionTypeIn = normalized_enum(StockTransactionType)


class InventoryItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    category: str | None = Field(default=None, max_length=120)
    sku: str | None = Field(default=None, max_length=64)
    brand: str | None = Field(default=None, max_length=120)
    unit: str = Field(default="piece", min_length=1, max_length=24)
    min_stock: int = Field(default=0, ge=0)


class InventoryItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    category: str | None = Field(default=None, max_length=120)
    sku: str | None = Field(default=None, max_length=64)
    brand: str | None = Field(default=None, max_length=120)
    unit: str | None = Field(default=None, min_length=1, max_length=24)
    min_stock: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class InventoryItemOut(OrmOut):
    id: int
    name: str
    category: str | None
    sku: str | None
    brand: str | None
    unit: str
    min_stock: int
    is_active: bool
    current_stock: int = 0
    is_low_stock: bool = False
    created_at: datetime
    updated_at: datetime


class StockTransactionCreate(BaseModel):
    type: StockTransactionTypeIn
    quantity: int = Field(gt=0)
    unit_price: Decimal | None = Field(default=None, ge=0)
    reason: str | None = Field(default=None, max_length=255)
    date: NaiveDateTime | None = None


class StockTransactionOut(OrmOut):
    id: int
    item_id: int
    type: StockTransactionType
    quantity: int
    unit_price: Rupees | None = Field(default=None, validation_alias="unit_price_paise")
    reason: str | None
    date: datetime
    related_expense_id: int | None
    created_by_user_id: int | None
    created_at: datetime


class InventoryItemDetailOut(InventoryItemOut):
    transactions: list[StockTransactionOut] = Field(default_factory=list)


class StockTransactionListOut(BaseModel):
    item: InventoryItemOut
    transactions: list[StockTransactionOut]
