from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field

from app.core.money import to_paise
from app.models.ledger import PaymentMode


def _normalize_enum_input(value):
    if isinstance(value, Enum) or not isinstance(value, str):
        return value
    return value.strip().upper().replace("-", "_").replace(" ", "_")


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _require_whole_paise(value: Decimal) -> Decimal:
    if to_paise(value) <= 0:
        raise ValueError("amount must be at least 0.01")
    return value


# Enum inputs are accepted in any case ("cash", "Cash", "CASH").
PaymentModeIn = Annotated[PaymentMode, BeforeValidator(_normalize_enum_input)]

# Stored timestamps are naive UTC; offsets in the request are applied first.
NaiveDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]

PositiveAmount = Annotated[Decimal, Field(gt=0), AfterValidator(_require_whole_paise)]


def normalized_enum(enum_cls: type[Enum]):
    return Annotated[enum_cls, BeforeValidator(_normalize_enum_input)]


def clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class OrmOut(BaseModel):
    # paise columns are read through their `*_paise` alias
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class BreakdownItemOut(BaseModel):
    label: str
    amount: Decimal
    count: int = 0
    share_percent: Decimal


class MessageOut(BaseModel):
    message: str
