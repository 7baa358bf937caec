"""Rupee <-> paise conversion.

Amounts are persisted and summed as integer paise. Decimals only exist in
request and response bodies.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BeforeValidator

PAISE_PER_RUPEE = 100
_TWO_PLACES = Decimal("0.01")


def to_paise(amount: Decimal | int | float | str | None) -> int:
    if amount is None:
        return 0
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * PAISE_PER_RUPEE).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_paise(paise: int | None) -> Decimal:
    if not paise:
        return Decimal("0.00")
    return (Decimal(int(paise)) / PAISE_PER_RUPEE).quantize(_TWO_PLACES)


def percent(part: int, whole: int) -> Decimal:
    if whole <= 0:
        return Decimal("0.00")
    return (Decimal(part) * 100 / Decimal(whole)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def _paise_to_rupees(value):
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return from_paise(value)
    return value


# Response field fed from an integer paise column.
Rupees = Annotated[Decimal, BeforeValidator(_paise_to_rupees)]
