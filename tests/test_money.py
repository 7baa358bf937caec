from decimal import Decimal

from app.core.money import from_paise, percent, to_paise


def test_to_paise_rounds_half_up():
    assert to_paise(Decimal("10.005")) == 1001
    assert to_paise("99.99") == 9999
    assert to_paise(None) == 0


def test_from_paise_keeps_two_places():
    assert from_paise(12345) == Decimal("123.45")
    assert from_paise(0) == Decimal("0.00")
    assert str(from_paise(3000000)) == "30000.00"


def test_percent_of_empty_whole_is_zero():
    assert percent(1, 3) == Decimal("33.33")
    assert percent(5, 0) == Decimal("0.00")
