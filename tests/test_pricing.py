from decimal import Decimal

import pytest

from tracker.pricing import to_money, total_purchase_price


def test_total_purchase_price_sums_components():
    assert total_purchase_price(10, 2, 0) == Decimal("12.00")
    assert total_purchase_price("4.00", "1.00", "0.00") == Decimal("5.00")


def test_missing_components_count_as_zero():
    assert total_purchase_price(Decimal("25"), None, "") == Decimal("25.00")


def test_float_inputs_round_to_cents():
    assert total_purchase_price(0.1, 0.2, 0) == Decimal("0.30")
    assert to_money("4.005") == Decimal("4.01")


@pytest.mark.parametrize("bad", ["abc", "nan", "Infinity", "1e400"])
def test_to_money_rejects_non_finite_or_garbage(bad):
    with pytest.raises(ValueError):
        to_money(bad)


@pytest.mark.parametrize("bad", ["1_000", "١٢", "1e2", "12abc", "."])
def test_to_money_accepts_only_plain_ascii_decimals(bad):
    with pytest.raises(ValueError):
        to_money(bad)


def test_to_money_accepts_plain_decimal_text():
    assert to_money(" 12 ") == Decimal("12.00")
    assert to_money("-.5") == Decimal("-0.50")
    assert to_money("3.") == Decimal("3.00")
