"""
Money helpers shared by the state manager and the database layer.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

CENTS = Decimal("0.01")

# Largest amount a Numeric(10, 2) column holds
MAX_MONEY = Decimal("99999999.99")

# Plain ASCII decimal notation: no exponents, underscores or other scripts' digits
_DECIMAL_TEXT = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)")

Number = Union[Decimal, int, float, str]


def to_money(value: Optional[Number]) -> Decimal:
    """
    Normalise a monetary value to a Decimal rounded to cents.

    None and empty strings count as zero. Floats go through ``str`` so that
    ``0.1`` becomes ``Decimal("0.10")`` rather than its binary expansion.
    Strings must be plain decimal notation such as ``"12"`` or ``"4.50"``.

    Raises:
        ValueError: if the value is not a finite number
    """
    if value is None or value == "":
        return Decimal("0.00")
    if isinstance(value, str) and not _DECIMAL_TEXT.fullmatch(value.strip()):
        raise ValueError(f"Not a number: {value!r}")
    try:
        amount = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {value!r}")


def total_purchase_price(
    item_cost: Optional[Number],
    purchase_shipping_cost: Optional[Number] = None,
    purchase_sales_tax: Optional[Number] = None,
) -> Decimal:
    """
    Derived total purchase price of an inventory item.

    Args:
        item_cost: Unit cost paid
        purchase_shipping_cost: Shipping paid on purchase (missing counts as 0)
        purchase_sales_tax: Sales tax paid on purchase (missing counts as 0)

    Returns:
        Sum of the three components, in cents
    """
    return to_money(item_cost) + to_money(purchase_shipping_cost) + to_money(purchase_sales_tax)
