"""
Form validation for the Add/Edit Item and Log Sale forms.

Forms arrive as mappings of raw input strings, the way a browser submits them.
Rules are checked in a fixed order and the first failing rule wins, so the
message shown to the user is deterministic.
"""
import re
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple

from . import schemas
from .exceptions import FormValidationError, InsufficientStockError
from .pricing import MAX_MONEY, to_money

_WHOLE_NUMBER_TEXT = re.compile(r"[+-]?[0-9]+")


ITEM_MONEY_FIELDS = (
    # (key, label, optional)
    ("item_cost", "Item Cost", False),
    ("purchase_shipping_cost", "Purchase Shipping Cost", True),
    ("purchase_sales_tax", "Purchase Sales Tax", True),
)

SALE_MONEY_FIELDS = (
    ("sale_price", "Sale Price"),
    ("shipping_cost", "Shipping Cost (Sale)"),
    ("sales_tax", "Sales Tax (Sale)"),
    ("platform_fees", "Platform Fees"),
)


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return "" if value is None else str(value).strip()


def parse_non_negative_money(value: Any) -> Optional[Decimal]:
    """Return the value as cents, or None if it is not a number between 0 and MAX_MONEY. Blank means 0."""
    if _is_blank(value):
        return Decimal("0.00")
    try:
        amount = to_money(value)
    except ValueError:
        return None
    if amount < 0 or amount > MAX_MONEY:
        return None
    return amount


def parse_whole_number(value: Any) -> Optional[int]:
    """Return the value as an int, or None if it is not a whole number ("2.5", "abc", True)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = "" if value is None else str(value).strip()
    if not _WHOLE_NUMBER_TEXT.fullmatch(text):
        return None
    return int(text)


def parse_iso_date(value: Any) -> Optional[date]:
    """Return the value as a date, or None if it is not YYYY-MM-DD."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _check_item_form(form: Mapping[str, Any]) -> Optional[FormValidationError]:
    if _is_blank(form.get("item_name")) or _is_blank(form.get("quantity_in_stock")) or _is_blank(form.get("purchase_date")):
        return FormValidationError("Please fill in Item Name, Quantity in Stock, and Purchase Date.")

    for key, label, optional in ITEM_MONEY_FIELDS:
        value = form.get(key)
        if not _is_blank(value):
            if parse_non_negative_money(value) is None:
                return FormValidationError(f"{label} must be a valid non-negative number if entered.")
        elif not optional:
            return FormValidationError(f"{label} is required.")

    quantity = parse_whole_number(form.get("quantity_in_stock"))
    if quantity is None or quantity < 0:
        return FormValidationError("Quantity in Stock must be a valid non-negative whole number.")

    if parse_iso_date(form.get("purchase_date")) is None:
        return FormValidationError("Purchase Date must be a valid date (YYYY-MM-DD).")

    return None


def validate_item_form(form: Mapping[str, Any]) -> Tuple[bool, str]:
    """
    Validate the Add/Edit Item form.

    Args:
        form: Raw form values keyed by field name

    Returns:
        Tuple of (is_valid, error_message)
    """
    error = _check_item_form(form)
    if error is not None:
        return False, error.message
    return True, ""


def parse_item_form(form: Mapping[str, Any]) -> schemas.InventoryItemCreate:
    """
    Validate the Add/Edit Item form and convert it to typed item data.

    Optional monetary fields left empty become 0.

    Raises:
        FormValidationError: if any rule fails
    """
    error = _check_item_form(form)
    if error is not None:
        raise error

    return schemas.InventoryItemCreate(
        item_name=_text(form, "item_name"),
        description=_text(form, "description"),
        item_cost=parse_non_negative_money(form.get("item_cost")),
        purchase_shipping_cost=parse_non_negative_money(form.get("purchase_shipping_cost")),
        purchase_sales_tax=parse_non_negative_money(form.get("purchase_sales_tax")),
        quantity_in_stock=parse_whole_number(form.get("quantity_in_stock")),
        supplier=_text(form, "supplier"),
        purchase_date=parse_iso_date(form.get("purchase_date")),
    )


def _check_sale_form(form: Mapping[str, Any], available_stock: int) -> Optional[FormValidationError]:
    if any(_is_blank(form.get(key)) for key in ("sale_date", "platform", "quantity_sold", "sale_price")):
        return FormValidationError("Please fill in Sale Date, Platform, Quantity Sold, and Sale Price.")

    quantity = parse_whole_number(form.get("quantity_sold"))
    if quantity is None or quantity <= 0:
        return FormValidationError("Quantity Sold must be a positive whole number.")

    if quantity > available_stock:
        return InsufficientStockError(available=available_stock, requested=quantity)

    for key, label in SALE_MONEY_FIELDS:
        value = form.get(key)
        if not _is_blank(value) and parse_non_negative_money(value) is None:
            return FormValidationError(f"{label} must be a valid non-negative number if entered.")

    if _text(form, "platform") not in schemas.SALE_PLATFORMS:
        return FormValidationError(f"Platform must be one of: {', '.join(schemas.SALE_PLATFORMS)}.")

    if parse_iso_date(form.get("sale_date")) is None:
        return FormValidationError("Sale Date must be a valid date (YYYY-MM-DD).")

    return None


def validate_sale_form(form: Mapping[str, Any], available_stock: int) -> Tuple[bool, str]:
    """
    Validate the Log Sale form against the stock of the item being sold.

    Args:
        form: Raw form values keyed by field name
        available_stock: Current quantity in stock of the item

    Returns:
        Tuple of (is_valid, error_message)
    """
    error = _check_sale_form(form, available_stock)
    if error is not None:
        return False, error.message
    return True, ""


def parse_sale_form(form: Mapping[str, Any], available_stock: int) -> schemas.SaleDetails:
    """
    Validate the Log Sale form and convert it to typed sale details.

    Raises:
        InsufficientStockError: if more units are requested than are available
        FormValidationError: if any other rule fails
    """
    error = _check_sale_form(form, available_stock)
    if error is not None:
        raise error

    return schemas.SaleDetails(
        sale_date=parse_iso_date(form.get("sale_date")),
        platform=schemas.Platform(_text(form, "platform")),
        quantity_sold=parse_whole_number(form.get("quantity_sold")),
        sale_price=parse_non_negative_money(form.get("sale_price")),
        shipping_cost=parse_non_negative_money(form.get("shipping_cost")),
        sales_tax=parse_non_negative_money(form.get("sales_tax")),
        platform_fees=parse_non_negative_money(form.get("platform_fees")),
    )
