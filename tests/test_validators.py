from datetime import date
from decimal import Decimal

import pytest

from tracker import schemas
from tracker.exceptions import FormValidationError, InsufficientStockError
from tracker.validators import (
    parse_item_form,
    parse_sale_form,
    parse_whole_number,
    validate_item_form,
    validate_sale_form,
)


SALE_FORM = {
    "sale_date": "2024-06-10",
    "platform": "eBay",
    "quantity_sold": "1",
    "sale_price": "15",
    "shipping_cost": "",
    "sales_tax": "",
    "platform_fees": "",
}


def _sale(**overrides):
    form = dict(SALE_FORM)
    form.update(overrides)
    return form


def test_valid_item_form_parses(widget_form):
    assert validate_item_form(widget_form) == (True, "")
    item = parse_item_form(widget_form)
    assert item.item_name == "Widget"
    assert item.item_cost == Decimal("10.00")
    assert item.quantity_in_stock == 5
    assert item.purchase_date == date(2024, 6, 1)


def test_optional_costs_default_to_zero(widget_form):
    widget_form["purchase_shipping_cost"] = ""
    widget_form["purchase_sales_tax"] = "   "
    item = parse_item_form(widget_form)
    assert item.purchase_shipping_cost == Decimal("0.00")
    assert item.purchase_sales_tax == Decimal("0.00")


@pytest.mark.parametrize("missing", ["item_name", "quantity_in_stock", "purchase_date"])
def test_item_required_fields(widget_form, missing):
    widget_form[missing] = ""
    assert validate_item_form(widget_form) == (
        False, "Please fill in Item Name, Quantity in Stock, and Purchase Date."
    )


def test_item_cost_is_required(widget_form):
    widget_form["item_cost"] = ""
    assert validate_item_form(widget_form) == (False, "Item Cost is required.")


@pytest.mark.parametrize("field,label", [
    ("item_cost", "Item Cost"),
    ("purchase_shipping_cost", "Purchase Shipping Cost"),
    ("purchase_sales_tax", "Purchase Sales Tax"),
])
@pytest.mark.parametrize("value", ["-1", "abc"])
def test_item_money_fields_must_be_non_negative_numbers(widget_form, field, label, value):
    widget_form[field] = value
    is_valid, message = validate_item_form(widget_form)
    assert not is_valid
    assert message == f"{label} must be a valid non-negative number if entered."


@pytest.mark.parametrize("quantity", ["-1", "2.5", "many"])
def test_item_quantity_must_be_non_negative_integer(widget_form, quantity):
    widget_form["quantity_in_stock"] = quantity
    is_valid, message = validate_item_form(widget_form)
    assert not is_valid
    assert message.startswith("Quantity in Stock")


def test_item_zero_quantity_is_valid(widget_form):
    widget_form["quantity_in_stock"] = "0"
    assert parse_item_form(widget_form).quantity_in_stock == 0


def test_item_purchase_date_must_be_iso(widget_form):
    widget_form["purchase_date"] = "06/01/2024"
    with pytest.raises(FormValidationError) as exc:
        parse_item_form(widget_form)
    assert "Purchase Date" in exc.value.message


def test_valid_sale_form_parses():
    details = parse_sale_form(_sale(shipping_cost="3.5", platform_fees="1.95"), available_stock=5)
    assert details.platform is schemas.Platform.EBAY
    assert details.quantity_sold == 1
    assert details.sale_price == Decimal("15.00")
    assert details.shipping_cost == Decimal("3.50")
    assert details.sales_tax == Decimal("0.00")
    assert details.platform_fees == Decimal("1.95")


@pytest.mark.parametrize("missing", ["sale_date", "platform", "quantity_sold", "sale_price"])
def test_sale_required_fields(missing):
    assert validate_sale_form(_sale(**{missing: ""}), available_stock=5) == (
        False, "Please fill in Sale Date, Platform, Quantity Sold, and Sale Price."
    )


@pytest.mark.parametrize("quantity", ["0", "-2", "1.5", "x"])
def test_sale_quantity_must_be_positive_integer(quantity):
    assert validate_sale_form(_sale(quantity_sold=quantity), available_stock=5) == (
        False, "Quantity Sold must be a positive whole number."
    )


def test_sale_quantity_cannot_exceed_stock():
    with pytest.raises(InsufficientStockError) as exc:
        parse_sale_form(_sale(quantity_sold="6"), available_stock=5)
    assert exc.value.available == 5
    assert exc.value.requested == 6
    assert exc.value.message == "Quantity Sold cannot exceed available stock (5)."


def test_sale_stock_is_checked_before_money_fields():
    is_valid, message = validate_sale_form(_sale(quantity_sold="9", sale_price="-1"), available_stock=2)
    assert not is_valid
    assert "available stock" in message


@pytest.mark.parametrize("field,label", [
    ("sale_price", "Sale Price"),
    ("shipping_cost", "Shipping Cost (Sale)"),
    ("sales_tax", "Sales Tax (Sale)"),
    ("platform_fees", "Platform Fees"),
])
def test_sale_money_fields_must_be_non_negative(field, label):
    assert validate_sale_form(_sale(**{field: "-0.01"}), available_stock=5) == (
        False, f"{label} must be a valid non-negative number if entered."
    )


def test_sale_platform_must_be_known():
    is_valid, message = validate_sale_form(_sale(platform="Craigslist"), available_stock=5)
    assert not is_valid
    assert message.startswith("Platform must be one of")


def test_parse_whole_number():
    assert parse_whole_number(" 7 ") == 7
    assert parse_whole_number(3) == 3
    assert parse_whole_number(True) is None
    assert parse_whole_number("3.0") is None


def test_parse_whole_number_rejects_underscores_and_non_ascii_digits():
    assert parse_whole_number("1_0") is None
    assert parse_whole_number("١٢") is None
    assert parse_whole_number("") is None
    assert parse_whole_number(None) is None
    assert parse_whole_number("-4") == -4


def test_item_form_rejects_underscored_numbers(widget_form):
    widget_form["quantity_in_stock"] = "1_0"
    is_valid, message = validate_item_form(widget_form)
    assert not is_valid
    assert message.startswith("Quantity in Stock")

    widget_form["quantity_in_stock"] = "5"
    widget_form["item_cost"] = "1_000"
    assert validate_item_form(widget_form) == (
        False, "Item Cost must be a valid non-negative number if entered."
    )


def test_item_cost_beyond_column_range_is_rejected(widget_form):
    widget_form["item_cost"] = "1000000000"
    assert validate_item_form(widget_form) == (
        False, "Item Cost must be a valid non-negative number if entered."
    )
    widget_form["item_cost"] = "99999999.99"
    assert parse_item_form(widget_form).item_cost == Decimal("99999999.99")


def test_sale_price_beyond_column_range_is_rejected():
    assert validate_sale_form(_sale(sale_price="1e27"), available_stock=5) == (
        False, "Sale Price must be a valid non-negative number if entered."
    )
