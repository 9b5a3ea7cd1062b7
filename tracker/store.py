"""
In-memory inventory and sales state manager.

``InventoryStore`` owns the list of inventory items and mediates the three forms
of the tracker UI (Add Item, Edit Item, Log Sale). A view layer calls its
methods in response to user events and re-renders from its state:

    store = InventoryStore(confirm=ask_user)
    store.open_add_form()
    store.submit_item_form({"item_name": "Widget", "item_cost": "10", ...})
    store.set_search_term("widg")
    rows = store.filtered_items

All mutations run synchronously to completion. Nothing is persisted.
"""
import logging
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from . import schemas, validators
from .exceptions import (
    FormValidationError,
    InsufficientStockError,
    InvalidModeError,
    ItemNotFoundError,
    OutOfStockError,
)
from .identifiers import generate_internal_id, generate_item_number, generate_unique
from .pricing import to_money, total_purchase_price

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Are you sure you want to delete this inventory item?"

MONEY_FIELDS = ("item_cost", "purchase_shipping_cost", "purchase_sales_tax")

# Fields a caller can never overwrite on an existing item
IMMUTABLE_FIELDS = ("id", "item_number", "total_purchase_price", "created_at")

SAMPLE_ITEMS = [
    {
        "item_name": "Vintage T-Shirt - Band Edition",
        "description": "Rare 1990s band t-shirt, size L",
        "item_cost": "4.00",
        "purchase_shipping_cost": "1.00",
        "purchase_sales_tax": "0.00",
        "quantity_in_stock": 10,
        "supplier": "Retro Finds Co.",
        "purchase_date": "2024-04-15",
    },
    {
        "item_name": "Antique Ceramic Vase",
        "description": "Hand-painted, 19th century",
        "item_cost": "60.00",
        "purchase_shipping_cost": "5.00",
        "purchase_sales_tax": "5.00",
        "quantity_in_stock": 3,
        "supplier": "Estate Sales Inc.",
        "purchase_date": "2024-03-20",
    },
    {
        "item_name": "Action Figure - Hero X",
        "description": "Limited edition, mint condition",
        "item_cost": "25.00",
        "purchase_shipping_cost": "3.00",
        "purchase_sales_tax": "2.00",
        "quantity_in_stock": 0,
        "supplier": "Collectibles R Us",
        "purchase_date": "2024-05-01",
    },
]


class UIMode(str, Enum):
    """Which form, if any, is open. At most one form is open at a time."""
    IDLE = "idle"
    ADDING = "adding"
    EDITING = "editing"
    LOGGING_SALE = "logging_sale"


def matches_search(item: schemas.InventoryItem, query: Optional[str]) -> bool:
    """Case-insensitive substring match of ``query`` against item name or item number."""
    needle = (query or "").lower()
    return needle in (item.item_name or "").lower() or needle in (item.item_number or "").lower()


def _always_confirm(prompt: str) -> bool:
    return True


def _with_total(values: Mapping[str, Any]) -> schemas.InventoryItem:
    values = dict(values)
    for field in MONEY_FIELDS:
        values[field] = to_money(values.get(field))
    values["total_purchase_price"] = total_purchase_price(
        values["item_cost"], values["purchase_shipping_cost"], values["purchase_sales_tax"]
    )
    return schemas.InventoryItem(**values)


class InventoryStore:
    """
    Owner of the inventory item collection and of the UI mode.

    Args:
        items: Initial items; their total purchase prices are recomputed on load
        confirm: Called with a prompt before destructive actions; returning False cancels
    """

    def __init__(
        self,
        items: Optional[Iterable[schemas.InventoryItem]] = None,
        confirm: Callable[[str], bool] = _always_confirm,
    ):
        self._items: List[schemas.InventoryItem] = [_with_total(item.model_dump()) for item in items or []]
        self._confirm = confirm
        self.sales: List[schemas.SaleRecord] = []
        self.mode = UIMode.IDLE
        self.current_item_id: Optional[str] = None
        self.search_term = ""
        self.error_message = ""

    @classmethod
    def with_sample_items(cls, confirm: Callable[[str], bool] = _always_confirm) -> "InventoryStore":
        """Build a store pre-loaded with the sample inventory."""
        store = cls(confirm=confirm)
        for data in SAMPLE_ITEMS:
            store.add_item(schemas.InventoryItemCreate(**data))
        return store

    # -- queries -----------------------------------------------------------

    @property
    def items(self) -> List[schemas.InventoryItem]:
        return list(self._items)

    @property
    def current_item(self) -> Optional[schemas.InventoryItem]:
        """The item bound to the open Edit or Log Sale form."""
        if self.current_item_id is None:
            return None
        return self.get_item(self.current_item_id)

    @property
    def filtered_items(self) -> List[schemas.InventoryItem]:
        return self.search(self.search_term)

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise ItemNotFoundError(item_id)

    def get_item(self, item_id: str) -> schemas.InventoryItem:
        """
        Raises:
            ItemNotFoundError: if no item has this id
        """
        return self._items[self._index_of(item_id)]

    def search(self, query: Optional[str] = "") -> List[schemas.InventoryItem]:
        """Items whose name or item number contains ``query``, ignoring case. Empty query matches all."""
        return [item for item in self._items if matches_search(item, query)]

    def set_search_term(self, term: Optional[str]) -> None:
        self.search_term = term or ""

    # -- mutations ---------------------------------------------------------

    def add_item(self, data: schemas.InventoryItemCreate) -> schemas.InventoryItem:
        """
        Store a new item with a generated id, item number and total purchase price.

        Args:
            data: Item fields without id or item number

        Returns:
            The stored item
        """
        values = data.model_dump(exclude=set(IMMUTABLE_FIELDS))
        values["id"] = generate_unique(generate_internal_id, {item.id for item in self._items})
        values["item_number"] = generate_unique(generate_item_number, {item.item_number for item in self._items})
        item = _with_total(values)
        self._items.append(item)
        logger.info(f"Added inventory item {item.item_number} ({item.item_name})")
        return item

    def update_item(self, item_id: str, data: BaseModel) -> schemas.InventoryItem:
        """
        Replace the editable fields of an item and recompute its total purchase price.

        Only fields set on ``data`` are applied. Id and item number are kept
        from the stored record even if ``data`` carries different values.

        Args:
            item_id: Internal id of the item to update
            data: InventoryItemUpdate, or a full item record

        Returns:
            The updated item

        Raises:
            ItemNotFoundError: if no item has this id
        """
        index = self._index_of(item_id)
        existing = self._items[index]

        update_data = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None and key not in IMMUTABLE_FIELDS
        }
        values = existing.model_dump()
        values.update(update_data)
        item = _with_total(values)

        self._items[index] = item
        logger.info(f"Updated inventory item {item.item_number}")
        return item

    def delete_item(self, item_id: str) -> bool:
        """
        Delete an item after asking for confirmation.

        Returns:
            True if the item was deleted, False if the user declined

        Raises:
            ItemNotFoundError: if no item has this id
        """
        index = self._index_of(item_id)
        if not self._confirm(DELETE_CONFIRMATION):
            return False

        removed = self._items.pop(index)
        if self.current_item_id == item_id:
            self.cancel()
        logger.info(f"Deleted inventory item {removed.item_number}")
        return True

    def log_sale(
        self,
        sale: schemas.SaleDetails,
        item_id: str,
        quantity_sold: Optional[int] = None,
    ) -> schemas.SaleRecord:
        """
        Record a sale of an item and take the sold units out of stock.

        Args:
            sale: Sale details from the Log Sale form
            item_id: Internal id of the sold item
            quantity_sold: Units sold; defaults to ``sale.quantity_sold``

        Returns:
            The emitted sale record, linked to the item by item number

        Raises:
            ItemNotFoundError: if no item has this id
            FormValidationError: if the quantity is not positive
            OutOfStockError: if the item has no stock
            InsufficientStockError: if more units are requested than are in stock
        """
        quantity = sale.quantity_sold if quantity_sold is None else quantity_sold
        index = self._index_of(item_id)
        item = self._items[index]

        if quantity <= 0:
            raise FormValidationError("Quantity Sold must be a positive whole number.")
        if item.quantity_in_stock <= 0:
            raise OutOfStockError(item.item_number)
        if quantity > item.quantity_in_stock:
            raise InsufficientStockError(item.quantity_in_stock, quantity, item.item_number)

        self._items[index] = item.model_copy(update={"quantity_in_stock": item.quantity_in_stock - quantity})

        details = sale.model_dump()
        details["quantity_sold"] = quantity
        record = schemas.SaleRecord(
            inventory_item_number=item.item_number,
            item_name=item.item_name,
            **details,
        )
        self.sales.append(record)
        logger.info(
            f"Sale logged from inventory: {quantity} x {item.item_number} on {record.platform.value} "
            f"at {record.sale_price} each, {self._items[index].quantity_in_stock} left"
        )
        return record

    # -- form state machine ------------------------------------------------

    def open_add_form(self) -> None:
        self.mode = UIMode.ADDING
        self.current_item_id = None
        self.error_message = ""

    def open_edit_form(self, item_id: str) -> schemas.InventoryItem:
        """
        Raises:
            ItemNotFoundError: if no item has this id
        """
        item = self.get_item(item_id)
        self.mode = UIMode.EDITING
        self.current_item_id = item.id
        self.error_message = ""
        return item

    def open_log_sale_form(self, item_id: str) -> schemas.InventoryItem:
        """
        Open the Log Sale form for an item. Items without stock cannot be sold.

        Raises:
            ItemNotFoundError: if no item has this id
            OutOfStockError: if the item has no stock
        """
        item = self.get_item(item_id)
        if item.quantity_in_stock <= 0:
            raise OutOfStockError(item.item_number)
        self.mode = UIMode.LOGGING_SALE
        self.current_item_id = item.id
        self.error_message = ""
        return item

    def cancel(self) -> None:
        """Close whichever form is open, discarding its input."""
        self.mode = UIMode.IDLE
        self.current_item_id = None
        self.error_message = ""

    def submit_item_form(self, form: Mapping[str, Any]) -> schemas.InventoryItem:
        """
        Save the open Add or Edit form.

        On success the form closes. On a validation error the form stays open
        with ``error_message`` set and nothing is changed.

        Raises:
            InvalidModeError: if neither the Add nor the Edit form is open
            FormValidationError: if the input is invalid
            ItemNotFoundError: if the edited item no longer exists
        """
        if self.mode not in (UIMode.ADDING, UIMode.EDITING):
            raise InvalidModeError(f"No item form is open (mode: {self.mode.value})")

        self.error_message = ""
        try:
            data = validators.parse_item_form(form)
        except FormValidationError as e:
            self.error_message = e.message
            raise

        if self.mode is UIMode.ADDING:
            item = self.add_item(data)
        else:
            item = self.update_item(self.current_item_id, data)
        self.cancel()
        return item

    def submit_sale_form(self, form: Mapping[str, Any]) -> schemas.SaleRecord:
        """
        Save the open Log Sale form for the current item.

        Raises:
            InvalidModeError: if the Log Sale form is not open
            FormValidationError: if the input is invalid or exceeds the stock
            ItemNotFoundError: if the item no longer exists
        """
        if self.mode is not UIMode.LOGGING_SALE:
            raise InvalidModeError(f"Log Sale form is not open (mode: {self.mode.value})")

        item = self.get_item(self.current_item_id)
        self.error_message = ""
        try:
            details = validators.parse_sale_form(form, item.quantity_in_stock)
        except FormValidationError as e:
            if isinstance(e, InsufficientStockError):
                e.item_number = item.item_number
            self.error_message = e.message
            raise

        record = self.log_sale(details, item.id, details.quantity_sold)
        self.cancel()
        return record
