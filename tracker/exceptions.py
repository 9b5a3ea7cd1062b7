"""
Errors raised by the inventory/sales state manager and the database layer.
"""
from typing import Optional


class TrackerError(Exception):
    """Base class for all tracker errors."""


class FormValidationError(TrackerError):
    """Raised when form input is missing or malformed. Nothing is mutated."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InsufficientStockError(FormValidationError):
    """Raised when a sale asks for more units than are in stock."""

    def __init__(self, available: int, requested: int, item_number: Optional[str] = None):
        super().__init__(f"Quantity Sold cannot exceed available stock ({available}).")
        self.available = available
        self.requested = requested
        self.item_number = item_number


class OutOfStockError(FormValidationError):
    """Raised when a sale is attempted for an item with no stock."""

    def __init__(self, item_number: str):
        super().__init__(f"Item {item_number} is out of stock.")
        self.item_number = item_number


class ItemNotFoundError(TrackerError):
    """Raised when an operation references an inventory item id that does not exist."""

    def __init__(self, item_id: str):
        super().__init__(f"Inventory item not found: {item_id}")
        self.item_id = item_id


class InvalidModeError(TrackerError):
    """Raised when a form is submitted while a different form (or none) is open."""
