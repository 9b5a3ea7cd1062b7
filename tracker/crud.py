"""
CRUD (Create, Read, Update, Delete) operations for the Tracker service.

This module contains all database operations for inventory and sales management.
"""
from decimal import Decimal
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from sqlalchemy import func
from . import models, schemas
from .exceptions import InsufficientStockError, OutOfStockError
from .identifiers import generate_internal_id, generate_item_number, generate_unique
from .pricing import to_money, total_purchase_price

# Set up logging
logger = logging.getLogger(__name__)


class _TakenInTable:
    """Membership test against an identifier column, for unique id generation."""

    def __init__(self, db: Session, column):
        self.db = db
        self.column = column

    def __contains__(self, value: str) -> bool:
        return self.db.query(self.column).filter(self.column == value).first() is not None


def _apply_total(db_item: models.InventoryItem) -> None:
    for field in ("item_cost", "purchase_shipping_cost", "purchase_sales_tax"):
        setattr(db_item, field, to_money(getattr(db_item, field)))
    db_item.total_purchase_price = total_purchase_price(
        db_item.item_cost, db_item.purchase_shipping_cost, db_item.purchase_sales_tax
    )


def get_inventory_item(db: Session, item_id: str) -> Optional[models.InventoryItem]:
    """
    Retrieve a single inventory item by its internal ID.

    Args:
        db: Database session
        item_id: Internal ID of the inventory item to retrieve

    Returns:
        InventoryItem object or None if not found
    """
    return db.query(models.InventoryItem).filter(models.InventoryItem.id == item_id).first()

def _item_for_update(db: Session, item_id: str):
    """Query for one inventory item that locks its row until the transaction ends."""
    return db.query(models.InventoryItem).filter(models.InventoryItem.id == item_id).with_for_update()

def get_inventory_item_by_number(db: Session, item_number: str) -> Optional[models.InventoryItem]:
    """
    Retrieve an inventory item by its user-facing item number.

    Args:
        db: Database session
        item_number: Item number to search for

    Returns:
        InventoryItem object or None if not found
    """
    return db.query(models.InventoryItem).filter(models.InventoryItem.item_number == item_number).first()

def get_inventory_items(db: Session, skip: int = 0, limit: int = 100, search: Optional[str] = None) -> List[models.InventoryItem]:
    """
    Retrieve a list of inventory items with pagination.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return
        search: Optional case-insensitive substring matched against item name or item number

    Returns:
        List of InventoryItem objects, oldest first
    """
    query = db.query(models.InventoryItem)
    if search:
        query = query.filter(
            models.InventoryItem.item_name.icontains(search, autoescape=True)
            | models.InventoryItem.item_number.icontains(search, autoescape=True)
        )
    return query.order_by(models.InventoryItem.created_at, models.InventoryItem.id).offset(skip).limit(limit).all()

def create_inventory_item(db: Session, item: schemas.InventoryItemCreate) -> models.InventoryItem:
    """
    Create a new inventory item with generated identifiers and derived total.

    Args:
        db: Database session
        item: Inventory item data to create

    Returns:
        Created InventoryItem object
    """
    db_item = models.InventoryItem(**item.model_dump())
    db_item.id = generate_unique(generate_internal_id, _TakenInTable(db, models.InventoryItem.id))
    db_item.item_number = generate_unique(generate_item_number, _TakenInTable(db, models.InventoryItem.item_number))
    _apply_total(db_item)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.info(f"Created inventory item {db_item.item_number} ({db_item.item_name})")
    return db_item

def update_inventory_item(db: Session, item_id: str, item: schemas.InventoryItemUpdate) -> Optional[models.InventoryItem]:
    """
    Update an existing inventory item and recompute its total purchase price.

    Args:
        db: Database session
        item_id: Internal ID of the inventory item to update
        item: Updated item data (only provided fields will be updated)

    Returns:
        Updated InventoryItem object or None if not found
    """
    db_item = get_inventory_item(db, item_id)
    if db_item is None:
        return None

    update_data = item.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is not None:
            setattr(db_item, key, value)
    _apply_total(db_item)

    db.commit()
    db.refresh(db_item)
    logger.info(f"Updated inventory item {db_item.item_number}")
    return db_item

def delete_inventory_item(db: Session, item_id: str) -> bool:
    """
    Delete an inventory item from the database.

    Args:
        db: Database session
        item_id: Internal ID of the inventory item to delete

    Returns:
        True if item was deleted, False if not found
    """
    db_item = get_inventory_item(db, item_id)
    if db_item is None:
        return False

    item_number = db_item.item_number
    db.delete(db_item)
    db.commit()
    logger.info(f"Deleted inventory item {item_number}")
    return True

def get_inventory_analytics(db: Session, low_stock_threshold: int) -> dict:
    """
    Summarise stock levels across the inventory.

    Args:
        db: Database session
        low_stock_threshold: Items with stock above zero and at or below this count as low stock

    Returns:
        dict: total_items, total_quantity, out_of_stock, low_stock, total_stock_value, low_stock_items
    """
    total_items = db.query(func.count(models.InventoryItem.id)).scalar()

    out_of_stock = db.query(func.count(models.InventoryItem.id)).filter(
        models.InventoryItem.quantity_in_stock == 0
    ).scalar()

    low_stock_items = db.query(models.InventoryItem).filter(
        models.InventoryItem.quantity_in_stock > 0,
        models.InventoryItem.quantity_in_stock <= low_stock_threshold
    ).order_by(models.InventoryItem.quantity_in_stock).all()

    total_quantity = db.query(func.sum(models.InventoryItem.quantity_in_stock)).scalar() or 0

    # Value of stock on hand at purchase price
    total_stock_value = sum(
        (to_money(price) * qty
         for price, qty in db.query(models.InventoryItem.total_purchase_price, models.InventoryItem.quantity_in_stock)),
        Decimal("0.00")
    )

    return {
        "total_items": total_items,
        "total_quantity": int(total_quantity),
        "out_of_stock": out_of_stock,
        "low_stock": len(low_stock_items),
        "total_stock_value": str(total_stock_value),
        "low_stock_items": [
            {
                "id": item.id,
                "item_number": item.item_number,
                "item_name": item.item_name,
                "quantity_in_stock": item.quantity_in_stock
            }
            for item in low_stock_items
        ]
    }

def get_sale(db: Session, sale_id: int) -> Optional[models.Sale]:
    """
    Retrieve a single sale by ID.

    Args:
        db: Database session
        sale_id: ID of the sale to retrieve

    Returns:
        Sale object or None if not found
    """
    return db.query(models.Sale).filter(models.Sale.id == sale_id).first()

def get_sales(db: Session, skip: int = 0, limit: int = 100, item_number: Optional[str] = None) -> List[models.Sale]:
    """
    Retrieve logged sales, newest first.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return
        item_number: Only return sales of this inventory item

    Returns:
        List of Sale objects
    """
    query = db.query(models.Sale)
    if item_number:
        query = query.filter(models.Sale.inventory_item_number == item_number)
    return query.order_by(models.Sale.created_at.desc(), models.Sale.id.desc()).offset(skip).limit(limit).all()

def create_sale(db: Session, sale: schemas.SaleCreate) -> Optional[models.Sale]:
    """
    Log a sale and decrement the sold item's stock in one transaction.

    Args:
        db: Database session
        sale: Sale data, referencing the item by internal ID

    Returns:
        Created Sale object or None if the item was not found

    Raises:
        OutOfStockError: if the item has no stock
        InsufficientStockError: if more units are requested than are in stock
    """
    db_item = _item_for_update(db, sale.inventory_item_id).first()
    if db_item is None:
        return None

    if db_item.quantity_in_stock <= 0:
        raise OutOfStockError(db_item.item_number)
    if sale.quantity_sold > db_item.quantity_in_stock:
        raise InsufficientStockError(db_item.quantity_in_stock, sale.quantity_sold, db_item.item_number)

    db_item.quantity_in_stock = db_item.quantity_in_stock - sale.quantity_sold

    db_sale = models.Sale(
        inventory_item_number=db_item.item_number,
        item_name=db_item.item_name,
        sale_date=sale.sale_date,
        platform=sale.platform.value,
        quantity_sold=sale.quantity_sold,
        sale_price=to_money(sale.sale_price),
        shipping_cost=to_money(sale.shipping_cost),
        sales_tax=to_money(sale.sales_tax),
        platform_fees=to_money(sale.platform_fees)
    )
    remaining = db_item.quantity_in_stock
    db.add(db_sale)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to log sale of {sale.quantity_sold} x {db_sale.inventory_item_number}: {e}")
        raise
    db.refresh(db_sale)
    logger.info(f"Sale logged: {db_sale.quantity_sold} x {db_sale.inventory_item_number} on {db_sale.platform}, {remaining} left")
    return db_sale
