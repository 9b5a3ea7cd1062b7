"""
SQLAlchemy ORM models for the Tracker service.

Defines the database schema for inventory and sales tables.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text, ForeignKey
from .database import Base

class InventoryItem(Base):
    """
    Inventory item model representing a purchased product held in stock.

    Attributes:
        id (str): Primary key, generated internal identifier (e.g. "_inv_k3j9x0a1b")
        item_number (str): User-facing unique item number (e.g. "ITEM-4F9K2Q")
        item_name (str): Display name of the item
        description (str): Free-form description
        item_cost (Decimal): Unit cost paid for the item
        purchase_shipping_cost (Decimal): Shipping paid when purchasing
        purchase_sales_tax (Decimal): Sales tax paid when purchasing
        total_purchase_price (Decimal): item_cost + purchase_shipping_cost + purchase_sales_tax
        quantity_in_stock (int): Units currently available
        supplier (str): Where the item was bought
        purchase_date (date): When the item was bought
        created_at (datetime): Timestamp when the item was created
    """
    __tablename__ = "inventory_items"

    id = Column(String, primary_key=True, index=True)
    item_number = Column(String, unique=True, index=True, nullable=False)
    item_name = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")
    item_cost = Column(Numeric(10, 2), nullable=False, default=0)
    purchase_shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)
    purchase_sales_tax = Column(Numeric(10, 2), nullable=False, default=0)
    total_purchase_price = Column(Numeric(12, 2), nullable=False, default=0)
    quantity_in_stock = Column(Integer, nullable=False, default=0)
    supplier = Column(String, nullable=True, default="")
    purchase_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Sale(Base):
    """
    Sale model recording units of an inventory item sold on a platform.

    Attributes:
        id (int): Primary key, auto-incrementing sale ID
        inventory_item_number (str): Item number of the sold inventory item
        item_name (str): Item name at the time of the sale
        sale_date (date): When the sale happened
        platform (str): Sales channel (eBay, Etsy, ...)
        quantity_sold (int): Units sold
        sale_price (Decimal): Price per unit
        shipping_cost (Decimal): Shipping charged on the sale
        sales_tax (Decimal): Sales tax collected on the sale
        platform_fees (Decimal): Fees charged by the platform
        created_at (datetime): Timestamp when the sale was logged
    """
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    inventory_item_number = Column(
        String, ForeignKey("inventory_items.item_number", ondelete="SET NULL"), nullable=True, index=True
    )
    item_name = Column(String, nullable=False)
    sale_date = Column(Date, nullable=False)
    platform = Column(String, nullable=False)
    quantity_sold = Column(Integer, nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=False)
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)
    sales_tax = Column(Numeric(10, 2), nullable=False, default=0)
    platform_fees = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
