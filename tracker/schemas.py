"""
Pydantic schemas for request/response validation in the Tracker service.

These schemas define the structure of inventory items and sale records, both for
the in-memory state manager and for the HTTP API.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from .pricing import MAX_MONEY


class Platform(str, Enum):
    """Sales channels a sale can be logged against."""
    EBAY = "eBay"
    FACEBOOK_MARKETPLACE = "Facebook Marketplace"
    NEXTDOOR = "Nextdoor"
    ETSY = "Etsy"
    OTHER = "Other"


SALE_PLATFORMS: List[str] = [platform.value for platform in Platform]


class InventoryItemBase(BaseModel):
    """Base schema with the user-editable inventory item attributes."""
    item_name: str = Field(..., min_length=1)
    description: str = ""
    item_cost: Decimal = Field(..., ge=0, le=MAX_MONEY, description="Unit cost paid")
    purchase_shipping_cost: Decimal = Field(Decimal("0"), ge=0, le=MAX_MONEY)
    purchase_sales_tax: Decimal = Field(Decimal("0"), ge=0, le=MAX_MONEY)
    quantity_in_stock: int = Field(..., ge=0)
    supplier: str = ""
    purchase_date: date

    @field_validator("item_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("item_name is required")
        return v


class InventoryItemCreate(InventoryItemBase):
    """Schema for creating a new inventory item. Id and item number are generated."""
    pass


class InventoryItemUpdate(BaseModel):
    """
    Schema for updating an existing inventory item. All fields are optional.

    Id and item number are not part of the schema; if a client sends them they
    are ignored, which keeps both immutable.
    """
    item_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    item_cost: Optional[Decimal] = Field(None, ge=0, le=MAX_MONEY)
    purchase_shipping_cost: Optional[Decimal] = Field(None, ge=0, le=MAX_MONEY)
    purchase_sales_tax: Optional[Decimal] = Field(None, ge=0, le=MAX_MONEY)
    quantity_in_stock: Optional[int] = Field(None, ge=0)
    supplier: Optional[str] = None
    purchase_date: Optional[date] = None

    @field_validator("item_name")
    @classmethod
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("item_name is required")
        return v


class InventoryItem(InventoryItemBase):
    """
    Schema for inventory item responses, includes generated and derived fields.

    Attributes:
        id (str): Internal identifier
        item_number (str): User-facing item number
        total_purchase_price (Decimal): item_cost + purchase_shipping_cost + purchase_sales_tax
        created_at (datetime): When the item was stored in the database (None in memory)
    """
    id: str
    item_number: str
    total_purchase_price: Decimal
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SaleDetails(BaseModel):
    """Sale fields entered on the Log Sale form."""
    sale_date: date
    platform: Platform
    quantity_sold: int = Field(..., gt=0, description="Units sold")
    sale_price: Decimal = Field(..., ge=0, le=MAX_MONEY, description="Price per unit")
    shipping_cost: Decimal = Field(Decimal("0"), ge=0, le=MAX_MONEY)
    sales_tax: Decimal = Field(Decimal("0"), ge=0, le=MAX_MONEY)
    platform_fees: Decimal = Field(Decimal("0"), ge=0, le=MAX_MONEY)


class SaleCreate(SaleDetails):
    """Schema for logging a sale through the API."""
    inventory_item_id: str = Field(..., description="Internal id of the sold item")


class SaleRecord(BaseModel):
    """
    Schema for a logged sale.

    Attributes:
        id (int): Database id (None for sales emitted by the in-memory store)
        inventory_item_number (str): Item number of the sold item
        item_name (str): Item name at the time of the sale
        sale_date (date): When the sale happened
        platform (Platform): Sales channel
        quantity_sold (int): Units sold
        sale_price (Decimal): Price per unit
        shipping_cost (Decimal): Shipping charged
        sales_tax (Decimal): Sales tax collected
        platform_fees (Decimal): Platform fees paid
        created_at (datetime): When the sale was logged
    """
    id: Optional[int] = None
    inventory_item_number: Optional[str] = None
    item_name: str
    sale_date: date
    platform: Platform
    quantity_sold: int
    sale_price: Decimal
    shipping_cost: Decimal = Decimal("0")
    sales_tax: Decimal = Decimal("0")
    platform_fees: Decimal = Decimal("0")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
