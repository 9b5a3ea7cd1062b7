"""
Inventory endpoints, mounted under ``/api/inventory``.
"""
from typing import List, Optional
import csv
import io
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..config import settings
from ..database import get_db

router = APIRouter()

EXPORT_COLUMNS = [
    "id", "item_number", "item_name", "description", "item_cost", "purchase_shipping_cost",
    "purchase_sales_tax", "total_purchase_price", "quantity_in_stock", "supplier", "purchase_date",
]


@router.get("/", response_model=List[schemas.InventoryItem])
def list_inventory_items(
    skip: int = 0,
    limit: int = 100,
    q: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List inventory items with pagination.

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100)
        q: Optional search over item name and item number (case-insensitive)
        db: Database session (injected)

    Returns:
        List of inventory item objects
    """
    return crud.get_inventory_items(db, skip=skip, limit=limit, search=q)

@router.get("/analytics")
def get_analytics(db: Session = Depends(get_db)):
    """
    Get inventory analytics.

    Returns:
        dict: Item and unit counts, out of stock and low stock items, stock value at purchase price
    """
    return crud.get_inventory_analytics(db, low_stock_threshold=settings.low_stock_threshold)

@router.get("/export/csv")
def export_inventory_csv(db: Session = Depends(get_db)):
    """
    Export all inventory items to CSV.

    Returns:
        CSV file with one row per item
    """
    items = crud.get_inventory_items(db, skip=0, limit=10000)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for item in items:
        writer.writerow([
            item.id,
            item.item_number,
            item.item_name,
            item.description or "",
            item.item_cost,
            item.purchase_shipping_cost,
            item.purchase_sales_tax,
            item.total_purchase_price,
            item.quantity_in_stock,
            item.supplier or "",
            item.purchase_date.isoformat()
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=inventory.csv"}
    )

@router.get("/{item_id}", response_model=schemas.InventoryItem)
def get_inventory_item(item_id: str, db: Session = Depends(get_db)):
    """
    Get a single inventory item by internal ID.

    Raises:
        HTTPException: 404 if item not found
    """
    db_item = crud.get_inventory_item(db, item_id=item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return db_item

@router.post("/", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(item: schemas.InventoryItemCreate, db: Session = Depends(get_db)):
    """
    Create a new inventory item. Id, item number and total purchase price are generated.

    Args:
        item: Inventory item data to create
        db: Database session (injected)

    Returns:
        Created inventory item object
    """
    return crud.create_inventory_item(db=db, item=item)

@router.put("/{item_id}", response_model=schemas.InventoryItem)
def update_inventory_item(
    item_id: str,
    item: schemas.InventoryItemUpdate,
    db: Session = Depends(get_db)
):
    """
    Update an existing inventory item. Id and item number never change.

    Args:
        item_id: Internal ID of the inventory item to update
        item: Updated item data
        db: Database session (injected)

    Returns:
        Updated inventory item object

    Raises:
        HTTPException: 404 if item not found
    """
    db_item = crud.update_inventory_item(db, item_id=item_id, item=item)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return db_item

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(item_id: str, db: Session = Depends(get_db)):
    """
    Delete an inventory item.

    Raises:
        HTTPException: 404 if item not found
    """
    success = crud.delete_inventory_item(db, item_id=item_id)
    if not success:
        raise HTTPException(status_code=404, detail="Inventory item not found")
