"""
Sales endpoints, mounted under ``/api/sales``.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..exceptions import FormValidationError

router = APIRouter()


@router.get("/platforms", response_model=List[str])
def list_platforms():
    """Sales channels accepted when logging a sale."""
    return schemas.SALE_PLATFORMS

@router.get("/", response_model=List[schemas.SaleRecord])
def list_sales(
    skip: int = 0,
    limit: int = 100,
    item_number: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List logged sales, newest first.

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100)
        item_number: Only list sales of this inventory item
        db: Database session (injected)
    """
    return crud.get_sales(db, skip=skip, limit=limit, item_number=item_number)

@router.get("/{sale_id}", response_model=schemas.SaleRecord)
def get_sale(sale_id: int, db: Session = Depends(get_db)):
    """
    Get a single sale by ID.

    Raises:
        HTTPException: 404 if sale not found
    """
    db_sale = crud.get_sale(db, sale_id=sale_id)
    if db_sale is None:
        raise HTTPException(status_code=404, detail="Sale not found")
    return db_sale

@router.post("/", response_model=schemas.SaleRecord, status_code=status.HTTP_201_CREATED)
def log_sale(sale: schemas.SaleCreate, db: Session = Depends(get_db)):
    """
    Log a sale against an inventory item and decrement its stock.

    Args:
        sale: Sale data including the internal ID of the sold item
        db: Database session (injected)

    Returns:
        Created sale record

    Raises:
        HTTPException: 400 if the item is out of stock or the quantity exceeds stock
        HTTPException: 404 if the item is not found
    """
    try:
        db_sale = crud.create_sale(db, sale=sale)
    except FormValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    if db_sale is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return db_sale
