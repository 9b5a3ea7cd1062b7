"""
Seed the sample inventory into the configured database.

Items whose name already exists are skipped, so running it twice is harmless.

  tracker-seed            # add missing sample items
  tracker-seed --reset    # delete all sales and items first
  tracker-seed --dry-run  # print what would be added
"""
import argparse
from typing import List, Optional

from sqlalchemy.orm import Session

from . import crud, models, schemas
from .database import SessionLocal, engine
from .store import SAMPLE_ITEMS


def seed(db: Session, reset: bool = False, dry_run: bool = False) -> List[str]:
    """
    Add the sample inventory items that are not present yet.

    Args:
        db: Database session
        reset: Delete all sales and inventory items before seeding
        dry_run: Report what would be added without writing anything

    Returns:
        Names of the items that were (or would be) added
    """
    if reset and not dry_run:
        db.query(models.Sale).delete()
        db.query(models.InventoryItem).delete()
        db.commit()

    existing = {name for (name,) in db.query(models.InventoryItem.item_name)}
    added = []
    for data in SAMPLE_ITEMS:
        item = schemas.InventoryItemCreate(**data)
        if item.item_name in existing and not reset:
            continue
        if not dry_run:
            crud.create_inventory_item(db, item)
        added.append(item.item_name)
    return added


def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Seed the tracker database with sample inventory items")
    p.add_argument("--reset", action="store_true", help="Delete all sales and inventory items first")
    p.add_argument("--dry-run", action="store_true", help="Do not write, just print what would be added")
    args = p.parse_args(argv)

    models.Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed(db, reset=args.reset, dry_run=args.dry_run)
    finally:
        db.close()

    prefix = "Would add" if args.dry_run else "Added"
    print(f"{prefix} {len(added)} item(s): {', '.join(added) if added else '-'}")


if __name__ == "__main__":
    main()
