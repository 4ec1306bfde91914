from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Iterable, Optional, List
from app.models.item import Item
from app.logger_config import logger


def get_item_by_id(db: Session, item_id: str) -> Optional[Item]:
    """Get item by ID."""
    return db.query(Item).filter(Item.id == item_id).first()


def get_items_by_ids(db: Session, item_ids: Iterable[str]) -> dict[str, Item]:
    """Fetch many items in one query, keyed by id. Unknown ids are absent."""
    ids = set(item_ids)
    if not ids:
        return {}
    return {item.id: item for item in db.query(Item).filter(Item.id.in_(ids)).all()}


def get_all_items(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    below_reorder: bool = False,
) -> tuple[List[Item], int]:
    """Get all items with optional filtering."""
    query = db.query(Item)

    if search:
        query = query.filter(Item.item_name.ilike(f"%{search}%"))

    if below_reorder:
        query = query.filter(Item.stock <= Item.reorder_level)

    total = query.count()
    items = query.order_by(Item.item_name).offset(skip).limit(limit).all()

    return items, total


def create_item(
    db: Session,
    item_name: str,
    supplier: Optional[str] = None,
    reorder_level: int = 0,
    stock: int = 0,
) -> Item:
    """Create a new item."""
    item = Item(
        item_name=item_name,
        supplier=supplier,
        reorder_level=reorder_level,
        stock=stock,
    )
    db.add(item)

    try:
        db.commit()
        db.refresh(item)
        return item
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating item: {str(e)}")
        raise ValueError("Failed to create item.")


def update_item(db: Session, item_id: str, **fields) -> Optional[Item]:
    """Update the given item fields; None values are left untouched."""
    item = get_item_by_id(db, item_id)
    if not item:
        return None

    for name, value in fields.items():
        if value is not None:
            setattr(item, name, value)

    try:
        db.commit()
        db.refresh(item)
        return item
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating item: {str(e)}")
        raise ValueError("Failed to update item.")
