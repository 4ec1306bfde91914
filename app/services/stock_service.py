from typing import Iterable
from sqlalchemy.orm import Session

from app.logger_config import logger
from app.models.item import Item
from app.models.sale import SaleItem


def adjust_stock(db: Session, item_id: str, delta: int) -> bool:
    """
    Shift an item's stock by ``delta`` with a single UPDATE statement.

    The new value is computed by the database (``stock = stock + delta``),
    so concurrent adjustments on the same item never overwrite each other.
    Returns False when no item matched; the caller decides whether that
    matters. Does not commit.
    """
    matched = (
        db.query(Item)
        .filter(Item.id == item_id)
        .update({Item.stock: Item.stock + delta}, synchronize_session=False)
    )
    if not matched:
        logger.warning(f"Stock adjustment of {delta} skipped, item {item_id} not found")
    return bool(matched)


def apply_sale(db: Session, lines: Iterable[SaleItem]) -> None:
    """Take each line's quantity out of stock, in line order."""
    for line in lines:
        adjust_stock(db, line.item_id, -line.quantity)


def revert_sale(db: Session, lines: Iterable[SaleItem]) -> None:
    """Put each line's quantity back into stock."""
    for line in lines:
        adjust_stock(db, line.item_id, line.quantity)
