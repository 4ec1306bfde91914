from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.logger_config import logger
from app.models.sale import Sale, SaleItem, utc_now
from app.services.item_service import get_items_by_ids
from app.services.stock_service import apply_sale, revert_sale
from app.services.user_service import get_users_by_ids


def to_utc(value: Optional[datetime]) -> datetime:
    """Normalise a sale date to UTC; naive values are taken as UTC."""
    if value is None:
        return utc_now()
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _build_lines(items: Iterable[Dict[str, Any]]) -> List[SaleItem]:
    return [
        SaleItem(position=position, item_id=line["item_id"], quantity=line["quantity"])
        for position, line in enumerate(items)
    ]


def get_sale_by_id(db: Session, sale_id: str) -> Optional[Sale]:
    """Get sale by ID, line items loaded."""
    return (
        db.query(Sale)
        .options(selectinload(Sale.items))
        .filter(Sale.id == sale_id)
        .first()
    )


def get_all_sales(db: Session) -> List[Sale]:
    """Get every sale, oldest first."""
    return (
        db.query(Sale)
        .options(selectinload(Sale.items))
        .order_by(Sale.date, Sale.id)
        .all()
    )


def create_sale(
    db: Session,
    user_id: str,
    items: List[Dict[str, Any]],
    date: Optional[datetime] = None,
) -> Sale:
    """
    Persist a sale and take its quantities out of stock.

    Referenced items and users are not checked. Both the insert and the
    stock decrements run in the same transaction.

    Raises:
        ValueError: the sale could not be persisted.
        SQLAlchemyError: a stock decrement failed after the sale was written.
    """
    sale = Sale(user_id=user_id, date=to_utc(date), items=_build_lines(items))
    db.add(sale)

    try:
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating sale: {str(e)}")
        raise ValueError(f"Failed to create sale: {str(e)}")

    try:
        apply_sale(db, sale.items)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Stock decrement failed for sale {sale.id}")
        raise

    db.refresh(sale)
    logger.info(f"Sale {sale.id} created with {len(sale.items)} line item(s)")
    return sale


def update_sale(
    db: Session,
    sale_id: str,
    user_id: Optional[str] = None,
    date: Optional[datetime] = None,
    items: Optional[List[Dict[str, Any]]] = None,
) -> Optional[Sale]:
    """
    Replace the given sale fields. Stock is left alone even when the line
    items change.
    """
    sale = get_sale_by_id(db, sale_id)
    if not sale:
        return None

    if user_id is not None:
        sale.user_id = user_id
    if date is not None:
        sale.date = to_utc(date)
    if items is not None:
        # TODO: reconcile stock against the old lines once clients stop
        # relying on update being stock-neutral.
        sale.items = _build_lines(items)

    try:
        db.commit()
        db.refresh(sale)
        return sale
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating sale: {str(e)}")
        raise ValueError(f"Failed to update sale: {str(e)}")


def delete_sale(db: Session, sale_id: str) -> bool:
    """
    Remove a sale and put its stored quantities back into stock.

    Returns False, without touching stock, when the sale does not exist.
    """
    sale = get_sale_by_id(db, sale_id)
    if not sale:
        return False

    lines = list(sale.items)

    try:
        db.delete(sale)
        db.flush()
        revert_sale(db, lines)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting sale {sale_id}")
        raise

    logger.info(f"Sale {sale_id} deleted, {len(lines)} line item(s) restocked")
    return True


# ============================================================================
# Join-on-read
# ============================================================================

def _expand_lines(sale: Sale, items_by_id: dict) -> List[Dict[str, Any]]:
    return [
        {"item_id": items_by_id.get(line.item_id), "quantity": line.quantity}
        for line in sale.items
    ]


def expand_sale(db: Session, sale: Sale) -> Dict[str, Any]:
    """Sale with each line's item id replaced by the item record."""
    items_by_id = get_items_by_ids(db, (line.item_id for line in sale.items))
    return {
        "id": sale.id,
        "user_id": sale.user_id,
        "date": sale.date,
        "items": _expand_lines(sale, items_by_id),
    }


def expand_sales(db: Session, sales: List[Sale]) -> List[Dict[str, Any]]:
    """
    Sales with line items expanded to item records and ``user_id`` expanded
    to the user's id and name. One lookup per store for the whole batch.
    """
    items_by_id = get_items_by_ids(
        db, (line.item_id for sale in sales for line in sale.items)
    )
    users_by_id = get_users_by_ids(db, (sale.user_id for sale in sales))

    return [
        {
            "id": sale.id,
            "user_id": users_by_id.get(sale.user_id),
            "date": sale.date,
            "items": _expand_lines(sale, items_by_id),
        }
        for sale in sales
    ]
