"""
Frequently-sold items report.

Quantities are summed per (item, user) pair over three lookback windows
ending now: the last 7 days, the last calendar month and the last calendar
year. Each window is a separate filter and group pass over the full sale
history, so a recent sale counts in all three totals.
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.logger_config import logger
from app.models.sale import Sale, SaleItem
from app.services.item_service import get_items_by_ids
from app.services.user_service import get_users_by_ids

UNKNOWN_USER = "Unknown"


def _shift_months(value: datetime, months: int) -> datetime:
    """Move ``value`` by whole calendar months, clamping the day to the target month."""
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def window_bounds(now: datetime) -> Dict[str, datetime]:
    """Lower bounds (inclusive) of the weekly, monthly and yearly windows."""
    return {
        "weekly": now - timedelta(days=7),
        "monthly": _shift_months(now, -1),
        "yearly": _shift_months(now, -12),
    }


def _quantities_since(db: Session, since: datetime) -> List[Any]:
    return (
        db.query(
            SaleItem.item_id,
            Sale.user_id,
            func.sum(SaleItem.quantity).label("total_quantity"),
        )
        .join(Sale, Sale.id == SaleItem.sale_id)
        .filter(Sale.date >= since)
        .group_by(SaleItem.item_id, Sale.user_id)
        .all()
    )


def _format_row(row: Any, items_by_id: dict, users_by_id: dict) -> Dict[str, Any]:
    item = items_by_id.get(row.item_id)
    user = users_by_id.get(row.user_id)
    return {
        "id": row.item_id,
        "user_id": row.user_id,
        "item_name": item.item_name if item else None,
        "totalQuantitySold": int(row.total_quantity or 0),
        "stock": item.stock if item else None,
        "supplier": item.supplier if item else None,
        "reorder_level": item.reorder_level if item else None,
        "user_name": user.name if user and user.name else UNKNOWN_USER,
    }


def get_frequently_sold_items(
    db: Session, now: Optional[datetime] = None
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Build the weekly / monthly / yearly frequently-sold report.

    Args:
        db: Database session.
        now: Reference time, defaults to the current UTC time.

    Returns:
        Dict with ``weekly``, ``monthly`` and ``yearly`` lists. Every group
        is returned, no ordering or cutoff is applied.
    """
    now = now or datetime.now(timezone.utc)
    bounds = window_bounds(now)

    grouped = {name: _quantities_since(db, since) for name, since in bounds.items()}

    rows = [row for window_rows in grouped.values() for row in window_rows]
    items_by_id = get_items_by_ids(db, (row.item_id for row in rows))
    users_by_id = get_users_by_ids(db, (row.user_id for row in rows))

    logger.debug(
        "Frequently sold groups: "
        + ", ".join(f"{name}={len(window_rows)}" for name, window_rows in grouped.items())
    )

    return {
        name: [_format_row(row, items_by_id, users_by_id) for row in window_rows]
        for name, window_rows in grouped.items()
    }
