from datetime import timedelta

import pytest

from app.services.sale_service import create_sale
from app.services.sales_report import get_frequently_sold_items, window_bounds

from conftest import make_item, make_user, utc

NOW = utc(2026, 6, 15, 12, 0)


def _rows(report, window):
    return {(row["id"], row["user_id"]): row for row in report[window]}


def test_recent_sale_counts_in_every_window(db):
    item = make_item(db, "A", stock=100)
    user = make_user(db, "U1")
    create_sale(db, user.id, [{"item_id": item.id, "quantity": 4}], date=NOW - timedelta(days=3))

    report = get_frequently_sold_items(db, now=NOW)

    for window in ("weekly", "monthly", "yearly"):
        assert _rows(report, window)[(item.id, user.id)]["totalQuantitySold"] == 4


def test_windows_sum_independently_over_full_history(db):
    item = make_item(db, "A", stock=100)
    user = make_user(db, "U1")
    create_sale(db, user.id, [{"item_id": item.id, "quantity": 2}], date=NOW - timedelta(days=3))
    create_sale(db, user.id, [{"item_id": item.id, "quantity": 5}], date=NOW - timedelta(days=20))
    create_sale(db, user.id, [{"item_id": item.id, "quantity": 7}], date=NOW - timedelta(days=40))

    report = get_frequently_sold_items(db, now=NOW)

    key = (item.id, user.id)
    assert _rows(report, "weekly")[key]["totalQuantitySold"] == 2
    assert _rows(report, "monthly")[key]["totalQuantitySold"] == 7
    assert _rows(report, "yearly")[key]["totalQuantitySold"] == 14


def test_sale_older_than_a_year_is_excluded(db):
    item = make_item(db, "A", stock=100)
    user = make_user(db, "U1")
    create_sale(db, user.id, [{"item_id": item.id, "quantity": 1}], date=NOW - timedelta(days=400))

    report = get_frequently_sold_items(db, now=NOW)

    assert report == {"weekly": [], "monthly": [], "yearly": []}


def test_groups_by_item_and_user_pair(db):
    item = make_item(db, "A", stock=100)
    other_item = make_item(db, "B", stock=100)
    alice = make_user(db, "Alice")
    bob = make_user(db, "Bob")
    day = NOW - timedelta(days=1)
    create_sale(db, alice.id, [{"item_id": item.id, "quantity": 1}, {"item_id": item.id, "quantity": 2}], date=day)
    create_sale(db, bob.id, [{"item_id": item.id, "quantity": 4}, {"item_id": other_item.id, "quantity": 1}], date=day)

    weekly = _rows(get_frequently_sold_items(db, now=NOW), "weekly")

    assert len(weekly) == 3
    assert weekly[(item.id, alice.id)]["totalQuantitySold"] == 3
    assert weekly[(item.id, alice.id)]["user_name"] == "Alice"
    assert weekly[(item.id, bob.id)]["totalQuantitySold"] == 4
    assert weekly[(other_item.id, bob.id)]["totalQuantitySold"] == 1


def test_entry_carries_current_item_fields(db):
    item = make_item(db, "A", stock=20, supplier="Acme", reorder_level=5)
    user = make_user(db, "U1")
    create_sale(db, user.id, [{"item_id": item.id, "quantity": 6}], date=NOW - timedelta(hours=1))

    entry = get_frequently_sold_items(db, now=NOW)["weekly"][0]

    assert entry == {
        "id": item.id,
        "user_id": user.id,
        "item_name": "A",
        "totalQuantitySold": 6,
        "stock": 14,
        "supplier": "Acme",
        "reorder_level": 5,
        "user_name": "U1",
    }


def test_missing_user_is_reported_as_unknown(db):
    item = make_item(db, "A", stock=20)
    create_sale(db, "removed-user", [{"item_id": item.id, "quantity": 1}], date=NOW - timedelta(days=1))

    entry = get_frequently_sold_items(db, now=NOW)["weekly"][0]

    assert entry["user_id"] == "removed-user"
    assert entry["user_name"] == "Unknown"


def test_missing_item_leaves_item_fields_empty(db):
    user = make_user(db, "U1")
    create_sale(db, user.id, [{"item_id": "removed-item", "quantity": 3}], date=NOW - timedelta(days=1))

    entry = get_frequently_sold_items(db, now=NOW)["weekly"][0]

    assert entry["id"] == "removed-item"
    assert entry["totalQuantitySold"] == 3
    assert entry["item_name"] is None
    assert entry["stock"] is None


@pytest.mark.parametrize(
    "now, monthly, yearly",
    [
        (utc(2026, 6, 15, 12, 0), utc(2026, 5, 15, 12, 0), utc(2025, 6, 15, 12, 0)),
        (utc(2026, 3, 31), utc(2026, 2, 28), utc(2025, 3, 31)),
        (utc(2024, 2, 29), utc(2024, 1, 29), utc(2023, 2, 28)),
        (utc(2026, 1, 10), utc(2025, 12, 10), utc(2025, 1, 10)),
    ],
)
def test_window_bounds(now, monthly, yearly):
    bounds = window_bounds(now)

    assert bounds["weekly"] == now - timedelta(days=7)
    assert bounds["monthly"] == monthly
    assert bounds["yearly"] == yearly
