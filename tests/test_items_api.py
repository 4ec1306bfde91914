from conftest import make_item, make_user


def test_create_and_fetch_item(client):
    response = client.post(
        "/api/v1/items",
        json={"item_name": "Bolt", "supplier": "Acme", "reorder_level": 3, "stock": 12},
    )

    assert response.status_code == 201
    item = response.json()
    assert item["stock"] == 12

    fetched = client.get(f"/api/v1/items/{item['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["item_name"] == "Bolt"


def test_get_missing_item_returns_404(client):
    response = client.get("/api/v1/items/missing")

    assert response.status_code == 404
    assert response.json() == {"message": "Item not found"}


def test_list_items_below_reorder_level(client, db):
    make_item(db, "Low", stock=2, reorder_level=5)
    make_item(db, "Edge", stock=5, reorder_level=5)
    make_item(db, "Plenty", stock=50, reorder_level=5)

    response = client.get("/api/v1/items", params={"below_reorder": "true"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert {item["item_name"] for item in body["items"]} == {"Low", "Edge"}


def test_update_item_changes_only_given_fields(client, db):
    item = make_item(db, "Nut", stock=4, supplier="Acme", reorder_level=1)

    response = client.put(f"/api/v1/items/{item.id}", json={"reorder_level": 6})

    assert response.status_code == 200
    body = response.json()
    assert body["reorder_level"] == 6
    assert body["supplier"] == "Acme"
    assert body["stock"] == 4


def test_create_item_rejects_blank_name(client):
    response = client.post("/api/v1/items", json={"item_name": ""})

    assert response.status_code == 400


def test_duplicate_user_email_is_rejected(client, db):
    make_user(db, "Alice", email="alice@example.com")

    response = client.post("/api/v1/users", json={"name": "Other", "email": "alice@example.com"})

    assert response.status_code == 400
    assert response.json() == {"message": "User with this email already exists"}


def test_get_user(client, db):
    user = make_user(db, "Alice")

    assert client.get(f"/api/v1/users/{user.id}").json()["name"] == "Alice"
    assert client.get("/api/v1/users/missing").status_code == 404


def test_item_response_flags_reorder(client, db):
    low = make_item(db, "Low", stock=2, reorder_level=5)
    plenty = make_item(db, "Plenty", stock=50, reorder_level=5)

    assert client.get(f"/api/v1/items/{low.id}").json()["needs_reorder"] is True
    assert client.get(f"/api/v1/items/{plenty.id}").json()["needs_reorder"] is False
