import pytest


@pytest.fixture
def item(client, auth_headers):
    response = client.post(
        "/inventory",
        json={"name": "Engine Oil 5W30", "category": "Lubricants", "sku": " eo-5w30 ", "unit": "litre", "min_stock": 2},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def test_new_item_starts_empty_and_low(item):
    assert item["sku"] == "EO-5W30"
    assert item["current_stock"] == 0
    assert item["is_low_stock"] is True


def test_duplicate_sku_conflicts(client, auth_headers, item):
    response = client.post("/inventory", json={"name": "Other oil", "sku": "EO-5W30"}, headers=auth_headers)
    assert response.status_code == 409


def test_stock_movements(client, auth_headers, item):
    url = f"/inventory/{item['id']}/stock"
    assert client.post(url, json={"type": "in", "quantity": 5, "unit_price": "450"}, headers=auth_headers).status_code == 201
    assert client.post(url, json={"type": "OUT", "quantity": 4, "reason": "Job use"}, headers=auth_headers).status_code == 201

    listing = client.get(f"/inventory/{item['id']}/stock-transactions", headers=auth_headers).json()
    assert listing["item"]["current_stock"] == 1
    assert listing["item"]["is_low_stock"] is True
    assert len(listing["transactions"]) == 2

    too_many = client.post(url, json={"type": "OUT", "quantity": 3}, headers=auth_headers)
    assert too_many.status_code == 400

    low = client.get("/inventory", params={"low_stock_only": True}, headers=auth_headers).json()
    assert [row["id"] for row in low] == [item["id"]]


def test_item_with_transactions_cannot_be_deleted(client, auth_headers, item):
    tx = client.post(f"/inventory/{item['id']}/stock", json={"type": "IN", "quantity": 1}, headers=auth_headers).json()
    assert client.delete(f"/inventory/{item['id']}", headers=auth_headers).status_code == 400

    assert client.delete(f"/inventory/{item['id']}/stock/{tx['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/inventory/{item['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/inventory/{item['id']}", headers=auth_headers).status_code == 404


def test_inactive_items_can_be_hidden(client, auth_headers, item):
    client.put(f"/inventory/{item['id']}", json={"is_active": False}, headers=auth_headers)
    assert client.get("/inventory", params={"include_inactive": False}, headers=auth_headers).json() == []
    assert len(client.get("/inventory", headers=auth_headers).json()) == 1
