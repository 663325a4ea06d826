"""Tests HTTP de los endpoints de ventas."""

from decimal import Decimal

import pytest

from app.modules.sales.repository import SalesRepository

API = "/api/v1/sales"


@pytest.fixture
def beer(make_product):
    return make_product(title="Cerveza", price="10.00", stock=20)


def create_sale(client, *items, client_name="Cliente A"):
    return client.post(
        API,
        json={
            "client": client_name,
            "branch": "Centro",
            "items": [{"product_id": pid, "quantity": qty} for pid, qty in items],
        },
    )


def test_create_sale_returns_created_sale(client, beer):
    response = create_sale(client, (beer.id, 5))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["sale"]["sale_number"] == "0001"
    assert Decimal(str(body["sale"]["total_value"])) == Decimal("45.00")
    assert Decimal(str(body["sale"]["items"][0]["discount"])) == Decimal("5.00")


def test_create_sale_ignores_caller_prices(client, beer):
    response = client.post(
        API,
        json={
            "client": "Cliente A",
            "branch": "Centro",
            "items": [{"product_id": beer.id, "quantity": 1, "unit_price": "0.01", "discount": "9"}],
        },
    )

    assert response.status_code == 201
    assert Decimal(str(response.json()["sale"]["total_value"])) == Decimal("10.00")


def test_create_sale_validation_errors_are_listed(client, beer):
    response = client.post(
        API,
        json={"client": "", "branch": "Centro", "items": [{"product_id": beer.id, "quantity": 25}]},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "validation_error"
    fields = {error["field"] for error in body["details"]["errors"]}
    assert {"client", "items.0.quantity"} <= fields


def test_create_sale_in_the_future_is_rejected(client, beer):
    response = client.post(
        API,
        json={
            "client": "Cliente A",
            "branch": "Centro",
            "sale_date": "2999-01-01T00:00:00",
            "items": [{"product_id": beer.id, "quantity": 1}],
        },
    )

    assert response.status_code == 422


def test_create_sale_without_items(client):
    response = create_sale(client)

    assert response.status_code == 400
    assert response.json()["error_code"] == "empty_sale"
    assert response.json()["message"] == "Sale must contain at least one item."


def test_create_sale_with_insufficient_stock(client, beer):
    response = create_sale(client, (beer.id, 20), (beer.id, 1))

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "insufficient_stock"
    assert body["details"]["available"] == 20
    assert body["details"]["requested"] == 21


def test_create_sale_with_unknown_product(client):
    response = create_sale(client, (999, 1))

    assert response.status_code == 404
    assert response.json()["error_code"] == "product_not_found"


def test_create_sale_with_taken_number_returns_conflict(client, beer, stock_of, monkeypatch):
    create_sale(client, (beer.id, 1))
    monkeypatch.setattr(
        SalesRepository, "get_next_sale_number", lambda self, width=4: "0001"
    )

    response = create_sale(client, (beer.id, 2))

    assert response.status_code == 409
    assert response.json()["error_code"] == "sale_number_conflict"
    assert response.json()["details"] == {"sale_number": "0001"}
    assert stock_of(beer.id) == 19


def test_get_sale_and_not_found(client, beer):
    sale_id = create_sale(client, (beer.id, 2)).json()["sale"]["id"]

    assert client.get(f"{API}/{sale_id}").json()["sale"]["items_count"] == 1
    missing = client.get(f"{API}/999")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "sale_not_found"


def test_list_sales(client, beer):
    create_sale(client, (beer.id, 1))
    create_sale(client, (beer.id, 1), client_name="Otro")

    body = client.get(API, params={"client": "Otro"}).json()

    assert body["total"] == 1
    assert body["items"][0]["sale_number"] == "0002"


def test_cancel_sale_twice(client, beer, stock_of):
    sale_id = create_sale(client, (beer.id, 5)).json()["sale"]["id"]

    first = client.put(f"{API}/{sale_id}/cancel")
    second = client.put(f"{API}/{sale_id}/cancel")

    assert first.status_code == 200
    assert first.json()["sale"]["is_cancelled"] is True
    assert second.status_code == 400
    assert second.json()["error_code"] == "sale_already_cancelled"
    assert stock_of(beer.id) == 20


def test_partial_cancellation(client, beer, stock_of):
    sale = create_sale(client, (beer.id, 10)).json()["sale"]
    item_id = sale["items"][0]["id"]

    response = client.put(
        f"{API}/{sale['id']}/items/{item_id}/partial-cancellation", json={"quantity": 3}
    )

    assert response.status_code == 200
    assert Decimal(str(response.json()["sale"]["total_value"])) == Decimal("30.00")
    assert stock_of(beer.id) == 17


def test_partial_cancellation_to_zero_removes_item(client, beer, stock_of):
    sale = create_sale(client, (beer.id, 4)).json()["sale"]
    item_id = sale["items"][0]["id"]

    response = client.put(
        f"{API}/{sale['id']}/items/{item_id}/partial-cancellation", json={"quantity": 0}
    )

    assert response.json()["sale"]["items"] == []
    assert Decimal(str(response.json()["sale"]["total_value"])) == Decimal("0")
    assert stock_of(beer.id) == 20


def test_partial_cancellation_rejects_quantity_over_limit(client, beer):
    sale = create_sale(client, (beer.id, 4)).json()["sale"]
    item_id = sale["items"][0]["id"]

    response = client.put(
        f"{API}/{sale['id']}/items/{item_id}/partial-cancellation", json={"quantity": 21}
    )

    assert response.status_code == 422


def test_delete_item_and_sale(client, beer, stock_of):
    sale = create_sale(client, (beer.id, 2), (beer.id, 3)).json()["sale"]

    item_response = client.delete(f"{API}/{sale['id']}/items/{sale['items'][0]['id']}")
    sale_response = client.delete(f"{API}/{sale['id']}")

    assert item_response.status_code == 200
    assert item_response.json()["sale"]["items_count"] == 1
    assert sale_response.status_code == 200
    assert sale_response.json()["stock_restored"] is False
    # 2 devueltas por el item; las 3 restantes se pierden al eliminar la venta
    assert stock_of(beer.id) == 17
    assert client.get(f"{API}/{sale['id']}").status_code == 404


def test_sales_health(client):
    assert client.get(f"{API}/health").json()["status"] == "healthy"
