import pytest


@pytest.fixture
def refs(make_customer, make_product):
    return make_customer(name="Bob"), make_product(name="Lamp")


def _order(customer, product, **overrides):
    body = {
        "number": "ORD-1",
        "customerId": customer["id"],
        "productId": product["id"],
        "quantity": 4,
        "price": "25.00",
        "discount": "10",
    }
    body.update(overrides)
    return body


def test_create_order_computes_total(client, refs):
    customer, product = refs

    response = client.post("/api/orders", json=_order(customer, product))

    assert response.status_code == 201
    order = response.json()
    assert order["total"] == 90.0
    assert order["status"] == "Pending"
    assert order["customerName"] == "Bob"
    assert order["productName"] == "Lamp"


def test_discount_outside_range_is_rejected(client, refs):
    customer, product = refs

    response = client.post("/api/orders", json=_order(customer, product, discount="120"))

    assert response.status_code == 400


def test_missing_product_is_rejected(client, refs):
    customer, _ = refs

    response = client.post("/api/orders", json=_order(customer, {"id": 999}))

    assert response.status_code == 400
    assert response.json()["error"] == "Product not found"


def test_update_order_status(client, refs):
    customer, product = refs
    order = client.post("/api/orders", json=_order(customer, product)).json()

    response = client.put(
        f"/api/orders/{order['id']}",
        json=_order(customer, product, status="Shipped", quantity=2),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Shipped"
    assert response.json()["total"] == 45.0


def test_delete_order(client, refs):
    customer, product = refs
    order = client.post("/api/orders", json=_order(customer, product)).json()

    assert client.delete(f"/api/orders/{order['id']}").status_code == 200
    assert client.get(f"/api/orders/{order['id']}").status_code == 404
