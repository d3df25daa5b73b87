import pytest
from fastapi import HTTPException

from erp_api.models.products import Product
from erp_api.services import sales as sale_writer


@pytest.fixture
def customer(make_customer):
    return make_customer()


def _stock(client, product_id):
    return client.get(f"/api/products/{product_id}").json()["quantity"]


def test_sale_decrements_stock(client, customer, make_product, make_sale):
    product = make_product(quantity=5)

    response = make_sale(customer["id"], product["id"], 3, discount="10% Off")

    assert response.status_code == 201
    sale = response.json()
    assert sale["saleId"].startswith("SALE-")
    assert sale["discount"] == "10% Off"
    assert sale["discountPercent"] == 10.0
    assert sale["amount"] == 27.0
    assert sale["status"] == "Completed"
    assert sale["paymentMethod"] == "Cash"
    assert sale["productName"] == product["name"]
    assert _stock(client, product["id"]) == 2


def test_insufficient_stock_changes_nothing(client, customer, make_product, make_sale):
    product = make_product(quantity=5)
    make_sale(customer["id"], product["id"], 3)

    response = make_sale(customer["id"], product["id"], 3)

    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient product quantity"
    assert _stock(client, product["id"]) == 2
    assert len(client.get("/api/sales").json()) == 1


def test_unknown_product_is_rejected(client, customer, make_sale):
    response = make_sale(customer["id"], 999, 1)

    assert response.status_code == 400
    assert response.json()["error"] == "Product not found"


def test_unknown_discount_label_is_rejected(client, customer, make_product, make_sale):
    product = make_product(quantity=5)

    response = make_sale(customer["id"], product["id"], 1, discount="50% Off")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Discount must be one of")
    assert _stock(client, product["id"]) == 5


def test_delete_restores_stock(client, customer, make_product, make_sale):
    product = make_product(quantity=5)
    sale = make_sale(customer["id"], product["id"], 4).json()

    response = client.delete(f"/api/sales/{sale['id']}")

    assert response.status_code == 200
    assert _stock(client, product["id"]) == 5
    assert client.get(f"/api/sales/{sale['id']}").status_code == 404


def test_update_same_product_counts_own_quantity(client, customer, make_product, make_sale):
    product = make_product(quantity=5)
    sale = make_sale(customer["id"], product["id"], 3).json()

    # 2 left in stock + 3 held by this sale
    response = client.put(
        f"/api/sales/{sale['id']}",
        json={
            "customerId": customer["id"],
            "productId": product["id"],
            "date": "2024-05-02",
            "quantity": 5,
            "unitPrice": "10.00",
        },
    )

    assert response.status_code == 200
    assert response.json()["quantity"] == 5
    assert response.json()["saleId"] == sale["saleId"]
    assert _stock(client, product["id"]) == 0


def test_update_same_product_over_available(client, customer, make_product, make_sale):
    product = make_product(quantity=5)
    sale = make_sale(customer["id"], product["id"], 3).json()

    response = client.put(
        f"/api/sales/{sale['id']}",
        json={
            "customerId": customer["id"],
            "productId": product["id"],
            "date": "2024-05-02",
            "quantity": 6,
            "unitPrice": "10.00",
        },
    )

    assert response.status_code == 400
    assert _stock(client, product["id"]) == 2
    assert client.get(f"/api/sales/{sale['id']}").json()["quantity"] == 3


def test_update_to_other_product_moves_stock(client, customer, make_product, make_sale):
    first = make_product(quantity=5)
    second = make_product(quantity=4)
    sale = make_sale(customer["id"], first["id"], 3).json()

    response = client.put(
        f"/api/sales/{sale['id']}",
        json={
            "customerId": customer["id"],
            "productId": second["id"],
            "date": "2024-05-02",
            "quantity": 4,
            "unitPrice": "10.00",
        },
    )

    assert response.status_code == 200
    assert response.json()["productId"] == second["id"]
    assert _stock(client, first["id"]) == 5
    assert _stock(client, second["id"]) == 0


def test_failed_switch_leaves_both_products_untouched(client, customer, make_product, make_sale):
    first = make_product(quantity=5)
    second = make_product(quantity=1)
    sale = make_sale(customer["id"], first["id"], 3).json()

    response = client.put(
        f"/api/sales/{sale['id']}",
        json={
            "customerId": customer["id"],
            "productId": second["id"],
            "date": "2024-05-02",
            "quantity": 2,
            "unitPrice": "10.00",
        },
    )

    assert response.status_code == 400
    assert _stock(client, first["id"]) == 2
    assert _stock(client, second["id"]) == 1
    assert client.get(f"/api/sales/{sale['id']}").json()["productId"] == first["id"]


def test_repeated_sales_never_oversell(client, customer, make_product, make_sale):
    product = make_product(quantity=5)

    statuses = [make_sale(customer["id"], product["id"], 2).status_code for _ in range(4)]

    assert statuses.count(201) == 2
    assert statuses.count(400) == 2
    assert _stock(client, product["id"]) == 1


def test_sale_ids_are_unique(client, customer, make_product, make_sale):
    product = make_product(quantity=10)

    ids = {make_sale(customer["id"], product["id"], 1).json()["saleId"] for _ in range(3)}

    assert len(ids) == 3


def test_sale_id_clash_is_not_reported_as_stock(client, customer, make_product, make_sale, monkeypatch):
    product = make_product(quantity=10)
    first = make_sale(customer["id"], product["id"], 1).json()

    monkeypatch.setattr(sale_writer, "_next_sale_id", lambda db: first["saleId"])
    response = make_sale(customer["id"], product["id"], 1)

    assert response.status_code == 400
    assert response.json()["error"] == "Sale conflicts with an existing record"
    assert _stock(client, product["id"]) == 9


def test_stock_constraint_is_reported_as_insufficient(db, make_product):
    product = make_product(quantity=1)

    row = db.query(Product).filter(Product.id == product["id"]).one()
    row.quantity = -1

    with pytest.raises(HTTPException) as exc_info:
        sale_writer._commit(db, "create")

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Insufficient product quantity"
    assert db.query(Product).filter(Product.id == product["id"]).one().quantity == 1
