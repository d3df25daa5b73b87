from datetime import date
from decimal import Decimal

from erp_api.services.analytics import growth_percentage


def test_growth_percentage():
    assert growth_percentage(0, 0) == 0.0
    assert growth_percentage(50, 0) == 100.0
    assert growth_percentage(150, 100) == 50.0
    assert growth_percentage(75, 100) == -25.0


def test_reports_stats(client, make_customer, make_product, make_sale, invoice_body):
    customer = make_customer()
    product = make_product(quantity=10)
    make_sale(customer["id"], product["id"], 2, discount="10% Off")
    make_sale(customer["id"], product["id"], 1)
    client.post("/api/invoices", json=invoice_body(customer["id"]))
    client.post(
        "/api/orders",
        json={
            "number": "ORD-1",
            "customerId": customer["id"],
            "productId": product["id"],
            "quantity": 2,
            "price": "10.00",
        },
    )
    client.post(
        "/api/transactions",
        json={
            "type": "Expense",
            "amount": "40.00",
            "bank": "HBL",
            "status": "Completed",
            "category": "Utilities",
            "date": date.today().isoformat(),
        },
    )

    response = client.get("/api/analytics/reports")

    assert response.status_code == 200
    body = response.json()
    stats = body["stats"]
    assert stats["revenue"] == 28.0
    assert stats["profit"] == 26.0
    assert stats["customers"] == 1
    assert stats["invoices"] == 1
    assert stats["orders"] == 1
    assert stats["quoteCount"] == 0
    assert stats["monthlyExpenses"] == 40.0
    assert stats["revenueChange"] == 100.0

    products = body["products"]
    assert products[0]["saleCount"] == 2
    assert products[0]["orderCount"] == 1
    assert products[0]["totalSaleValue"] == 30.0
    assert products[0]["totalDiscount"] == 2.0

    customers = body["customers"]
    assert customers[0]["orderCount"] == 1
    assert customers[0]["invoiceCount"] == 1
    assert customers[0]["totalOrderValue"] == 20.0

    invoices = body["invoices"]
    assert invoices[0]["itemCount"] == 2
    assert invoices[0]["totalValue"] == 120.0
    assert invoices[0]["customerName"] == customer["name"]


def test_single_family_listing(client, make_customer, make_product, make_sale):
    customer = make_customer()
    product = make_product(name="Kettle")
    make_sale(customer["id"], product["id"], 1)

    sales = client.get("/api/analytics/sales").json()

    assert sales[0]["productName"] == "Kettle"
    assert sales[0]["status"] == "Completed"


def test_unknown_family_is_404(client):
    assert client.get("/api/analytics/widgets").status_code == 404


def test_growth_percentage_accepts_decimals():
    assert growth_percentage(Decimal("28.00"), Decimal("20.00")) == 40.0
    assert growth_percentage(Decimal("1"), Decimal("3")) == -66.67


def test_product_image_url_matches_products_endpoint(client, make_product):
    product = make_product(image="uploads/a.png")

    listed = client.get("/api/analytics/products").json()

    assert product["image"] == "http://localhost:8000/uploads/a.png"
    assert listed[0]["image"] == product["image"]
