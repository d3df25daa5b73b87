from erp_api.models.customers import Customer
from erp_api.routers import customers as customers_router


def test_create_customer(client, make_company):
    company = make_company(name="Acme Ltd")

    response = client.post(
        "/api/customers",
        json={"name": "A", "email": "a@acme.com", "companyId": company["id"]},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "A"
    assert body["companyName"] == "Acme Ltd"
    assert body["phone"] == ""


def test_duplicate_email_is_rejected(client, make_customer):
    make_customer(email="a@acme.com")

    response = client.post("/api/customers", json={"name": "B", "email": "a@acme.com"})

    assert response.status_code == 400
    assert "already exists" in response.json()["error"]


def test_unique_constraint_backs_up_the_email_check(client, db, make_customer, monkeypatch):
    make_customer(email="a@acme.com")
    monkeypatch.setattr(customers_router, "_ensure_unique_email", lambda *args, **kwargs: None)

    for _ in range(2):
        response = client.post("/api/customers", json={"name": "B", "email": "a@acme.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Customer with this email already exists"}

    assert db.query(Customer).filter(Customer.email == "a@acme.com").count() == 1


def test_missing_email_is_a_field_error(client):
    response = client.post("/api/customers", json={"name": "B"})

    assert response.status_code == 400
    assert "email" in response.json()["error"]


def test_update_is_a_merge(client, make_customer):
    customer = make_customer(phone="111", address="Main St")

    response = client.put(f"/api/customers/{customer['id']}", json={"phone": "222"})

    assert response.status_code == 200
    body = response.json()
    assert body["phone"] == "222"
    assert body["address"] == "Main St"
    assert body["email"] == customer["email"]


def test_unknown_company_is_rejected(client):
    response = client.post(
        "/api/customers",
        json={"name": "A", "email": "a@acme.com", "companyId": 42},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Company not found"


def test_delete_blocked_by_invoice(client, make_customer, invoice_body):
    customer = make_customer()
    assert client.post("/api/invoices", json=invoice_body(customer["id"])).status_code == 201

    response = client.delete(f"/api/customers/{customer['id']}")

    assert response.status_code == 400
    assert "Cannot delete" in response.json()["error"]


def test_delete_blocked_by_sale(client, make_customer, make_product, make_sale):
    customer = make_customer()
    product = make_product()
    assert make_sale(customer["id"], product["id"], 1).status_code == 201

    response = client.delete(f"/api/customers/{customer['id']}")

    assert response.status_code == 400
    assert "Cannot delete" in response.json()["error"]


def test_delete_customer_without_records(client, make_customer):
    customer = make_customer()

    response = client.delete(f"/api/customers/{customer['id']}")

    assert response.status_code == 200
    assert client.get(f"/api/customers/{customer['id']}").status_code == 404
