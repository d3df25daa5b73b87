def test_create_and_get_company(client):
    response = client.post(
        "/api/companies",
        json={"name": "Acme", "email": "hello@acme.com", "website": "https://acme.com"},
    )
    assert response.status_code == 201
    company = response.json()
    assert company["name"] == "Acme"
    assert company["contact"] == ""
    assert company["website"] == "https://acme.com"

    response = client.get(f"/api/companies/{company['id']}")
    assert response.status_code == 200
    assert response.json()["email"] == "hello@acme.com"


def test_duplicate_company_email_is_rejected(client, make_company):
    make_company(email="dup@acme.com")

    response = client.post("/api/companies", json={"name": "Other", "email": "dup@acme.com"})

    assert response.status_code == 400
    assert "already exists" in response.json()["error"]


def test_invalid_website_is_rejected(client):
    response = client.post(
        "/api/companies",
        json={"name": "Acme", "email": "a@acme.com", "website": "acme"},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("website:")


def test_search_companies(client, make_company):
    make_company(name="Northwind")
    make_company(name="Contoso")

    response = client.get("/api/companies", params={"search": "north"})

    assert [c["name"] for c in response.json()] == ["Northwind"]


def test_delete_company_keeps_customers(client, make_company, make_customer):
    company = make_company()
    customer = make_customer(companyId=company["id"])

    response = client.delete(f"/api/companies/{company['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Company deleted successfully"}

    customer = client.get(f"/api/customers/{customer['id']}").json()
    assert customer["companyId"] is None
    assert customer["companyName"] == ""


def test_missing_company_is_404(client):
    response = client.get("/api/companies/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Company not found"}
