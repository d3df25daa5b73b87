def _quote(customer_id, **overrides):
    body = {
        "number": "Q-001",
        "customerId": customer_id,
        "date": "2024-06-01",
        "expireDate": "2024-06-15",
        "items": [
            {"item": "Consulting", "quantity": "4", "price": "25.00"},
            {"item": "Travel", "quantity": "1", "price": "30.00"},
        ],
    }
    body.update(overrides)
    return body


def test_create_quote_defaults_to_draft(client, make_customer):
    customer = make_customer()

    response = client.post("/api/quotes", json=_quote(customer["id"]))

    assert response.status_code == 201
    quote = response.json()
    assert quote["status"] == "draft"
    assert quote["itemCount"] == 2
    assert quote["total"] == 130.0
    assert quote["createdBy"] == "Admin"


def test_quote_status_uses_its_own_labels(client, make_customer):
    customer = make_customer()

    accepted = client.post("/api/quotes", json=_quote(customer["id"], status="Accepted"))
    invoice_only = client.post("/api/quotes", json=_quote(customer["id"], number="Q-2", status="overdue"))

    assert accepted.status_code == 201
    assert accepted.json()["status"] == "accepted"
    assert invoice_only.status_code == 400


def test_update_and_delete_quote(client, make_customer):
    customer = make_customer()
    quote = client.post("/api/quotes", json=_quote(customer["id"])).json()

    response = client.put(
        f"/api/quotes/{quote['id']}",
        json=_quote(customer["id"], status="sent", items=[{"item": "Audit", "quantity": "1", "price": "99.00"}]),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "sent"
    assert response.json()["itemCount"] == 1

    assert client.delete(f"/api/quotes/{quote['id']}").status_code == 200
    assert client.get("/api/quotes").json() == []


def test_delete_missing_quote_is_404(client):
    response = client.delete("/api/quotes/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Quote not found"}
