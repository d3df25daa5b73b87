def _payment(client, customer_id, receipt="RCPT-1", **overrides):
    body = {
        "receiptNumber": receipt,
        "customerId": customer_id,
        "amount": "150.00",
        "date": "2024-05-03",
        "paymentMode": "Bank Transfer",
    }
    body.update(overrides)
    return client.post("/api/payments", json=body)


def test_create_payment_shows_client_name(client, make_customer):
    customer = make_customer(name="Dana")

    response = _payment(client, customer["id"])

    assert response.status_code == 201
    payment = response.json()
    assert payment["client"] == "Dana"
    assert payment["status"] == "Received"
    assert payment["paymentMode"] == "Bank Transfer"


def test_total_received(client, make_customer):
    customer = make_customer()
    _payment(client, customer["id"], "R1", amount="100.00")
    _payment(client, customer["id"], "R2", amount="50.00")
    _payment(client, customer["id"], "R3", amount="70.00", status="Pending")

    response = client.get("/api/payments/total-received")

    assert response.json() == {"totalReceived": 150.0}


def test_payments_by_customer(client, make_customer):
    first = make_customer()
    second = make_customer()
    _payment(client, first["id"], "R1")
    _payment(client, second["id"], "R2")

    payments = client.get(f"/api/payments/customer/{first['id']}").json()

    assert [p["receiptNumber"] for p in payments] == ["R1"]


def test_duplicate_receipt_is_rejected(client, make_customer):
    customer = make_customer()
    _payment(client, customer["id"], "R1")

    response = _payment(client, customer["id"], "R1")

    assert response.status_code == 400


def test_unknown_payment_mode_is_rejected(client, make_customer):
    customer = make_customer()

    response = _payment(client, customer["id"], paymentMode="Barter")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Payment mode must be one of")
