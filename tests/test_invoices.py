import json
from datetime import date

import pytest
from fastapi import HTTPException

from erp_api.core.enum_mapper import DEFAULT_FAMILIES, EnumMapper, get_enum_mapper
from erp_api.main import app
from erp_api.models.invoice_items import InvoiceItem
from erp_api.models.invoices import Invoice
from erp_api.schemas.document import DocumentItemIn
from erp_api.schemas.invoice import InvoiceCreate
from erp_api.services.aggregates import invoice_writer


def test_create_invoice_with_items(client, make_customer, invoice_body):
    customer = make_customer()

    response = client.post("/api/invoices", json=invoice_body(customer["id"]))

    assert response.status_code == 201
    invoice = response.json()
    assert invoice["status"] == "draft"
    assert invoice["currency"] == "PKR"
    assert invoice["year"] == 2024
    assert invoice["customerName"] == customer["name"]
    assert invoice["itemCount"] == 2
    assert [i["item"] for i in invoice["items"]] == ["Design", "Hosting"]
    assert invoice["items"][0]["total"] == 100.0
    assert invoice["total"] == 120.0


def test_invoice_requires_items(client, make_customer, invoice_body):
    customer = make_customer()

    response = client.post("/api/invoices", json=invoice_body(customer["id"], items=[]))

    assert response.status_code == 400
    assert client.get("/api/invoices").json() == []


def test_unknown_status_label_is_rejected(client, make_customer, invoice_body):
    customer = make_customer()

    response = client.post("/api/invoices", json=invoice_body(customer["id"], status="archived"))

    assert response.status_code == 400
    assert response.json()["error"].startswith("Status must be one of")


def test_duplicate_number_is_rejected(client, make_customer, invoice_body):
    customer = make_customer()
    client.post("/api/invoices", json=invoice_body(customer["id"]))

    response = client.post("/api/invoices", json=invoice_body(customer["id"]))

    assert response.status_code == 400
    assert "already exists" in response.json()["error"]


def test_unknown_customer_is_rejected(client, invoice_body):
    response = client.post("/api/invoices", json=invoice_body(999))

    assert response.status_code == 400
    assert response.json()["error"] == "Customer not found"


def test_failing_item_rolls_back_header(db, make_customer):
    customer = make_customer()
    mapper = EnumMapper(DEFAULT_FAMILIES)

    broken_item = DocumentItemIn.model_construct(item=None, description=None, quantity=1, price=1)
    data = InvoiceCreate.model_construct(
        number="INV-BROKEN",
        customer_id=customer["id"],
        company_id=None,
        date=date(2024, 5, 1),
        expire_date=date(2024, 5, 31),
        year=None,
        currency=None,
        status=None,
        paid=0,
        note=None,
        tax=0,
        created_by=None,
        items=[broken_item],
    )

    with pytest.raises(HTTPException) as exc_info:
        invoice_writer.create(db, mapper, data)

    assert exc_info.value.status_code == 400
    assert db.query(Invoice).filter(Invoice.number == "INV-BROKEN").count() == 0


def test_update_replaces_items(client, make_customer, invoice_body):
    customer = make_customer()
    invoice = client.post("/api/invoices", json=invoice_body(customer["id"])).json()

    body = invoice_body(
        customer["id"],
        number="INV-001-R",
        status="paid",
        items=[{"item": "Support", "quantity": "3", "price": "15.00"}],
    )
    response = client.put(f"/api/invoices/{invoice['id']}", json=body)

    assert response.status_code == 200
    updated = response.json()
    assert updated["number"] == "INV-001-R"
    assert updated["status"] == "paid"
    assert [i["item"] for i in updated["items"]] == ["Support"]
    assert updated["total"] == 45.0


def test_update_missing_invoice_is_404(client, make_customer, invoice_body):
    customer = make_customer()

    response = client.put("/api/invoices/999", json=invoice_body(customer["id"]))

    assert response.status_code == 404


def test_delete_invoice(client, make_customer, invoice_body):
    customer = make_customer()
    invoice = client.post("/api/invoices", json=invoice_body(customer["id"])).json()

    response = client.delete(f"/api/invoices/{invoice['id']}")

    assert response.status_code == 200
    assert client.get(f"/api/invoices/{invoice['id']}").status_code == 404


def test_list_invoices_search(client, make_customer, invoice_body):
    customer = make_customer(name="Zed Traders")
    other = make_customer(name="Alpha")
    client.post("/api/invoices", json=invoice_body(customer["id"], number="INV-1"))
    client.post("/api/invoices", json=invoice_body(other["id"], number="INV-2"))

    found = client.get("/api/invoices", params={"search": "zed"}).json()

    assert [i["number"] for i in found] == ["INV-1"]


def test_failing_item_leaves_update_unapplied(db, client, make_customer, invoice_body):
    customer = make_customer()
    invoice = client.post("/api/invoices", json=invoice_body(customer["id"])).json()
    mapper = EnumMapper(DEFAULT_FAMILIES)

    broken_item = DocumentItemIn.model_construct(item=None, description=None, quantity=1, price=1)
    data = InvoiceCreate.model_construct(
        number="INV-001-R",
        customer_id=customer["id"],
        company_id=None,
        date=date(2024, 6, 1),
        expire_date=date(2024, 6, 30),
        year=None,
        currency=None,
        status="paid",
        paid=0,
        note=None,
        tax=0,
        created_by=None,
        items=[broken_item],
    )

    with pytest.raises(HTTPException) as exc_info:
        invoice_writer.update(db, mapper, invoice["id"], data)

    assert exc_info.value.status_code == 400

    stored = client.get(f"/api/invoices/{invoice['id']}").json()
    assert stored["number"] == "INV-001"
    assert stored["status"] == "draft"
    assert [i["item"] for i in stored["items"]] == ["Design", "Hosting"]
    assert db.query(InvoiceItem).filter(InvoiceItem.invoice_id == invoice["id"]).count() == 2


def test_partial_label_file_keeps_other_families(client, make_customer, invoice_body, tmp_path):
    path = tmp_path / "labels.json"
    path.write_text(json.dumps({
        "order_status": {"default": "NEW", "labels": {"New": "NEW", "Done": "DONE"}},
    }))
    mapper = EnumMapper.from_file(str(path))
    app.dependency_overrides[get_enum_mapper] = lambda: mapper

    customer = make_customer()
    response = client.post("/api/invoices", json=invoice_body(customer["id"]))

    assert response.status_code == 201
    assert response.json()["status"] == "draft"
