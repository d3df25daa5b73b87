import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import erp_api.models  # noqa: F401
from erp_api.database import Base, get_db
from erp_api.main import app


@pytest.fixture
def engine():
    """In-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Test client whose requests each get a fresh session on the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =========================================================
# RECORD FACTORIES (through the API)
# =========================================================
@pytest.fixture
def make_company(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        body = {
            "name": f"Acme {counter['n']}",
            "email": f"office{counter['n']}@acme.com",
            "country": "PK",
        }
        body.update(overrides)
        response = client.post("/api/companies", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_customer(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        body = {
            "name": f"Customer {counter['n']}",
            "email": f"customer{counter['n']}@acme.com",
            "phone": "0300-0000000",
        }
        body.update(overrides)
        response = client.post("/api/customers", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_product(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        body = {
            "sku": f"SKU-{counter['n']}",
            "name": f"Widget {counter['n']}",
            "price": "10.00",
            "quantity": 5,
        }
        body.update(overrides)
        response = client.post("/api/products", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_sale(client):
    def _make(customer_id, product_id, quantity, **overrides):
        body = {
            "customerId": customer_id,
            "productId": product_id,
            "date": "2024-05-01",
            "quantity": quantity,
            "unitPrice": "10.00",
        }
        body.update(overrides)
        return client.post("/api/sales", json=body)

    return _make


@pytest.fixture
def invoice_body():
    def _body(customer_id, number="INV-001", items=None, **overrides):
        body = {
            "number": number,
            "customerId": customer_id,
            "date": "2024-05-01",
            "expireDate": "2024-05-31",
            "status": "draft",
            "items": items if items is not None else [
                {"item": "Design", "description": "Logo work", "quantity": "2", "price": "50.00"},
                {"item": "Hosting", "quantity": "1", "price": "20.00"},
            ],
        }
        body.update(overrides)
        return body

    return _body
