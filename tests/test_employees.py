def _employee(client, **overrides):
    body = {
        "name": "Sara Khan",
        "employeeId": "EMP-001",
        "department": "Finance",
        "position": "Accountant",
        "salary": "85000",
        "hireDate": "2023-01-15",
        "email": "sara@acme.com",
    }
    body.update(overrides)
    return client.post("/api/employees", json=body)


def test_create_employee(client):
    response = _employee(client, website="https://sara.dev")

    assert response.status_code == 201
    employee = response.json()
    assert employee["department"] == "Finance"
    assert employee["status"] == "Active"
    assert employee["salary"] == 85000.0


def test_partial_update_keeps_other_fields(client):
    employee = _employee(client).json()

    response = client.put(f"/api/employees/{employee['id']}", json={"position": "Controller"})

    assert response.status_code == 200
    updated = response.json()
    assert updated["position"] == "Controller"
    assert updated["name"] == "Sara Khan"
    assert updated["department"] == "Finance"


def test_empty_update_is_rejected(client):
    employee = _employee(client).json()

    response = client.put(f"/api/employees/{employee['id']}", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "No fields to update"}


def test_duplicate_employee_id_is_rejected(client):
    _employee(client)

    response = _employee(client, email="other@acme.com")

    assert response.status_code == 400


def test_unknown_department_is_rejected(client):
    response = _employee(client, department="Legal")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Department must be one of")


def test_search_by_department(client):
    _employee(client)
    _employee(client, employeeId="EMP-002", email="li@acme.com", name="Li", department="IT")

    found = client.get("/api/employees", params={"search": "IT"}).json()

    assert [e["employeeId"] for e in found] == ["EMP-002"]


def test_delete_returns_no_content(client):
    employee = _employee(client).json()

    response = client.delete(f"/api/employees/{employee['id']}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/api/employees/{employee['id']}").status_code == 404
