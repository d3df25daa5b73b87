import bcrypt

from erp_api.models.users import User


def _user(client, **overrides):
    body = {
        "name": "Admin User",
        "username": "admin",
        "email": "admin@acme.com",
        "role": "Admin",
        "password": "s3cret-pass",
    }
    body.update(overrides)
    return client.post("/api/users", json=body)


def test_create_user_hides_password(client, db):
    response = _user(client)

    assert response.status_code == 201
    user = response.json()
    assert user["userId"].startswith("user_")
    assert user["role"] == "Admin"
    assert user["status"] == "Active"
    assert "password" not in user
    assert "passwordHash" not in user

    stored = db.query(User).filter(User.id == user["id"]).one()
    assert bcrypt.checkpw(b"s3cret-pass", stored.password_hash.encode())


def test_duplicate_username_is_rejected(client):
    _user(client)

    response = _user(client, email="second@acme.com")

    assert response.status_code == 400
    assert response.json()["error"] == "Username or email already exists"


def test_update_rehashes_password(client, db):
    user = _user(client).json()

    response = client.put(f"/api/users/{user['id']}", json={"password": "another-pass", "role": "hr"})

    assert response.status_code == 200
    assert response.json()["role"] == "HR"

    stored = db.query(User).filter(User.id == user["id"]).one()
    assert bcrypt.checkpw(b"another-pass", stored.password_hash.encode())


def test_search_users(client):
    _user(client)
    _user(client, username="jane", email="jane@acme.com", name="Jane", role="Sales")

    found = client.get("/api/users", params={"search": "jane"}).json()

    assert [u["username"] for u in found] == ["jane"]


def test_delete_user(client):
    user = _user(client).json()

    response = client.delete(f"/api/users/{user['id']}")

    assert response.status_code == 204
    assert client.get(f"/api/users/{user['id']}").status_code == 404


def test_login_challenge_is_not_returned(client, db):
    response = _user(client, currentChallenge="c2lnbi1tZQ")

    assert response.status_code == 201
    assert "currentChallenge" not in response.json()
    assert all("currentChallenge" not in u for u in client.get("/api/users").json())

    stored = db.query(User).filter(User.id == response.json()["id"]).one()
    assert stored.current_challenge == "c2lnbi1tZQ"
