from conftest import signup


def test_signup_returns_token_and_profile(client):
    response = client.post("/api/auth/signup", json={
        "name": "Asha Rao", "email": "Asha@Example.com", "password": "pw123456", "role": "customer",
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["access_token"]
    assert body["user"]["email"] == "asha@example.com"
    assert body["user"]["role"] == "customer"


def test_signup_validation(client):
    response = client.post("/api/auth/signup", json={"email": "x@example.com"})
    assert response.status_code == 400

    response = client.post("/api/auth/signup", json={
        "name": "X", "email": "x@example.com", "password": "pw", "role": "admin",
    })
    assert response.status_code == 400


def test_duplicate_email(client):
    payload = {"name": "A", "email": "dup@example.com", "password": "pw", "role": "customer"}
    assert client.post("/api/auth/signup", json=payload).status_code == 201
    assert client.post("/api/auth/signup", json=dict(payload, email="DUP@example.com")).status_code == 409


def test_login_checks_role(client):
    client.post("/api/auth/signup", json={
        "name": "S", "email": "shop@example.com", "password": "pw123", "role": "seller",
    })

    response = client.post("/api/auth/login", json={"email": "shop@example.com", "password": "pw123", "role": "seller"})
    assert response.status_code == 200
    assert response.get_json()["user"]["role"] == "seller"

    response = client.post("/api/auth/login", json={"email": "shop@example.com", "password": "pw123", "role": "ngo"})
    assert response.status_code == 403
    assert response.get_json()["message"] == "Invalid user role. You're not registered as a ngo."

    response = client.post("/api/auth/login", json={"email": "shop@example.com", "password": "wrong", "role": "seller"})
    assert response.status_code == 401


def test_profile_requires_token(client):
    response = client.get("/api/user/profile")
    assert response.status_code == 401
    assert "message" in response.get_json()


def test_profile_update(client, customer):
    headers, user = customer

    response = client.patch("/api/user/profile", json={"name": "New Name", "address": "12 MG Road"}, headers=headers)
    assert response.status_code == 200
    assert response.get_json()["user"]["address"] == "12 MG Road"

    profile = client.get("/api/user/profile", headers=headers).get_json()
    assert profile["name"] == "New Name"
    assert profile["id"] == user["id"]


def test_profile_email_conflict(client, customer, seller):
    headers, _ = customer
    _, seller_user = seller
    response = client.patch("/api/user/profile", json={"email": seller_user["email"]}, headers=headers)
    assert response.status_code == 409


def test_logout_revokes_token(client):
    headers, _ = signup(client, "customer")
    assert client.post("/api/auth/logout", headers=headers).status_code == 200

    response = client.get("/api/user/profile", headers=headers)
    assert response.status_code == 401


def test_role_guard(client, customer):
    headers, _ = customer
    response = client.get("/api/seller/products", headers=headers)
    assert response.status_code == 403


def test_demo_accounts(client):
    accounts = client.get("/api/demo-accounts").get_json()["accounts"]
    assert {a["role"] for a in accounts} == {"customer", "seller", "ngo"}
    assert all(a["password"] for a in accounts)


def test_non_string_fields_rejected(client, customer):
    headers, _ = customer
    response = client.patch("/api/user/profile", json={"email": 5}, headers=headers)
    assert response.status_code == 400
    assert response.get_json()["message"] == "'email' must be a string"

    response = client.post("/api/auth/signup", json={
        "name": "A", "email": ["a@example.com"], "password": "pw", "role": "customer",
    })
    assert response.status_code == 400

    response = client.post("/api/auth/login", json={"email": "a@example.com", "password": 123})
    assert response.status_code == 400


def test_body_must_be_an_object(client, customer):
    headers, _ = customer
    response = client.patch("/api/user/profile", json=["name"], headers=headers)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid request body"
