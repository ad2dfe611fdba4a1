import itertools

import pytest

from core.config import TestConfig
from core.extensions import db
from main import create_app
from routes.marketplace import seed_categories

_emails = itertools.count(1)


@pytest.fixture()
def app(monkeypatch):
    import cloudinary.uploader

    uploads = []

    def fake_upload(file, **options):
        uploads.append(options)
        return {"secure_url": f"https://res.cloudinary.com/test/{options['folder']}/{options['public_id']}.jpg"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)

    app = create_app(TestConfig)
    app.uploads = uploads
    with app.app_context():
        db.create_all()
        seed_categories()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def signup(client, role, name=None):
    email = f"{role}{next(_emails)}@example.com"
    response = client.post("/api/auth/signup", json={
        "name": name or f"Test {role}",
        "email": email,
        "password": "secret123",
        "role": role,
    })
    assert response.status_code == 201, response.get_json()
    body = response.get_json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]


@pytest.fixture()
def customer(client):
    return signup(client, "customer")


@pytest.fixture()
def seller(client):
    return signup(client, "seller")


@pytest.fixture()
def ngo(client):
    return signup(client, "ngo", name="Helping Hands")


@pytest.fixture()
def other_ngo(client):
    return signup(client, "ngo", name="Second NGO")


@pytest.fixture()
def categories(client):
    return {c["name"]: c["id"] for c in client.get("/api/categories").get_json()["categories"]}


@pytest.fixture()
def make_product(client, seller, categories):
    headers, _ = seller

    def make(name="Cotton Shirt", price=1000, discounted_price=None, category="Men", **extra):
        payload = {
            "name": name,
            "description": f"{name} description",
            "price": price,
            "discounted_price": discounted_price,
            "category_id": categories[category],
            "images": ["https://img.example.com/1.jpg"],
        }
        payload.update(extra)
        response = client.post("/api/seller/products", json=payload, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["product"]

    return make
