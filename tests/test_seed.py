from main import seed_all
from models.donationModels import Donation
from models.productModels import Products
from models.requestModels import Request, RequestItem
from models.userModel import Profile


def counts():
    return (
        Profile.query.count(),
        Products.query.count(),
        Donation.query.count(),
        Request.query.count(),
        RequestItem.query.count(),
    )


def test_seed_is_idempotent(app):
    seed_all()
    first = counts()
    assert first == (3, 4, 2, 2, 4)

    seed_all()
    assert counts() == first


def test_seeded_data_is_visible(app, client):
    seed_all()

    feed = client.get("/api/requests").get_json()["requests"]
    assert {r["title"] for r in feed} == {"Monsoon Relief Clothing Drive", "Winter Essentials Collection"}
    assert all(r["profiles"]["name"] == "Demo NGO" for r in feed)

    token = client.post("/api/auth/login", json={
        "email": "ngo@example.com", "password": "password123", "role": "ngo",
    }).get_json()["access_token"]
    body = client.get("/api/donations", headers={"Authorization": f"Bearer {token}"}).get_json()
    assert len(body["pending"]) == 2
