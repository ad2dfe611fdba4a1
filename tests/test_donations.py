import pytest

from core.errors import APIError
from core.extensions import db
from models.donationModels import Donation
from models.userModel import Profile
from routes.donations import accept_donation, donations_for

IMAGES = ["https://res.cloudinary.com/test/donations/a.jpg"]


def offer(client, headers, **overrides):
    payload = {
        "title": "Two winter jackets",
        "description": "Gently used, size M",
        "condition": "good",
        "images": IMAGES,
    }
    payload.update(overrides)
    response = client.post("/api/donations", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["donation"]


def test_offer_donation(client, customer, categories):
    headers, user = customer
    donation = offer(client, headers, category_id=categories["Winter Wear"], size="M")

    assert donation["status"] == "pending"
    assert donation["donor_id"] == user["id"]
    assert donation["ngo_id"] is None
    assert donation["categories"] == {"name": "Winter Wear"}
    assert donation["profiles"]["name"] == user["name"]


@pytest.mark.parametrize("payload", [
    {"title": "Coat", "description": "d", "condition": "good", "images": []},
    {"title": "Coat", "description": "d", "images": IMAGES},
    {"title": "Coat", "description": "d", "condition": "good", "images": IMAGES, "category_id": 999},
])
def test_offer_validation(client, customer, payload):
    headers, _ = customer
    assert client.post("/api/donations", json=payload, headers=headers).status_code == 400
    assert Donation.query.count() == 0


def test_accept_then_complete(client, customer, ngo):
    donor_headers, _ = customer
    ngo_headers, ngo_user = ngo
    donation = offer(client, donor_headers)

    response = client.post(f"/api/donations/{donation['id']}/accept", headers=ngo_headers)
    assert response.status_code == 200
    accepted = response.get_json()["donation"]
    assert accepted["status"] == "accepted"
    assert accepted["ngo_id"] == ngo_user["id"]

    response = client.post(f"/api/donations/{donation['id']}/complete", headers=ngo_headers)
    assert response.status_code == 200
    assert response.get_json()["donation"]["status"] == "completed"


def test_second_accept_loses(client, customer, ngo, other_ngo):
    donation = offer(client, customer[0])

    assert client.post(f"/api/donations/{donation['id']}/accept", headers=ngo[0]).status_code == 200
    response = client.post(f"/api/donations/{donation['id']}/accept", headers=other_ngo[0])
    assert response.status_code == 409

    assert db.session.get(Donation, donation["id"]).ngo_id == ngo[1]["id"]


def test_accept_with_stale_read(app, client, customer, ngo, other_ngo):
    donation_id = offer(client, customer[0])["id"]
    first = db.session.get(Profile, ngo[1]["id"])
    second = db.session.get(Profile, other_ngo[1]["id"])

    # both NGOs saw the donation as pending
    seen = db.session.get(Donation, donation_id)
    assert seen.status == "pending"

    accept_donation(first, donation_id)
    with pytest.raises(APIError) as excinfo:
        accept_donation(second, donation_id)

    assert excinfo.value.status_code == 409
    assert db.session.get(Donation, donation_id).ngo_id == first.id


def test_complete_pending_is_conflict(client, customer, ngo):
    donation = offer(client, customer[0])
    response = client.post(f"/api/donations/{donation['id']}/complete", headers=ngo[0])
    assert response.status_code == 409
    assert db.session.get(Donation, donation["id"]).status == "pending"


def test_only_accepting_ngo_completes(client, customer, ngo, other_ngo):
    donation = offer(client, customer[0])
    client.post(f"/api/donations/{donation['id']}/accept", headers=ngo[0])

    response = client.post(f"/api/donations/{donation['id']}/complete", headers=other_ngo[0])
    assert response.status_code == 403
    assert db.session.get(Donation, donation["id"]).status == "accepted"


def test_customers_cannot_accept(client, customer):
    donation = offer(client, customer[0])
    other, _ = customer
    assert client.post(f"/api/donations/{donation['id']}/accept", headers=other).status_code == 403


def test_reject_pending(client, customer, ngo):
    donation = offer(client, customer[0])

    response = client.post(f"/api/donations/{donation['id']}/reject", headers=ngo[0])
    assert response.status_code == 200
    assert response.get_json()["donation"]["status"] == "rejected"

    assert client.post(f"/api/donations/{donation['id']}/accept", headers=ngo[0]).status_code == 409
    assert client.post(f"/api/donations/{donation['id']}/reject", headers=ngo[0]).status_code == 409


def test_unknown_donation(client, ngo):
    assert client.post("/api/donations/999/accept", headers=ngo[0]).status_code == 404
    assert client.get("/api/donations/999", headers=ngo[0]).status_code == 404


def test_listing_by_role(client, customer, ngo, other_ngo):
    donor_headers, donor = customer
    open_one = offer(client, donor_headers, title="Open")
    taken = offer(client, donor_headers, title="Taken")
    client.post(f"/api/donations/{taken['id']}/accept", headers=ngo[0])

    body = client.get("/api/donations", headers=donor_headers).get_json()
    assert body["pending"] == []
    assert {d["id"] for d in body["donations"]} == {open_one["id"], taken["id"]}

    body = client.get("/api/donations", headers=ngo[0]).get_json()
    assert [d["id"] for d in body["pending"]] == [open_one["id"]]
    assert [d["id"] for d in body["donations"]] == [taken["id"]]

    body = client.get("/api/donations", headers=other_ngo[0]).get_json()
    assert [d["id"] for d in body["pending"]] == [open_one["id"]]
    assert body["donations"] == []


def test_donations_for_ngo_own_offer_in_both_lists(app, client, ngo):
    donation = offer(client, ngo[0])
    profile = db.session.get(Profile, ngo[1]["id"])

    pending, own = donations_for(profile)
    assert [d.id for d in pending] == [donation["id"]]
    assert [d.id for d in own] == [donation["id"]]


def test_detail_visibility(client, customer, ngo):
    from conftest import signup

    donation = offer(client, customer[0])
    stranger, _ = signup(client, "customer")

    assert client.get(f"/api/donations/{donation['id']}", headers=customer[0]).status_code == 200
    assert client.get(f"/api/donations/{donation['id']}", headers=ngo[0]).status_code == 200
    assert client.get(f"/api/donations/{donation['id']}", headers=stranger).status_code == 404
