"""Booking, review and payment flows through the HTTP surface."""

import pytest

from fitflow.core.enums import UserRole


@pytest.fixture
def open_slot(make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id, max_participants=1)
    return trainer, slot


def _booking_body(trainer, slot, email, transaction_id="pi_test_1"):
    return {
        "trainer_id": trainer.id,
        "slot_id": slot.id,
        "email": email,
        "name": "Mia",
        "package_name": "Standard",
        "price": "49.99",
        "transaction_id": transaction_id,
    }


@pytest.fixture
def mia(make_user, auth_headers):
    make_user("mia@example.com", display_name="Mia")
    return auth_headers("mia@example.com")


def test_book_until_full(client, open_slot, mia, make_user, auth_headers):
    trainer, slot = open_slot

    created = client.post("/bookings", json=_booking_body(trainer, slot, "mia@example.com"), headers=mia)
    assert created.status_code == 201
    booking = created.json()
    assert booking["payment_status"] == "paid"
    assert booking["price"] == 49.99
    assert booking["slot_name"] == "Morning HIIT"

    make_user("bob@example.com")
    rejected = client.post(
        "/bookings",
        json=_booking_body(trainer, slot, "bob@example.com", "pi_test_2"),
        headers=auth_headers("bob@example.com"),
    )
    assert rejected.status_code == 409
    assert rejected.json()["code"] == "SLOT_FULL"

    detail = client.get(f"/trainers/{trainer.id}/slots/{slot.id}").json()
    assert detail["slot"]["booking_count"] == 1
    assert detail["slot"]["is_booked"] is True
    assert detail["slot"]["seats_left"] == 0
    assert "members" not in detail["slot"]


def test_cannot_book_for_someone_else(client, open_slot, mia):
    trainer, slot = open_slot
    response = client.post(
        "/bookings", json=_booking_body(trainer, slot, "other@example.com"), headers=mia
    )

    assert response.status_code == 403
    assert response.json()["code"] == "SELF_BOOKING_ONLY"


def test_my_bookings_carry_trainer_name(client, open_slot, mia):
    trainer, slot = open_slot
    client.post("/bookings", json=_booking_body(trainer, slot, "mia@example.com"), headers=mia)

    mine = client.get("/bookings/me", headers=mia).json()

    assert len(mine) == 1
    assert mine[0]["trainer_name"] == trainer.name


def test_booking_visibility_and_payment_update(client, open_slot, mia, make_user, auth_headers, admin_headers):
    trainer, slot = open_slot
    booking_id = client.post(
        "/bookings", json=_booking_body(trainer, slot, "mia@example.com"), headers=mia
    ).json()["id"]

    make_user("bob@example.com")
    assert client.get(f"/bookings/{booking_id}", headers=auth_headers("bob@example.com")).status_code == 403
    assert client.get(f"/bookings/{booking_id}", headers=admin_headers).status_code == 200

    updated = client.patch(
        f"/bookings/{booking_id}", json={"payment_status": "Completed"}, headers=mia
    )
    assert updated.status_code == 200
    assert updated.json()["payment_status"] == "Completed"

    immutable = client.patch(f"/bookings/{booking_id}", json={"price": "1.00"}, headers=mia)
    assert immutable.status_code == 422

    empty = client.patch(f"/bookings/{booking_id}", json={}, headers=mia)
    assert empty.status_code == 400
    assert empty.json()["code"] == "EMPTY_UPDATE"


def test_trainer_and_admin_listings(client, open_slot, mia, auth_headers, admin_headers):
    trainer, slot = open_slot
    client.post("/bookings", json=_booking_body(trainer, slot, "mia@example.com"), headers=mia)

    for_trainer = client.get("/bookings/trainer", headers=auth_headers(trainer.email, UserRole.TRAINER))
    assert [b["user_email"] for b in for_trainer.json()] == ["mia@example.com"]

    everything = client.get("/bookings", params={"skip": 0, "limit": 10}, headers=admin_headers)
    assert everything.status_code == 200
    assert everything.json()[0]["trainer_name"] == trainer.name

    assert client.get("/bookings", params={"limit": 1000}, headers=admin_headers).status_code == 422
    assert client.get("/bookings", headers=mia).status_code == 403


def test_review_once_per_booking(client, open_slot, mia, make_user, auth_headers):
    trainer, slot = open_slot
    booking_id = client.post(
        "/bookings", json=_booking_body(trainer, slot, "mia@example.com"), headers=mia
    ).json()["id"]

    first = client.post(
        "/reviews", json={"booking_id": booking_id, "rating": 5, "comment": "Loved it"}, headers=mia
    )
    assert first.status_code == 201
    assert first.json()["trainer_id"] == trainer.id

    again = client.post("/reviews", json={"booking_id": booking_id, "rating": 1}, headers=mia)
    assert again.status_code == 409
    assert again.json()["code"] == "DUPLICATE_REVIEW"

    make_user("bob@example.com")
    stranger = client.post(
        "/reviews", json={"booking_id": booking_id, "rating": 1}, headers=auth_headers("bob@example.com")
    )
    assert stranger.status_code == 403

    assert client.get("/bookings/me", headers=mia).json()[0]["has_reviewed"] is True
    assert [r["comment"] for r in client.get(f"/trainers/{trainer.id}/reviews").json()] == ["Loved it"]
    assert len(client.get("/reviews", params={"limit": 5}).json()) == 1


def test_payment_intent_and_history(client, open_slot, mia, gateway):
    trainer, slot = open_slot

    intent = client.post("/payments/create-intent", json={"amount": "12.50"}, headers=mia)
    assert intent.status_code == 200
    body = intent.json()
    assert body["amount"] == 1250
    assert body["currency"] == "usd"
    assert body["payment_intent_id"].startswith("pi_fake_")
    assert len(gateway.created) == 1

    assert client.post("/payments/create-intent", json={"amount": 0}, headers=mia).status_code == 422

    client.post(
        "/bookings",
        json=_booking_body(trainer, slot, "mia@example.com", body["payment_intent_id"]),
        headers=mia,
    )
    history = client.get("/payments/history", headers=mia).json()
    assert [(h["transaction_id"], h["amount"]) for h in history] == [(body["payment_intent_id"], 49.99)]


def test_admin_overview_and_orphan_report(client, open_slot, mia, admin_headers):
    trainer, slot = open_slot
    client.post("/bookings", json=_booking_body(trainer, slot, "mia@example.com"), headers=mia)
    client.post("/newsletter/subscribe", json={"name": "Mia", "email": "mia@example.com"})

    overview = client.get("/admin/overview", headers=admin_headers)
    assert overview.status_code == 200
    data = overview.json()
    assert data["total_revenue"] == pytest.approx(49.99)
    assert data["subscriber_count"] == 1
    assert data["paid_member_count"] == 1
    assert data["trainer_counts"] == {"pending": 0, "accepted": 1, "rejected": 0}
    assert len(data["recent_transactions"]) == 1

    orphans = client.get("/admin/orphaned-bookings", params={"older_than_minutes": 0}, headers=admin_headers)
    assert orphans.status_code == 200
    assert orphans.json()["count"] == 0
