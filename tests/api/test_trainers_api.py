from fitflow.core.enums import UserRole


def _apply(client, headers, **overrides):
    body = {
        "name": "Pat Lee",
        "experience_years": 4,
        "skills": ["Yoga"],
        "available_days": ["monday", "Friday"],
        "available_time": "Evenings",
    }
    body.update(overrides)
    return client.post("/trainers", json=body, headers=headers)


def test_application_lifecycle(client, make_user, auth_headers, admin_headers):
    make_user("pat@example.com", display_name="Pat")
    pat = auth_headers("pat@example.com")

    applied = _apply(client, pat)
    assert applied.status_code == 201
    application = applied.json()
    assert application["status"] == "pending"
    assert application["available_days"] == ["Monday", "Friday"]

    assert _apply(client, pat).status_code == 409
    assert client.get("/trainers/me", headers=pat).json()["status"] == "pending"

    pending = client.get("/trainers/applications", headers=admin_headers).json()
    assert [a["email"] for a in pending] == ["pat@example.com"]
    assert client.get("/trainers/applications", headers=pat).status_code == 403

    accepted = client.patch(
        f"/trainers/{application['id']}/status",
        json={"status": "accepted", "feedback": "Welcome"},
        headers=admin_headers,
    )
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    assert client.get("/users/role/pat@example.com").json() == {"role": "trainer"}

    again = client.patch(
        f"/trainers/{application['id']}/status", json={"status": "rejected"}, headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["code"] == "INVALID_STATUS_TRANSITION"

    listed = client.get("/trainers").json()
    assert [t["name"] for t in listed] == ["Pat Lee"]
    assert "email" not in listed[0]


def test_pending_is_not_a_valid_decision(client, make_user, auth_headers, admin_headers):
    make_user("pat@example.com")
    trainer_id = _apply(client, auth_headers("pat@example.com")).json()["id"]

    response = client.patch(
        f"/trainers/{trainer_id}/status", json={"status": "pending"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATUS"


def test_slot_management_hides_roster_from_the_public(client, make_trainer, make_user, auth_headers):
    trainer = make_trainer()
    coach = auth_headers(trainer.email, UserRole.TRAINER)

    created = client.post(
        "/trainers/slots",
        json={"name": "Core Blast", "time": "12:00", "days": ["tuesday"], "max_participants": 2},
        headers=coach,
    )
    assert created.status_code == 201
    slot = created.json()
    assert slot["days"] == ["Tuesday"]
    assert (slot["booking_count"], slot["is_booked"], slot["seats_left"]) == (0, False, 2)

    make_user("mia@example.com")
    client.post(
        "/bookings",
        json={
            "trainer_id": trainer.id,
            "slot_id": slot["id"],
            "email": "mia@example.com",
            "price": "20.00",
            "transaction_id": "pi_roster",
        },
        headers=auth_headers("mia@example.com"),
    )

    own = client.get("/trainers/slots", headers=coach).json()
    assert [m["email"] for m in own[0]["members"]] == ["mia@example.com"]

    public = client.get(f"/trainers/{trainer.id}").json()
    assert public["slots"][0]["booking_count"] == 1
    assert "members" not in public["slots"][0]

    assert client.get("/trainers/slots", headers=auth_headers("mia@example.com")).status_code == 403


def test_zero_capacity_slot_is_rejected(client, make_trainer, auth_headers):
    trainer = make_trainer()
    response = client.post(
        "/trainers/slots",
        json={"name": "Nobody", "time": "12:00", "days": ["Monday"], "max_participants": 0},
        headers=auth_headers(trainer.email, UserRole.TRAINER),
    )
    assert response.status_code == 422


def test_rating_endpoint(client, make_trainer, make_user, auth_headers):
    trainer = make_trainer()
    make_user("fan@example.com")
    fan = auth_headers("fan@example.com")

    first = client.post(f"/trainers/rating/{trainer.id}", json={"rating": 4}, headers=fan)
    assert first.json() == {"average_rating": 4.0, "total_ratings": 1}

    duplicate = client.post(f"/trainers/rating/{trainer.id}", json={"rating": 2}, headers=fan)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "DUPLICATE_RATING"

    assert client.get(f"/trainers/{trainer.id}/ratings").json()["total_ratings"] == 1
    assert client.get("/trainers/01ARZ3NDEKTSV4RRFFQ69G5FAV/ratings").status_code == 404
