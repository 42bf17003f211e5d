"""Error envelope and credential handling across the API."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import SecretStr

from fitflow.auth import create_access_token
from fitflow.core.constants import ROOT_MESSAGE
from fitflow.core.enums import UserRole
from tests.factories import id_token

PROBLEM_KEYS = {"type", "title", "status", "detail", "message", "code", "instance"}


def test_root_and_health(client):
    root = client.get("/")
    assert root.status_code == 200
    assert root.text == ROOT_MESSAGE

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert health.json()["database"] == "ok"


def test_missing_credentials_is_401(client):
    response = client.get("/bookings/me")

    assert response.status_code == 401
    body = response.json()
    assert PROBLEM_KEYS <= set(body)
    assert body["code"] == "NOT_AUTHENTICATED"
    assert body["message"] == body["detail"]
    assert body["instance"] == "/bookings/me"


def test_garbage_token_is_403(client):
    response = client.get("/bookings/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json()["code"] == "INVALID_TOKEN"


def test_expired_token_is_403(client, test_settings):
    token = create_access_token(
        {"sub": "mia@example.com"}, timedelta(minutes=-5), settings=test_settings
    )
    response = client.get("/bookings/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json()["code"] == "INVALID_TOKEN"


def test_token_signed_with_another_secret_is_403(client, test_settings):
    other = test_settings.model_copy(update={"secret_key": SecretStr("some-other-signing-secret-0123456789abcdef")})
    token = create_access_token({"sub": "mia@example.com"}, settings=other)
    response = client.get("/bookings/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


def test_role_comes_from_the_directory_not_the_token(client, make_user, auth_headers):
    make_user("mia@example.com")
    # Claims admin, stored as member
    headers = auth_headers("mia@example.com", UserRole.ADMIN)

    response = client.get("/users", headers=headers)

    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "INSUFFICIENT_ROLE"
    assert body["errors"] == {"required": ["admin"]}


def test_request_validation_uses_problem_shape(client, make_user, auth_headers):
    make_user("mia@example.com")
    response = client.post(
        "/bookings", json={"trainer_id": "x"}, headers=auth_headers("mia@example.com")
    )

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "validation_error"
    assert isinstance(body["errors"], list) and body["errors"]


def test_unknown_route_is_problem_404(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_login_exchanges_id_token_for_session_cookie(client, make_user, test_settings):
    make_user("mia@example.com", display_name="Mia")

    response = client.post(
        "/auth/login",
        json={"email": "mia@example.com"},
        headers=_bearer(id_token(test_settings, "mia@example.com")),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"email": "mia@example.com", "role": "member"}
    assert body["access_token"]
    assert test_settings.auth_cookie_name in response.cookies
    assert "httponly" in response.headers["set-cookie"].lower()

    # TestClient replays the cookie
    assert client.get("/bookings/me").status_code == 200

    client.post("/auth/logout")
    client.cookies.clear()
    assert client.get("/bookings/me").status_code == 401


def test_login_with_bare_email_is_rejected(client, make_user):
    make_user("admin@example.com", role=UserRole.ADMIN)

    response = client.post("/auth/login", json={"email": "admin@example.com"})

    assert response.status_code == 401
    assert response.json()["code"] == "NOT_AUTHENTICATED"
    assert "set-cookie" not in response.headers
    assert client.get("/users").status_code == 401


def test_login_only_for_the_email_the_id_token_proves(client, make_user, test_settings):
    make_user("admin@example.com", role=UserRole.ADMIN)
    make_user("mia@example.com")

    response = client.post(
        "/auth/login",
        json={"email": "admin@example.com"},
        headers=_bearer(id_token(test_settings, "mia@example.com")),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "IDENTITY_MISMATCH"


def test_login_rejects_tokens_the_identity_provider_did_not_issue(
    client, make_user, auth_headers, test_settings
):
    make_user("mia@example.com")

    # A FitFlow session token has no audience and is not an ID token
    session = client.post(
        "/auth/login", json={"email": "mia@example.com"}, headers=auth_headers("mia@example.com")
    )
    assert session.status_code == 403
    assert session.json()["code"] == "INVALID_TOKEN"

    forged = jwt.encode(
        {"email": "mia@example.com", "aud": "fitflow", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "not-the-identity-provider-key-0123456789",
        algorithm="HS256",
    )
    assert client.post("/auth/login", json={"email": "mia@example.com"}, headers=_bearer(forged)).status_code == 403

    unverified = id_token(test_settings, "mia@example.com", email_verified=False)
    assert client.post("/auth/login", json={"email": "mia@example.com"}, headers=_bearer(unverified)).status_code == 403

    expired = id_token(test_settings, "mia@example.com", exp=datetime.now(timezone.utc) - timedelta(minutes=1))
    assert client.post("/auth/login", json={"email": "mia@example.com"}, headers=_bearer(expired)).status_code == 403


def test_login_for_unknown_user_is_401(client, test_settings):
    response = client.post(
        "/auth/login",
        json={"email": "ghost@example.com"},
        headers=_bearer(id_token(test_settings, "ghost@example.com")),
    )

    assert response.status_code == 401
    assert response.json()["code"] == "UNKNOWN_USER"
