"""
Name: Auth & Account Endpoint Tests

Responsibilities:
  - Register/login responses, session cookie and 401 handling
  - Purpose-bound tokens (reset token is not a session)
  - Password recovery and email verification over HTTP
  - Profile endpoints (/users/me)
  - Per-IP rate limits on login, registration, recovery and email routes
"""

from datetime import timedelta

import pytest

from timetracker import container
from timetracker.crosscutting import rate_limit as rate_limit_module
from timetracker.crosscutting.config import Settings
from timetracker.domain.services import TokenPurpose

pytestmark = pytest.mark.unit


def test_register_returns_session_and_cookie(client):
    response = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "Ada@Example.com", "password": "secret1"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["default_timer_preset_id"] is not None
    assert "password_hash" not in body["user"]

    set_cookie = response.headers["set-cookie"]
    assert "access_token=" in set_cookie
    assert "HttpOnly" in set_cookie


def test_register_duplicate_is_400(client, register):
    register()
    response = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret1"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_register_validation_is_400_with_field_messages(client):
    response = client.post(
        "/auth/register",
        json={"name": "  ", "email": "ada@example.com", "password": "secret1"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "BAD_REQUEST"
    assert body["detail"] == "name: Name is required"


def test_login_and_invalid_credentials(client, register):
    register()

    ok = client.post("/auth/login", json={"email": "ada@example.com", "password": "secret1"})
    bad = client.post("/auth/login", json={"email": "ada@example.com", "password": "nope12"})

    assert ok.status_code == 200
    assert ok.json()["token"]
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid credentials"


def test_cookie_session_is_accepted(client):
    client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret1"},
    )
    # R: sin Authorization: la cookie httpOnly del registro basta.
    response = client.get("/users/me")
    assert response.status_code == 200
    assert response.json()["email"] == "ada@example.com"


def test_missing_token_is_401(client):
    response = client.get("/users/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_reset_token_is_not_a_session(client, register):
    body, _ = register()
    reset_token = container.get_token_service().sign(
        {"id": body["user"]["id"]},
        purpose=TokenPurpose.PASSWORD_RESET,
        lifetime=timedelta(minutes=5),
    )

    response = client.get("/users/me", headers={"Authorization": f"Bearer {reset_token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_forgot_and_reset_password(client, register):
    register()

    forgot = client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    unknown = client.post("/auth/forgot-password", json={"email": "ghost@example.com"})

    assert forgot.status_code == unknown.status_code == 200
    assert forgot.json() == unknown.json()

    outbox = container.get_email_sender().outbox
    assert len(outbox) == 1
    token = outbox[0].html.split("token=", 1)[1].split('"', 1)[0]

    reset = client.post(
        "/auth/reset-password", json={"token": token, "new_password": "brand-new"}
    )
    assert reset.status_code == 200

    login = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "brand-new"}
    )
    assert login.status_code == 200


def test_reset_with_session_token_is_401(client, register):
    body, _ = register()
    response = client.post(
        "/auth/reset-password", json={"token": body["token"], "new_password": "brand-new"}
    )
    assert response.status_code == 401


def test_email_verification_flow(client, register):
    body, headers = register()

    status = client.get("/auth/verification/status", headers=headers).json()
    assert status["verified"] is False
    assert status["pending"] is False

    requested = client.post(
        "/auth/verification/request", json={"email": "ada@example.com"}, headers=headers
    )
    assert requested.status_code == 200

    again = client.post(
        "/auth/verification/request", json={"email": "ada@example.com"}, headers=headers
    )
    assert again.status_code == 400

    token = container.get_email_sender().outbox[-1].html.split("token=", 1)[1].split('"', 1)[0]
    verified = client.post("/auth/verification/verify", json={"token": token})
    assert verified.status_code == 200

    status = client.get("/auth/verification/status", headers=headers).json()
    assert status["verified"] is True
    assert client.get("/users/me", headers=headers).json()["email_verified"] is True


def test_profile_update_and_password_change(client, register):
    _, headers = register()

    patched = client.patch(
        "/users/me", json={"name": "Ada L.", "theme": "dark", "preferred_language": "tr"},
        headers=headers,
    )
    assert patched.status_code == 200
    assert patched.json()["theme"] == "dark"
    assert patched.json()["preferred_language"] == "tr"

    wrong = client.post(
        "/users/me/password",
        json={"current_password": "nope", "new_password": "secret2"},
        headers=headers,
    )
    changed = client.post(
        "/users/me/password",
        json={"current_password": "secret1", "new_password": "secret2"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert changed.status_code == 200


def test_profile_email_in_use(client, register):
    register(email="taken@example.com")
    _, headers = register(email="ada@example.com")
    response = client.patch("/users/me", json={"email": "taken@example.com"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already in use"


def test_ensure_defaults_is_idempotent(client, register):
    body, headers = register()

    first = client.post("/users/me/defaults", headers=headers)
    second = client.post("/users/me/defaults", headers=headers)

    assert first.status_code == second.status_code == 200
    assert second.json()["default_timer_preset_id"] == body["user"]["default_timer_preset_id"]
    assert client.get("/timer-presets/count", headers=headers).json() == {"count": 2}
    assert client.get("/projects/count", headers=headers).json() == {"count": 1}


def test_forgot_password_is_rate_limited_per_ip(client):
    payload = {"email": "ada@example.com"}
    for _ in range(3):
        assert client.post("/auth/forgot-password", json=payload).status_code == 200

    blocked = client.post("/auth/forgot-password", json=payload)

    assert blocked.status_code == 429
    assert blocked.headers["content-type"].startswith("application/problem+json")
    assert blocked.json()["code"] == "RATE_LIMITED"
    assert int(blocked.headers["retry-after"]) >= 1
    assert blocked.headers["x-ratelimit-remaining"] == "0"

    # R: otra IP tiene su propio bucket.
    other_ip = client.post(
        "/auth/forgot-password", json=payload, headers={"X-Forwarded-For": "203.0.113.9"}
    )
    assert other_ip.status_code == 200


def test_failed_logins_are_rate_limited(client):
    payload = {"email": "ada@example.com", "password": "wrong-pass"}
    statuses = [client.post("/auth/login", json=payload).status_code for _ in range(11)]

    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429


def test_registration_reports_remaining_quota(client):
    response = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret1"},
    )
    assert response.status_code == 201
    assert response.headers["x-ratelimit-limit"] == "5"
    assert response.headers["x-ratelimit-remaining"] == "4"


def test_verification_requests_share_the_email_quota(client, register):
    _, headers = register()
    statuses = [
        client.post(
            "/auth/verification/request", json={"email": "ada@example.com"}, headers=headers
        ).status_code
        for _ in range(4)
    ]
    # R: 2..3 chocan con el cooldown (400) pero igual consumen cupo.
    assert statuses == [200, 400, 400, 429]


def test_rate_limit_can_be_disabled(client, monkeypatch):
    monkeypatch.setattr(
        rate_limit_module, "get_settings", lambda: Settings(rate_limit_enabled=False)
    )
    payload = {"email": "ada@example.com"}
    statuses = [client.post("/auth/forgot-password", json=payload).status_code for _ in range(5)]
    assert statuses == [200] * 5
