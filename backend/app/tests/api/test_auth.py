from fastapi.testclient import TestClient

from app.api.rate_limit import memory_store
from app.core.config import settings
from app.core.security import create_refresh_token
from app.tests.utils import STRONG_PASSWORD, register_user

AUTH = f"{settings.API_V1_STR}/auth"


def test_register_returns_user_and_tokens(client: TestClient):
    data = register_user(client, "new@example.com")

    assert data["user"]["email"] == "new@example.com"
    assert "hashed_password" not in data["user"]
    assert data["tokens"]["token_type"] == "bearer"
    assert data["tokens"]["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_register_rejects_duplicate_email(client: TestClient):
    register_user(client, "dup@example.com")

    response = client.post(f"{AUTH}/register", json={"email": "dup@example.com", "password": STRONG_PASSWORD})

    assert response.status_code == 409
    assert response.json()["status"] == "error"


def test_register_rejects_weak_password(client: TestClient):
    response = client.post(f"{AUTH}/register", json={"email": "weak@example.com", "password": "alllowercase"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Password does not meet requirements"
    assert {e["code"] for e in body["errors"]} >= {"missing_uppercase", "missing_digit"}


def test_request_validation_errors_use_envelope(client: TestClient):
    response = client.post(f"{AUTH}/register", json={"email": "not-an-email", "password": STRONG_PASSWORD})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert body["errors"][0]["field"] == "email"


def test_login_and_me(client: TestClient):
    register_user(client, "me@example.com")

    response = client.post(f"{AUTH}/login", json={"email": "me@example.com", "password": STRONG_PASSWORD})
    assert response.status_code == 200
    token = response.json()["data"]["tokens"]["access_token"]

    me = client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "me@example.com"
    assert me.json()["data"]["last_login_at"] is not None


def test_login_failures_are_indistinguishable(client: TestClient):
    register_user(client, "known@example.com")

    wrong_password = client.post(f"{AUTH}/login", json={"email": "known@example.com", "password": "Wr0ng!pass"})
    unknown_email = client.post(f"{AUTH}/login", json={"email": "ghost@example.com", "password": STRONG_PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        "status": "error",
        "message": "Invalid email or password",
    }


def test_refresh_issues_new_tokens(client: TestClient):
    tokens = register_user(client)["tokens"]

    response = client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    assert response.json()["data"]["access_token"]


def test_access_and_refresh_tokens_are_not_interchangeable(client: TestClient):
    data = register_user(client)
    access = data["tokens"]["access_token"]
    refresh = create_refresh_token(data["user"]["id"])

    assert client.post(f"{AUTH}/refresh", json={"refresh_token": access}).status_code == 401
    assert client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {refresh}"}).status_code == 401
    assert client.get(f"{AUTH}/me").status_code == 401


def test_change_password(client: TestClient, auth_headers: dict[str, str]):
    wrong = client.post(
        f"{AUTH}/change-password",
        headers=auth_headers,
        json={"current_password": "Not!th3one", "new_password": "An0ther$ecret"},
    )
    assert wrong.status_code == 400

    response = client.post(
        f"{AUTH}/change-password",
        headers=auth_headers,
        json={"current_password": STRONG_PASSWORD, "new_password": "An0ther$ecret"},
    )
    assert response.status_code == 200

    login = client.post(f"{AUTH}/login", json={"email": "owner@example.com", "password": "An0ther$ecret"})
    assert login.status_code == 200


def test_auth_endpoints_are_rate_limited(client: TestClient, monkeypatch):
    monkeypatch.setattr(memory_store, "_clock", lambda: 1_000_000.0)
    responses = [
        client.post(f"{AUTH}/login", json={"email": "x@example.com", "password": "Wr0ng!pass"})
        for _ in range(6)
    ]

    assert [r.status_code for r in responses] == [401] * 5 + [429]
    assert responses[-1].json()["retryAfter"] == 20
