from datetime import datetime, timedelta, timezone

import jwt
import pytest
from google.auth.exceptions import GoogleAuthError, TransportError

from database_init import db
from models.user import User


def test_register_returns_token_and_user(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": "secret123", "fullName": "New Person", "phone": "0244"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["fullName"] == "New Person"
    assert body["user"]["role"] == "customer"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.get_json()["user"]["id"] == body["user"]["id"]


def test_register_duplicate_email(client, customer):
    resp = client.post(
        "/api/auth/register",
        json={"email": "jane@example.com", "password": "secret123", "fullName": "Jane"},
    )
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "User already exists"}


def test_register_requires_fields(client):
    resp = client.post("/api/auth/register", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_login(client, customer):
    resp = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["id"] == customer["id"]


def test_login_wrong_password(client, customer):
    resp = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid credentials"}


def test_login_unknown_email(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert resp.status_code == 401


def test_me_requires_valid_token(client):
    assert client.get("/api/auth/me").status_code == 401
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Not authorized to access this route"}


def test_expired_token_is_rejected(app, client, customer):
    expired = jwt.encode(
        {"id": customer["id"], "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401


def test_google_auth_creates_user(app, client, monkeypatch):
    calls = []

    def fake_verify(credential, client_id):
        calls.append((credential, client_id))
        return "ama@gmail.com", "Ama Mensah", "google-sub-1"

    monkeypatch.setattr("routes.auth.verify_google_credential", fake_verify)

    resp = client.post("/api/auth/google", json={"credential": "id-token"})

    assert resp.status_code == 200
    assert calls == [("id-token", "test-google-client")]
    assert resp.get_json()["user"]["fullName"] == "Ama Mensah"
    with app.app_context():
        user = User.query.filter_by(email="ama@gmail.com").one()
        assert user.google_id == "google-sub-1"
        assert user.password == ""


def test_google_auth_links_existing_user(app, client, customer, monkeypatch):
    monkeypatch.setattr(
        "routes.auth.verify_google_credential",
        lambda credential, client_id: ("jane@example.com", "Jane", "google-sub-2"),
    )
    resp = client.post("/api/auth/google", json={"credential": "id-token"})
    assert resp.get_json()["user"]["id"] == customer["id"]
    with app.app_context():
        assert db.session.get(User, customer["id"]).google_id == "google-sub-2"


def test_google_auth_invalid_credential(client, monkeypatch):
    def reject(credential, client_id):
        raise ValueError("Token expired")

    monkeypatch.setattr("routes.auth.verify_google_credential", reject)
    resp = client.post("/api/auth/google", json={"credential": "bad"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Google authentication failed"}


@pytest.mark.parametrize(
    "error",
    [GoogleAuthError("Wrong issuer."), TransportError("certs unreachable")],
)
def test_google_auth_library_errors_return_401(client, monkeypatch, error):
    def reject(credential, client_id):
        raise error

    monkeypatch.setattr("routes.auth.verify_google_credential", reject)
    resp = client.post("/api/auth/google", json={"credential": "forged"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Google authentication failed"}



def test_google_only_account_cannot_password_login(client, monkeypatch):
    monkeypatch.setattr(
        "routes.auth.verify_google_credential",
        lambda credential, client_id: ("kofi@gmail.com", "Kofi", "google-sub-3"),
    )
    client.post("/api/auth/google", json={"credential": "id-token"})
    resp = client.post("/api/auth/login", json={"email": "kofi@gmail.com", "password": "anything"})
    assert resp.status_code == 401
