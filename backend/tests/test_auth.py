"""Tests for registration, login and bearer-token validation."""
from datetime import timedelta

from eventify.auth import create_access_token, get_password_hash, verify_password
from eventify.config import settings
from eventify.models.user import User
from tests.conftest import auth_headers, register_user


class TestPasswordHashing:

    def test_hash_round_trip(self):
        hashed = get_password_hash("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_garbage_hash_is_rejected(self):
        assert not verify_password("secret123", "not-a-bcrypt-hash")


class TestRegister:

    def test_register_returns_user_and_token(self, client):
        data = register_user(client, "alice@example.com", name="Alice")
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["name"] == "Alice"
        assert data["user"]["role"] == "user"
        assert data["token"]

    def test_register_duplicate_email_conflict(self, client):
        register_user(client, "alice@example.com")
        resp = client.post("/api/auth/register", json={
            "email": "Alice@Example.com", "password": "secret123", "name": "Again",
        })
        assert resp.status_code == 409

    def test_register_short_password_rejected(self, client):
        resp = client.post("/api/auth/register", json={
            "email": "alice@example.com", "password": "123", "name": "Alice",
        })
        assert resp.status_code == 422

    def test_register_invalid_email_rejected(self, client):
        resp = client.post("/api/auth/register", json={
            "email": "not-an-email", "password": "secret123", "name": "Alice",
        })
        assert resp.status_code == 422

    def test_admin_email_gets_admin_role(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "boss@example.com, other@example.com")
        data = register_user(client, "boss@example.com")
        assert data["user"]["role"] == "admin"

    def test_password_is_stored_hashed(self, client, db):
        register_user(client, "alice@example.com", password="secret123")
        user = db.query(User).filter(User.email == "alice@example.com").one()
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)


class TestLogin:

    def test_login_success(self, client):
        register_user(client, "alice@example.com", password="secret123")
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "alice@example.com"
        assert resp.json()["token"]

    def test_login_wrong_password(self, client):
        register_user(client, "alice@example.com", password="secret123")
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})
        assert resp.status_code == 401

    def test_login_unknown_email(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
        assert resp.status_code == 401


class TestBearerToken:

    def test_me_with_token(self, client):
        alice = register_user(client, "alice@example.com", name="Alice")
        resp = client.get("/api/auth/me", headers=alice["headers"])
        assert resp.status_code == 200
        assert resp.json()["user_id"] == alice["user"]["user_id"]

    def test_me_without_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_me_with_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers=auth_headers("garbage"))
        assert resp.status_code == 401

    def test_me_with_expired_token(self, client, db):
        register_user(client, "alice@example.com")
        user = db.query(User).filter(User.email == "alice@example.com").one()
        token = create_access_token(user, expires_delta=timedelta(minutes=-1))
        resp = client.get("/api/auth/me", headers=auth_headers(token))
        assert resp.status_code == 401
        assert "expired" in resp.json()["detail"].lower()
