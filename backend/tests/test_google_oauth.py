"""Tests for the Google sign-in flow (Google's endpoints are stubbed)."""
import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi import HTTPException

from eventify.config import settings
from eventify.models.user import User
from eventify.schemas.user import GoogleProfile
from eventify.services import google_oauth
from tests.conftest import register_user


@pytest.fixture
def google_configured(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "client-id")
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", "client-secret")
    monkeypatch.setattr(settings, "FRONTEND_URL", "http://frontend.test")


def _stub_profile(monkeypatch, profile: GoogleProfile):
    monkeypatch.setattr(google_oauth, "fetch_profile", lambda code: profile)


def _callback(client, code="abc"):
    client.cookies.set("oauth_state", "state-1")
    return client.get(
        "/api/auth/google/callback",
        params={"code": code, "state": "state-1"},
        follow_redirects=False,
    )


def _redirect_data(resp) -> dict:
    location = urlparse(resp.headers["location"])
    return json.loads(parse_qs(location.query)["data"][0])


class TestGoogleRedirect:

    def test_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")
        resp = client.get("/api/auth/google", follow_redirects=False)
        assert resp.status_code == 503

    def test_redirects_to_consent_screen(self, client, google_configured):
        resp = client.get("/api/auth/google", follow_redirects=False)
        assert resp.status_code == 302
        location = urlparse(resp.headers["location"])
        assert location.netloc == "accounts.google.com"
        query = parse_qs(location.query)
        assert query["client_id"] == ["client-id"]
        assert query["response_type"] == ["code"]
        assert "oauth_state" in resp.cookies


class TestGoogleCallback:

    def test_creates_new_account(self, client, db, google_configured, monkeypatch):
        _stub_profile(monkeypatch, GoogleProfile(google_id="g-1", email="new@example.com", name="New"))
        resp = _callback(client)
        assert resp.status_code == 302
        assert resp.headers["location"].startswith("http://frontend.test/auth/google/callback?data=")

        data = _redirect_data(resp)
        assert data["user"]["email"] == "new@example.com"
        assert data["token"]
        user = db.query(User).filter(User.email == "new@example.com").one()
        assert user.google_id == "g-1"

    def test_links_existing_account(self, client, db, google_configured, monkeypatch):
        existing = register_user(client, "alice@example.com", name="Alice")
        _stub_profile(monkeypatch, GoogleProfile(google_id="g-2", email="alice@example.com", name="Alice G"))
        data = _redirect_data(_callback(client))

        assert data["user"]["user_id"] == existing["user"]["user_id"]
        user = db.query(User).filter(User.email == "alice@example.com").one()
        assert user.google_id == "g-2"
        assert user.name == "Alice"

    def test_repeat_login_reuses_account(self, client, db, google_configured, monkeypatch):
        _stub_profile(monkeypatch, GoogleProfile(google_id="g-3", email="repeat@example.com", name="R"))
        first = _redirect_data(_callback(client))
        second = _redirect_data(_callback(client))
        assert first["user"]["user_id"] == second["user"]["user_id"]
        assert db.query(User).count() == 1

    def test_state_mismatch_rejected(self, client, google_configured, monkeypatch):
        _stub_profile(monkeypatch, GoogleProfile(google_id="g-4", email="x@example.com", name="X"))
        client.cookies.set("oauth_state", "expected")
        resp = client.get(
            "/api/auth/google/callback",
            params={"code": "abc", "state": "forged"},
            follow_redirects=False,
        )
        assert resp.status_code == 400


_RealClient = httpx.Client


def _stub_google(monkeypatch, userinfo):
    """Serve Google's token and userinfo endpoints from memory."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            return httpx.Response(200, json={"access_token": "google-token"})
        return httpx.Response(200, json=userinfo)

    monkeypatch.setattr(
        google_oauth.httpx, "Client",
        lambda **kwargs: _RealClient(transport=httpx.MockTransport(handler), **kwargs),
    )


class TestGoogleProfileExchange:

    def test_reads_profile(self, google_configured, monkeypatch):
        _stub_google(monkeypatch, {"sub": "g-9", "email": "jo@example.com"})
        profile = google_oauth.fetch_profile("abc")
        assert profile.google_id == "g-9"
        assert profile.email == "jo@example.com"
        assert profile.name == "jo"

    def test_userinfo_without_identity_is_unauthorized(self, google_configured, monkeypatch):
        _stub_google(monkeypatch, {"name": "No Id"})
        with pytest.raises(HTTPException) as exc:
            google_oauth.fetch_profile("abc")
        assert exc.value.status_code == 401

    def test_missing_subject_is_unauthorized(self, google_configured, monkeypatch):
        _stub_google(monkeypatch, {"email": "nosub@example.com"})
        with pytest.raises(HTTPException) as exc:
            google_oauth.fetch_profile("abc")
        assert exc.value.status_code == 401
        assert exc.value.detail == "Google authentication failed"
