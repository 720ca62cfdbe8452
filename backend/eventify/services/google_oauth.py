"""Google OAuth 2.0 authorization-code flow."""
import logging
from urllib.parse import urlencode

import httpx
from fastapi import HTTPException, status

from eventify.config import settings
from eventify.schemas.user import GoogleProfile

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
SCOPES = "openid email profile"


def _ensure_configured() -> None:
    if not settings.GOOGLE_CLIENT_ID or not settings.GOOGLE_CLIENT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google login is not configured",
        )


def authorization_url(state: str) -> str:
    """URL of Google's consent screen for this application."""
    _ensure_configured()
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.GOOGLE_CALLBACK_URL,
        "response_type": "code",
        "scope": SCOPES,
        "state": state,
        "prompt": "select_account",
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def fetch_profile(code: str) -> GoogleProfile:
    """Exchange an authorization code and read the user's profile."""
    _ensure_configured()
    try:
        with httpx.Client(timeout=10.0) as client:
            token_resp = client.post(TOKEN_URL, data={
                "code": code,
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "redirect_uri": settings.GOOGLE_CALLBACK_URL,
                "grant_type": "authorization_code",
            })
            token_resp.raise_for_status()
            access_token = token_resp.json()["access_token"]

            info_resp = client.get(USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
            info_resp.raise_for_status()
            info = info_resp.json()

        return GoogleProfile(
            google_id=info["sub"],
            email=info["email"],
            name=info.get("name") or info["email"].split("@")[0],
        )
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        # ValueError also covers undecodable JSON and pydantic's ValidationError
        logger.warning("Google code exchange failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Google authentication failed")
