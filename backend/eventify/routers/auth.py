"""Authentication routes: local accounts and Google sign-in."""
import json
import logging
import secrets
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from eventify.auth import get_current_user
from eventify.config import settings
from eventify.database import get_db
from eventify.models.user import User
from eventify.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserOut
from eventify.services import auth_service, google_oauth

logger = logging.getLogger(__name__)
router = APIRouter()

STATE_COOKIE = "oauth_state"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return it with a bearer token."""
    return auth_service.register(db, payload.email, payload.password, payload.name)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, payload.email, payload.password)


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.get("/google")
def google_login():
    """Start the Google OAuth flow."""
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(google_oauth.authorization_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(STATE_COOKIE, state, httponly=True, max_age=600, samesite="lax")
    return response


@router.get("/google/callback")
def google_callback(
    request: Request,
    code: str = Query(...),
    state: str = Query(...),
    db: Session = Depends(get_db),
):
    """Finish the Google flow and hand the session to the frontend."""
    if request.cookies.get(STATE_COOKIE) != state:
        raise HTTPException(status_code=400, detail="Invalid OAuth state")

    profile = google_oauth.fetch_profile(code)
    result = auth_service.find_or_create_google_user(db, profile)
    data = AuthResponse.model_validate(result, from_attributes=True).model_dump(mode="json")

    target = f"{settings.FRONTEND_URL}/auth/google/callback?data={quote(json.dumps(data))}"
    response = RedirectResponse(target, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(STATE_COOKIE)
    logger.info("Google sign-in completed for user %s", data["user"]["user_id"])
    return response
