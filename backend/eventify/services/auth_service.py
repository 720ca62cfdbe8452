"""Account registration, login and Google identity mapping."""
import logging
import secrets
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from eventify.auth import create_access_token, get_password_hash, verify_password
from eventify.config import settings
from eventify.models.user import User, UserRole
from eventify.schemas.user import GoogleProfile

logger = logging.getLogger(__name__)


def _auth_payload(user: User) -> dict[str, Any]:
    return {"user": user, "token": create_access_token(user)}


def _role_for(email: str) -> UserRole:
    return UserRole.admin if email.lower() in settings.admin_emails else UserRole.user


def register(db: Session, email: str, password: str, name: str) -> dict[str, Any]:
    """Create a local account; emails are unique."""
    email = email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        email=email,
        password_hash=get_password_hash(password),
        name=name,
        role=_role_for(email),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.user_id, user.email)
    return _auth_payload(user)


def login(db: Session, email: str, password: str) -> dict[str, Any]:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Rejected login for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info("User %s logged in", user.user_id)
    return _auth_payload(user)


def find_or_create_google_user(db: Session, profile: GoogleProfile) -> dict[str, Any]:
    """Map a Google identity to a local account, creating or linking it."""
    email = profile.email.lower()
    user = (
        db.query(User)
        .filter(or_(User.email == email, User.google_id == profile.google_id))
        .first()
    )
    if user is None:
        # Google accounts get a random password nobody knows
        user = User(
            email=email,
            name=profile.name,
            google_id=profile.google_id,
            password_hash=get_password_hash(secrets.token_urlsafe(16)),
            role=_role_for(email),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user %s from Google identity", user.user_id)
    elif not user.google_id:
        user.google_id = profile.google_id
        db.commit()
        db.refresh(user)
        logger.info("Linked Google identity to user %s", user.user_id)
    return _auth_payload(user)
