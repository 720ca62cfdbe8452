"""Participation API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventify.auth import get_current_user, require_roles
from eventify.database import get_db
from eventify.models.user import User, UserRole
from eventify.schemas.participation import (
    ParticipationCreate,
    ParticipationOut,
    ParticipationPage,
    ParticipationUpdate,
)
from eventify.services import participation_service

router = APIRouter()


@router.post("/", response_model=ParticipationOut, status_code=status.HTTP_201_CREATED)
def create_participation(
    payload: ParticipationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Register the caller for an event."""
    return participation_service.create_participation(
        db, user, payload.event_id, participation_status=payload.status, notes=payload.notes,
    )


@router.get("/", response_model=ParticipationPage)
def list_participations(
    user_id: Optional[str] = Query(None),
    event_id: Optional[str] = Query(None),
    participation_status: Optional[str] = Query(None, alias="status", pattern="^(pending|confirmed|cancelled)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=participation_service.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(UserRole.admin)),
):
    """List all participations (admin only)."""
    return participation_service.list_participations(
        db, user_id=user_id, event_id=event_id, participation_status=participation_status, page=page, limit=limit,
    )


@router.get("/user/me", response_model=list[ParticipationOut])
def my_participations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return participation_service.participations_for_user(db, user.user_id)


@router.get("/user/{user_id}", response_model=list[ParticipationOut])
def user_participations(
    user_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(UserRole.admin)),
):
    return participation_service.participations_for_user(db, user_id)


@router.get("/event/{event_id}", response_model=list[ParticipationOut])
def event_participations(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """All participations of an event (organizer only)."""
    return participation_service.participations_for_event(db, event_id, user)


@router.delete("/event/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_participation(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Withdraw the caller from an event."""
    participation_service.cancel_participation(db, event_id, user)


@router.get("/{participation_id}", response_model=ParticipationOut)
def get_participation(participation_id: str, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return participation_service.get_participation(db, participation_id)


@router.patch("/{participation_id}", response_model=ParticipationOut)
def update_participation(
    participation_id: str,
    payload: ParticipationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Change status or notes (organizer or the participant)."""
    return participation_service.update_participation(
        db, participation_id, user, payload.model_dump(exclude_unset=True),
    )


@router.delete("/{participation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_participation(participation_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    participation_service.delete_participation(db, participation_id, user)
