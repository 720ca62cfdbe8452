"""Event API routes — delegates to event_service for rule enforcement."""
from typing import Optional
from datetime import datetime
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventify.auth import get_current_user, get_optional_user
from eventify.database import get_db
from eventify.models.user import User
from eventify.schemas.event import EventCreate, EventUpdate, EventOut, EventPage
from eventify.services import event_service

router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Create a new event organized by the caller."""
    return event_service.create_event(db, user, payload.model_dump())


@router.get("/", response_model=EventPage)
def list_events(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    start_date_from: Optional[datetime] = Query(None),
    start_date_to: Optional[datetime] = Query(None),
    event_status: Optional[str] = Query(None, alias="status", pattern="^(active|cancelled|completed)$"),
    organizer: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=event_service.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """List events visible to the caller, with optional filters."""
    return event_service.list_events(
        db,
        actor=user,
        search=search,
        category=category,
        start_date_from=start_date_from,
        start_date_to=start_date_to,
        event_status=event_status,
        organizer=organizer,
        page=page,
        limit=limit,
    )


@router.get("/organizer/{user_id}", response_model=list[EventOut])
def events_by_organizer(user_id: str, db: Session = Depends(get_db)):
    return event_service.events_by_organizer(db, user_id)


@router.get("/participant/{user_id}", response_model=list[EventOut])
def events_by_participant(user_id: str, db: Session = Depends(get_db)):
    return event_service.events_by_participant(db, user_id)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db), user: Optional[User] = Depends(get_optional_user)):
    """Fetch a single event with its participants."""
    return event_service.get_event(db, event_id, user)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Update an event (organizer only)."""
    updates = payload.model_dump(exclude_unset=True, exclude={"version"})
    return event_service.update_event(db, event_id, user, updates, version=payload.version)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Delete an event (organizer only)."""
    event_service.delete_event(db, event_id, user)


@router.post("/{event_id}/join", response_model=EventOut)
def join_event(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return event_service.join_event(db, event_id, user)


@router.post("/{event_id}/leave", response_model=EventOut)
def leave_event(event_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return event_service.leave_event(db, event_id, user)
