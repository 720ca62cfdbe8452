"""Core event service — enforces the event lifecycle rules.

Responsibilities:
- Date validation: start before end, no events starting in the past
- Authorization hook: only the organizer may update/delete
- Capacity: never shrink below the current participant count
- Visibility: private events only reach their organizer and participants
- Join/leave through the membership module so capacity checks are atomic
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from eventify.models.event import Event, EventStatus
from eventify.models.participation import Participation, ParticipationStatus, ACTIVE_STATUSES
from eventify.models.user import User
from eventify.services import membership

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50


def as_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _check_dates(start: datetime, end: datetime) -> None:
    if as_utc(start) > as_utc(end):
        raise HTTPException(status_code=400, detail="Start date must be before end date")


def _check_authorization(event: Event, actor: User, action: str) -> None:
    """Only the organizer may modify this event."""
    if event.organizer_id != actor.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the event organizer can {action} this event",
        )


def _can_view(event: Event, actor: Optional[User]) -> bool:
    if not event.is_private:
        return True
    if actor is None:
        return False
    return event.organizer_id == actor.user_id or event.has_participant(actor.user_id)


def create_event(db: Session, actor: User, data: dict[str, Any]) -> Event:
    """Create an event organized by ``actor`` with no participants."""
    start, end = data["start_date"], data["end_date"]
    _check_dates(start, end)
    if as_utc(start) < datetime.now(timezone.utc):
        raise HTTPException(status_code=400, detail="Start date cannot be in the past")

    event = Event(
        title=data["title"],
        description=data["description"],
        start_date=as_utc(start),
        end_date=as_utc(end),
        location=data["location"],
        category=data["category"],
        image_url=data.get("image_url"),
        max_participants=data.get("max_participants") or 0,
        status=EventStatus(data.get("status") or "active"),
        is_private=bool(data.get("is_private")),
        organizer_id=actor.user_id,
        version=1,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.event_id, actor.user_id)
    return event


def list_events(
    db: Session,
    actor: Optional[User] = None,
    search: Optional[str] = None,
    category: Optional[str] = None,
    start_date_from: Optional[datetime] = None,
    start_date_to: Optional[datetime] = None,
    event_status: Optional[str] = None,
    organizer: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> dict[str, Any]:
    """Paginated, filtered listing honouring event visibility."""
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    page = max(1, page)
    query = db.query(Event)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Event.title.ilike(pattern),
            Event.description.ilike(pattern),
            Event.location.ilike(pattern),
        ))
    if category:
        query = query.filter(Event.category == category)
    if start_date_from:
        query = query.filter(Event.start_date >= as_utc(start_date_from))
    if start_date_to:
        query = query.filter(Event.start_date <= as_utc(start_date_to))
    if event_status:
        query = query.filter(Event.status == EventStatus(event_status))
    if organizer:
        query = query.filter(Event.organizer_id == organizer)

    if actor is not None:
        joined = select(Participation.event_id).where(
            Participation.user_id == actor.user_id,
            Participation.status.in_(ACTIVE_STATUSES),
        )
        query = query.filter(or_(
            Event.is_private.is_(False),
            Event.organizer_id == actor.user_id,
            Event.event_id.in_(joined),
        ))
    else:
        query = query.filter(Event.is_private.is_(False))

    total = query.count()
    events = (
        query.order_by(Event.start_date)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"events": events, "total": total, "page": page, "limit": limit}


def get_event(db: Session, event_id: str, actor: Optional[User] = None) -> Event:
    event = membership.get_event_or_404(db, event_id)
    if not _can_view(event, actor):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this private event",
        )
    return event


def update_event(
    db: Session,
    event_id: str,
    actor: User,
    updates: dict[str, Any],
    version: Optional[int] = None,
) -> Event:
    """Partial update by the organizer; dates and capacity are re-validated."""
    event = membership.get_event_or_404(db, event_id)
    _check_authorization(event, actor, "update")

    seen_version = event.version
    if version is not None and version != seen_version:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Version mismatch: expected {seen_version}, got {version}. Re-fetch and retry.",
        )

    start = updates.get("start_date") or event.start_date
    end = updates.get("end_date") or event.end_date
    if "start_date" in updates or "end_date" in updates:
        _check_dates(start, end)

    capacity = updates.get("max_participants")
    if capacity:
        current = membership.count_active(db, event.event_id)
        if current > capacity:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot reduce max participants below current participant count ({current})",
            )

    for field, value in updates.items():
        if value is None and field != "image_url":
            continue
        if field in ("start_date", "end_date"):
            value = as_utc(value)
        elif field == "status":
            value = EventStatus(value)
        setattr(event, field, value)

    membership.claim_event(db, event.event_id, seen_version)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s to version %d", event_id, event.version)
    return event


def delete_event(db: Session, event_id: str, actor: User) -> None:
    """Hard-delete an event and its participations (organizer only)."""
    event = membership.get_event_or_404(db, event_id)
    _check_authorization(event, actor, "delete")
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s by organizer %s", event_id, actor.user_id)


def join_event(db: Session, event_id: str, actor: User) -> Event:
    """Add ``actor`` to the event, reactivating a cancelled participation if any."""
    event = membership.get_event_or_404(db, event_id)
    seen_version = event.version
    membership.ensure_active(event)

    existing = membership.find_participation(db, event.event_id, actor.user_id)
    if existing is not None and existing.is_active:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You are already a participant of this event",
        )
    membership.ensure_capacity(db, event)

    if existing is not None:
        existing.status = ParticipationStatus.confirmed
    else:
        db.add(Participation(
            event_id=event.event_id,
            user_id=actor.user_id,
            status=ParticipationStatus.confirmed,
        ))
    membership.commit_membership(db, event.event_id, seen_version)
    db.refresh(event)
    logger.info("User %s joined event %s", actor.user_id, event_id)
    return event


def leave_event(db: Session, event_id: str, actor: User) -> Event:
    """Remove ``actor`` from the event by deleting their participation."""
    event = membership.get_event_or_404(db, event_id)
    seen_version = event.version

    existing = membership.find_participation(db, event.event_id, actor.user_id)
    if existing is None or not existing.is_active:
        raise HTTPException(status_code=400, detail="You are not a participant of this event")

    db.delete(existing)
    membership.commit_membership(db, event.event_id, seen_version)
    db.refresh(event)
    logger.info("User %s left event %s", actor.user_id, event_id)
    return event


def events_by_organizer(db: Session, user_id: str) -> list[Event]:
    return db.query(Event).filter(Event.organizer_id == user_id).order_by(Event.start_date).all()


def events_by_participant(db: Session, user_id: str) -> list[Event]:
    return (
        db.query(Event)
        .join(Participation, Participation.event_id == Event.event_id)
        .filter(Participation.user_id == user_id, Participation.status.in_(ACTIVE_STATUSES))
        .order_by(Event.start_date)
        .all()
    )
