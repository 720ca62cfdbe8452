"""Membership bookkeeping shared by the event and participation services.

Participation rows are the only stored record of who takes part in an event;
``Event.participants`` is derived from them. Every change to membership runs
its checks and writes in one transaction and then claims the event's
``version`` with a conditional UPDATE. When the claim matches no row another
request changed the event since it was read, so the whole transaction is
rolled back and the caller gets 409. This makes "check capacity, then add"
atomic without table locks.
"""
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventify.models.event import Event, EventStatus
from eventify.models.participation import Participation, ACTIVE_STATUSES

logger = logging.getLogger(__name__)


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail=f"Event with ID {event_id} not found")
    return event


def count_active(db: Session, event_id: str) -> int:
    return (
        db.query(func.count(Participation.participation_id))
        .filter(Participation.event_id == event_id, Participation.status.in_(ACTIVE_STATUSES))
        .scalar()
    )


def find_participation(db: Session, event_id: str, user_id: str) -> Optional[Participation]:
    return (
        db.query(Participation)
        .filter(Participation.event_id == event_id, Participation.user_id == user_id)
        .first()
    )


def ensure_active(event: Event) -> None:
    if event.status != EventStatus.active:
        raise HTTPException(status_code=400, detail=f"Cannot join a {event.status.value} event")


def ensure_capacity(db: Session, event: Event) -> None:
    """Reject when one more active participant would exceed capacity."""
    if event.max_participants > 0 and count_active(db, event.event_id) >= event.max_participants:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Event has reached maximum participants",
        )


def claim_event(db: Session, event_id: str, seen_version: int) -> None:
    """Bump the event version iff it still equals ``seen_version``."""
    result = db.execute(
        update(Event)
        .where(Event.event_id == event_id, Event.version == seen_version)
        .values(version=seen_version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.warning("Concurrent modification of event %s (saw version %d)", event_id, seen_version)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Event was modified concurrently, please retry",
        )


def commit_membership(db: Session, event_id: str, seen_version: int) -> None:
    """Claim the event and commit pending membership writes as one unit."""
    claim_event(db, event_id, seen_version)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already registered for this event",
        )
