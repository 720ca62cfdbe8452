"""Participation lifecycle service.

Participations are the stored form of event membership, so every status
change that adds or removes someone from an event goes through
``membership.commit_membership`` together with the event version claim.
"""
import logging
from typing import Optional, Any

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from eventify.models.participation import Participation, ParticipationStatus, ACTIVE_STATUSES
from eventify.models.user import User
from eventify.services import membership

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _get_or_404(db: Session, participation_id: str) -> Participation:
    participation = (
        db.query(Participation)
        .filter(Participation.participation_id == participation_id)
        .first()
    )
    if not participation:
        raise HTTPException(status_code=404, detail=f"Participation with ID {participation_id} not found")
    return participation


def _check_organizer_or_participant(participation: Participation, actor: User, action: str) -> None:
    if actor.user_id not in (participation.user_id, participation.event.organizer_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have permission to {action} this participation",
        )


def create_participation(
    db: Session,
    actor: User,
    event_id: str,
    participation_status: Optional[str] = None,
    notes: Optional[str] = None,
) -> Participation:
    """Register ``actor`` for an event; one record per (user, event)."""
    event = membership.get_event_or_404(db, event_id)
    seen_version = event.version
    membership.ensure_active(event)

    new_status = ParticipationStatus(participation_status or ParticipationStatus.confirmed)
    if new_status in ACTIVE_STATUSES:
        membership.ensure_capacity(db, event)

    if membership.find_participation(db, event.event_id, actor.user_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already registered for this event")

    participation = Participation(
        event_id=event.event_id,
        user_id=actor.user_id,
        status=new_status,
        notes=notes,
    )
    db.add(participation)
    membership.commit_membership(db, event.event_id, seen_version)
    db.refresh(participation)
    logger.info("User %s registered for event %s (%s)", actor.user_id, event_id, new_status.value)
    return participation


def list_participations(
    db: Session,
    user_id: Optional[str] = None,
    event_id: Optional[str] = None,
    participation_status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> dict[str, Any]:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    page = max(1, page)
    query = db.query(Participation)
    if user_id:
        query = query.filter(Participation.user_id == user_id)
    if event_id:
        query = query.filter(Participation.event_id == event_id)
    if participation_status:
        query = query.filter(Participation.status == ParticipationStatus(participation_status))

    total = query.count()
    participations = (
        query.order_by(Participation.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"participations": participations, "total": total, "page": page, "limit": limit}


def get_participation(db: Session, participation_id: str) -> Participation:
    return _get_or_404(db, participation_id)


def participations_for_user(db: Session, user_id: str) -> list[Participation]:
    return (
        db.query(Participation)
        .filter(Participation.user_id == user_id)
        .order_by(Participation.created_at.desc())
        .all()
    )


def participations_for_event(db: Session, event_id: str, actor: User) -> list[Participation]:
    """All participations of an event; organizer only."""
    event = membership.get_event_or_404(db, event_id)
    if event.organizer_id != actor.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the organizer can view all participants",
        )
    return (
        db.query(Participation)
        .filter(Participation.event_id == event_id)
        .order_by(Participation.created_at.desc())
        .all()
    )


def update_participation(
    db: Session,
    participation_id: str,
    actor: User,
    updates: dict[str, Any],
) -> Participation:
    """Change status and/or notes.

    Moving to ``cancelled`` drops the user from the event's participants;
    moving out of ``cancelled`` re-admits them, subject to the same active
    and capacity checks as a fresh join.
    """
    participation = _get_or_404(db, participation_id)
    _check_organizer_or_participant(participation, actor, "update")
    event = participation.event
    seen_version = event.version

    if "notes" in updates:
        participation.notes = updates["notes"]

    new_status = updates.get("status")
    membership_changed = False
    if new_status is not None:
        new_status = ParticipationStatus(new_status)
        was_active = participation.is_active
        if not was_active and new_status in ACTIVE_STATUSES:
            membership.ensure_active(event)
            membership.ensure_capacity(db, event)
        membership_changed = was_active != (new_status in ACTIVE_STATUSES)
        participation.status = new_status

    if membership_changed:
        membership.commit_membership(db, event.event_id, seen_version)
    else:
        db.commit()
    db.refresh(participation)
    logger.info("Updated participation %s (status=%s)", participation_id, participation.status.value)
    return participation


def delete_participation(db: Session, participation_id: str, actor: User) -> None:
    participation = _get_or_404(db, participation_id)
    _check_organizer_or_participant(participation, actor, "delete")
    event = participation.event
    seen_version = event.version

    db.delete(participation)
    membership.commit_membership(db, event.event_id, seen_version)
    logger.info("Deleted participation %s on event %s", participation_id, event.event_id)


def cancel_participation(db: Session, event_id: str, actor: User) -> None:
    """Withdraw ``actor`` from an event by deleting their participation."""
    event = membership.get_event_or_404(db, event_id)
    seen_version = event.version
    participation = membership.find_participation(db, event.event_id, actor.user_id)
    if participation is None:
        raise HTTPException(status_code=404, detail="Not registered for this event")

    db.delete(participation)
    membership.commit_membership(db, event.event_id, seen_version)
    logger.info("User %s cancelled participation in event %s", actor.user_id, event_id)
