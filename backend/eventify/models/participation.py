"""Participation ORM model: the authoritative record of event membership."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventify.database import Base


class ParticipationStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"


ACTIVE_STATUSES = (ParticipationStatus.pending, ParticipationStatus.confirmed)


class Participation(Base):
    __tablename__ = "participations"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_participations_event_user"),
    )

    participation_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    status = Column(SAEnum(ParticipationStatus), nullable=False, default=ParticipationStatus.confirmed)
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event", back_populates="participations")
    user = relationship("User", lazy="joined")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
