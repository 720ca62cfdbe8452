"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventify.database import Base


class EventStatus(str, enum.Enum):
    active = "active"
    cancelled = "cancelled"
    completed = "completed"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(500), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    image_url = Column(String(1000), nullable=True)
    organizer_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    max_participants = Column(Integer, nullable=False, default=0)  # 0 = unlimited
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.active)
    is_private = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    organizer = relationship("User", lazy="joined")
    participations = relationship(
        "Participation",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Participation.created_at",
    )

    @property
    def participants(self):
        """Users holding an active participation, in join order."""
        return [p.user for p in self.participations if p.is_active]

    def has_participant(self, user_id: str) -> bool:
        return any(p.user_id == user_id and p.is_active for p in self.participations)
