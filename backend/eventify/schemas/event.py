"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, computed_field

from eventify.schemas.user import UserSummary


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    start_date: datetime
    end_date: datetime
    location: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1, max_length=100)
    image_url: Optional[str] = None
    max_participants: int = Field(default=0, ge=0)
    status: str = Field(default="active", pattern="^(active|cancelled|completed)$")
    is_private: bool = False


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=0)
    status: Optional[str] = Field(default=None, pattern="^(active|cancelled|completed)$")
    is_private: Optional[bool] = None
    version: Optional[int] = None  # optimistic lock; skipped when omitted


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str
    start_date: datetime
    end_date: datetime
    location: str
    category: str
    image_url: Optional[str] = None
    max_participants: int
    status: str
    is_private: bool
    organizer_id: str
    organizer: Optional[UserSummary] = None
    participants: list[UserSummary] = []
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def effective_status(self) -> str:
        """Stored status, except past non-cancelled events read as completed."""
        if self.status == "cancelled":
            return self.status
        end = self.end_date if self.end_date.tzinfo else self.end_date.replace(tzinfo=timezone.utc)
        if end < datetime.now(timezone.utc):
            return "completed"
        return self.status


class EventPage(BaseModel):
    events: list[EventOut]
    total: int
    page: int
    limit: int
