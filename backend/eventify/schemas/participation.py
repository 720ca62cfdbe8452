"""Pydantic schemas for Participations."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from eventify.schemas.user import UserSummary

_STATUS_PATTERN = "^(pending|confirmed|cancelled)$"


class ParticipationCreate(BaseModel):
    event_id: str
    status: Optional[str] = Field(default=None, pattern=_STATUS_PATTERN)
    notes: Optional[str] = Field(default=None, max_length=1000)


class ParticipationUpdate(BaseModel):
    status: Optional[str] = Field(default=None, pattern=_STATUS_PATTERN)
    notes: Optional[str] = Field(default=None, max_length=1000)


class EventBrief(BaseModel):
    event_id: str
    title: str
    start_date: datetime
    location: str
    image_url: Optional[str] = None
    organizer_id: str

    model_config = {"from_attributes": True}


class ParticipationOut(BaseModel):
    participation_id: str
    event_id: str
    user_id: str
    status: str
    notes: Optional[str] = None
    user: Optional[UserSummary] = None
    event: Optional[EventBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ParticipationPage(BaseModel):
    participations: list[ParticipationOut]
    total: int
    page: int
    limit: int
