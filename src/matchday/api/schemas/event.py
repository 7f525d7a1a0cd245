from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class EventCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    teams_enabled: bool = True
    event_id: str | None = None


class EventStatusRequest(BaseModel):
    status: Literal["scheduled", "cancelled", "archived"]


class EventResponse(BaseModel):
    event_id: str
    title: str
    teams_enabled: bool
    status: str
    created_at: datetime
    updated_at: datetime


class RsvpRequest(BaseModel):
    rsvp: Literal["accepted", "declined"]
    name: str | None = None


class RsvpResponse(BaseModel):
    event_id: str
    user_id: str
    name: str | None
    rsvp: str
