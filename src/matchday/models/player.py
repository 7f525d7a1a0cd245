"""Canonical player models shared across ingestion and balancer layers."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from matchday.config import RATING_MAX, RATING_MIN


class RosterPlayer(BaseModel):
    """Confirmed player handed to the balancer.

    ``rating`` is ``None`` when nobody has rated the player yet; the default
    is resolved when the rating is read, never stored on the record.
    """

    player_id: str = Field(..., min_length=1)
    name: str
    rating: Optional[int] = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    is_goalkeeper: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    def effective_rating(self, default: int) -> int:
        return self.rating if self.rating is not None else default


class RatingEntry(BaseModel):
    """Organizer-supplied rating for one player at one event."""

    event_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    is_goalkeeper: bool = False

    model_config = ConfigDict(frozen=True)


class RsvpEntry(BaseModel):
    event_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    rsvp: Literal["accepted", "declined"]

    model_config = ConfigDict(frozen=True)
