from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from matchday.config import RATING_MAX, RATING_MIN


class RosterPlayerResponse(BaseModel):
    player_id: str
    name: str
    rating: int | None
    is_goalkeeper: bool


class BalanceStatsResponse(BaseModel):
    sum_a: int
    sum_b: int
    avg_a: float
    avg_b: float
    diff: int


class BalanceResponse(BaseModel):
    team_a: List[RosterPlayerResponse]
    team_b: List[RosterPlayerResponse]
    stats: BalanceStatsResponse
    warnings: List[str]


class StoredTeamsResponse(BalanceResponse):
    event_id: str
    created_by: str | None
    created_at: datetime


class BalancePlayer(BaseModel):
    player_id: str = Field(..., min_length=1)
    name: str | None = None
    rating: int | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    is_goalkeeper: bool = False


class BalanceRequest(BaseModel):
    players: List[BalancePlayer] = Field(default_factory=list)
    allow_unrated: bool = False


class RatingItem(BaseModel):
    user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    is_goalkeeper: bool = False


class RatingsRequest(BaseModel):
    ratings: List[RatingItem]


class RatingsResponse(BaseModel):
    event_id: str
    saved: int


class GenerateTeamsRequest(BaseModel):
    created_by: str | None = None
