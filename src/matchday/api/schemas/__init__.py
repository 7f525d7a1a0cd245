"""Pydantic models for API I/O."""

from .event import EventCreateRequest, EventResponse, EventStatusRequest, RsvpRequest, RsvpResponse
from .teams import (
    BalanceRequest,
    BalanceResponse,
    BalanceStatsResponse,
    GenerateTeamsRequest,
    RatingItem,
    RatingsRequest,
    RatingsResponse,
    RosterPlayerResponse,
    StoredTeamsResponse,
)

__all__ = [
    "BalanceRequest",
    "BalanceResponse",
    "BalanceStatsResponse",
    "EventCreateRequest",
    "EventResponse",
    "EventStatusRequest",
    "GenerateTeamsRequest",
    "RatingItem",
    "RatingsRequest",
    "RatingsResponse",
    "RosterPlayerResponse",
    "RsvpRequest",
    "RsvpResponse",
    "StoredTeamsResponse",
]
