"""Configuration helpers for the rating scale."""

from .rating import (
    RATING_MAX,
    RATING_MIN,
    RatingScale,
    get_rating_scale,
)

__all__ = [
    "RATING_MAX",
    "RATING_MIN",
    "RatingScale",
    "get_rating_scale",
]
