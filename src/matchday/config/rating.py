"""Rating scale used when ranking and balancing players."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5
RATING_DEFAULT = 3

_DEFAULT_RATING_ENV = "MATCHDAY_DEFAULT_RATING"


@dataclass(frozen=True)
class RatingScale:
    minimum: int
    maximum: int
    default: int

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum


def _env_rating(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    return max(RATING_MIN, min(RATING_MAX, value))


def get_rating_scale() -> RatingScale:
    """Return the active scale, honouring ``MATCHDAY_DEFAULT_RATING``."""

    return RatingScale(
        minimum=RATING_MIN,
        maximum=RATING_MAX,
        default=_env_rating(_DEFAULT_RATING_ENV, RATING_DEFAULT),
    )
