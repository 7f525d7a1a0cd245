"""Helpers to build rosters from RSVPs, stored ratings and CSV files."""

from __future__ import annotations

import csv
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from matchday.config import get_rating_scale
from matchday.models import RatingEntry, RosterPlayer, RsvpEntry


logger = logging.getLogger(__name__)

DEFAULT_ROSTER_MAPPING = {
    "player_id": "player_id",
    "name": "name",
    "rating": "rating",
    "is_goalkeeper": "is_goalkeeper",
}

_TRUE_FLAGS = {"1", "true", "t", "yes", "y", "gr", "gk", "sim", "s"}
_FALSE_FLAGS = {"0", "false", "f", "no", "n", "nao", "não", ""}


class RosterValidationError(ValueError):
    """Raised when a roster does not meet the balancing preconditions."""

    def __init__(self, problems: Sequence[str]):
        super().__init__("; ".join(problems))
        self.problems = list(problems)


class RosterRow(BaseModel):
    raw_id: str
    raw_name: str
    raw_rating: Optional[str] = None
    raw_goalkeeper: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "RosterRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key, DEFAULT_ROSTER_MAPPING[key])
            value = row.get(column)
            return value.strip() if value is not None else None

        return cls(
            raw_id=extract("player_id") or "",
            raw_name=extract("name") or "",
            raw_rating=extract("rating"),
            raw_goalkeeper=extract("is_goalkeeper"),
        )


def _parse_rating(raw_rating: Optional[str], *, player_id: str) -> Optional[int]:
    if raw_rating is None or not raw_rating.strip():
        return None
    try:
        return int(raw_rating.strip())
    except ValueError:
        raise ValueError(f"rating '{raw_rating}' for player {player_id!r} is not an integer") from None


def _parse_flag(value: Optional[str], *, player_id: str) -> bool:
    if value is None:
        return False
    text = value.strip().lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise ValueError(f"goalkeeper flag '{value}' for player {player_id!r} is not recognised")


def load_roster_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[RosterRow]:
    mapping = mapping or DEFAULT_ROSTER_MAPPING
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = [RosterRow.from_mapping(row, mapping) for row in reader]
    return rows


def rows_to_players(rows: Iterable[RosterRow]) -> List[RosterPlayer]:
    players: List[RosterPlayer] = []
    skipped = 0
    for row in rows:
        if not row.raw_id:
            skipped += 1
            continue
        players.append(
            RosterPlayer(
                player_id=row.raw_id,
                name=row.raw_name or row.raw_id,
                rating=_parse_rating(row.raw_rating, player_id=row.raw_id),
                is_goalkeeper=_parse_flag(row.raw_goalkeeper, player_id=row.raw_id),
            )
        )
    if skipped:
        logger.info("Skipped %s roster rows without a player id", skipped)
    return players


def load_players_from_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[RosterPlayer]:
    return rows_to_players(load_roster_csv(path, mapping=mapping))


def merge_roster_with_ratings(
    rsvps: Iterable[RsvpEntry],
    ratings: Iterable[RatingEntry],
    *,
    default_rating: Optional[int] = None,
) -> List[RosterPlayer]:
    """Build the roster for an event from accepted RSVPs and stored ratings.

    Players keep RSVP order. Players nobody has rated get the default rating
    and are not goalkeepers.
    """

    if default_rating is None:
        default_rating = get_rating_scale().default

    ratings_by_user = {entry.user_id: entry for entry in ratings}
    roster: List[RosterPlayer] = []
    for rsvp in rsvps:
        if rsvp.rsvp != "accepted":
            continue
        stored = ratings_by_user.get(rsvp.user_id)
        roster.append(
            RosterPlayer(
                player_id=rsvp.user_id,
                name=rsvp.name or rsvp.user_id,
                rating=stored.rating if stored is not None else default_rating,
                is_goalkeeper=stored.is_goalkeeper if stored is not None else False,
            )
        )
    return roster


def validate_roster(players: Sequence[RosterPlayer], *, require_ratings: bool = True) -> None:
    """Reject rosters with repeated ids and, unless disabled, unrated players."""

    problems: List[str] = []
    unrated = [player.player_id for player in players if not player.is_rated]
    if require_ratings and unrated:
        problems.append("players without rating: " + ", ".join(unrated))

    counts = Counter(player.player_id for player in players)
    duplicates = sorted(pid for pid, count in counts.items() if count > 1)
    if duplicates:
        problems.append("duplicate player ids: " + ", ".join(duplicates))

    if problems:
        raise RosterValidationError(problems)
