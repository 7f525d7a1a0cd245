"""Input adapters that assemble and validate event rosters."""

from .roster import (
    DEFAULT_ROSTER_MAPPING,
    RosterRow,
    RosterValidationError,
    load_players_from_csv,
    load_roster_csv,
    merge_roster_with_ratings,
    rows_to_players,
    validate_roster,
)

__all__ = [
    "DEFAULT_ROSTER_MAPPING",
    "RosterRow",
    "RosterValidationError",
    "load_roster_csv",
    "load_players_from_csv",
    "merge_roster_with_ratings",
    "rows_to_players",
    "validate_roster",
]
