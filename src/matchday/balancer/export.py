"""CSV export helpers for balanced teams."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable, Mapping, Union

from matchday.balancer.service import BalanceResult


EXPORT_HEADERS = ("team", "player_id", "name", "rating", "is_goalkeeper")


def _rows(label: str, players: Iterable[Mapping]) -> Iterable[list]:
    for player in players:
        rating = player.get("rating")
        yield [
            label,
            player.get("player_id", ""),
            player.get("name", ""),
            "" if rating is None else rating,
            "1" if player.get("is_goalkeeper") else "0",
        ]


def export_teams_to_csv(result: Union[BalanceResult, Mapping]) -> str:
    """Render a result (or its stored payload) as CSV, Team A rows first."""

    payload = result.to_dict() if isinstance(result, BalanceResult) else result

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    for row in _rows("A", payload.get("team_a", [])):
        writer.writerow(row)
    for row in _rows("B", payload.get("team_b", [])):
        writer.writerow(row)
    return buffer.getvalue()


__all__ = ["EXPORT_HEADERS", "export_teams_to_csv"]
