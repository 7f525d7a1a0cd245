"""Greedy two-team balancer with a dedicated goalkeeper slot per team."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import List, Optional, Sequence, Tuple

from matchday.config import get_rating_scale
from matchday.models import RosterPlayer


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

WARNING_EXTRA_GOALKEEPERS = "Existem {count} GR. Só 2 foram usados."
WARNING_SINGLE_GOALKEEPER = "Só existe 1 guarda-redes."
WARNING_NO_GOALKEEPERS = "Não há guarda-redes marcados."

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class BalanceStats:
    sum_a: int
    sum_b: int
    avg_a: float
    avg_b: float
    diff: int

    def to_dict(self) -> dict:
        return {
            "sum_a": self.sum_a,
            "sum_b": self.sum_b,
            "avg_a": self.avg_a,
            "avg_b": self.avg_b,
            "diff": self.diff,
        }


@dataclass(frozen=True)
class BalanceResult:
    team_a: Tuple[RosterPlayer, ...]
    team_b: Tuple[RosterPlayer, ...]
    stats: BalanceStats
    warnings: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "team_a": [player.model_dump() for player in self.team_a],
            "team_b": [player.model_dump() for player in self.team_b],
            "stats": self.stats.to_dict(),
            "warnings": list(self.warnings),
        }


def _average(total: int, size: int) -> float:
    if size == 0:
        return 0.0
    value = (Decimal(total) / Decimal(size)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(value)


def build_balanced_teams(
    players: Sequence[RosterPlayer],
    *,
    default_rating: Optional[int] = None,
) -> BalanceResult:
    """Split ``players`` into two teams with rating sums as close as possible.

    Goalkeepers take one reserved slot per team (best to A, second best to B);
    extra goalkeepers play in the field. Field players are handed out in
    descending rating order to whichever team has the smaller sum, ties going
    to A unless A already has more players. Never raises: policy deviations
    are reported in ``warnings``.
    """

    if default_rating is None:
        default_rating = get_rating_scale().default

    def rating(player: RosterPlayer) -> int:
        return player.effective_rating(default_rating)

    # sorted() is stable so equal ratings keep roster order
    goalkeepers = sorted((p for p in players if p.is_goalkeeper), key=rating, reverse=True)
    field_players = sorted((p for p in players if not p.is_goalkeeper), key=rating, reverse=True)

    team_a: List[RosterPlayer] = []
    team_b: List[RosterPlayer] = []
    warnings: List[str] = []

    if len(goalkeepers) >= 2:
        team_a.append(goalkeepers[0])
        team_b.append(goalkeepers[1])
        if len(goalkeepers) > 2:
            warnings.append(WARNING_EXTRA_GOALKEEPERS.format(count=len(goalkeepers)))
            field_players.extend(goalkeepers[2:])
    elif len(goalkeepers) == 1:
        team_a.append(goalkeepers[0])
        warnings.append(WARNING_SINGLE_GOALKEEPER)
    else:
        warnings.append(WARNING_NO_GOALKEEPERS)

    sum_a = sum(rating(p) for p in team_a)
    sum_b = sum(rating(p) for p in team_b)
    for player in field_players:
        if sum_a < sum_b:
            target = "A"
        elif sum_b < sum_a:
            target = "B"
        else:
            target = "A" if len(team_a) <= len(team_b) else "B"

        if target == "A":
            team_a.append(player)
            sum_a += rating(player)
        else:
            team_b.append(player)
            sum_b += rating(player)

    stats = BalanceStats(
        sum_a=sum_a,
        sum_b=sum_b,
        avg_a=_average(sum_a, len(team_a)),
        avg_b=_average(sum_b, len(team_b)),
        diff=abs(sum_a - sum_b),
    )

    logger.info(
        "Balanced %s players: A=%s (sum %s) B=%s (sum %s) diff %s",
        len(players),
        len(team_a),
        sum_a,
        len(team_b),
        sum_b,
        stats.diff,
    )
    for warning in warnings:
        logger.warning("Balance warning: %s", warning)

    return BalanceResult(
        team_a=tuple(team_a),
        team_b=tuple(team_b),
        stats=stats,
        warnings=tuple(warnings),
    )
