"""Two-team balancing built on player ratings and goalkeeper flags."""

from .export import export_teams_to_csv
from .service import BalanceResult, BalanceStats, build_balanced_teams

__all__ = ["BalanceResult", "BalanceStats", "build_balanced_teams", "export_teams_to_csv"]
