"""Command-line interface for splitting a roster CSV into two teams."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from matchday.balancer import build_balanced_teams, export_teams_to_csv
from matchday.config_loader import MappingProfile
from matchday.ingest import DEFAULT_ROSTER_MAPPING, RosterValidationError, load_players_from_csv, validate_roster


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build two balanced teams from a roster CSV")
    parser.add_argument("roster", type=Path, help="Path to roster CSV")
    parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for roster CSV columns (e.g., rating=Nota)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    parser.add_argument("--output", type=Path, default=Path("teams.csv"), help="Output CSV path")
    parser.add_argument("--json", type=Path, default=None, help="Optional path to write the result JSON")
    parser.add_argument(
        "--allow-unrated",
        action="store_true",
        help="Balance players without a rating using the default rating",
    )
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        key = key.strip()
        if key not in DEFAULT_ROSTER_MAPPING:
            raise ValueError(f"Unknown roster column '{key}'")
        mapping[key] = value.strip()
    return mapping


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    roster_mapping = _parse_mapping(args.column)
    if args.load_profile:
        profile = MappingProfile.load(args.load_profile)
        roster_mapping = profile.roster_mapping | roster_mapping
    if args.save_profile:
        MappingProfile(roster_mapping).save(args.save_profile)
        print(f"Saved mapping profile to {args.save_profile}")

    players = load_players_from_csv(args.roster, mapping=DEFAULT_ROSTER_MAPPING | roster_mapping)
    try:
        validate_roster(players, require_ratings=not args.allow_unrated)
    except RosterValidationError as exc:
        for problem in exc.problems:
            print(f"Invalid roster: {problem}", file=sys.stderr)
        return 1

    result = build_balanced_teams(players)
    args.output.write_text(export_teams_to_csv(result), encoding="utf-8")
    if args.json:
        args.json.write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"Wrote result JSON to {args.json}")

    stats = result.stats
    print(f"Team A: {len(result.team_a)} players, sum {stats.sum_a}, avg {stats.avg_a:.2f}")
    print(f"Team B: {len(result.team_b)} players, sum {stats.sum_b}, avg {stats.avg_b:.2f}")
    print(f"Difference: {stats.diff}")
    for warning in result.warnings:
        print(f"Warning: {warning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
