"""Lightweight REST client for the matchday API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_ratings(path: Path | None) -> list[dict]:
    if path is None:
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid ratings JSON: {exc}") from exc
    if not isinstance(data, list):
        raise SystemExit("Ratings JSON must be a list of {user_id, rating, is_goalkeeper} objects")
    return data


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the matchday REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("event_id", help="Event identifier")
    parser.add_argument("--ratings", type=Path, help="JSON file with ratings to save before generating")
    parser.add_argument("--created-by", default=None, help="Organizer id recorded with the teams")
    parser.add_argument("--roster-only", action="store_true", help="Print the confirmed roster and exit")
    parser.add_argument("--show", action="store_true", help="Print the stored teams without regenerating")
    parser.add_argument("--export-path", type=Path, help="Destination path for exported CSV")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.roster_only:
            resp = client.get(f"/events/{args.event_id}/roster")
            if resp.status_code == 404:
                raise SystemExit(f"event {args.event_id} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
            return

        if not args.show:
            ratings = load_ratings(args.ratings)
            if ratings:
                resp = client.put(f"/events/{args.event_id}/ratings", json={"ratings": ratings})
                resp.raise_for_status()
                print(f"Saved {resp.json()['saved']} ratings")

            resp = client.post(f"/events/{args.event_id}/teams", json={"created_by": args.created_by})
            if resp.status_code == 404:
                raise SystemExit(f"event {args.event_id} not found")
            resp.raise_for_status()
        else:
            resp = client.get(f"/events/{args.event_id}/teams")
            if resp.status_code == 404:
                raise SystemExit(f"teams for event {args.event_id} not found")
            resp.raise_for_status()

        payload = resp.json()
        stats = payload["stats"]
        print(f"Team A sum {stats['sum_a']} avg {stats['avg_a']} | Team B sum {stats['sum_b']} avg {stats['avg_b']}")
        print(f"Difference: {stats['diff']}")
        for warning in payload["warnings"]:
            print(f"Warning: {warning}")

        if args.export_path:
            resp = client.get(f"/events/{args.event_id}/teams/export.csv")
            resp.raise_for_status()
            args.export_path.write_text(resp.text, encoding="utf-8")
            print(f"CSV export saved to {args.export_path}")


if __name__ == "__main__":
    main()
