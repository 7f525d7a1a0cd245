"""Persistence layer for events, RSVPs, player ratings and generated teams."""

from __future__ import annotations

import json
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional
from uuid import uuid4

from matchday.balancer import BalanceResult
from matchday.ingest import merge_roster_with_ratings
from matchday.models import RatingEntry, RosterPlayer, RsvpEntry


EVENT_STATUSES = ("scheduled", "cancelled", "archived")
RSVP_VALUES = ("accepted", "declined")


class EventNotActiveError(RuntimeError):
    """Raised when an RSVP changes on an event that is no longer scheduled."""


@dataclass
class EventRecord:
    event_id: str
    title: str
    teams_enabled: bool
    status: str
    created_at: datetime
    updated_at: datetime


@dataclass
class TeamsRecord:
    event_id: str
    team_a: List[dict]
    team_b: List[dict]
    stats: dict
    warnings: List[str]
    created_by: Optional[str]
    created_at: datetime

    def to_payload(self) -> dict:
        return {
            "team_a": self.team_a,
            "team_b": self.team_b,
            "stats": self.stats,
            "warnings": self.warnings,
        }


class EventStore:
    """Simple SQLite-backed store for events and their generated teams."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv("MATCHDAY_DB_PATH")
        if env_db:
            if env_db.startswith("file:"):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS events (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                teams_enabled INTEGER NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS event_rsvps (
                event_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                name TEXT,
                rsvp TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (event_id, user_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS event_player_ratings (
                event_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                rating INTEGER NOT NULL,
                is_goalkeeper INTEGER NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (event_id, user_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS event_teams (
                event_id TEXT PRIMARY KEY,
                team_a_json TEXT NOT NULL,
                team_b_json TEXT NOT NULL,
                stats_json TEXT NOT NULL,
                warnings_json TEXT NOT NULL,
                created_by TEXT,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def create_event(
        self,
        *,
        title: str,
        teams_enabled: bool = True,
        event_id: Optional[str] = None,
    ) -> EventRecord:
        event_id = event_id or uuid4().hex
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO events (id, title, teams_enabled, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (event_id, title, int(teams_enabled), "scheduled", now, now),
            )
            conn.commit()
        event = self.get_event(event_id)
        if event is None:  # pragma: no cover
            raise KeyError(f"Event {event_id} not found after insert")
        return event

    def get_event(self, event_id: Optional[str]) -> Optional[EventRecord]:
        if not event_id:
            return None
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_event(row)

    def update_event_status(self, event_id: str, status: str) -> EventRecord:
        if status not in EVENT_STATUSES:
            raise ValueError(f"Unsupported event status {status!r}")
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE events SET status = ?, updated_at = ? WHERE id = ?",
                (status, now, event_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise KeyError(f"Event {event_id} not found")
        event = self.get_event(event_id)
        if event is None:  # pragma: no cover
            raise KeyError(f"Event {event_id} not found after update")
        return event

    def _require_event(self, event_id: str) -> EventRecord:
        event = self.get_event(event_id)
        if event is None:
            raise KeyError(f"Event {event_id} not found")
        return event

    def set_rsvp(
        self,
        event_id: str,
        user_id: str,
        *,
        rsvp: str,
        name: Optional[str] = None,
    ) -> RsvpEntry:
        if rsvp not in RSVP_VALUES:
            raise ValueError(f"Unsupported RSVP value {rsvp!r}")
        event = self._require_event(event_id)
        if event.status != "scheduled":
            raise EventNotActiveError(f"Event {event_id} is {event.status}")

        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO event_rsvps (event_id, user_id, name, rsvp, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (event_id, user_id) DO UPDATE SET
                    name = COALESCE(excluded.name, event_rsvps.name),
                    rsvp = excluded.rsvp,
                    updated_at = excluded.updated_at
                """,
                (event_id, user_id, name, rsvp, now, now),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM event_rsvps WHERE event_id = ? AND user_id = ?",
                (event_id, user_id),
            ).fetchone()
        return self._row_to_rsvp(row)

    def list_rsvps(self, event_id: str) -> List[RsvpEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM event_rsvps WHERE event_id = ? ORDER BY created_at, rowid",
                (event_id,),
            ).fetchall()
        return [self._row_to_rsvp(row) for row in rows]

    def save_ratings(self, entries: Iterable[RatingEntry]) -> int:
        """Upsert ratings keyed by ``(event_id, user_id)``; return the row count."""

        now = datetime.now(timezone.utc).isoformat()
        payload = [
            (entry.event_id, entry.user_id, entry.rating, int(entry.is_goalkeeper), now)
            for entry in entries
        ]
        for event_id in {item[0] for item in payload}:
            self._require_event(event_id)
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO event_player_ratings (event_id, user_id, rating, is_goalkeeper, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (event_id, user_id) DO UPDATE SET
                    rating = excluded.rating,
                    is_goalkeeper = excluded.is_goalkeeper,
                    updated_at = excluded.updated_at
                """,
                payload,
            )
            conn.commit()
        return len(payload)

    def list_ratings(self, event_id: str) -> List[RatingEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM event_player_ratings WHERE event_id = ? ORDER BY rowid",
                (event_id,),
            ).fetchall()
        return [
            RatingEntry(
                event_id=row["event_id"],
                user_id=row["user_id"],
                rating=row["rating"],
                is_goalkeeper=bool(row["is_goalkeeper"]),
            )
            for row in rows
        ]

    def get_roster(self, event_id: str, *, default_rating: Optional[int] = None) -> List[RosterPlayer]:
        """Return the accepted players of an event annotated with their ratings."""

        return merge_roster_with_ratings(
            self.list_rsvps(event_id),
            self.list_ratings(event_id),
            default_rating=default_rating,
        )

    def save_teams(
        self,
        event_id: str,
        result: BalanceResult,
        *,
        created_by: Optional[str] = None,
    ) -> TeamsRecord:
        """Store ``result`` for the event, replacing any earlier result."""

        self._require_event(event_id)
        payload = result.to_dict()
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO event_teams (
                    event_id, team_a_json, team_b_json, stats_json, warnings_json, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (event_id) DO UPDATE SET
                    team_a_json = excluded.team_a_json,
                    team_b_json = excluded.team_b_json,
                    stats_json = excluded.stats_json,
                    warnings_json = excluded.warnings_json,
                    created_by = excluded.created_by,
                    created_at = excluded.created_at
                """,
                (
                    event_id,
                    json.dumps(payload["team_a"]),
                    json.dumps(payload["team_b"]),
                    json.dumps(payload["stats"]),
                    json.dumps(payload["warnings"]),
                    created_by,
                    now,
                ),
            )
            conn.commit()
        teams = self.get_teams(event_id)
        if teams is None:  # pragma: no cover
            raise KeyError(f"Teams for event {event_id} not found after upsert")
        return teams

    def get_teams(self, event_id: str) -> Optional[TeamsRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM event_teams WHERE event_id = ?", (event_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_teams(row)

    def _row_to_event(self, row: sqlite3.Row) -> EventRecord:
        return EventRecord(
            event_id=row["id"],
            title=row["title"],
            teams_enabled=bool(row["teams_enabled"]),
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_rsvp(self, row: sqlite3.Row) -> RsvpEntry:
        return RsvpEntry(
            event_id=row["event_id"],
            user_id=row["user_id"],
            name=row["name"],
            rsvp=row["rsvp"],
        )

    def _row_to_teams(self, row: sqlite3.Row) -> TeamsRecord:
        return TeamsRecord(
            event_id=row["event_id"],
            team_a=json.loads(row["team_a_json"]),
            team_b=json.loads(row["team_b_json"]),
            stats=json.loads(row["stats_json"]),
            warnings=json.loads(row["warnings_json"]),
            created_by=row["created_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


__all__ = [
    "EVENT_STATUSES",
    "EventNotActiveError",
    "EventRecord",
    "EventStore",
    "RSVP_VALUES",
    "TeamsRecord",
]
