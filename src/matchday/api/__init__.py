"""REST API for event rosters and balanced teams."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from matchday.api.schemas import (
    BalanceRequest,
    BalanceResponse,
    EventCreateRequest,
    EventResponse,
    EventStatusRequest,
    GenerateTeamsRequest,
    RatingsRequest,
    RatingsResponse,
    RosterPlayerResponse,
    RsvpRequest,
    RsvpResponse,
    StoredTeamsResponse,
)
from matchday.balancer import BalanceResult, build_balanced_teams, export_teams_to_csv
from matchday.ingest import RosterValidationError, validate_roster
from matchday.models import RatingEntry, RosterPlayer
from matchday.persistence import EventNotActiveError, EventRecord, EventStore, TeamsRecord


logger = logging.getLogger(__name__)


def event_to_response(event: EventRecord) -> EventResponse:
    return EventResponse(
        event_id=event.event_id,
        title=event.title,
        teams_enabled=event.teams_enabled,
        status=event.status,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


def result_to_response(result: BalanceResult) -> BalanceResponse:
    return BalanceResponse.model_validate(result.to_dict())


def teams_record_to_response(record: TeamsRecord) -> StoredTeamsResponse:
    payload: dict[str, Any] = record.to_payload()
    payload.update(
        event_id=record.event_id,
        created_by=record.created_by,
        created_at=record.created_at,
    )
    return StoredTeamsResponse.model_validate(payload)


def _validation_failure(exc: RosterValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"problems": exc.problems})


def create_app() -> FastAPI:
    app = FastAPI(title="matchday teams")
    store = EventStore(Path(__file__).resolve().parent.parent / "matchday.sqlite")
    app.state.event_store = store

    def _fetch_event_or_404(event_id: str) -> EventRecord:
        event = store.get_event(event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def _fetch_teams_event(event_id: str) -> EventRecord:
        event = _fetch_event_or_404(event_id)
        if not event.teams_enabled:
            raise HTTPException(status_code=409, detail="Teams are not enabled for this event")
        return event

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/balance", response_model=BalanceResponse)
    async def balance(payload: BalanceRequest):
        players = [
            RosterPlayer(
                player_id=item.player_id,
                name=item.name or item.player_id,
                rating=item.rating,
                is_goalkeeper=item.is_goalkeeper,
            )
            for item in payload.players
        ]
        try:
            validate_roster(players, require_ratings=not payload.allow_unrated)
        except RosterValidationError as exc:
            raise _validation_failure(exc) from exc
        return result_to_response(build_balanced_teams(players))

    @app.post("/events", response_model=EventResponse, status_code=201)
    async def create_event(payload: EventCreateRequest):
        if payload.event_id and store.get_event(payload.event_id) is not None:
            raise HTTPException(status_code=409, detail="Event already exists")
        event = store.create_event(
            title=payload.title,
            teams_enabled=payload.teams_enabled,
            event_id=payload.event_id,
        )
        return event_to_response(event)

    @app.get("/events/{event_id}", response_model=EventResponse)
    async def get_event(event_id: str):
        return event_to_response(_fetch_event_or_404(event_id))

    @app.post("/events/{event_id}/status", response_model=EventResponse)
    async def update_status(event_id: str, payload: EventStatusRequest):
        _fetch_event_or_404(event_id)
        return event_to_response(store.update_event_status(event_id, payload.status))

    @app.put("/events/{event_id}/rsvps/{user_id}", response_model=RsvpResponse)
    async def set_rsvp(event_id: str, user_id: str, payload: RsvpRequest):
        _fetch_event_or_404(event_id)
        try:
            entry = store.set_rsvp(event_id, user_id, rsvp=payload.rsvp, name=payload.name)
        except EventNotActiveError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return RsvpResponse(
            event_id=entry.event_id,
            user_id=entry.user_id,
            name=entry.name,
            rsvp=entry.rsvp,
        )

    @app.get("/events/{event_id}/roster", response_model=list[RosterPlayerResponse])
    async def get_roster(event_id: str):
        _fetch_teams_event(event_id)
        return [RosterPlayerResponse.model_validate(player.model_dump()) for player in store.get_roster(event_id)]

    @app.put("/events/{event_id}/ratings", response_model=RatingsResponse)
    async def save_ratings(event_id: str, payload: RatingsRequest):
        _fetch_teams_event(event_id)
        entries = [
            RatingEntry(
                event_id=event_id,
                user_id=item.user_id,
                rating=item.rating,
                is_goalkeeper=item.is_goalkeeper,
            )
            for item in payload.ratings
        ]
        saved = store.save_ratings(entries)
        return RatingsResponse(event_id=event_id, saved=saved)

    @app.post("/events/{event_id}/teams", response_model=StoredTeamsResponse)
    async def generate_teams(event_id: str, payload: GenerateTeamsRequest | None = None):
        _fetch_teams_event(event_id)
        roster = store.get_roster(event_id)
        try:
            validate_roster(roster)
        except RosterValidationError as exc:
            raise _validation_failure(exc) from exc
        result = build_balanced_teams(roster)
        created_by = payload.created_by if payload is not None else None
        record = store.save_teams(event_id, result, created_by=created_by)
        logger.info("Stored teams for event %s (%s players)", event_id, len(roster))
        return teams_record_to_response(record)

    def _fetch_teams_or_404(event_id: str) -> TeamsRecord:
        _fetch_teams_event(event_id)
        record = store.get_teams(event_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Teams have not been generated yet")
        return record

    @app.get("/events/{event_id}/teams", response_model=StoredTeamsResponse)
    async def get_teams(event_id: str):
        return teams_record_to_response(_fetch_teams_or_404(event_id))

    @app.get("/events/{event_id}/teams/export.csv")
    async def export_teams(event_id: str):
        record = _fetch_teams_or_404(event_id)
        return Response(
            content=export_teams_to_csv(record.to_payload()),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={event_id}-teams.csv"},
        )

    return app
