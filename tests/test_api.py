import pytest
from httpx import ASGITransport, AsyncClient

from matchday.api import create_app


@pytest.fixture
async def client(tmp_path, monkeypatch):
    monkeypatch.setenv("MATCHDAY_DB_PATH", str(tmp_path / "api.sqlite"))
    monkeypatch.delenv("MATCHDAY_DEFAULT_RATING", raising=False)
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _create_event(client: AsyncClient, event_id: str = "e1", teams_enabled: bool = True) -> dict:
    resp = await client.post(
        "/events",
        json={"title": "Futebol de terça", "event_id": event_id, "teams_enabled": teams_enabled},
    )
    assert resp.status_code == 201
    return resp.json()


async def _accept(client: AsyncClient, event_id: str, user_id: str, name: str) -> None:
    resp = await client.put(f"/events/{event_id}/rsvps/{user_id}", json={"rsvp": "accepted", "name": name})
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_balance_endpoint(client: AsyncClient):
    players = [
        {"player_id": "1", "name": "Ana", "rating": 5},
        {"player_id": "2", "name": "Bruno", "rating": 4},
        {"player_id": "3", "name": "Carla", "rating": 3},
        {"player_id": "4", "name": "Duarte", "rating": 2},
    ]

    resp = await client.post("/balance", json={"players": players})

    assert resp.status_code == 200
    payload = resp.json()
    assert [p["player_id"] for p in payload["team_a"]] == ["1", "4"]
    assert [p["player_id"] for p in payload["team_b"]] == ["2", "3"]
    assert payload["stats"] == {"sum_a": 7, "sum_b": 7, "avg_a": 3.5, "avg_b": 3.5, "diff": 0}
    assert payload["warnings"] == ["Não há guarda-redes marcados."]


@pytest.mark.anyio
async def test_balance_endpoint_empty_roster(client: AsyncClient):
    resp = await client.post("/balance", json={"players": []})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["team_a"] == [] and payload["team_b"] == []
    assert payload["stats"]["diff"] == 0


@pytest.mark.anyio
async def test_balance_endpoint_requires_ratings(client: AsyncClient):
    players = [{"player_id": "1", "name": "Ana"}, {"player_id": "2", "rating": 3}]

    resp = await client.post("/balance", json={"players": players})
    assert resp.status_code == 422
    assert resp.json()["detail"]["problems"] == ["players without rating: 1"]

    resp = await client.post("/balance", json={"players": players, "allow_unrated": True})
    assert resp.status_code == 200
    assert resp.json()["stats"]["sum_a"] + resp.json()["stats"]["sum_b"] == 6


@pytest.mark.anyio
async def test_balance_endpoint_rejects_out_of_range_rating(client: AsyncClient):
    resp = await client.post("/balance", json={"players": [{"player_id": "1", "rating": 6}]})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_event_lifecycle(client: AsyncClient):
    await _create_event(client)
    resp = await client.get("/events/e1")
    assert resp.status_code == 200
    assert resp.json()["status"] == "scheduled"

    resp = await client.post("/events", json={"title": "Again", "event_id": "e1"})
    assert resp.status_code == 409

    resp = await client.post("/events/e1/status", json={"status": "cancelled"})
    assert resp.json()["status"] == "cancelled"

    resp = await client.put("/events/e1/rsvps/u1", json={"rsvp": "accepted"})
    assert resp.status_code == 409

    resp = await client.get("/events/unknown")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_generate_and_view_teams(client: AsyncClient):
    await _create_event(client)
    await _accept(client, "e1", "gk", "Guarda")
    await _accept(client, "e1", "a", "Ana")
    await _accept(client, "e1", "b", "Bruno")
    await _accept(client, "e1", "c", "Carla")
    resp = await client.put("/events/e1/rsvps/d", json={"rsvp": "declined", "name": "Duarte"})
    assert resp.status_code == 200

    resp = await client.get("/events/e1/roster")
    assert resp.status_code == 200
    roster = resp.json()
    assert [p["player_id"] for p in roster] == ["gk", "a", "b", "c"]
    assert all(p["rating"] == 3 and not p["is_goalkeeper"] for p in roster)

    resp = await client.get("/events/e1/teams")
    assert resp.status_code == 404

    ratings = [
        {"user_id": "gk", "rating": 5, "is_goalkeeper": True},
        {"user_id": "a", "rating": 4},
        {"user_id": "b", "rating": 3},
        {"user_id": "c", "rating": 2},
    ]
    resp = await client.put("/events/e1/ratings", json={"ratings": ratings})
    assert resp.status_code == 200
    assert resp.json() == {"event_id": "e1", "saved": 4}

    resp = await client.post("/events/e1/teams", json={"created_by": "org1"})
    assert resp.status_code == 200
    payload = resp.json()
    assert [p["player_id"] for p in payload["team_a"]] == ["gk", "c"]
    assert [p["player_id"] for p in payload["team_b"]] == ["a", "b"]
    assert payload["stats"]["diff"] == 0
    assert payload["warnings"] == ["Só existe 1 guarda-redes."]
    assert payload["created_by"] == "org1"

    resp = await client.get("/events/e1/teams")
    assert resp.status_code == 200
    assert resp.json()["team_a"] == payload["team_a"]

    resp = await client.get("/events/e1/teams/export.csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0] == "team,player_id,name,rating,is_goalkeeper"
    assert lines[1] == "A,gk,Guarda,5,1"


@pytest.mark.anyio
async def test_regenerating_replaces_stored_teams(client: AsyncClient):
    await _create_event(client)
    await _accept(client, "e1", "a", "Ana")
    await client.post("/events/e1/teams", json={"created_by": "org1"})

    await _accept(client, "e1", "b", "Bruno")
    resp = await client.post("/events/e1/teams", json={"created_by": "org2"})
    assert resp.status_code == 200

    stored = (await client.get("/events/e1/teams")).json()
    assert stored["created_by"] == "org2"
    assert len(stored["team_a"]) + len(stored["team_b"]) == 2


@pytest.mark.anyio
async def test_ratings_out_of_range_rejected(client: AsyncClient):
    await _create_event(client)
    resp = await client.put("/events/e1/ratings", json={"ratings": [{"user_id": "a", "rating": 0}]})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_teams_disabled_event(client: AsyncClient):
    await _create_event(client, event_id="e2", teams_enabled=False)

    resp = await client.post("/events/e2/teams", json={})
    assert resp.status_code == 409
    resp = await client.get("/events/e2/teams")
    assert resp.status_code == 409
    resp = await client.get("/events/missing/teams")
    assert resp.status_code == 404
