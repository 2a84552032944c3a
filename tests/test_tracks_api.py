"""Integration tests for the track endpoints.

Uses the InMemoryPlannerRepository double from conftest and httpx
AsyncClient against the full app.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.eventdesk.main import create_app
from src.eventdesk.planner.schemas import EventCreate, UserCreate


@pytest.mark.asyncio
async def test_create_track_trims_and_defaults(client, repo):
    """POST /api/tracks -> 201 with trimmed fields and empty participants."""
    event = await repo.create_event(EventCreate(name="Builders Summit"))

    response = await client.post(
        "/api/tracks",
        json={"eventId": event.id, "name": "  Logistics  ", "description": "   "},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Logistics"
    assert data["description"] is None
    assert data["leadId"] == ""
    assert data["participantIds"] == []
    assert data["eventId"] == event.id
    assert data["id"] in repo.tracks


@pytest.mark.asyncio
async def test_create_track_with_lead(client, repo):
    event = await repo.create_event(EventCreate(name="Builders Summit"))
    lead = await repo.create_user(UserCreate(name="Ana", email="ana@example.com", initials="AN"))

    response = await client.post(
        "/api/tracks",
        json={"eventId": event.id, "name": "Speakers", "description": " Talks ", "leadId": lead.id},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["leadId"] == lead.id
    assert data["description"] == "Talks"
    assert data["participantIds"] == []


@pytest.mark.asyncio
async def test_create_track_missing_event_id(client, repo):
    response = await client.post("/api/tracks", json={"name": "X"})

    assert response.status_code == 400
    assert response.json() == {"error": "Event ID is required"}
    assert repo.tracks == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("name", [None, "", "   ", 42])
async def test_create_track_invalid_name(client, repo, name):
    body = {"eventId": str(uuid.uuid4())}
    if name is not None:
        body["name"] = name

    response = await client.post("/api/tracks", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Track name is required"}
    assert repo.tracks == {}


@pytest.mark.asyncio
async def test_create_track_validates_before_store_access(client, repo):
    repo.create_track = AsyncMock()

    response = await client.post("/api/tracks", json={"eventId": "", "name": "X"})

    assert response.status_code == 400
    repo.create_track.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_track_malformed_event_id(client):
    response = await client.post("/api/tracks", json={"eventId": "nope", "name": "X"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid eventId: must be a valid UUID"}


@pytest.mark.asyncio
async def test_create_track_store_failure_is_generic_500(client, repo):
    repo.create_track = AsyncMock(side_effect=RuntimeError("connection reset by peer"))

    response = await client.post(
        "/api/tracks", json={"eventId": str(uuid.uuid4()), "name": "Logistics"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create track"}
    assert "connection reset" not in response.text


@pytest.mark.asyncio
async def test_create_track_invalid_json(client):
    response = await client.post(
        "/api/tracks", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body"}


@pytest.mark.asyncio
async def test_list_tracks_filters_by_event_and_orders(client, repo):
    event = await repo.create_event(EventCreate(name="Summit"))
    other = await repo.create_event(EventCreate(name="Meetup"))
    for name in ("Logistics", "Speakers"):
        await client.post("/api/tracks", json={"eventId": event.id, "name": name})
    await client.post("/api/tracks", json={"eventId": other.id, "name": "Food"})

    response = await client.get("/api/tracks", params={"eventId": event.id})

    assert response.status_code == 200
    data = response.json()
    assert [t["name"] for t in data] == ["Logistics", "Speakers"]
    assert [t["order"] for t in data] == [0, 1]


@pytest.mark.asyncio
async def test_delete_track_deletes_its_tasks(client, repo):
    event = await repo.create_event(EventCreate(name="Summit"))
    track = (await client.post("/api/tracks", json={"eventId": event.id, "name": "Logistics"})).json()
    await client.post("/api/tasks", json={"eventId": event.id, "trackId": track["id"], "title": "A"})
    await client.post("/api/tasks", json={"eventId": event.id, "title": "Untracked"})

    response = await client.delete(f"/api/tracks/{track['id']}")
    again = await client.delete(f"/api/tracks/{track['id']}")

    assert response.status_code == 204
    assert repo.tracks == {}
    assert [t.title for t in repo.tasks.values()] == ["Untracked"]
    assert again.status_code == 404
    assert again.json() == {"error": "Track not found"}


@pytest.mark.asyncio
async def test_delete_track_store_failure_is_generic_500(client, repo):
    repo.delete_track = AsyncMock(side_effect=RuntimeError("connection reset"))

    response = await client.delete(f"/api/tracks/{uuid.uuid4()}")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to delete track"}


@pytest.mark.asyncio
async def test_tracks_api_503_when_not_initialized():
    """app.state.planner_repository = None -> 503."""
    app = create_app()
    app.state.planner_repository = None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/api/tracks")

    assert response.status_code == 503
    assert response.json() == {"error": "Planner repository not initialized"}
