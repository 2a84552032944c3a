"""Integration tests for the meeting endpoints (creation and enriched reads)."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from src.eventdesk.planner.schemas import EventCreate, MeetingNoteCreate, UserCreate


@pytest_asyncio.fixture
async def event(repo):
    return await repo.create_event(EventCreate(name="Summit"))


@pytest_asyncio.fixture
async def people(repo):
    ana = await repo.create_user(UserCreate(name="Ana", email="ana@example.com", initials="AN"))
    bo = await repo.create_user(UserCreate(name="Bo", email="bo@example.com", initials="BO"))
    return ana, bo


def _meeting_body(event_id: str, **overrides) -> dict:
    body = {"eventId": event_id, "title": "Kickoff", "date": "2026-10-01", "time": "10:00"}
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_meeting_keeps_valid_attendees_in_order(client, event, people):
    ana, bo = people

    response = await client.post(
        "/api/meetings",
        json=_meeting_body(event.id, attendeeIds=[bo.id, "not-a-uuid", ana.id]),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["attendeeIds"] == [bo.id, ana.id]
    assert data["date"] == "2026-10-01"
    assert data["time"] == "10:00"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("missing", "message"),
    [
        ("eventId", "Event ID is required"),
        ("title", "Meeting title is required"),
        ("date", "Meeting date is required"),
        ("time", "Meeting time is required"),
    ],
)
async def test_create_meeting_required_fields(client, event, missing, message):
    body = _meeting_body(event.id)
    del body[missing]

    response = await client.post("/api/meetings", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": message}


@pytest.mark.asyncio
async def test_create_meeting_invalid_date(client, event):
    response = await client.post("/api/meetings", json=_meeting_body(event.id, date="next tuesday"))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid date: expected YYYY-MM-DD"}


@pytest.mark.asyncio
async def test_list_meetings_enriched_and_date_descending(client, repo, event, people):
    ana, bo = people
    missing = str(uuid.uuid4())
    older = (await client.post(
        "/api/meetings",
        json=_meeting_body(event.id, title="Older", date="2026-09-01", attendeeIds=[ana.id]),
    )).json()
    newer = (await client.post(
        "/api/meetings",
        json=_meeting_body(event.id, title="Newer", date="2026-10-01", attendeeIds=[bo.id, missing]),
    )).json()
    await repo.create_note(
        MeetingNoteCreate(meeting_id=older["id"], content="Notes", created_by=ana.id)
    )

    response = await client.get("/api/meetings", params={"eventId": event.id})

    assert response.status_code == 200
    data = response.json()
    assert [m["id"] for m in data] == [newer["id"], older["id"]]
    assert data[0]["hasNotes"] is False
    assert data[1]["hasNotes"] is True
    assert data[0]["attendees"][0]["name"] == "Bo"
    assert data[0]["attendees"][1] is None
    assert data[1]["attendees"] == [
        {"id": ana.id, "name": "Ana", "initials": "AN", "email": "ana@example.com", "avatar": None}
    ]


@pytest.mark.asyncio
async def test_list_meetings_lookup_failure_is_500_without_partial_data(client, repo, event, people):
    ana, _ = people
    await client.post("/api/meetings", json=_meeting_body(event.id, attendeeIds=[ana.id]))
    repo.get_user = AsyncMock(side_effect=ConnectionError("users table locked"))

    response = await client.get("/api/meetings")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch meetings"}


@pytest.mark.asyncio
async def test_list_meetings_empty(client):
    response = await client.get("/api/meetings")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_get_meeting_enriched(client, event, people):
    ana, _ = people
    created = (await client.post(
        "/api/meetings", json=_meeting_body(event.id, attendeeIds=[ana.id])
    )).json()

    response = await client.get(f"/api/meetings/{created['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["hasNotes"] is False
    assert data["attendees"][0]["id"] == ana.id


@pytest.mark.asyncio
async def test_get_meeting_not_found(client):
    response = await client.get(f"/api/meetings/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"error": "Meeting not found"}


@pytest.mark.asyncio
async def test_get_meeting_malformed_id(client):
    response = await client.get("/api/meetings/42")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid meetingId: must be a valid UUID"}


@pytest.mark.asyncio
async def test_update_meeting_replaces_fields(client, event, people):
    ana, bo = people
    created = (await client.post("/api/meetings", json=_meeting_body(event.id))).json()

    response = await client.put(
        f"/api/meetings/{created['id']}",
        json={"title": " Retro ", "date": "2026-11-02", "time": "16:30", "attendeeIds": [bo.id, "x"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Retro"
    assert data["date"] == "2026-11-02"
    assert data["time"] == "16:30"
    assert data["attendeeIds"] == [bo.id]
    assert data["eventId"] == event.id


@pytest.mark.asyncio
async def test_update_meeting_revalidates_input(client, event):
    created = (await client.post("/api/meetings", json=_meeting_body(event.id))).json()

    response = await client.put(
        f"/api/meetings/{created['id']}", json={"title": "Retro", "date": "2026-11-02"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Meeting time is required"}


@pytest.mark.asyncio
async def test_update_meeting_not_found(client):
    response = await client.put(
        f"/api/meetings/{uuid.uuid4()}",
        json={"title": "Retro", "date": "2026-11-02", "time": "16:30"},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Meeting not found"}


@pytest.mark.asyncio
async def test_delete_meeting_removes_its_note(client, repo, event, people):
    ana, _ = people
    created = (await client.post("/api/meetings", json=_meeting_body(event.id))).json()
    await repo.create_note(
        MeetingNoteCreate(meeting_id=created["id"], content="Agreed on venue", created_by=ana.id)
    )

    response = await client.delete(f"/api/meetings/{created['id']}")
    again = await client.delete(f"/api/meetings/{created['id']}")

    assert response.status_code == 204
    assert repo.meetings == {}
    assert repo.notes == {}
    assert again.status_code == 404
