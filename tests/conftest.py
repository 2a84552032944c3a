"""Shared test fixtures.

Provides:
- InMemoryPlannerRepository: PlannerRepository double backed by dicts
- repo: a fresh in-memory repository per test
- client: httpx AsyncClient against create_app() with the repository on app.state

The lifespan is not run (ASGITransport does not send lifespan events), so
no database is touched.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from src.eventdesk.main import create_app
from src.eventdesk.planner.repository import slugify
from src.eventdesk.planner.schemas import (
    Event,
    EventCreate,
    EventUpdate,
    Meeting,
    MeetingCreate,
    MeetingNote,
    MeetingNoteCreate,
    MeetingNoteUpdate,
    MeetingUpdate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    Track,
    TrackCreate,
    User,
    UserCreate,
)


def _duplicate(what: str) -> IntegrityError:
    return IntegrityError("INSERT", {}, Exception(f"duplicate {what}"))


# ── In-Memory Test Double ────────────────────────────────────────────────────


class InMemoryPlannerRepository:
    """In-memory PlannerRepository for testing without database."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.events: dict[str, Event] = {}
        self.tracks: dict[str, Track] = {}
        self.tasks: dict[str, Task] = {}
        self.meetings: dict[str, Meeting] = {}
        self.notes: dict[str, MeetingNote] = {}

    # Users

    async def list_users(self) -> list[User]:
        return sorted(self.users.values(), key=lambda u: u.name)

    async def get_user(self, user_id: str) -> User | None:
        return self.users.get(str(user_id))

    async def get_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    async def create_user(self, data: UserCreate) -> User:
        if await self.get_user_by_email(data.email) is not None:
            raise _duplicate("email")
        user = User(id=str(uuid.uuid4()), created_at=datetime.now(timezone.utc), **data.model_dump())
        self.users[user.id] = user
        return user

    # Events

    async def list_events(self) -> list[Event]:
        return list(self.events.values())

    async def get_event(self, event_id: str) -> Event | None:
        return self.events.get(str(event_id))

    async def get_event_by_slug(self, slug: str) -> Event | None:
        return next((e for e in self.events.values() if e.slug == slug), None)

    async def create_event(self, data: EventCreate) -> Event:
        base_slug = data.slug or slugify(data.name)
        taken = {e.slug for e in self.events.values()}
        slug, counter = base_slug, 1
        while slug in taken:
            slug = f"{base_slug}-{counter}"
            counter += 1
        event = Event(
            id=str(uuid.uuid4()),
            slug=slug,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(exclude={"slug"}),
        )
        self.events[event.id] = event
        return event

    async def update_event(self, event_id: str, data: EventUpdate) -> Event | None:
        event = self.events.get(event_id)
        if event is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        if not changes.get("name"):
            changes.pop("name", None)
        for key in ("type", "status"):
            if changes.get(key) is None:
                changes.pop(key, None)
        event = event.model_copy(update={**changes, "updated_at": datetime.now(timezone.utc)})
        self.events[event_id] = event
        return event

    async def join_event(self, event_id: str, user_id: str) -> Event | None:
        event = self.events.get(event_id)
        if event is not None and user_id not in event.participant_ids:
            event = event.model_copy(update={"participant_ids": [*event.participant_ids, user_id]})
            self.events[event_id] = event
        return event

    async def leave_event(self, event_id: str, user_id: str) -> Event | None:
        event = self.events.get(event_id)
        if event is not None and user_id in event.participant_ids:
            remaining = [p for p in event.participant_ids if p != user_id]
            event = event.model_copy(update={"participant_ids": remaining})
            self.events[event_id] = event
        return event

    # Tracks

    async def create_track(self, data: TrackCreate) -> Track:
        order = data.order
        if order is None:
            order = sum(1 for t in self.tracks.values() if t.event_id == data.event_id)
        track = Track(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            order=order,
            **data.model_dump(exclude={"order"}),
        )
        self.tracks[track.id] = track
        return track

    async def get_track(self, track_id: str) -> Track | None:
        return self.tracks.get(str(track_id))

    async def list_tracks(self, event_id: str | None = None) -> list[Track]:
        tracks = [t for t in self.tracks.values() if event_id is None or t.event_id == event_id]
        return sorted(tracks, key=lambda t: t.order)

    async def add_track_participant(self, track_id: str, user_id: str) -> Track:
        track = self.tracks.get(track_id)
        if track is None:
            raise ValueError(f"Track not found: id={track_id}")
        if user_id not in track.participant_ids:
            track = track.model_copy(update={"participant_ids": [*track.participant_ids, user_id]})
            self.tracks[track_id] = track
        return track

    # Tasks

    async def create_task(self, data: TaskCreate) -> Task:
        track = self.tracks.get(data.track_id) if data.track_id else None
        if data.track_id and (track is None or track.event_id != data.event_id):
            raise ValueError(f"Track not found: id={data.track_id}")
        now = datetime.now(timezone.utc)
        task = Task(
            id=str(uuid.uuid4()),
            created_at=now,
            completed_at=now if data.status == TaskStatus.COMPLETED else None,
            **data.model_dump(),
        )
        self.tasks[task.id] = task
        if task.track_id and task.assignee_id:
            await self.add_track_participant(task.track_id, task.assignee_id)
        return task

    async def get_task(self, task_id: str) -> Task | None:
        return self.tasks.get(str(task_id))

    async def list_tasks(
        self, event_id: str | None = None, track_id: str | None = None
    ) -> list[Task]:
        return [
            t
            for t in self.tasks.values()
            if (event_id is None or t.event_id == event_id)
            and (track_id is None or t.track_id == track_id)
        ]

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task | None:
        task = self.tasks.get(task_id)
        if task is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        if changes.get("status") is not None:
            new_status = TaskStatus(changes["status"])
            if new_status == TaskStatus.COMPLETED and task.status != new_status:
                changes["completed_at"] = datetime.now(timezone.utc)
            elif new_status != TaskStatus.COMPLETED:
                changes["completed_at"] = None
        task = task.model_copy(update={**changes, "updated_at": datetime.now(timezone.utc)})
        self.tasks[task_id] = task
        if "assignee_id" in changes and task.assignee_id and task.track_id in self.tracks:
            await self.add_track_participant(task.track_id, task.assignee_id)
        return task

    async def delete_task(self, task_id: str) -> bool:
        return self.tasks.pop(task_id, None) is not None

    async def delete_track(self, track_id: str) -> bool:
        if self.tracks.pop(track_id, None) is None:
            return False
        self.tasks = {k: t for k, t in self.tasks.items() if t.track_id != track_id}
        return True

    # Meetings

    async def create_meeting(self, data: MeetingCreate) -> Meeting:
        meeting = Meeting(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        self.meetings[meeting.id] = meeting
        return meeting

    async def get_meeting(self, meeting_id: str) -> Meeting | None:
        return self.meetings.get(str(meeting_id))

    async def list_meetings(self, event_id: str | None = None) -> list[Meeting]:
        meetings = [m for m in self.meetings.values() if event_id is None or m.event_id == event_id]
        return sorted(meetings, key=lambda m: (m.meeting_date, m.time), reverse=True)

    async def update_meeting(self, meeting_id: str, data: MeetingUpdate) -> Meeting | None:
        meeting = self.meetings.get(meeting_id)
        if meeting is None:
            return None
        meeting = meeting.model_copy(
            update={**data.model_dump(), "updated_at": datetime.now(timezone.utc)}
        )
        self.meetings[meeting_id] = meeting
        return meeting

    async def delete_meeting(self, meeting_id: str) -> bool:
        self.notes = {k: n for k, n in self.notes.items() if n.meeting_id != meeting_id}
        return self.meetings.pop(meeting_id, None) is not None

    # Meeting notes

    async def get_note_by_meeting_id(self, meeting_id: str) -> MeetingNote | None:
        return next((n for n in self.notes.values() if n.meeting_id == meeting_id), None)

    async def get_note(self, note_id: str) -> MeetingNote | None:
        return self.notes.get(str(note_id))

    async def create_note(self, data: MeetingNoteCreate) -> MeetingNote:
        if await self.get_note_by_meeting_id(data.meeting_id) is not None:
            raise _duplicate("meeting_id")
        note = MeetingNote(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        self.notes[note.id] = note
        return note

    async def update_note(self, note_id: str, data: MeetingNoteUpdate) -> MeetingNote | None:
        note = self.notes.get(note_id)
        if note is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        if not changes.get("content"):
            changes.pop("content", None)
        note = note.model_copy(update={**changes, "updated_at": datetime.now(timezone.utc)})
        self.notes[note_id] = note
        return note


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def repo() -> InMemoryPlannerRepository:
    return InMemoryPlannerRepository()


@pytest_asyncio.fixture
async def client(repo) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the API with the in-memory repository installed."""
    app = create_app()
    app.state.planner_repository = repo

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
