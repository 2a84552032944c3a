"""Planner repository -- async CRUD for all planner entities.

Provides PlannerRepository with the session_factory callable pattern: every
method opens its own session, so independent lookups may run concurrently
(meeting enrichment relies on this). Handles conversion between SQLAlchemy
models and Pydantic schemas.

Lookups return None for missing rows and for ids that are not valid UUIDs.
Writes raise ValueError for missing rows and let SQLAlchemy errors
(IntegrityError on duplicate email/slug/note) propagate.
"""

from __future__ import annotations

import re
import unicodedata
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.eventdesk.planner.models import (
    EventModel,
    MeetingModel,
    MeetingNoteModel,
    TaskModel,
    TrackModel,
    UserModel,
)
from src.eventdesk.planner.schemas import (
    Event,
    EventCreate,
    EventStatus,
    EventType,
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

logger = structlog.get_logger(__name__)


# ── Helpers ─────────────────────────────────────────────────────────────────


def parse_uuid(value: str | uuid.UUID | None) -> uuid.UUID | None:
    """Return value as a UUID, or None if it is empty or malformed."""
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def slugify(name: str) -> str:
    """Lowercase ASCII slug: accents stripped, non-alphanumerics collapsed to '-'."""
    normalized = unicodedata.normalize("NFKD", name)
    ascii_name = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    return slug or "event"


def _opt_str(value: uuid.UUID | None) -> str | None:
    return str(value) if value is not None else None


def _add_member(model: Any, field: str, user_id: str) -> bool:
    """Append user_id to a JSON membership list. False if already present."""
    members = list(getattr(model, field) or [])
    if user_id in members:
        return False
    members.append(user_id)
    # Reassign so SQLAlchemy sees the JSON column as changed
    setattr(model, field, members)
    model.updated_at = datetime.now(timezone.utc)
    return True


def _remove_member(model: Any, field: str, user_id: str) -> bool:
    members = list(getattr(model, field) or [])
    if user_id not in members:
        return False
    setattr(model, field, [m for m in members if m != user_id])
    model.updated_at = datetime.now(timezone.utc)
    return True


# ── Serialization Helpers ───────────────────────────────────────────────────


def _model_to_user(model: UserModel) -> User:
    return User(
        id=str(model.id),
        name=model.name,
        email=model.email,
        initials=model.initials,
        avatar=model.avatar,
        handle=model.handle,
        wallet=model.wallet,
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


def _model_to_event(model: EventModel) -> Event:
    return Event(
        id=str(model.id),
        name=model.name,
        slug=model.slug,
        type=EventType(model.type),
        status=EventStatus(model.status),
        description=model.description,
        start_date=model.start_date,
        end_date=model.end_date,
        participant_ids=list(model.participant_ids or []),
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


def _model_to_track(model: TrackModel) -> Track:
    return Track(
        id=str(model.id),
        event_id=str(model.event_id),
        name=model.name,
        description=model.description,
        lead_id=model.lead_id or "",
        participant_ids=list(model.participant_ids or []),
        order=model.display_order,
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


def _model_to_task(model: TaskModel) -> Task:
    return Task(
        id=str(model.id),
        event_id=str(model.event_id),
        track_id=_opt_str(model.track_id),
        title=model.title,
        description=model.description,
        assignee_id=_opt_str(model.assignee_id),
        deadline=model.deadline,
        status=TaskStatus(model.status),
        support_resources=list(model.support_resources or []),
        completed_at=model.completed_at,
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


def _model_to_meeting(model: MeetingModel) -> Meeting:
    return Meeting(
        id=str(model.id),
        event_id=str(model.event_id),
        title=model.title,
        meeting_date=model.meeting_date,
        time=model.meeting_time,
        attendee_ids=list(model.attendee_ids or []),
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


def _model_to_note(model: MeetingNoteModel) -> MeetingNote:
    return MeetingNote(
        id=str(model.id),
        meeting_id=str(model.meeting_id),
        content=model.content,
        agenda=model.agenda,
        decisions=model.decisions,
        action_items=list(model.action_items or []),
        created_by=str(model.created_by),
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


# ── Repository ──────────────────────────────────────────────────────────────


class PlannerRepository:
    """Async CRUD operations for users, events, tracks, tasks, meetings, and notes.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    # ── Users ────────────────────────────────────────────────────────────

    async def list_users(self) -> list[User]:
        async for session in self._session_factory():
            result = await session.execute(select(UserModel).order_by(UserModel.name))
            return [_model_to_user(m) for m in result.scalars().all()]

    async def get_user(self, user_id: str) -> User | None:
        """Get a user by ID. Returns None for unknown or malformed ids."""
        parsed = parse_uuid(user_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            model = await session.get(UserModel, parsed)
            return _model_to_user(model) if model is not None else None

    async def get_user_by_email(self, email: str) -> User | None:
        async for session in self._session_factory():
            stmt = select(UserModel).where(UserModel.email == email)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_user(model) if model is not None else None

    async def create_user(self, data: UserCreate) -> User:
        async for session in self._session_factory():
            model = UserModel(
                name=data.name,
                email=data.email,
                initials=data.initials,
                avatar=data.avatar,
                handle=data.handle,
                wallet=data.wallet,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return _model_to_user(model)

    # ── Events ───────────────────────────────────────────────────────────

    async def list_events(self) -> list[Event]:
        async for session in self._session_factory():
            stmt = select(EventModel).order_by(EventModel.created_at)
            result = await session.execute(stmt)
            return [_model_to_event(m) for m in result.scalars().all()]

    async def get_event(self, event_id: str) -> Event | None:
        parsed = parse_uuid(event_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            model = await session.get(EventModel, parsed)
            return _model_to_event(model) if model is not None else None

    async def get_event_by_slug(self, slug: str) -> Event | None:
        async for session in self._session_factory():
            stmt = select(EventModel).where(EventModel.slug == slug)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_event(model) if model is not None else None

    async def create_event(self, data: EventCreate) -> Event:
        """Create an event, de-duplicating the slug with -1, -2, ... suffixes."""
        base_slug = data.slug or slugify(data.name)
        async for session in self._session_factory():
            stmt = select(EventModel.slug).where(
                (EventModel.slug == base_slug) | EventModel.slug.like(f"{base_slug}-%")
            )
            taken = set((await session.execute(stmt)).scalars().all())
            slug = base_slug
            counter = 1
            while slug in taken:
                slug = f"{base_slug}-{counter}"
                counter += 1

            model = EventModel(
                name=data.name,
                slug=slug,
                type=data.type.value,
                status=data.status.value,
                description=data.description,
                start_date=data.start_date,
                end_date=data.end_date,
                participant_ids=list(data.participant_ids),
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return _model_to_event(model)

    async def update_event(self, event_id: str, data: EventUpdate) -> Event | None:
        """Apply the explicitly set fields of data. The slug never changes."""
        changes = data.model_dump(exclude_unset=True)
        async for session in self._session_factory():
            model = await session.get(EventModel, uuid.UUID(event_id))
            if model is None:
                return None

            if changes.get("name"):
                model.name = changes["name"]
            if changes.get("type") is not None:
                model.type = EventType(changes["type"]).value
            if changes.get("status") is not None:
                model.status = EventStatus(changes["status"]).value
            for field in ("description", "start_date", "end_date"):
                if field in changes:
                    setattr(model, field, changes[field])

            model.updated_at = datetime.now(timezone.utc)
            await session.commit()
            await session.refresh(model)
            return _model_to_event(model)

    async def join_event(self, event_id: str, user_id: str) -> Event | None:
        """Add user_id to the event's participants. Joining twice is a no-op."""
        async for session in self._session_factory():
            model = await session.get(EventModel, uuid.UUID(event_id))
            if model is None:
                return None
            if _add_member(model, "participant_ids", user_id):
                await session.commit()
                await session.refresh(model)
            return _model_to_event(model)

    async def leave_event(self, event_id: str, user_id: str) -> Event | None:
        async for session in self._session_factory():
            model = await session.get(EventModel, uuid.UUID(event_id))
            if model is None:
                return None
            if _remove_member(model, "participant_ids", user_id):
                await session.commit()
                await session.refresh(model)
            return _model_to_event(model)

    # ── Tracks ───────────────────────────────────────────────────────────

    async def create_track(self, data: TrackCreate) -> Track:
        """Persist a new track. Order defaults to the end of the event's list."""
        async for session in self._session_factory():
            order = data.order
            if order is None:
                stmt = select(func.count()).select_from(TrackModel).where(
                    TrackModel.event_id == uuid.UUID(data.event_id)
                )
                order = (await session.execute(stmt)).scalar_one()

            model = TrackModel(
                event_id=uuid.UUID(data.event_id),
                name=data.name,
                description=data.description,
                lead_id=data.lead_id,
                participant_ids=list(data.participant_ids),
                display_order=order,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return _model_to_track(model)

    async def get_track(self, track_id: str) -> Track | None:
        parsed = parse_uuid(track_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            model = await session.get(TrackModel, parsed)
            return _model_to_track(model) if model is not None else None

    async def list_tracks(self, event_id: str | None = None) -> list[Track]:
        async for session in self._session_factory():
            stmt = select(TrackModel).order_by(TrackModel.display_order, TrackModel.created_at)
            if event_id is not None:
                stmt = stmt.where(TrackModel.event_id == uuid.UUID(event_id))
            result = await session.execute(stmt)
            return [_model_to_track(m) for m in result.scalars().all()]

    async def add_track_participant(self, track_id: str, user_id: str) -> Track:
        """Add a user to a track's participants (no-op if already present).

        Raises:
            ValueError: If track not found.
        """
        async for session in self._session_factory():
            model = await session.get(TrackModel, uuid.UUID(track_id))
            if model is None:
                raise ValueError(f"Track not found: id={track_id}")

            if _add_member(model, "participant_ids", user_id):
                await session.commit()
                await session.refresh(model)
            return _model_to_track(model)

    async def delete_track(self, track_id: str) -> bool:
        """Delete a track together with its tasks. False if the track is unknown."""
        parsed = uuid.UUID(track_id)
        async for session in self._session_factory():
            if await session.get(TrackModel, parsed) is None:
                return False
            tasks = await session.execute(delete(TaskModel).where(TaskModel.track_id == parsed))
            await session.execute(delete(TrackModel).where(TrackModel.id == parsed))
            await session.commit()
            logger.info("track.deleted", track_id=track_id, tasks_deleted=tasks.rowcount)
            return True

    # ── Tasks ────────────────────────────────────────────────────────────

    async def create_task(self, data: TaskCreate) -> Task:
        """Create a task. An assignee on a tracked task joins the track.

        The task row and the track's participant list are committed together.

        Raises:
            ValueError: If track_id names no track of the task's event.
        """
        async for session in self._session_factory():
            track = None
            if data.track_id:
                track = await session.get(TrackModel, uuid.UUID(data.track_id))
                if track is None or str(track.event_id) != str(uuid.UUID(data.event_id)):
                    raise ValueError(
                        f"Track not found: id={data.track_id} event_id={data.event_id}"
                    )

            model = TaskModel(
                event_id=uuid.UUID(data.event_id),
                track_id=parse_uuid(data.track_id),
                title=data.title,
                description=data.description,
                assignee_id=parse_uuid(data.assignee_id),
                deadline=data.deadline,
                status=data.status.value,
                support_resources=list(data.support_resources),
                completed_at=(
                    datetime.now(timezone.utc)
                    if data.status == TaskStatus.COMPLETED
                    else None
                ),
            )
            session.add(model)
            if track is not None and data.assignee_id:
                _add_member(track, "participant_ids", str(uuid.UUID(data.assignee_id)))
            await session.commit()
            await session.refresh(model)
            return _model_to_task(model)

    async def get_task(self, task_id: str) -> Task | None:
        parsed = parse_uuid(task_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            model = await session.get(TaskModel, parsed)
            return _model_to_task(model) if model is not None else None

    async def list_tasks(
        self, event_id: str | None = None, track_id: str | None = None
    ) -> list[Task]:
        async for session in self._session_factory():
            stmt = select(TaskModel).order_by(TaskModel.created_at)
            if event_id is not None:
                stmt = stmt.where(TaskModel.event_id == uuid.UUID(event_id))
            if track_id is not None:
                stmt = stmt.where(TaskModel.track_id == uuid.UUID(track_id))
            result = await session.execute(stmt)
            return [_model_to_task(m) for m in result.scalars().all()]

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task | None:
        """Apply the explicitly set fields of data. Returns None if not found.

        Moving to COMPLETED stamps completed_at; leaving it clears the stamp.
        A new assignee on a tracked task joins the track in the same commit.
        """
        changes = data.model_dump(exclude_unset=True)
        async for session in self._session_factory():
            model = await session.get(TaskModel, uuid.UUID(task_id))
            if model is None:
                return None

            for field in ("title", "description", "deadline"):
                if field in changes:
                    setattr(model, field, changes[field])
            if "support_resources" in changes:
                model.support_resources = list(changes["support_resources"] or [])
            if "assignee_id" in changes:
                model.assignee_id = parse_uuid(changes["assignee_id"])
            if changes.get("status") is not None:
                new_status = TaskStatus(changes["status"])
                if new_status == TaskStatus.COMPLETED and model.status != new_status.value:
                    model.completed_at = datetime.now(timezone.utc)
                elif new_status != TaskStatus.COMPLETED:
                    model.completed_at = None
                model.status = new_status.value

            if "assignee_id" in changes and model.track_id and model.assignee_id:
                track = await session.get(TrackModel, model.track_id)
                if track is not None:
                    _add_member(track, "participant_ids", str(model.assignee_id))

            model.updated_at = datetime.now(timezone.utc)
            await session.commit()
            await session.refresh(model)
            return _model_to_task(model)

    async def delete_task(self, task_id: str) -> bool:
        async for session in self._session_factory():
            result = await session.execute(
                delete(TaskModel).where(TaskModel.id == uuid.UUID(task_id))
            )
            await session.commit()
            return result.rowcount > 0

    # ── Meetings ─────────────────────────────────────────────────────────

    async def create_meeting(self, data: MeetingCreate) -> Meeting:
        async for session in self._session_factory():
            model = MeetingModel(
                event_id=uuid.UUID(data.event_id),
                title=data.title,
                meeting_date=data.meeting_date,
                meeting_time=data.time,
                attendee_ids=list(data.attendee_ids),
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return _model_to_meeting(model)

    async def get_meeting(self, meeting_id: str) -> Meeting | None:
        parsed = parse_uuid(meeting_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            model = await session.get(MeetingModel, parsed)
            return _model_to_meeting(model) if model is not None else None

    async def list_meetings(self, event_id: str | None = None) -> list[Meeting]:
        """List meetings, most recent date first."""
        async for session in self._session_factory():
            stmt = select(MeetingModel).order_by(
                MeetingModel.meeting_date.desc(), MeetingModel.meeting_time.desc()
            )
            if event_id is not None:
                stmt = stmt.where(MeetingModel.event_id == uuid.UUID(event_id))
            result = await session.execute(stmt)
            return [_model_to_meeting(m) for m in result.scalars().all()]

    async def update_meeting(self, meeting_id: str, data: MeetingUpdate) -> Meeting | None:
        async for session in self._session_factory():
            model = await session.get(MeetingModel, uuid.UUID(meeting_id))
            if model is None:
                return None

            model.title = data.title
            model.meeting_date = data.meeting_date
            model.meeting_time = data.time
            model.attendee_ids = list(data.attendee_ids)
            model.updated_at = datetime.now(timezone.utc)
            await session.commit()
            await session.refresh(model)
            return _model_to_meeting(model)

    async def delete_meeting(self, meeting_id: str) -> bool:
        """Delete a meeting and its note. False if the meeting is unknown."""
        parsed = uuid.UUID(meeting_id)
        async for session in self._session_factory():
            await session.execute(
                delete(MeetingNoteModel).where(MeetingNoteModel.meeting_id == parsed)
            )
            result = await session.execute(delete(MeetingModel).where(MeetingModel.id == parsed))
            await session.commit()
            return result.rowcount > 0

    # ── Meeting Notes ────────────────────────────────────────────────────

    async def get_note_by_meeting_id(self, meeting_id: str) -> MeetingNote | None:
        """Get the (single) note of a meeting."""
        parsed = parse_uuid(meeting_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            stmt = select(MeetingNoteModel).where(MeetingNoteModel.meeting_id == parsed)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_note(model) if model is not None else None

    async def get_note(self, note_id: str) -> MeetingNote | None:
        parsed = parse_uuid(note_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            model = await session.get(MeetingNoteModel, parsed)
            return _model_to_note(model) if model is not None else None

    async def create_note(self, data: MeetingNoteCreate) -> MeetingNote:
        async for session in self._session_factory():
            model = MeetingNoteModel(
                meeting_id=uuid.UUID(data.meeting_id),
                content=data.content,
                agenda=data.agenda,
                decisions=data.decisions,
                action_items=list(data.action_items),
                created_by=uuid.UUID(data.created_by),
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return _model_to_note(model)

    async def update_note(
        self, note_id: str, data: MeetingNoteUpdate
    ) -> MeetingNote | None:
        changes = data.model_dump(exclude_unset=True)
        async for session in self._session_factory():
            model = await session.get(MeetingNoteModel, uuid.UUID(note_id))
            if model is None:
                return None

            if changes.get("content"):
                model.content = changes["content"]
            for field in ("agenda", "decisions"):
                if field in changes:
                    setattr(model, field, changes[field])
            if "action_items" in changes:
                model.action_items = list(changes["action_items"] or [])

            model.updated_at = datetime.now(timezone.utc)
            await session.commit()
            await session.refresh(model)
            return _model_to_note(model)
