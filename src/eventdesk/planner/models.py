"""Planner persistence models.

Six SQLAlchemy models on the shared declarative Base:
- UserModel: People who lead tracks, take tasks, and attend meetings
- EventModel: Top-level planning unit (meetup, conference, ...)
- TrackModel: Named workstream of an event with a lead and participants
- TaskModel: Unit of work inside an event, optionally filed under a track
- MeetingModel: Scheduled meeting of an event with ordered attendees
- MeetingNoteModel: At most one note per meeting

Membership lists (participants, attendees) are stored as ordered JSON
arrays of user id strings. No foreign key constraints (application-level
referential integrity via repository).
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, String, Text, func, text
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.eventdesk.core.database import Base


def _uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )


def _created_at() -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), server_default=func.now())


def _updated_at() -> Mapped[datetime | None]:
    return mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)


class UserModel(Base):
    """A person known to the planner. Email is unique."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    initials: Mapped[str] = mapped_column(String(10), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    handle: Mapped[str | None] = mapped_column(String(200), nullable=True)
    wallet: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime | None] = _updated_at()


class EventModel(Base):
    """A planned event. Slug is unique and used in URLs."""

    __tablename__ = "events"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    slug: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(
        String(50), default="Custom", server_default=text("'Custom'")
    )
    status: Mapped[str] = mapped_column(
        String(50), default="In Planning", server_default=text("'In Planning'")
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    participant_ids: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime | None] = _updated_at()


class TrackModel(Base):
    """Workstream of an event.

    lead_id is an empty string when no lead is assigned. participant_ids
    starts empty and grows as tasks in the track are assigned.
    """

    __tablename__ = "tracks"

    id: Mapped[uuid.UUID] = _uuid_pk()
    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    lead_id: Mapped[str] = mapped_column(
        String(64), default="", server_default=text("''")
    )
    participant_ids: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    display_order: Mapped[int] = mapped_column(
        Integer, default=0, server_default=text("0")
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime | None] = _updated_at()


class TaskModel(Base):
    """Task of an event, optionally filed under a track."""

    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = _uuid_pk()
    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    track_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), default="pending", server_default=text("'pending'")
    )
    support_resources: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime | None] = _updated_at()


class MeetingModel(Base):
    """Scheduled meeting. attendee_ids keeps invitation order."""

    __tablename__ = "meetings"

    id: Mapped[uuid.UUID] = _uuid_pk()
    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    meeting_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    meeting_time: Mapped[str] = mapped_column("time", String(8), nullable=False)
    attendee_ids: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime | None] = _updated_at()


class MeetingNoteModel(Base):
    """Notes taken for a meeting. meeting_id is unique (zero-or-one)."""

    __tablename__ = "meeting_notes"

    id: Mapped[uuid.UUID] = _uuid_pk()
    meeting_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, unique=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    agenda: Mapped[str | None] = mapped_column(Text, nullable=True)
    decisions: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_items: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime | None] = _updated_at()
