"""Pydantic v2 schemas for the planner domain.

Defines the data contracts for users, events, tracks, tasks, meetings,
meeting notes, and the request-scoped EnrichedMeeting view. JSON field
names are camelCase (``eventId``, ``participantIds``, ``hasNotes``); Python
attributes stay snake_case. Models accept either form on input.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Enums ────────────────────────────────────────────────────────────────────


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"


class EventType(str, Enum):
    MEETUP = "Meetup"
    CONFERENCE = "Conference"
    PROPERTY = "Property"
    CUSTOM = "Custom"


class EventStatus(str, Enum):
    IN_PLANNING = "In Planning"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# ── Users ────────────────────────────────────────────────────────────────────


class User(CamelModel):
    """A person known to the planner."""

    id: str
    name: str
    email: str
    initials: str
    avatar: str | None = None
    handle: str | None = None
    wallet: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(CamelModel):
    name: str
    email: str
    initials: str
    avatar: str | None = None
    handle: str | None = None
    wallet: str | None = None


class UserSummary(CamelModel):
    """Client-facing user projection used in pickers and lists."""

    id: str
    name: str
    initials: str
    email: str | None = None


class AttendeeProjection(CamelModel):
    """Resolved attendee attached to an enriched meeting."""

    id: str
    name: str
    initials: str
    email: str | None = None
    avatar: str | None = None

    @classmethod
    def from_user(cls, user: User) -> AttendeeProjection:
        return cls(
            id=user.id,
            name=user.name,
            initials=user.initials,
            email=user.email,
            avatar=user.avatar,
        )


# ── Events ───────────────────────────────────────────────────────────────────


class Event(CamelModel):
    id: str
    name: str
    slug: str
    type: EventType = EventType.CUSTOM
    status: EventStatus = EventStatus.IN_PLANNING
    description: str | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None
    participant_ids: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EventCreate(CamelModel):
    """Input for creating an event. Slug is derived from the name when absent."""

    name: str
    slug: str | None = None
    type: EventType = EventType.CUSTOM
    status: EventStatus = EventStatus.IN_PLANNING
    description: str | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None
    participant_ids: list[str] = Field(default_factory=list)


class EventUpdate(CamelModel):
    """Partial event update. Only fields explicitly set are applied."""

    name: str | None = None
    type: EventType | None = None
    status: EventStatus | None = None
    description: str | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None


# ── Tracks ───────────────────────────────────────────────────────────────────


class Track(CamelModel):
    """Workstream of an event, owned by a lead, accumulating participants."""

    id: str
    event_id: str
    name: str
    description: str | None = None
    lead_id: str = ""
    participant_ids: list[str] = Field(default_factory=list)
    order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TrackCreate(CamelModel):
    event_id: str
    name: str
    description: str | None = None
    lead_id: str = ""
    participant_ids: list[str] = Field(default_factory=list)
    order: int | None = None


# ── Tasks ────────────────────────────────────────────────────────────────────


class Task(CamelModel):
    id: str
    event_id: str
    track_id: str | None = None
    title: str
    description: str | None = None
    assignee_id: str | None = None
    deadline: date_type | None = None
    status: TaskStatus = TaskStatus.PENDING
    support_resources: list[str] = Field(default_factory=list)
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskCreate(CamelModel):
    event_id: str
    title: str
    track_id: str | None = None
    description: str | None = None
    assignee_id: str | None = None
    deadline: date_type | None = None
    status: TaskStatus = TaskStatus.PENDING
    support_resources: list[str] = Field(default_factory=list)


class TaskUpdate(CamelModel):
    """Partial task update. Only fields explicitly set are applied."""

    title: str | None = None
    description: str | None = None
    assignee_id: str | None = None
    deadline: date_type | None = None
    status: TaskStatus | None = None
    support_resources: list[str] | None = None


# ── Meetings ─────────────────────────────────────────────────────────────────


class Meeting(CamelModel):
    """Scheduled meeting with an ordered list of attendee ids."""

    id: str
    event_id: str
    title: str
    meeting_date: date_type = Field(alias="date")
    time: str
    attendee_ids: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MeetingCreate(CamelModel):
    event_id: str
    title: str
    meeting_date: date_type = Field(alias="date")
    time: str
    attendee_ids: list[str] = Field(default_factory=list)


class MeetingUpdate(CamelModel):
    """Full replacement of a meeting's editable fields."""

    title: str
    meeting_date: date_type = Field(alias="date")
    time: str
    attendee_ids: list[str] = Field(default_factory=list)


class EnrichedMeeting(Meeting):
    """Meeting plus request-time derived fields.

    ``attendees`` is aligned with ``attendee_ids``: same length, same order,
    ``None`` where no user matches the id. ``has_notes`` is a snapshot of the
    note lookup at enrichment time.
    """

    has_notes: bool = False
    attendees: list[AttendeeProjection | None] = Field(default_factory=list)


# ── Meeting Notes ────────────────────────────────────────────────────────────


class MeetingNote(CamelModel):
    id: str
    meeting_id: str
    content: str
    agenda: str | None = None
    decisions: str | None = None
    action_items: list[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MeetingNoteCreate(CamelModel):
    meeting_id: str
    content: str
    created_by: str
    agenda: str | None = None
    decisions: str | None = None
    action_items: list[str] = Field(default_factory=list)


class MeetingNoteUpdate(CamelModel):
    content: str | None = None
    agenda: str | None = None
    decisions: str | None = None
    action_items: list[str] | None = None
