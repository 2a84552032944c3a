"""One-shot bulk copy of mock JSON seed data into the planner store.

MockDataMigrator reads users.json, events.json, tracks.json, tasks.json,
meetings.json, and meeting-notes.json from a directory and recreates the
records through PlannerRepository, in dependency order. Seed files carry
their own (legacy) ids; the migrator maps each legacy id to the id the
store assigns and rewrites references through that map.

Per-record policy:
- A record whose parent cannot be mapped is skipped.
- Unmappable user references (lead, assignee, participants, attendees)
  are dropped from the record.
- Duplicates (IntegrityError) and malformed records (ValidationError) are
  logged and skipped. A user whose email already exists is mapped to the
  existing user; an event whose slug (given, or derived from its name)
  already exists is reused.
- A task whose track belongs to another event is skipped.
- Anything else aborts the run and propagates to the caller.

The routine is not transactional across records: a failed run leaves the
records created before the failure in place.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import IntegrityError

from src.eventdesk.core.monitoring import migration_records_total
from src.eventdesk.planner.repository import PlannerRepository, slugify
from src.eventdesk.planner.schemas import (
    EventCreate,
    MeetingCreate,
    MeetingNoteCreate,
    TaskCreate,
    TrackCreate,
    UserCreate,
)

logger = structlog.get_logger(__name__)

SEED_FILES: dict[str, str] = {
    "users": "users.json",
    "events": "events.json",
    "tracks": "tracks.json",
    "tasks": "tasks.json",
    "meetings": "meetings.json",
    "meeting_notes": "meeting-notes.json",
}


class EntityCount(BaseModel):
    created: int = 0
    skipped: int = 0


class MigrationSummary(BaseModel):
    """Created/skipped counts per entity for one migration run."""

    users: EntityCount = Field(default_factory=EntityCount)
    events: EntityCount = Field(default_factory=EntityCount)
    tracks: EntityCount = Field(default_factory=EntityCount)
    tasks: EntityCount = Field(default_factory=EntityCount)
    meetings: EntityCount = Field(default_factory=EntityCount)
    meeting_notes: EntityCount = Field(default_factory=EntityCount)


class SeedDataError(ValueError):
    """A seed file exists but does not hold a JSON array of objects."""


class MockDataMigrator:
    """Copy seed JSON files into the store through the repository.

    Args:
        repository: Target PlannerRepository.
        data_dir: Directory holding the seed JSON files.
    """

    def __init__(self, repository: PlannerRepository, data_dir: str | Path) -> None:
        self._repo = repository
        self._data_dir = Path(data_dir)
        self._ids: dict[str, dict[str, str]] = {
            "users": {},
            "events": {},
            "tracks": {},
            "tasks": {},
            "meetings": {},
        }
        self.summary = MigrationSummary()

    # ── Public API ───────────────────────────────────────────────────────

    async def run(self) -> MigrationSummary:
        """Migrate every entity in dependency order and return the summary."""
        logger.info("migration.started", data_dir=str(self._data_dir))

        await self._migrate_users()
        await self._migrate_events()
        await self._migrate_tracks()
        await self._migrate_tasks()
        await self._migrate_meetings()
        await self._migrate_meeting_notes()

        logger.info(
            "migration.completed",
            created={entity: getattr(self.summary, entity).created for entity in SEED_FILES},
        )
        return self.summary

    # ── Helpers ──────────────────────────────────────────────────────────

    def _read(self, entity: str) -> list[dict[str, Any]]:
        path = self._data_dir / SEED_FILES[entity]
        if not path.exists():
            logger.warning("migration.seed_file_missing", entity=entity, path=str(path))
            return []
        records = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise SeedDataError(f"{path.name} must contain a JSON array of objects")
        return records

    def _map(self, entity: str, legacy_id: Any) -> str | None:
        if not legacy_id:
            return None
        return self._ids[entity].get(str(legacy_id))

    def _map_users(self, legacy_ids: Any) -> list[str]:
        if not isinstance(legacy_ids, list):
            return []
        mapped = (self._map("users", legacy_id) for legacy_id in legacy_ids)
        return [user_id for user_id in mapped if user_id is not None]

    def _created(self, entity: str, legacy_id: Any, new_id: str) -> None:
        if legacy_id and entity in self._ids:
            self._ids[entity][str(legacy_id)] = new_id
        getattr(self.summary, entity).created += 1
        migration_records_total.labels(entity=entity, outcome="created").inc()

    def _skipped(self, entity: str, reason: str, **context: Any) -> None:
        getattr(self.summary, entity).skipped += 1
        migration_records_total.labels(entity=entity, outcome="skipped").inc()
        logger.warning("migration.record_skipped", entity=entity, reason=reason, **context)

    # ── Entities ─────────────────────────────────────────────────────────

    async def _migrate_users(self) -> None:
        for record in self._read("users"):
            legacy_id = record.get("id")
            try:
                data = UserCreate.model_validate(record)
                user = await self._repo.create_user(data)
            except ValidationError as exc:
                self._skipped("users", "invalid_record", legacy_id=legacy_id, error=str(exc))
                continue
            except IntegrityError:
                existing = await self._repo.get_user_by_email(record["email"])
                if existing is not None and legacy_id:
                    self._ids["users"][str(legacy_id)] = existing.id
                self._skipped("users", "already_exists", email=record.get("email"))
                continue
            self._created("users", legacy_id, user.id)

    async def _migrate_events(self) -> None:
        for record in self._read("events"):
            legacy_id = record.get("id")
            try:
                data = EventCreate.model_validate(
                    {**record, "participantIds": self._map_users(record.get("participantIds"))}
                )
            except ValidationError as exc:
                self._skipped("events", "invalid_record", legacy_id=legacy_id, error=str(exc))
                continue

            # Records without a slug reuse the one the store would derive from the name
            slug = data.slug or slugify(data.name)
            existing = await self._repo.get_event_by_slug(slug)
            if existing is not None:
                if legacy_id:
                    self._ids["events"][str(legacy_id)] = existing.id
                self._skipped("events", "already_exists", slug=slug)
                continue

            try:
                event = await self._repo.create_event(data)
            except IntegrityError:
                self._skipped("events", "already_exists", slug=slug)
                continue
            self._created("events", legacy_id, event.id)

    async def _migrate_tracks(self) -> None:
        for record in self._read("tracks"):
            legacy_id = record.get("id")
            event_id = self._map("events", record.get("eventId"))
            if event_id is None:
                self._skipped("tracks", "event_not_found", name=record.get("name"))
                continue
            try:
                data = TrackCreate(
                    event_id=event_id,
                    name=record.get("name"),
                    description=record.get("description"),
                    lead_id=self._map("users", record.get("leadId")) or "",
                    participant_ids=self._map_users(record.get("participantIds")),
                    order=record.get("order"),
                )
                track = await self._repo.create_track(data)
            except (ValidationError, IntegrityError) as exc:
                self._skipped("tracks", "invalid_record", legacy_id=legacy_id, error=str(exc))
                continue
            self._created("tracks", legacy_id, track.id)

    async def _migrate_tasks(self) -> None:
        for record in self._read("tasks"):
            legacy_id = record.get("id")
            event_id = self._map("events", record.get("eventId"))
            if event_id is None:
                self._skipped("tasks", "event_not_found", title=record.get("title"))
                continue
            try:
                data = TaskCreate.model_validate(
                    {
                        **record,
                        "eventId": event_id,
                        "trackId": self._map("tracks", record.get("trackId")),
                        "assigneeId": self._map("users", record.get("assigneeId")),
                    }
                )
                task = await self._repo.create_task(data)
            except (ValueError, IntegrityError) as exc:
                self._skipped("tasks", "invalid_record", legacy_id=legacy_id, error=str(exc))
                continue
            self._created("tasks", legacy_id, task.id)

    async def _migrate_meetings(self) -> None:
        for record in self._read("meetings"):
            legacy_id = record.get("id")
            event_id = self._map("events", record.get("eventId"))
            if event_id is None:
                self._skipped("meetings", "event_not_found", title=record.get("title"))
                continue
            try:
                data = MeetingCreate.model_validate(
                    {
                        **record,
                        "eventId": event_id,
                        "attendeeIds": self._map_users(record.get("attendeeIds")),
                    }
                )
                meeting = await self._repo.create_meeting(data)
            except (ValidationError, IntegrityError) as exc:
                self._skipped("meetings", "invalid_record", legacy_id=legacy_id, error=str(exc))
                continue
            self._created("meetings", legacy_id, meeting.id)

    async def _migrate_meeting_notes(self) -> None:
        for record in self._read("meeting_notes"):
            meeting_id = self._map("meetings", record.get("meetingId"))
            if meeting_id is None:
                self._skipped("meeting_notes", "meeting_not_found", meeting_id=record.get("meetingId"))
                continue
            created_by = self._map("users", record.get("createdBy"))
            if created_by is None:
                self._skipped("meeting_notes", "author_not_found", created_by=record.get("createdBy"))
                continue
            try:
                data = MeetingNoteCreate.model_validate(
                    {**record, "meetingId": meeting_id, "createdBy": created_by}
                )
                note = await self._repo.create_note(data)
            except (ValidationError, IntegrityError) as exc:
                self._skipped("meeting_notes", "invalid_record", meeting_id=meeting_id, error=str(exc))
                continue
            self._created("meeting_notes", record.get("id"), note.id)


async def migrate_mock_data(
    repository: PlannerRepository, data_dir: str | Path
) -> MigrationSummary:
    """Run a full seed migration from data_dir into repository."""
    return await MockDataMigrator(repository, data_dir).run()
