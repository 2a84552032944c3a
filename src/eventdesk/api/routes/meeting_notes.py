"""Meeting note endpoints. A meeting has at most one note."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import IntegrityError

from src.eventdesk.api.deps import get_repository
from src.eventdesk.api.errors import (
    ApiError,
    bad_request,
    error_response,
    not_found,
    optional_trimmed,
    read_json_object,
    require_uuid,
    validate_required_string,
)
from src.eventdesk.planner.repository import PlannerRepository
from src.eventdesk.planner.schemas import MeetingNote, MeetingNoteCreate, MeetingNoteUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/meeting-notes", tags=["meeting-notes"])

NOTE_CONFLICT = "Meeting already has notes"


def _parse_action_items(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise bad_request("Invalid actionItems: must be a list of strings")
    return [str(item).strip() for item in value if str(item).strip()]


@router.get("", response_model=MeetingNote)
async def get_note_for_meeting(
    meeting_id: str = Query(alias="meetingId"),
    repo: PlannerRepository = Depends(get_repository),
) -> MeetingNote:
    note = await repo.get_note_by_meeting_id(require_uuid(meeting_id, "meetingId"))
    if note is None:
        raise not_found("Meeting note")
    return note


@router.post("", response_model=MeetingNote, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    body = await read_json_object(request)

    if not body.get("meetingId"):
        raise bad_request("Meeting ID is required")
    meeting_id = require_uuid(body["meetingId"], "meetingId")

    content = validate_required_string(body.get("content"))
    if content is None:
        raise bad_request("Note content is required")

    if not body.get("createdBy"):
        raise bad_request("Author is required")
    created_by = require_uuid(body["createdBy"], "createdBy")

    if await repo.get_meeting(meeting_id) is None:
        raise not_found("Meeting")
    if await repo.get_note_by_meeting_id(meeting_id) is not None:
        raise ApiError(status.HTTP_409_CONFLICT, NOTE_CONFLICT)

    data = MeetingNoteCreate(
        meeting_id=meeting_id,
        content=content,
        created_by=created_by,
        agenda=optional_trimmed(body.get("agenda")),
        decisions=optional_trimmed(body.get("decisions")),
        action_items=_parse_action_items(body.get("actionItems")),
    )
    try:
        note = await repo.create_note(data)
    except IntegrityError:
        # Lost a race with a concurrent create for the same meeting
        raise ApiError(status.HTTP_409_CONFLICT, NOTE_CONFLICT) from None
    except Exception:
        logger.error("meeting_note.create_failed", meeting_id=meeting_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create meeting note")

    logger.info("meeting_note.created", note_id=note.id, meeting_id=meeting_id)
    return note


@router.api_route("/{note_id}", methods=["PUT", "PATCH"], response_model=MeetingNote)
async def update_note(
    note_id: str,
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
) -> MeetingNote:
    note_id = require_uuid(note_id, "noteId")
    body = await read_json_object(request)

    fields: dict[str, Any] = {}
    if "content" in body:
        content = validate_required_string(body["content"])
        if content is None:
            raise bad_request("Note content is required")
        fields["content"] = content
    for key in ("agenda", "decisions"):
        if key in body:
            fields[key] = optional_trimmed(body[key])
    if "actionItems" in body:
        fields["action_items"] = _parse_action_items(body["actionItems"])

    note = await repo.update_note(note_id, MeetingNoteUpdate(**fields))
    if note is None:
        raise not_found("Meeting note")
    return note
