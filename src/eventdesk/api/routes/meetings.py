"""Meeting endpoints.

Listing and detail responses are enriched: each meeting carries
``hasNotes`` and an ``attendees`` list aligned with ``attendeeIds``
(``null`` where no user matches). Enrichment is all-or-nothing, so a failed
lookup turns the whole listing into a 500.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status

from src.eventdesk.api.deps import get_repository
from src.eventdesk.api.errors import (
    bad_request,
    error_response,
    filter_uuids,
    not_found,
    read_json_object,
    require_uuid,
    validate_required_string,
)
from src.eventdesk.planner.enrichment import enrich_meetings_with_details
from src.eventdesk.planner.repository import PlannerRepository
from src.eventdesk.planner.schemas import (
    EnrichedMeeting,
    Meeting,
    MeetingCreate,
    MeetingUpdate,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/meetings", tags=["meetings"])


def _parse_meeting_fields(body: dict) -> dict:
    """Validate the fields shared by meeting creation and replacement.

    Malformed attendee ids are dropped rather than rejected.
    """
    title = validate_required_string(body.get("title"))
    if title is None:
        raise bad_request("Meeting title is required")

    if not body.get("date"):
        raise bad_request("Meeting date is required")
    if not body.get("time"):
        raise bad_request("Meeting time is required")

    return {
        "title": title,
        "meeting_date": body["date"],
        "time": str(body["time"]).strip(),
        "attendee_ids": filter_uuids(body.get("attendeeIds")),
    }


def parse_meeting_payload(body: dict) -> MeetingCreate:
    event_id = validate_required_string(body.get("eventId"))
    if event_id is None:
        raise bad_request("Event ID is required")
    event_id = require_uuid(event_id, "eventId")

    fields = _parse_meeting_fields(body)
    try:
        return MeetingCreate(event_id=event_id, **fields)
    except ValueError:
        raise bad_request("Invalid date: expected YYYY-MM-DD") from None


def parse_meeting_update(body: dict) -> MeetingUpdate:
    fields = _parse_meeting_fields(body)
    try:
        return MeetingUpdate(**fields)
    except ValueError:
        raise bad_request("Invalid date: expected YYYY-MM-DD") from None


@router.post("", response_model=Meeting, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    body = await read_json_object(request)
    data = parse_meeting_payload(body)

    try:
        meeting = await repo.create_meeting(data)
    except Exception:
        logger.error("meeting.create_failed", event_id=data.event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create meeting")

    logger.info("meeting.created", meeting_id=meeting.id, attendees=len(meeting.attendee_ids))
    return meeting


@router.get("", response_model=list[EnrichedMeeting])
async def list_meetings(
    event_id: str | None = Query(default=None, alias="eventId"),
    repo: PlannerRepository = Depends(get_repository),
):
    """List meetings (most recent first) with notes presence and attendee details."""
    if event_id is not None:
        event_id = require_uuid(event_id, "eventId")

    try:
        meetings = await repo.list_meetings(event_id=event_id)
        return await enrich_meetings_with_details(meetings, repo)
    except Exception:
        logger.error("meeting.list_failed", event_id=event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch meetings")


@router.get("/{meeting_id}", response_model=EnrichedMeeting)
async def get_meeting(
    meeting_id: str,
    repo: PlannerRepository = Depends(get_repository),
):
    meeting_id = require_uuid(meeting_id, "meetingId")
    meeting = await repo.get_meeting(meeting_id)
    if meeting is None:
        raise not_found("Meeting")

    try:
        enriched = await enrich_meetings_with_details([meeting], repo)
    except Exception:
        logger.error("meeting.enrich_failed", meeting_id=meeting_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch meeting")
    return enriched[0]


@router.put("/{meeting_id}", response_model=Meeting)
async def update_meeting(
    meeting_id: str,
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    """Replace a meeting's title, date, time, and attendees."""
    meeting_id = require_uuid(meeting_id, "meetingId")
    body = await read_json_object(request)
    if await repo.get_meeting(meeting_id) is None:
        raise not_found("Meeting")
    data = parse_meeting_update(body)

    try:
        meeting = await repo.update_meeting(meeting_id, data)
    except Exception:
        logger.error("meeting.update_failed", meeting_id=meeting_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update meeting")
    if meeting is None:
        raise not_found("Meeting")
    return meeting


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meeting(
    meeting_id: str,
    repo: PlannerRepository = Depends(get_repository),
) -> Response:
    meeting_id = require_uuid(meeting_id, "meetingId")
    if not await repo.delete_meeting(meeting_id):
        raise not_found("Meeting")
    logger.info("meeting.deleted", meeting_id=meeting_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
