"""Track endpoints.

POST /api/tracks validates the payload by hand so that validation failures
carry the exact messages the front end shows ("Event ID is required",
"Track name is required") and are rejected before any store access.
Deleting a track deletes its tasks with it.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status

from src.eventdesk.api.deps import get_repository
from src.eventdesk.api.errors import (
    bad_request,
    error_response,
    not_found,
    optional_trimmed,
    read_json_object,
    require_uuid,
    validate_required_string,
)
from src.eventdesk.planner.repository import PlannerRepository
from src.eventdesk.planner.schemas import Track, TrackCreate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/tracks", tags=["tracks"])


def parse_track_payload(body: dict) -> TrackCreate:
    """Validate a track creation payload.

    Raises:
        ApiError(400): Missing event id, missing/blank name, malformed ids.
    """
    event_id = body.get("eventId")
    if not event_id:
        raise bad_request("Event ID is required")

    name = validate_required_string(body.get("name"))
    if name is None:
        raise bad_request("Track name is required")

    lead_id = body.get("leadId") or ""
    if lead_id:
        lead_id = require_uuid(lead_id, "leadId")

    return TrackCreate(
        event_id=require_uuid(event_id, "eventId"),
        name=name,
        description=optional_trimmed(body.get("description")),
        lead_id=lead_id,
        # Participants join as tasks in the track get assigned
        participant_ids=[],
    )


@router.post("", response_model=Track, status_code=status.HTTP_201_CREATED)
async def create_track(
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    """Create a track for an event."""
    body = await read_json_object(request)
    data = parse_track_payload(body)

    try:
        track = await repo.create_track(data)
    except Exception:
        logger.error("track.create_failed", event_id=data.event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create track")

    logger.info("track.created", track_id=track.id, event_id=track.event_id)
    return track


@router.get("", response_model=list[Track])
async def list_tracks(
    event_id: str | None = Query(default=None, alias="eventId"),
    repo: PlannerRepository = Depends(get_repository),
) -> list[Track]:
    """List tracks, optionally restricted to one event."""
    if event_id is not None:
        event_id = require_uuid(event_id, "eventId")
    return await repo.list_tracks(event_id=event_id)


@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_track(
    track_id: str,
    repo: PlannerRepository = Depends(get_repository),
) -> Response:
    """Delete a track and every task filed under it."""
    track_id = require_uuid(track_id, "trackId")
    try:
        deleted = await repo.delete_track(track_id)
    except Exception:
        logger.error("track.delete_failed", track_id=track_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete track")
    if not deleted:
        raise not_found("Track")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
