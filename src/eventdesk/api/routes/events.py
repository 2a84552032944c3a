"""Event endpoints: list, create, update, lookup by slug, join and leave."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, status

from src.eventdesk.api.deps import get_repository
from src.eventdesk.api.errors import (
    bad_request,
    error_response,
    filter_uuids,
    not_found,
    optional_trimmed,
    read_json_object,
    require_uuid,
    validate_required_string,
)
from src.eventdesk.planner.repository import PlannerRepository
from src.eventdesk.planner.schemas import (
    Event,
    EventCreate,
    EventStatus,
    EventType,
    EventUpdate,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _parse_type(value: Any) -> EventType:
    try:
        return EventType(value)
    except ValueError:
        raise bad_request(f"Invalid type: {value}") from None


def _parse_status(value: Any) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        raise bad_request(f"Invalid status: {value}") from None


def parse_event_payload(body: dict) -> EventCreate:
    name = validate_required_string(body.get("name"))
    if name is None:
        raise bad_request("Event name is required")

    try:
        return EventCreate(
            name=name,
            type=_parse_type(body.get("type") or EventType.CUSTOM.value),
            status=_parse_status(body.get("status") or EventStatus.IN_PLANNING.value),
            description=optional_trimmed(body.get("description")),
            start_date=body.get("startDate") or None,
            end_date=body.get("endDate") or None,
            participant_ids=filter_uuids(body.get("participantIds")),
        )
    except ValueError:
        raise bad_request("Invalid date: expected YYYY-MM-DD") from None


def parse_event_update(body: dict) -> EventUpdate:
    """Validate a partial event update. Absent keys are left untouched."""
    fields: dict[str, Any] = {}
    if "name" in body:
        name = validate_required_string(body["name"])
        if name is None:
            raise bad_request("Event name is required")
        fields["name"] = name
    if "type" in body:
        fields["type"] = _parse_type(body["type"])
    if "status" in body:
        fields["status"] = _parse_status(body["status"])
    if "description" in body:
        fields["description"] = optional_trimmed(body["description"])
    if "startDate" in body:
        fields["start_date"] = body["startDate"] or None
    if "endDate" in body:
        fields["end_date"] = body["endDate"] or None

    try:
        return EventUpdate(**fields)
    except ValueError:
        raise bad_request("Invalid date: expected YYYY-MM-DD") from None


@router.get("", response_model=list[Event])
async def list_events(
    repo: PlannerRepository = Depends(get_repository),
) -> list[Event]:
    return await repo.list_events()


@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    data = parse_event_payload(await read_json_object(request))
    try:
        event = await repo.create_event(data)
    except Exception:
        logger.error("event.create_failed", name=data.name, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create event")

    logger.info("event.created", event_id=event.id, slug=event.slug)
    return event


@router.get("/{slug}", response_model=Event)
async def get_event(
    slug: str,
    repo: PlannerRepository = Depends(get_repository),
) -> Event:
    event = await repo.get_event_by_slug(slug)
    if event is None:
        raise not_found("Event")
    return event


@router.put("/{event_id}", response_model=Event)
async def update_event(
    event_id: str,
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    event_id = require_uuid(event_id, "eventId")
    body = await read_json_object(request)
    if await repo.get_event(event_id) is None:
        raise not_found("Event")
    data = parse_event_update(body)

    try:
        event = await repo.update_event(event_id, data)
    except Exception:
        logger.error("event.update_failed", event_id=event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update event")
    if event is None:
        raise not_found("Event")
    return event


async def _membership_user(request: Request, repo: PlannerRepository) -> str:
    body = await read_json_object(request)
    if not body.get("userId"):
        raise bad_request("User ID is required")
    user_id = require_uuid(body["userId"], "userId")
    if await repo.get_user(user_id) is None:
        raise not_found("User")
    return user_id


@router.post("/{event_id}/join")
async def join_event(
    event_id: str,
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    """Add a user to the event's participants. Joining twice is harmless."""
    event_id = require_uuid(event_id, "eventId")
    user_id = await _membership_user(request, repo)

    try:
        event = await repo.join_event(event_id, user_id)
    except Exception:
        logger.error("event.join_failed", event_id=event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to join event")
    if event is None:
        raise not_found("Event")

    logger.info("event.joined", event_id=event_id, user_id=user_id)
    return {"success": True, "event": event.model_dump(mode="json", by_alias=True)}


@router.delete("/{event_id}/join")
async def leave_event(
    event_id: str,
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    event_id = require_uuid(event_id, "eventId")
    user_id = await _membership_user(request, repo)

    try:
        event = await repo.leave_event(event_id, user_id)
    except Exception:
        logger.error("event.leave_failed", event_id=event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to leave event")
    if event is None:
        raise not_found("Event")

    logger.info("event.left", event_id=event_id, user_id=user_id)
    return {"success": True, "event": event.model_dump(mode="json", by_alias=True)}
