"""Task endpoints: create, list, update, delete.

Assigning a task that belongs to a track adds the assignee to that track's
participants. The track must exist and belong to the task's event; this is
checked before anything is written. Updates accept PUT and PATCH alike.
"""

from __future__ import annotations

from typing import Any

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
from src.eventdesk.planner.schemas import Task, TaskCreate, TaskStatus, TaskUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

VALID_STATUSES = tuple(s.value for s in TaskStatus)


def _parse_status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise bad_request(
            f"Invalid status: must be one of {', '.join(VALID_STATUSES)}"
        ) from None


def _parse_resources(value: Any) -> list[str]:
    """Accept a list of strings or the textarea form, one resource per line."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split("\n")
    if not isinstance(value, list):
        raise bad_request("Invalid supportResources: must be a list of strings")
    return [str(item).strip() for item in value if str(item).strip()]


def parse_task_payload(body: dict) -> TaskCreate:
    event_id = validate_required_string(body.get("eventId"))
    if event_id is None:
        raise bad_request("Event ID is required")

    title = validate_required_string(body.get("title"))
    if title is None:
        raise bad_request("Task title is required")

    track_id = body.get("trackId")
    assignee_id = body.get("assigneeId")
    try:
        return TaskCreate(
            event_id=require_uuid(event_id, "eventId"),
            title=title,
            track_id=require_uuid(track_id, "trackId") if track_id else None,
            description=optional_trimmed(body.get("description")),
            assignee_id=require_uuid(assignee_id, "assigneeId") if assignee_id else None,
            deadline=body.get("deadline") or None,
            status=_parse_status(body.get("status") or TaskStatus.PENDING.value),
            support_resources=_parse_resources(body.get("supportResources")),
        )
    except ValueError:
        raise bad_request("Invalid deadline: expected YYYY-MM-DD") from None


def parse_task_update(body: dict) -> TaskUpdate:
    fields: dict[str, Any] = {}
    if "title" in body:
        title = validate_required_string(body["title"])
        if title is None:
            raise bad_request("Task title is required")
        fields["title"] = title
    if "description" in body:
        fields["description"] = optional_trimmed(body["description"])
    if "assigneeId" in body:
        assignee_id = body["assigneeId"]
        fields["assignee_id"] = require_uuid(assignee_id, "assigneeId") if assignee_id else None
    if "status" in body:
        fields["status"] = _parse_status(body["status"])
    if "supportResources" in body:
        fields["support_resources"] = _parse_resources(body["supportResources"])
    if "deadline" in body:
        fields["deadline"] = body["deadline"] or None

    try:
        return TaskUpdate(**fields)
    except ValueError:
        raise bad_request("Invalid deadline: expected YYYY-MM-DD") from None


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
):
    body = await read_json_object(request)
    data = parse_task_payload(body)

    if data.track_id:
        track = await repo.get_track(data.track_id)
        if track is None:
            raise not_found("Track")
        if track.event_id != data.event_id:
            raise bad_request("Track does not belong to this event")

    try:
        task = await repo.create_task(data)
    except Exception:
        logger.error("task.create_failed", event_id=data.event_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create task")

    logger.info("task.created", task_id=task.id, track_id=task.track_id)
    return task


@router.get("", response_model=list[Task])
async def list_tasks(
    event_id: str | None = Query(default=None, alias="eventId"),
    track_id: str | None = Query(default=None, alias="trackId"),
    repo: PlannerRepository = Depends(get_repository),
) -> list[Task]:
    return await repo.list_tasks(
        event_id=require_uuid(event_id, "eventId") if event_id else None,
        track_id=require_uuid(track_id, "trackId") if track_id else None,
    )


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=Task)
async def update_task(
    task_id: str,
    request: Request,
    repo: PlannerRepository = Depends(get_repository),
) -> Task:
    task_id = require_uuid(task_id, "taskId")
    data = parse_task_update(await read_json_object(request))

    task = await repo.update_task(task_id, data)
    if task is None:
        raise not_found("Task")
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    repo: PlannerRepository = Depends(get_repository),
) -> Response:
    task_id = require_uuid(task_id, "taskId")
    if not await repo.delete_task(task_id):
        raise not_found("Task")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
