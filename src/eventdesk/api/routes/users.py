"""User endpoints (read-only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.eventdesk.api.deps import get_repository
from src.eventdesk.api.errors import not_found, require_uuid
from src.eventdesk.planner.repository import PlannerRepository
from src.eventdesk.planner.schemas import User, UserSummary

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserSummary])
async def list_users(
    repo: PlannerRepository = Depends(get_repository),
) -> list[UserSummary]:
    """All users, projected to the fields pickers need."""
    users = await repo.list_users()
    return [
        UserSummary(id=u.id, name=u.name, initials=u.initials, email=u.email)
        for u in users
    ]


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    repo: PlannerRepository = Depends(get_repository),
) -> User:
    user = await repo.get_user(require_uuid(user_id, "userId"))
    if user is None:
        raise not_found("User")
    return user
