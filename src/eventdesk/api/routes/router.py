"""API router -- aggregates all endpoint routers.

Health checks live at the root; everything else is mounted under /api.
"""

from __future__ import annotations

from fastapi import APIRouter

from src.eventdesk.api.routes import (
    events,
    health,
    locale,
    meeting_notes,
    meetings,
    migrate,
    tasks,
    tracks,
    users,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(users.router)
api_router.include_router(events.router)
api_router.include_router(tracks.router)
api_router.include_router(tasks.router)
api_router.include_router(meetings.router)
api_router.include_router(meeting_notes.router)
api_router.include_router(migrate.router)
api_router.include_router(locale.router)

router = APIRouter()

router.include_router(health.router)
router.include_router(api_router)
