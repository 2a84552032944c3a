"""Migration trigger: copy the mock seed data into the store.

POST /api/migrate runs the seed migration once. The endpoint does not guard
against repeated calls; repeat runs rely on the migration skipping users and
events that already exist.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.eventdesk.api.deps import get_repository
from src.eventdesk.config import get_settings
from src.eventdesk.planner.repository import PlannerRepository
from src.eventdesk.seed.migration import migrate_mock_data

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/migrate", tags=["migrate"])


@router.post("")
async def run_migration(
    repo: PlannerRepository = Depends(get_repository),
) -> JSONResponse:
    """Run the mock data migration and report the outcome."""
    settings = get_settings()
    try:
        summary = await migrate_mock_data(repo, settings.SEED_DATA_DIR)
    except Exception as exc:
        logger.error("migration.failed", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc) or "Migration failed"},
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "message": "Migration completed successfully",
            "summary": summary.model_dump(),
        },
    )
