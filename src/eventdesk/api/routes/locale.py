"""Locale selection and the localized application shell.

The language switcher reads GET /api/locale, writes the choice with
PUT /api/locale (which sets the locale cookie), and the front end renders
the sidebar and header from GET /api/layout.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.eventdesk.api.deps import get_locale
from src.eventdesk.api.errors import bad_request, read_json_object
from src.eventdesk.config import SUPPORTED_LOCALES, get_settings
from src.eventdesk.i18n import LANGUAGE_NAMES, is_supported_locale
from src.eventdesk.i18n.layout import build_layout

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["locale"])


def _locale_payload(locale: str) -> dict[str, Any]:
    return {
        "locale": locale,
        "supported": [
            {"code": code, "name": LANGUAGE_NAMES[code]} for code in SUPPORTED_LOCALES
        ],
    }


@router.get("/locale")
async def get_current_locale(locale: str = Depends(get_locale)) -> dict[str, Any]:
    return _locale_payload(locale)


@router.put("/locale")
async def set_locale(request: Request) -> JSONResponse:
    """Persist the chosen locale in the locale cookie."""
    body = await read_json_object(request)
    code = body.get("locale")
    if not isinstance(code, str) or not is_supported_locale(code):
        raise bad_request(f"Unsupported locale: {code}")

    settings = get_settings()
    response = JSONResponse(content=_locale_payload(code))
    response.set_cookie(
        key=settings.LOCALE_COOKIE_NAME,
        value=code,
        max_age=settings.LOCALE_COOKIE_MAX_AGE,
        path="/",
        samesite="lax",
    )
    logger.info("locale.changed", locale=code)
    return response


@router.get("/layout")
async def get_layout(locale: str = Depends(get_locale)) -> dict[str, Any]:
    """Navigation, header labels and language options for the request locale."""
    return build_layout(locale)
