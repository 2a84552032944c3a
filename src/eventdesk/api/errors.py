"""API error envelope and request validation helpers.

Every error leaving the API has the shape ``{"error": "<message>"}``.
Handlers raise ApiError (or use the helpers below); register_error_handlers()
installs the exception handlers that render it, plus a catch-all that
turns anything unexpected into a generic 500.
"""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """An error with an HTTP status and a caller-safe message."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def bad_request(message: str) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, message)


def not_found(entity_name: str) -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, f"{entity_name} not found")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ── Validation Helpers ───────────────────────────────────────────────────────


def validate_required_string(value: Any) -> str | None:
    """Return the trimmed string, or None if value is missing, not a string, or blank."""
    if not value or not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def optional_trimmed(value: Any) -> str | None:
    """Trim an optional string; blank or non-string becomes None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def require_uuid(value: Any, field_name: str) -> str:
    """Return value as a canonical UUID string or raise a 400."""
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError):
        raise bad_request(f"Invalid {field_name}: must be a valid UUID") from None


def filter_uuids(values: Any) -> list[str]:
    """Keep the well-formed UUIDs of a list, in order. Non-lists become []."""
    if not isinstance(values, list):
        return []
    kept: list[str] = []
    for value in values:
        try:
            kept.append(str(uuid.UUID(str(value))))
        except ValueError:
            continue
    return kept


async def read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object or raise a 400."""
    try:
        body = await request.json()
    except ValueError:
        raise bad_request("Invalid JSON body") from None
    if not isinstance(body, dict):
        raise bad_request("Invalid JSON body")
    return body


# ── Exception Handlers ───────────────────────────────────────────────────────


def register_error_handlers(app: FastAPI) -> None:
    """Render every error as the {"error": message} envelope."""

    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid {location}: {first.get('msg')}" if location else first.get("msg")
        else:
            message = "Invalid request"
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "request.unhandled_error",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
