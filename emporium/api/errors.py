"""
Error shaping for the JSON API.

Handlers raise domain exceptions (missing records, uniqueness conflicts,
store failures) and the handlers installed here render them with the
response shapes the admin UI and the chat widget expect.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from emporium.db.patches import PatchError
from emporium.db.repositories.records import RecordConflict, RecordNotFound

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "The requested resource was not found."


class ApiError(Exception):
    def __init__(self, status_code: int, payload: Dict[str, Any]):
        super().__init__(payload)
        self.status_code = status_code
        self.payload = payload


def not_found(message: str = NOT_FOUND_MESSAGE) -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, {"error": {"code": "not_found", "message": message}})


def conflict(message: str) -> ApiError:
    return ApiError(status.HTTP_409_CONFLICT, {"error": {"code": "conflict", "message": message}})


def validation_error(path: str, message: str) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        {"error": "Validation error", "details": [{"path": path, "message": message}]},
    )


def store_failure(action: str, exc: Exception) -> ApiError:
    logger.exception("Failed to %s: %s", action, exc)
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"error": f"Failed to {action}", "details": str(exc)},
    )


def delete_failure(thing: str, exc: Exception, message: Optional[str] = None) -> ApiError:
    logger.exception("Failed to delete %s: %s", thing, exc)
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {
            "error": {
                "code": "internal_server_error",
                "message": message or f"Failed to delete {thing}.",
                "details": str(exc),
            }
        },
    )


def deleted(thing: str) -> Dict[str, str]:
    return {"message": f"{thing} deleted successfully."}


def _error_path(loc) -> str:
    parts = [str(p) for p in loc or ()]
    if parts and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    return ".".join(parts)


def _first_error_message(error: Dict[str, Any]) -> str:
    message = error.get("msg") or "Invalid value"
    # pydantic prefixes messages raised from validators
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


async def _api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(exc.payload, status_code=exc.status_code)


async def _record_not_found_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(not_found(str(exc.args[0]) if exc.args else NOT_FOUND_MESSAGE).payload, status_code=404)


async def _record_conflict_handler(request: Request, exc: RecordConflict):
    logger.info("Uniqueness conflict on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(conflict("A record with the same unique value already exists.").payload, status_code=409)


async def _patch_error_handler(request: Request, exc: PatchError):
    error = validation_error("", str(exc))
    return JSONResponse(error.payload, status_code=error.status_code)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first: Optional[Dict[str, Any]] = errors[0] if errors else None
    if first is None:
        error = validation_error("", "Invalid request")
    else:
        error = validation_error(_error_path(first.get("loc")), _first_error_message(first))
    return JSONResponse(error.payload, status_code=error.status_code)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RecordNotFound, _record_not_found_handler)
    app.add_exception_handler(RecordConflict, _record_conflict_handler)
    app.add_exception_handler(PatchError, _patch_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
