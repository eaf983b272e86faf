"""Map engine exceptions to HTTP responses."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from faceoff.core.errors import (
    DirectoryLookupError,
    DuplicateProfileError,
    FaceoffError,
    InvalidRequestError,
    ProfileNotFoundError,
    StoreUnavailableError,
)

logger = structlog.get_logger()

STATUS_CODES: dict[type[FaceoffError], int] = {
    InvalidRequestError: 400,
    ProfileNotFoundError: 404,
    DuplicateProfileError: 409,
    DirectoryLookupError: 502,
    StoreUnavailableError: 503,
}


def status_code_for(exc: FaceoffError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


async def faceoff_exception_handler(request: Request, exc: FaceoffError) -> JSONResponse:
    """Render a FaceoffError as a JSON error body."""
    status_code = status_code_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log("request_failed", path=request.url.path, error=exc.message, type=type(exc).__name__)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.message,
            "type": exc.__class__.__name__,
            "retryable": exc.retryable,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FaceoffError, faceoff_exception_handler)
