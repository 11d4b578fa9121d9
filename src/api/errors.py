"""Mapping of application errors onto HTTP responses.

Client-input errors carry their message; database failures are reported
generically so no internals reach the caller.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import DevEventError
from ..db import ConnectionError, ConflictError, DatabaseTimeoutError
from ..validation import ValidationError, ReferentialIntegrityError

logger = logging.getLogger(__name__)


def status_for(exc: DevEventError) -> int:
    if isinstance(exc, (ValidationError, ReferentialIntegrityError)):
        return 400
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, (ConnectionError, DatabaseTimeoutError)):
        return 503
    return 500


def error_body(exc: DevEventError) -> Dict[str, Any]:
    if isinstance(exc, ValidationError):
        return {"message": str(exc), "errors": exc.errors}
    if isinstance(exc, ReferentialIntegrityError):
        return {"message": str(exc), "errors": {"eventId": str(exc)}}
    if isinstance(exc, ConflictError):
        return {"message": str(exc)}
    if isinstance(exc, (ConnectionError, DatabaseTimeoutError)):
        return {"message": "Database unavailable", "error": "Unable to connect to database"}
    return {"message": "Internal server error"}


async def handle_app_error(request: Request, exc: DevEventError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handler for every DevEventError subclass."""
    app.add_exception_handler(DevEventError, handle_app_error)


__all__ = ['status_for', 'error_body', 'register_exception_handlers']
