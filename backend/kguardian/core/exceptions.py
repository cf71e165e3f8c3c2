"""
Domain exceptions and their HTTP mapping.

Every handler answers with ``{"detail": <message>}`` so clients can show the
message in a toast, the way FastAPI's own HTTPException bodies look.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class KGuardianError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReportValidationError(KGuardianError):
    """An incident report failed field validation."""

    status_code = 422

    def __init__(self, errors: Dict[str, str], focus: Optional[str]):
        super().__init__("Report validation failed")
        self.errors = errors
        self.focus = focus


class MediaRejected(KGuardianError):
    """Evidence file refused before reaching storage."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class StorageError(KGuardianError):
    status_code = status.HTTP_502_BAD_GATEWAY


async def report_validation_handler(request: Request, exc: ReportValidationError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "errors": exc.errors, "focus": exc.focus},
    )


async def kguardian_error_handler(request: Request, exc: KGuardianError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReportValidationError, report_validation_handler)
    app.add_exception_handler(KGuardianError, kguardian_error_handler)
