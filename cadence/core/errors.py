"""
Custom exception hierarchy for Cadence.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages. Ingestion failures also
say whether retrying the same recap is safe (`details.retryable`).
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class CadenceException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(CadenceException):
    """Missing or malformed request fields. Nothing was written."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        details: dict[str, Any] = {"retryable": False}
        if field:
            details["field"] = field
        super().__init__(message=message, details=details)


class UpstreamError(CadenceException):
    """The summarizer failed, timed out or returned something unusable."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, detail: str | None = None):
        details: dict[str, Any] = {"retryable": True}
        if detail:
            details["detail"] = detail
        super().__init__(message=message, details=details)


class ConfigurationError(UpstreamError):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "CONFIGURATION_ERROR"

    def __init__(self, setting: str):
        super().__init__(message=f"{setting} is not configured.")
        self.details["retryable"] = False
        self.details["setting"] = setting


class PersistenceError(CadenceException):
    """A store operation failed; the transaction was rolled back."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "PERSISTENCE_ERROR"

    def __init__(self, message: str, detail: str | None = None):
        details: dict[str, Any] = {"retryable": True}
        if detail:
            details["detail"] = detail
        super().__init__(message=message, details=details)


class NotFoundError(CadenceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} {identifier} not found.",
            details={"resource": resource, "id": str(identifier)},
        )


class UnauthorizedError(CadenceException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def cadence_exception_handler(request: Request, exc: CadenceException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors, "retryable": False},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
