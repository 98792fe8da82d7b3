"""
Custom exception hierarchy for the Nivra journal.

Rule: every error has a machine-readable `code` string so the UI layer
can branch on it without parsing English messages.

Only `NoMoodSelectedError` ever reaches a caller. Persisted-state and
date errors are raised by decoders and absorbed where they are caught.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class NivraException(Exception):
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


class NoMoodSelectedError(NivraException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "NO_MOOD_SELECTED"

    def __init__(self, received: str | None = None):
        super().__init__(
            message="Please select a mood before saving.",
            details={"received": received} if received else {},
        )


class CorruptPersistedStateError(NivraException):
    code = "CORRUPT_PERSISTED_STATE"

    def __init__(self, slot: str, raw: str | None = None):
        super().__init__(
            message=f"Stored value for slot '{slot}' could not be decoded.",
            details={"slot": slot, "raw": raw} if raw is not None else {"slot": slot},
        )


class DateComputationError(NivraException):
    code = "DATE_COMPUTATION_FAILURE"

    def __init__(self, raw: str):
        super().__init__(
            message=f"Cannot interpret '{raw}' as a calendar day.",
            details={"raw": raw},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def nivra_exception_handler(request: Request, exc: NivraException) -> JSONResponse:
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
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
