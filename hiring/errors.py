"""Typed application errors and their translation to API responses.

Services raise one of the AppError subclasses below. Only the exception
handlers registered in main.py know about HTTP status codes.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    INVALID_ENUM = "invalid_enum"
    CONFLICT = "conflict"
    VALIDATION_FAILED = "validation_failed"


STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_ENUM: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
}


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    @property
    def payload(self) -> Dict[str, Any]:
        return build_error_payload(self.kind.value, self.message, self.details)


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class InvalidEnumError(AppError):
    kind = ErrorKind.INVALID_ENUM


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class ValidationFailedError(AppError):
    kind = ErrorKind.VALIDATION_FAILED


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    payload = build_error_payload(
        ErrorKind.VALIDATION_FAILED.value,
        "Validation failed",
        {"errors": jsonable_encoder(errors)},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)
