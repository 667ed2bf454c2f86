"""Typed service errors and the HTTP status each kind maps to."""

import logging
from enum import Enum

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Every failure a service can report to the transport layer."""

    invalid_format = "InvalidFormat"
    future_creation_date = "FutureCreationDate"
    past_due_date = "PastDueDate"
    invalid_start_date = "InvalidStartDate"
    invalid_end_date = "InvalidEndDate"
    invalid_date_range = "InvalidDateRange"
    invalid_credentials = "InvalidCredentials"
    permission_denied = "PermissionDenied"
    not_found = "NotFound"
    task_not_found = "TaskNotFound"
    conflict = "Conflict"
    store_failure = "StoreFailure"


STATUS_CODES = {
    ErrorKind.invalid_format: status.HTTP_400_BAD_REQUEST,
    ErrorKind.future_creation_date: status.HTTP_400_BAD_REQUEST,
    ErrorKind.past_due_date: status.HTTP_400_BAD_REQUEST,
    ErrorKind.invalid_start_date: status.HTTP_400_BAD_REQUEST,
    ErrorKind.invalid_end_date: status.HTTP_400_BAD_REQUEST,
    ErrorKind.invalid_date_range: status.HTTP_400_BAD_REQUEST,
    ErrorKind.invalid_credentials: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.permission_denied: status.HTTP_403_FORBIDDEN,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.task_not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.store_failure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Raised by validators and services; carries its kind and a user-facing message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.value}, {self.message!r})"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.kind.value} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind.value},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=STATUS_CODES[ErrorKind.conflict],
        content={
            "detail": "The request conflicts with existing data",
            "error": ErrorKind.conflict.value,
        },
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=STATUS_CODES[ErrorKind.store_failure],
        content={
            "detail": "Internal server error",
            "error": ErrorKind.store_failure.value,
        },
    )
