from enum import Enum
from typing import Optional

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BACKEND = "backend"


_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BACKEND: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Base exception for service layer errors.

    Callers branch on ``kind``; ``status_code`` is the HTTP mapping of the kind
    unless given explicitly.
    """

    kind: ErrorKind = ErrorKind.BACKEND

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.status_code = status_code if status_code is not None else _STATUS_BY_KIND[self.kind]


class ValidationError(ServiceError):
    """Missing required field, malformed identifier, illegal class name."""

    kind = ErrorKind.VALIDATION


class ConflictError(ServiceError):
    """Duplicate identifier, email, or (class, section) assignment."""

    kind = ErrorKind.CONFLICT


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class BackendError(ServiceError):
    kind = ErrorKind.BACKEND
