"""
Custom exception classes for the Property Marketplace API.
Every exception carries an ErrorKind; STATUS_BY_KIND is the one place kinds become HTTP status codes.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status
import enum


class ErrorKind(str, enum.Enum):
    """Error taxonomy shared by services and the HTTP boundary."""
    VALIDATION = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    UNAUTHENTICATED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    UNEXPECTED = "INTERNAL_SERVER_ERROR"


# Forbidden is reported as 401 and conflicts as 400.
STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_UNAUTHORIZED_MESSAGE = "Unauthorized"
GENERIC_ERROR_MESSAGE = "Something went wrong"


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        kind: ErrorKind,
        detail: str,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=STATUS_BY_KIND[kind], detail=detail, headers=headers)
        self.kind = kind

    @property
    def error_code(self) -> str:
        return self.kind.value


class ValidationError(APIException):
    """Malformed or missing input; carries the first failing rule's message."""

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(ErrorKind.VALIDATION, detail)
        self.field = field


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(self, detail: str):
        super().__init__(ErrorKind.CONFLICT, detail)


class UnauthorizedError(APIException):
    """No usable session on a request that needs one."""

    def __init__(self, detail: str = GENERIC_UNAUTHORIZED_MESSAGE):
        super().__init__(
            ErrorKind.UNAUTHENTICATED,
            detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Session present but the action is not permitted."""

    def __init__(self, detail: str = GENERIC_UNAUTHORIZED_MESSAGE):
        super().__init__(ErrorKind.FORBIDDEN, detail)


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str):
        super().__init__(ErrorKind.NOT_FOUND, f"{resource} not found")


class InternalServerError(APIException):
    """Internal server error exception."""

    def __init__(self, detail: str = GENERIC_ERROR_MESSAGE):
        super().__init__(ErrorKind.UNEXPECTED, detail)


# Authentication specific exceptions
class InvalidCredentialsError(UnauthorizedError):
    """Invalid login credentials exception."""

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class UserAlreadyExistsError(ConflictError):
    """Registration attempted with an email that is already taken."""

    def __init__(self):
        super().__init__("User already exists")


# Property specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self):
        super().__init__("Property")
