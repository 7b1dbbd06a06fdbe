"""
Utility modules for the Property Marketplace API.
"""

from .auth import (
    create_access_token,
    verify_token,
    TokenPayload
)

from .exceptions import (
    ErrorKind,
    STATUS_BY_KIND,
    APIException,
    ValidationError,
    ConflictError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    InternalServerError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    PropertyNotFoundError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "verify_token",
    "TokenPayload",

    # Exceptions
    "ErrorKind",
    "STATUS_BY_KIND",
    "APIException",
    "ValidationError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "InternalServerError",
    "InvalidCredentialsError",
    "UserAlreadyExistsError",
    "PropertyNotFoundError",
]
