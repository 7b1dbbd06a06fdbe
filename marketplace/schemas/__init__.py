"""
Pydantic schemas for request/response validation.
"""

from .base import APIModel

# Authentication schemas
from .auth import (
    RegisterResponse,
    LoginRequest,
    LoginResponse
)

# User schemas
from .user import (
    UserRegister,
    UserResponse,
    ContactCard
)

# Property schemas
from .property import (
    PropertyCreate,
    PropertyResponse,
    PropertyWithOwnerResponse,
    PropertySummary,
    PropertySearchFilters
)

# Message schemas
from .message import (
    MessageCreate,
    MessageResponse,
    InboxMessageResponse
)

# Error schemas
from .error import (
    ErrorResponse,
    APIErrorResponse,
    get_error_responses
)

__all__ = [
    "APIModel",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "UserRegister",
    "UserResponse",
    "ContactCard",
    "PropertyCreate",
    "PropertyResponse",
    "PropertyWithOwnerResponse",
    "PropertySummary",
    "PropertySearchFilters",
    "MessageCreate",
    "MessageResponse",
    "InboxMessageResponse",
    "ErrorResponse",
    "APIErrorResponse",
    "get_error_responses",
]
