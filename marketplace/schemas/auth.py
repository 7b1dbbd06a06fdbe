"""
Pydantic schemas for authentication requests and responses.
Handles registration results, login, and token data.
"""

from pydantic import Field, field_validator
from marketplace.schemas.base import APIModel
from marketplace.schemas.user import UserResponse


class RegisterResponse(APIModel):
    """Registration result."""

    message: str = Field(
        "User created successfully",
        examples=["User created successfully"]
    )
    user: UserResponse


class LoginRequest(APIModel):
    """Login request schema."""

    email: str = Field(
        ...,
        description="User's email address",
        examples=["jo@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        description="User's password",
        examples=["secret1"]
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        v = v.lower().strip()
        if not v:
            raise ValueError("Email is required")
        return v


class LoginResponse(APIModel):
    """Login response with the session token and the signed-in user."""

    access_token: str = Field(
        ...,
        description="JWT access token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    token_type: str = Field(
        default="bearer",
        description="Token type",
        examples=["bearer"]
    )
    expires_in: int = Field(
        ...,
        description="Access token expiration time in seconds",
        examples=[86400]
    )
    user: UserResponse
