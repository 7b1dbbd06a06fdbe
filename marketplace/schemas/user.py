"""
Pydantic schemas for user registration and responses.
"""

from pydantic import Field, field_validator
from datetime import datetime
from marketplace.models.user import User, UserRole
from marketplace.schemas.base import APIModel


class UserRegister(APIModel):
    """
    Registration payload.

    Rules are checked in field order and each one raises a human-readable
    message; the first failure is what the client sees.
    """

    name: str = Field(
        ...,
        description="Display name (minimum 2 characters)",
        examples=["Jo Lee"]
    )

    email: str = Field(
        ...,
        description="Email address, unique across users",
        examples=["jo@example.com"]
    )

    password: str = Field(
        ...,
        description="Password (minimum 6 characters)",
        examples=["secret1"]
    )

    role: UserRole = Field(
        ...,
        description="Marketplace role",
        examples=["SELLER"]
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        """Validate syntax and normalize email."""
        try:
            return User.validate_email_format(v.strip())
        except ValueError:
            raise ValueError("Invalid email address")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v):
        """Reject anything outside the four marketplace roles."""
        allowed = [role.value for role in UserRole]
        if v not in allowed:
            raise ValueError(f"Role must be one of: {', '.join(allowed)}")
        return v


class UserResponse(APIModel):
    """User as returned to clients. Never includes the password hash."""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime


class ContactCard(APIModel):
    """Name and email shown next to listings and messages."""

    name: str
    email: str
