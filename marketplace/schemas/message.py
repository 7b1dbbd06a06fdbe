"""
Pydantic schemas for property messages.
"""

from pydantic import Field, field_validator
from datetime import datetime
from marketplace.schemas.base import APIModel
from marketplace.schemas.property import PropertySummary
from marketplace.schemas.user import ContactCard


class MessageCreate(APIModel):
    """Schema for posting a message on a property thread."""

    content: str = Field(..., max_length=5000, description="Message body", examples=["Is this still available?"])

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class MessageResponse(APIModel):
    """A message in a property thread."""

    id: str
    property_id: str
    sender_id: str
    content: str
    created_at: datetime


class InboxMessageResponse(MessageResponse):
    """A message in the user's inbox, with the listing and sender it came from."""

    property: PropertySummary
    sender: ContactCard
