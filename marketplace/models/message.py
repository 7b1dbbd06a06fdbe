"""
Message model for conversations attached to a property listing.
"""

from sqlalchemy import Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from marketplace.models.user import User
    from marketplace.models.property import Property


class Message(Base):
    """
    A single message in a property's thread.
    Messages are append-only: there is no edit or delete operation.
    """

    __tablename__ = "messages"

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Message body"
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Property thread this message belongs to"
    )

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who sent the message"
    )

    # Relationships
    property: Mapped["Property"] = relationship(
        "Property",
        back_populates="messages",
        lazy="selectin"
    )

    sender: Mapped["User"] = relationship(
        "User",
        back_populates="sent_messages",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, property_id={self.property_id}, sender_id={self.sender_id})>"

    def to_dict(self, include_context: bool = False) -> dict:
        """
        Convert message to dictionary.

        Args:
            include_context: Include the property summary and sender contact card
        """
        result = {
            "id": str(self.id),
            "property_id": str(self.property_id),
            "sender_id": str(self.sender_id),
            "content": self.content,
            "created_at": self.created_at,
        }

        if include_context:
            result["property"] = {"id": str(self.property.id), "title": self.property.title}
            result["sender"] = self.sender.to_contact_dict()

        return result


# Thread reads are ordered by creation time
property_created_index = Index(
    'idx_messages_property_created',
    Message.property_id,
    Message.created_at
)
