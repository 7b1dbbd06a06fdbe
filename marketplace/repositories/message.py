"""
Message repository for property threads and user inboxes.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, desc, asc, func
from marketplace.repositories.base import BaseRepository
from marketplace.models.message import Message
from marketplace.models.property import Property
from typing import List
import uuid
import logging

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    """Repository for append-only property messages."""

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def create_message(self, property_id: uuid.UUID, sender_id: uuid.UUID, content: str) -> Message:
        """
        Append a message to a property's thread.

        Args:
            property_id: UUID of the property
            sender_id: UUID of the sending user
            content: Message body

        Returns:
            Created message
        """
        message = await self.create({
            "property_id": property_id,
            "sender_id": sender_id,
            "content": content,
        })
        logger.info(f"Message {message.id} posted on property {property_id} by {sender_id}")
        return message

    async def get_thread(self, property_id: uuid.UUID) -> List[Message]:
        """
        Get a property's thread, oldest first.

        Args:
            property_id: UUID of the property

        Returns:
            Messages in creation order
        """
        try:
            query = (
                select(Message)
                .where(Message.property_id == property_id)
                .order_by(asc(Message.created_at))
            )
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to get thread for property {property_id}: {e}")
            raise

    async def get_inbox(self, user_id: uuid.UUID) -> List[Message]:
        """
        Get messages on properties the user owns, plus messages the user sent, newest first.

        Args:
            user_id: UUID of the user

        Returns:
            Messages with property and sender loaded
        """
        try:
            owned_properties = select(Property.id).where(Property.user_id == user_id)

            query = (
                select(Message)
                .where(
                    or_(
                        Message.property_id.in_(owned_properties),
                        Message.sender_id == user_id
                    )
                )
                .order_by(desc(Message.created_at))
            )
            result = await self.db.execute(query)
            messages = result.scalars().all()

            logger.debug(f"Retrieved {len(messages)} inbox messages for user {user_id}")
            return list(messages)
        except Exception as e:
            logger.error(f"Failed to get inbox for user {user_id}: {e}")
            raise

    async def has_sent_message(self, property_id: uuid.UUID, sender_id: uuid.UUID) -> bool:
        """Whether the user has posted at least one message on the property's thread."""
        query = (
            select(func.count(Message.id))
            .where(Message.property_id == property_id)
            .where(Message.sender_id == sender_id)
        )
        result = await self.db.execute(query)
        return result.scalar() > 0
