"""
Message service for property threads and inboxes.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.message import MessageRepository
from marketplace.models.message import Message
from marketplace.models.property import Property
from marketplace.schemas.message import MessageCreate
from marketplace.services.access_policy import Principal
import logging

logger = logging.getLogger(__name__)


class MessageService:
    """
    Reads and appends property messages.

    Thread operations take a property that has already passed
    PropertyService.authorize for the matching action.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.message_repo = MessageRepository(db_session)

    async def get_thread(self, property_obj: Property) -> List[Message]:
        """Messages on the property, oldest first."""
        return await self.message_repo.get_thread(property_obj.id)

    async def post_message(
        self,
        property_obj: Property,
        message_data: MessageCreate,
        principal: Principal
    ) -> Message:
        """
        Append a message from principal to the property's thread.

        Args:
            property_obj: Authorized target property
            message_data: Validated message payload
            principal: Sender

        Returns:
            Created message
        """
        return await self.message_repo.create_message(
            property_id=property_obj.id,
            sender_id=principal.id,
            content=message_data.content
        )

    async def get_inbox(self, principal: Principal) -> List[Message]:
        """Messages on the principal's properties plus messages they sent, newest first."""
        messages = await self.message_repo.get_inbox(principal.id)
        logger.debug(f"Inbox for {principal.id}: {len(messages)} messages")
        return messages
