"""
Property service for listing management.
Handles creation, public browse, owner dashboards, and property-scoped authorization.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.property import PropertyRepository, PropertySearchFilters
from marketplace.repositories.message import MessageRepository
from marketplace.models.property import Property
from marketplace.schemas.property import PropertyCreate, PropertySearchFilters as PropertySearchSchema
from marketplace.services.access_policy import AccessPolicy, Action, Principal, PropertyFacts
import uuid
import logging

logger = logging.getLogger(__name__)


def parse_property_id(raw_id: str) -> Optional[uuid.UUID]:
    """Parse a path identifier; anything that is not a UUID names no property."""
    try:
        return uuid.UUID(str(raw_id))
    except (ValueError, TypeError, AttributeError):
        return None


class PropertyService:
    """
    Property service for managing listings.
    Every property-scoped check goes through the access policy.
    """

    def __init__(self, db_session: AsyncSession, policy: AccessPolicy):
        self.db = db_session
        self.policy = policy
        self.property_repo = PropertyRepository(db_session)
        self.message_repo = MessageRepository(db_session)

    async def find_property(self, property_id: str) -> Optional[Property]:
        """Load a property by raw path id, returning None for unknown or malformed ids."""
        parsed_id = parse_property_id(property_id)
        if parsed_id is None:
            return None
        return await self.property_repo.get_by_id(parsed_id)

    async def authorize(
        self,
        principal: Optional[Principal],
        action: Action,
        property_id: str
    ) -> Property:
        """
        Resolve a property and check that principal may perform action on it.

        Args:
            principal: Request principal, or None for anonymous requests
            action: Property-scoped action
            property_id: Raw property id from the path

        Returns:
            The target property

        Raises:
            UnauthorizedError: No principal on a session-gated action, or the action is forbidden
            PropertyNotFoundError: The property does not exist
        """
        property_obj = await self.find_property(property_id)

        facts = None
        if property_obj is not None:
            has_posted = False
            if principal is not None and self.policy.needs_participation(action):
                has_posted = await self.message_repo.has_sent_message(property_obj.id, principal.id)
            facts = PropertyFacts(owner_id=property_obj.user_id, principal_has_posted=has_posted)

        self.policy.enforce(principal, action, facts)
        return property_obj

    async def create_property(self, property_data: PropertyCreate, principal: Principal) -> Property:
        """
        Create a listing owned by the principal. Any role may list.

        Args:
            property_data: Validated creation payload
            principal: Authenticated creator

        Returns:
            Created property instance
        """
        create_data = property_data.model_dump()
        create_data["user_id"] = principal.id

        property_obj = await self.property_repo.create_property(create_data)

        logger.info(f"Property created by user {principal.id}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def get_property(self, property_id: str, principal: Optional[Principal] = None) -> Property:
        """
        Public property detail.

        Raises:
            PropertyNotFoundError: If the property does not exist
        """
        return await self.authorize(principal, Action.VIEW_PROPERTY, property_id)

    async def browse_properties(self, filters: PropertySearchSchema) -> List[Property]:
        """
        Public browse of AVAILABLE listings, newest first.

        Args:
            filters: Validated browse filters

        Returns:
            Matching properties
        """
        self.policy.enforce(None, Action.BROWSE_PROPERTIES)

        repo_filters = PropertySearchFilters(
            property_type=filters.property_type,
            min_price=filters.min_price,
            max_price=filters.max_price,
            bedrooms=filters.bedrooms,
            city=filters.city
        )
        return await self.property_repo.search_available(repo_filters)

    async def get_user_properties(self, principal: Principal) -> List[Property]:
        """Every listing owned by the principal, newest first."""
        return await self.property_repo.get_by_owner(principal.id)
