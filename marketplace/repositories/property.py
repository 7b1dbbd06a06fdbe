"""
Property repository for managing listings with browse filtering.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc
from marketplace.repositories.base import BaseRepository
from marketplace.models.property import Property, PropertyStatus, PropertyType
from typing import Optional, List, Dict, Any
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Data class for property browse filters."""

    def __init__(
        self,
        property_type: Optional[PropertyType] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        bedrooms: Optional[int] = None,
        city: Optional[str] = None
    ):
        self.property_type = property_type
        self.min_price = min_price
        self.max_price = max_price
        self.bedrooms = bedrooms
        self.city = city


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new listing. Status always starts as AVAILABLE.

        Args:
            property_data: Dictionary containing property information and user_id

        Returns:
            Created property instance
        """
        create_data = {**property_data, "status": PropertyStatus.AVAILABLE}
        created_property = await self.create(create_data)
        logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
        return created_property

    async def search_available(self, filters: PropertySearchFilters) -> List[Property]:
        """
        Browse available listings, newest first.

        Args:
            filters: PropertySearchFilters instance with browse criteria

        Returns:
            Matching properties with owners loaded
        """
        try:
            conditions = self.build_filter_conditions(filters)
            query = (
                select(Property)
                .where(and_(*conditions))
                .order_by(desc(Property.created_at))
            )

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property browse returned {len(properties)} results")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    @staticmethod
    def build_filter_conditions(filters: PropertySearchFilters) -> List:
        """
        Compile browse filters into SQLAlchemy conditions.

        The AVAILABLE status condition is always present; every other
        condition is added only when its filter is set.

        Args:
            filters: PropertySearchFilters instance

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = [Property.status == PropertyStatus.AVAILABLE]

        if filters.property_type is not None:
            conditions.append(Property.property_type == filters.property_type)

        # Inclusive price bounds, independent of each other
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms == filters.bedrooms)

        # Case-insensitive substring match; % and _ in the value are literals
        if filters.city:
            conditions.append(Property.city.icontains(filters.city, autoescape=True))

        return conditions

    async def get_by_owner(self, user_id: uuid.UUID) -> List[Property]:
        """
        Get every listing owned by a user, whatever its status, newest first.

        Args:
            user_id: UUID of the owner

        Returns:
            List of properties
        """
        try:
            query = (
                select(Property)
                .where(Property.user_id == user_id)
                .order_by(desc(Property.created_at))
            )

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Retrieved {len(properties)} properties for owner {user_id}")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to get properties by owner {user_id}: {e}")
            raise

    async def update_status(self, property_id: uuid.UUID, status: PropertyStatus) -> Optional[Property]:
        """
        Change a listing's status.

        Args:
            property_id: UUID of the property
            status: New status

        Returns:
            Updated property or None if not found
        """
        property_obj = await self.get_by_id(property_id)
        if not property_obj:
            return None

        try:
            property_obj.status = status
            await self.db.commit()
            await self.db.refresh(property_obj)
            logger.info(f"Property {property_id} status set to {status.value}")
            return property_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property status {property_id}: {e}")
            raise
