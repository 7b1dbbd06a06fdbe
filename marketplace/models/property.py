"""
Property model for marketplace listings.
Handles property data with location, pricing, and ownership.
"""

from sqlalchemy import String, Text, Integer, Numeric, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from marketplace.models.user import User
    from marketplace.models.message import Message


class PropertyType(str, enum.Enum):
    """Kind of property being listed."""
    HOUSE = "HOUSE"
    APARTMENT = "APARTMENT"
    PLOT = "PLOT"
    AGRICULTURAL_LAND = "AGRICULTURAL_LAND"


class PropertyStatus(str, enum.Enum):
    """Listing status; only AVAILABLE listings are publicly browsable."""
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    SOLD = "SOLD"
    RENTED = "RENTED"


class Property(Base):
    """
    Property listing owned by the user who created it.
    Ownership is never reassigned.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    property_type: Mapped[PropertyType] = mapped_column(
        "type",
        SQLEnum(PropertyType, name="property_type"),
        nullable=False,
        index=True,
        comment="House, apartment, plot or agricultural land"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Asking price"
    )

    # Optional layout details
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    floors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    parking_spaces: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Address
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, name="property_status"),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True,
        comment="Listing status"
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who owns this listing"
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    messages: Mapped[List["Message"]] = relationship(
        "Message",
        back_populates="property",
        passive_deletes=True,
        lazy="raise"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    def to_dict(self, include_owner: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_owner: Whether to include the owner's contact card

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "title": self.title,
            "description": self.description,
            "property_type": self.property_type.value,
            "price": float(self.price),
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "floors": self.floors,
            "parking_spaces": self.parking_spaces,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "zip_code": self.zip_code,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

        if include_owner and self.owner:
            result["user"] = self.owner.to_contact_dict()

        return result


# Public browse: status filter plus newest first
status_created_index = Index(
    'idx_properties_status_created',
    Property.status,
    Property.created_at.desc()
)

# Owner dashboard listing
owner_created_index = Index(
    'idx_properties_owner_created',
    Property.user_id,
    Property.created_at.desc()
)

# Price range filtering on available listings
status_price_index = Index(
    'idx_properties_status_price',
    Property.status,
    Property.price
)
