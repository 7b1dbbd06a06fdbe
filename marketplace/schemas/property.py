"""
Pydantic schemas for property requests and responses.
Handles property creation, browse filters, and validation.
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from marketplace.models.property import PropertyStatus, PropertyType
from marketplace.schemas.base import APIModel
from marketplace.schemas.user import ContactCard


def _require_min_length(value: str, minimum: int, label: str) -> str:
    value = value.strip()
    if len(value) < minimum:
        raise ValueError(f"{label} must be at least {minimum} characters")
    return value


class PropertyCreate(APIModel):
    """Schema for creating a new property listing."""

    title: str = Field(..., max_length=255, description="Listing title", examples=["Lakeview House"])
    description: str = Field(..., max_length=5000, description="Detailed description")
    price: Decimal = Field(..., description="Asking price", examples=[250000])
    property_type: PropertyType = Field(..., alias="type", description="Property type", examples=["HOUSE"])

    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[int] = Field(None, ge=0, le=100)
    floors: Optional[int] = Field(None, ge=0, le=200)
    parking_spaces: Optional[int] = Field(None, ge=0, le=1000)

    address: str = Field(..., max_length=255, examples=["1 Lake Rd"])
    city: str = Field(..., max_length=120, examples=["Lakeview"])
    state: str = Field(..., max_length=120, examples=["CA"])
    country: str = Field(..., max_length=120, examples=["US"])
    zip_code: str = Field(..., max_length=20, examples=["90001"])

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _require_min_length(v, 5, "Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _require_min_length(v, 20, "Description")

    @field_validator("price", mode="before")
    @classmethod
    def require_numeric_price(cls, v):
        # Decimal coerces strings in lax mode; listings take JSON numbers only
        if isinstance(v, (str, bool)):
            raise ValueError("Price must be a number")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        """Validate price value."""
        if v <= 0:
            raise ValueError("Price must be greater than 0")
        if v > Decimal("9999999999.99"):
            raise ValueError("Price exceeds maximum allowed value")
        return v

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _require_min_length(v, 5, "Address")

    @field_validator("city")
    @classmethod
    def validate_city(cls, v):
        return _require_min_length(v, 2, "City")

    @field_validator("state")
    @classmethod
    def validate_state(cls, v):
        return _require_min_length(v, 2, "State")

    @field_validator("country")
    @classmethod
    def validate_country(cls, v):
        return _require_min_length(v, 2, "Country")

    @field_validator("zip_code")
    @classmethod
    def validate_zip_code(cls, v):
        return _require_min_length(v, 5, "Zip code")


class PropertyResponse(APIModel):
    """Property as stored."""

    id: str
    user_id: str
    title: str
    description: str
    property_type: PropertyType = Field(..., alias="type")
    price: float
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    floors: Optional[int] = None
    parking_spaces: Optional[int] = None
    address: str
    city: str
    state: str
    country: str
    zip_code: str
    status: PropertyStatus
    created_at: datetime
    updated_at: datetime


class PropertyWithOwnerResponse(PropertyResponse):
    """Property plus its owner's contact card."""

    user: Optional[ContactCard] = None


class PropertySummary(APIModel):
    """Minimal property reference embedded in inbox messages."""

    id: str
    title: str


class PropertySearchFilters(APIModel):
    """Optional browse filters; absent or empty values impose no constraint."""

    property_type: Optional[PropertyType] = Field(None, alias="type")
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    city: Optional[str] = None

    @field_validator("property_type", "min_price", "max_price", "bedrooms", "city", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("city")
    @classmethod
    def strip_city(cls, v):
        return v.strip() if v is not None else v
