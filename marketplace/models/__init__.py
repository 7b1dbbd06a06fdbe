"""
Database models for the Property Marketplace API.
Includes User, Property, and Message models with relationships and validation.
"""

from marketplace.models.user import User, UserRole
from marketplace.models.property import Property, PropertyType, PropertyStatus
from marketplace.models.message import Message

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyType",
    "PropertyStatus",
    "Message",
]
