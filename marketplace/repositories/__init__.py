"""
Repository layer for data access operations.
"""

from marketplace.repositories.base import BaseRepository
from marketplace.repositories.message import MessageRepository
from marketplace.repositories.property import PropertyRepository, PropertySearchFilters
from marketplace.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "MessageRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository"
]
