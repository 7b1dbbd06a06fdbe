"""
API route handlers for the Property Marketplace API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .messages import router as messages_router

__all__ = ["auth_router", "properties_router", "messages_router"]
