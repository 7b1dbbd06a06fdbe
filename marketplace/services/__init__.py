"""
Service layer for business logic implementation.
Contains services for authentication, listings, messaging, access policy, and error handling.
"""

from .access_policy import AccessPolicy, Action, Decision, Principal, PropertyFacts
from .auth import AuthService
from .property import PropertyService
from .message import MessageService
from .error_handler import ErrorHandlerService

__all__ = [
    "AccessPolicy",
    "Action",
    "Decision",
    "Principal",
    "PropertyFacts",
    "AuthService",
    "PropertyService",
    "MessageService",
    "ErrorHandlerService"
]
