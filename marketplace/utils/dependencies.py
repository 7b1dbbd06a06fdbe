"""
FastAPI dependency injection utilities for sessions, services, and access control.

Access dependencies run before the request body is validated, so a request
fails on a missing session first, an unknown property second, and invalid
input last.
"""

from functools import lru_cache
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import get_settings
from marketplace.database import get_db
from marketplace.models.property import Property
from marketplace.models.user import User
from marketplace.services.access_policy import AccessPolicy, Action, Principal
from marketplace.services.auth import AuthService
from marketplace.services.message import MessageService
from marketplace.services.property import PropertyService
from marketplace.utils.exceptions import UnauthorizedError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


@lru_cache()
def get_access_policy() -> AccessPolicy:
    """Process-wide access policy built from settings."""
    return AccessPolicy.from_settings(get_settings())


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    policy: AccessPolicy = Depends(get_access_policy)
) -> PropertyService:
    return PropertyService(db, policy)


async def get_message_service(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(db)


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Principal]:
    """
    Resolve the request principal from a bearer token.

    Missing, malformed, and expired tokens all resolve to None; whether that
    is acceptable is the access policy's decision.
    """
    if not credentials:
        return None
    return await auth_service.resolve_principal(credentials.credentials)


async def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal)
) -> Principal:
    """
    Require a principal.

    Raises:
        UnauthorizedError: If the request has no valid session
    """
    if principal is None:
        raise UnauthorizedError()
    return principal


async def get_current_user(
    principal: Principal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """Full user record for the authenticated principal."""
    return await auth_service.get_current_user(principal)


def require_access(action: Action):
    """
    Create a dependency that enforces a principal-only action.

    Args:
        action: Action from the policy table

    Returns:
        Dependency function resolving to the authorized principal
    """
    async def access_dependency(
        principal: Optional[Principal] = Depends(get_optional_principal),
        policy: AccessPolicy = Depends(get_access_policy)
    ) -> Principal:
        policy.enforce(principal, action)
        return principal

    return access_dependency


def require_property_access(action: Action):
    """
    Create a dependency that enforces a property-scoped action.

    The route must declare a `property_id` path parameter.

    Args:
        action: Action from the policy table

    Returns:
        Dependency function resolving to the target property
    """
    async def property_access_dependency(
        property_id: str,
        principal: Optional[Principal] = Depends(get_optional_principal),
        property_service: PropertyService = Depends(get_property_service)
    ) -> Property:
        return await property_service.authorize(principal, action, property_id)

    return property_access_dependency
