"""
Tests for service classes: registration, login, session resolution, listings and threads.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, patch

from marketplace.models.user import User, UserRole
from marketplace.models.property import Property, PropertyStatus, PropertyType
from marketplace.schemas.user import UserRegister
from marketplace.schemas.property import PropertyCreate, PropertySearchFilters
from marketplace.schemas.message import MessageCreate
from marketplace.services.access_policy import Action
from marketplace.services.auth import AuthService
from marketplace.services.property import PropertyService, parse_property_id
from marketplace.services.message import MessageService
from marketplace.repositories.property import PropertyRepository
from marketplace.utils.auth import create_access_token
from marketplace.utils.exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    PropertyNotFoundError,
    UnauthorizedError,
    UserAlreadyExistsError
)
from tests.conftest import PropertyFactory, TEST_PASSWORD, principal_for


def registration(**overrides) -> UserRegister:
    data = {"name": "Jo", "email": "jo@example.com", "password": TEST_PASSWORD, "role": "SELLER"}
    data.update(overrides)
    return UserRegister(**data)


class TestAuthService:
    """Test AuthService functionality."""

    async def test_register_stores_hashed_password(self, auth_service: AuthService):
        user = await auth_service.register(registration())

        assert user.email == "jo@example.com"
        assert user.role == UserRole.SELLER
        assert user.hashed_password != TEST_PASSWORD
        assert user.verify_password(TEST_PASSWORD)

    async def test_register_duplicate_email(self, auth_service: AuthService):
        await auth_service.register(registration())

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await auth_service.register(registration(name="Other Jo", email="JO@example.com"))
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "User already exists"

    async def test_register_race_maps_constraint_violation(self, auth_service: AuthService):
        """A concurrent signup that slips past the pre-check still reports a duplicate."""
        await auth_service.register(registration())

        with patch.object(auth_service.user_repo, "email_exists", AsyncMock(return_value=False)):
            with pytest.raises(UserAlreadyExistsError):
                await auth_service.register(registration(name="Racer"))

    async def test_login_returns_token(self, auth_service: AuthService, seller: User):
        user, token = await auth_service.login(seller.email, TEST_PASSWORD)

        assert user.id == seller.id
        principal = await auth_service.resolve_principal(token)
        assert principal.id == seller.id
        assert principal.role == UserRole.SELLER

    async def test_login_wrong_password(self, auth_service: AuthService, seller: User):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(seller.email, "not-the-password")

    async def test_resolve_principal_rejects_bad_tokens(self, auth_service: AuthService, seller: User):
        expired = create_access_token(seller.id, seller.email, seller.role, expires_delta=timedelta(minutes=-5))
        ghost = create_access_token(uuid.uuid4(), "ghost@example.com", UserRole.BUYER)

        assert await auth_service.resolve_principal(None) is None
        assert await auth_service.resolve_principal("not-a-jwt") is None
        assert await auth_service.resolve_principal(expired) is None
        assert await auth_service.resolve_principal(ghost) is None


class TestPropertyService:
    """Test PropertyService functionality."""

    def test_parse_property_id(self):
        property_id = uuid.uuid4()
        assert parse_property_id(str(property_id)) == property_id
        assert parse_property_id("abc") is None

    async def test_create_property_owned_by_principal(self, property_service: PropertyService, buyer: User):
        data = PropertyCreate(**PropertyFactory.create_payload())

        property_obj = await property_service.create_property(data, principal_for(buyer))

        assert property_obj.user_id == buyer.id
        assert property_obj.status == PropertyStatus.AVAILABLE
        assert property_obj.price == Decimal("250000")

    async def test_get_property_any_status(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        seller: User
    ):
        sold = await PropertyFactory.create_property(property_repository, seller.id, status=PropertyStatus.SOLD)

        found = await property_service.get_property(str(sold.id))
        assert found.id == sold.id

    @pytest.mark.parametrize("raw_id", ["abc", "12345", str(uuid.UUID(int=0))])
    async def test_get_property_unknown_id(self, property_service: PropertyService, raw_id: str):
        with pytest.raises(PropertyNotFoundError):
            await property_service.get_property(raw_id)

    async def test_browse_with_filters(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        seller: User
    ):
        await PropertyFactory.create_property(property_repository, seller.id, title="Cheap Plot",
                                              property_type=PropertyType.PLOT, price=Decimal("50000"))
        await PropertyFactory.create_property(property_repository, seller.id, title="Big House",
                                              price=Decimal("500000"))

        filters = PropertySearchFilters.model_validate({"type": "", "maxPrice": "100000", "city": " "})
        results = await property_service.browse_properties(filters)

        assert [p.title for p in results] == ["Cheap Plot"]

    async def test_authorize_checks_principal_before_existence(self, property_service: PropertyService):
        with pytest.raises(UnauthorizedError):
            await property_service.authorize(None, Action.POST_MESSAGE, "abc")

    async def test_authorize_thread_for_stranger(
        self,
        property_service: PropertyService,
        seller_property: Property,
        other_seller: User
    ):
        with pytest.raises(ForbiddenError):
            await property_service.authorize(principal_for(other_seller), Action.VIEW_THREAD, str(seller_property.id))


class TestMessageService:
    """Test MessageService functionality."""

    async def test_post_and_read_thread(
        self,
        property_service: PropertyService,
        message_service: MessageService,
        seller_property: Property,
        seller: User,
        buyer: User
    ):
        target = await property_service.authorize(principal_for(buyer), Action.POST_MESSAGE, str(seller_property.id))
        message = await message_service.post_message(target, MessageCreate(content="  Still available?  "), principal_for(buyer))

        assert message.sender_id == buyer.id
        assert message.content == "Still available?"

        thread = await message_service.get_thread(seller_property)
        assert [m.id for m in thread] == [message.id]

        inbox = await message_service.get_inbox(principal_for(seller))
        assert [m.id for m in inbox] == [message.id]
