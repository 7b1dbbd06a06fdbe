"""
Test configuration and fixtures for the property marketplace API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read at import time; point them at SQLite before the app loads.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
import uuid
from typing import AsyncGenerator, Dict, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from marketplace.main import app
from marketplace.database import Base, get_db
from marketplace.models.user import User, UserRole
from marketplace.models.property import Property, PropertyStatus, PropertyType
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.message import MessageRepository
from marketplace.services.access_policy import AccessPolicy, Principal
from marketplace.services.auth import AuthService
from marketplace.services.property import PropertyService
from marketplace.services.message import MessageService
from marketplace.utils.auth import create_access_token
import marketplace.models  # noqa: F401


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret1"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async test client; every request gets its own session on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def message_repository(db_session: AsyncSession) -> MessageRepository:
    return MessageRepository(db_session)


# Service fixtures
@pytest.fixture
def access_policy() -> AccessPolicy:
    return AccessPolicy()


@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession, access_policy: AccessPolicy) -> PropertyService:
    return PropertyService(db_session, access_policy)


@pytest.fixture
def message_service(db_session: AsyncSession) -> MessageService:
    return MessageService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        password: str = TEST_PASSWORD,
        name: str = "Test User",
        role: UserRole = UserRole.SELLER
    ) -> dict:
        return {
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "name": name,
            "role": role
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: str = None,
        password: str = TEST_PASSWORD,
        name: str = "Test User",
        role: UserRole = UserRole.SELLER
    ) -> User:
        """Create a test user in the database."""
        user_data = UserFactory.create_user_data(email=email, password=password, name=name, role=role)
        return await user_repo.create_user(user_data)


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        user_id: uuid.UUID = None,
        title: str = "Lakeview House",
        description: str = "A quiet house by the lake with a garden.",
        property_type: PropertyType = PropertyType.HOUSE,
        price: Decimal = Decimal("250000"),
        bedrooms: Optional[int] = 3,
        city: str = "Lakeview"
    ) -> dict:
        return {
            "user_id": user_id,
            "title": title,
            "description": description,
            "property_type": property_type,
            "price": price,
            "bedrooms": bedrooms,
            "address": "1 Lake Rd",
            "city": city,
            "state": "CA",
            "country": "US",
            "zip_code": "90001"
        }

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        user_id: uuid.UUID,
        status: PropertyStatus = PropertyStatus.AVAILABLE,
        **overrides
    ) -> Property:
        """Create a test property in the database, optionally moving it to another status."""
        property_data = PropertyFactory.create_property_data(user_id=user_id, **overrides)
        property_obj = await property_repo.create_property(property_data)
        if status != PropertyStatus.AVAILABLE:
            property_obj = await property_repo.update_status(property_obj.id, status)
        return property_obj

    @staticmethod
    def create_payload(**overrides) -> dict:
        """JSON body for POST /api/properties."""
        payload = {
            "title": "Lakeview House",
            "description": "A quiet house by the lake with a garden.",
            "type": "HOUSE",
            "price": 250000,
            "bedrooms": 3,
            "address": "1 Lake Rd",
            "city": "Lakeview",
            "state": "CA",
            "country": "US",
            "zipCode": "90001"
        }
        payload.update(overrides)
        return payload


def principal_for(user: User) -> Principal:
    return Principal(id=user.id, role=user.role)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="jo@example.com", name="Jo", role=UserRole.SELLER)


@pytest.fixture
async def buyer(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="ann@example.com", name="Ann", role=UserRole.BUYER)


@pytest.fixture
async def other_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="sam@example.com", name="Sam", role=UserRole.SELLER)


@pytest.fixture
async def seller_property(property_repository: PropertyRepository, seller: User) -> Property:
    return await PropertyFactory.create_property(property_repository, seller.id)
