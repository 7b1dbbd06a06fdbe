"""
Integration tests for the API endpoints.
Tests complete request/response cycles through the ASGI app.
"""

import pytest
import uuid
from httpx import AsyncClient
from fastapi import status
from sqlalchemy import select, func

from marketplace.models.message import Message
from marketplace.models.property import Property, PropertyStatus
from marketplace.models.user import User
from marketplace.repositories.property import PropertyRepository
from tests.conftest import PropertyFactory, TEST_PASSWORD, auth_headers


API = "/api"


async def register(client: AsyncClient, name: str, email: str, role: str, password: str = TEST_PASSWORD):
    return await client.post(f"{API}/auth/register", json={
        "name": name, "email": email, "password": password, "role": role
    })


async def login_headers(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> dict:
    response = await client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == status.HTTP_200_OK
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


class TestMarketplaceScenario:
    """Register, list, browse, message, read the thread."""

    async def test_listing_and_thread_flow(self, async_client: AsyncClient):
        response = await register(async_client, "Jo Lee", "jo@x.com", "SELLER")
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["email"] == "jo@x.com"
        jo = await login_headers(async_client, "jo@x.com")

        response = await async_client.post(f"{API}/properties", headers=jo, json={
            "title": "Lakeview House",
            "description": "A lovely 20+ character description",
            "price": 250000,
            "type": "HOUSE",
            "address": "1 Lake Rd",
            "city": "Lakeview",
            "state": "CA",
            "country": "US",
            "zipCode": "90001"
        })
        assert response.status_code == status.HTTP_201_CREATED
        created = response.json()
        assert created["status"] == "AVAILABLE"
        property_id = created["id"]

        response = await async_client.get(f"{API}/properties", params={"city": "lake", "minPrice": "200000"})
        assert response.status_code == status.HTTP_200_OK
        assert property_id in [p["id"] for p in response.json()]

        assert (await register(async_client, "Ann", "ann@x.com", "BUYER")).status_code == status.HTTP_201_CREATED
        ann = await login_headers(async_client, "ann@x.com")

        response = await async_client.post(
            f"{API}/properties/{property_id}/messages",
            headers=ann,
            json={"content": "Is it still available?"}
        )
        assert response.status_code == status.HTTP_201_CREATED

        response = await async_client.get(f"{API}/properties/{property_id}/messages", headers=jo)
        assert response.status_code == status.HTTP_200_OK
        assert [m["content"] for m in response.json()] == ["Is it still available?"]

        assert (await register(async_client, "Sam", "sam@x.com", "SELLER")).status_code == status.HTTP_201_CREATED
        sam = await login_headers(async_client, "sam@x.com")

        response = await async_client.get(f"{API}/properties/{property_id}/messages", headers=sam)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["message"] == "Unauthorized"


class TestAuthenticationEndpoints:
    """Registration, login and the current user."""

    async def test_register_response_hides_password(self, async_client: AsyncClient):
        response = await register(async_client, "Jo Lee", "jo@example.com", "BROKER")

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "User created successfully"
        assert data["user"]["role"] == "BROKER"
        assert "password" not in data["user"]
        assert "hashedPassword" not in data["user"]

    async def test_register_duplicate_email(self, async_client: AsyncClient):
        await register(async_client, "Jo Lee", "jo@example.com", "SELLER")
        response = await register(async_client, "Jo Two", "jo@example.com", "BUYER")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["message"] == "User already exists"

    @pytest.mark.parametrize("overrides,message", [
        ({"name": "J"}, "Name must be at least 2 characters"),
        ({"email": "not-an-email"}, "Invalid email address"),
        ({"password": "12345"}, "Password must be at least 6 characters"),
        ({"role": "ADMIN"}, "Role must be one of: BUYER, SELLER, BROKER, BUILDER"),
    ])
    async def test_register_validation_messages(self, async_client: AsyncClient, overrides: dict, message: str):
        body = {"name": "Jo Lee", "email": "jo@example.com", "password": TEST_PASSWORD, "role": "SELLER"}
        body.update(overrides)

        response = await async_client.post(f"{API}/auth/register", json=body)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert response.json()["error"]["message"] == message

    async def test_register_missing_field(self, async_client: AsyncClient):
        response = await async_client.post(f"{API}/auth/register", json={"name": "Jo Lee", "email": "jo@example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["message"] == "password is required"

    async def test_login_and_me(self, async_client: AsyncClient, seller: User):
        response = await async_client.post(f"{API}/auth/login", json={"email": seller.email, "password": TEST_PASSWORD})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == 24 * 60 * 60
        assert data["user"]["id"] == str(seller.id)

        me = await async_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
        assert me.status_code == status.HTTP_200_OK
        assert me.json()["email"] == seller.email

    async def test_login_invalid_credentials(self, async_client: AsyncClient, seller: User):
        response = await async_client.post(f"{API}/auth/login", json={"email": seller.email, "password": "wrong-one"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["message"] == "Invalid email or password"

    async def test_me_with_garbage_token(self, async_client: AsyncClient):
        response = await async_client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestPropertyEndpoints:
    """Listing creation, browse and detail."""

    async def test_browse_is_public_and_hides_unavailable(
        self,
        async_client: AsyncClient,
        property_repository: PropertyRepository,
        seller: User
    ):
        await PropertyFactory.create_property(property_repository, seller.id, title="Open House")
        await PropertyFactory.create_property(property_repository, seller.id, title="Pending House",
                                              status=PropertyStatus.PENDING)

        response = await async_client.get(f"{API}/properties")

        assert response.status_code == status.HTTP_200_OK
        assert [p["title"] for p in response.json()] == ["Open House"]
        assert response.json()[0]["user"] == {"name": seller.name, "email": seller.email}

    async def test_browse_ignores_empty_parameters(self, async_client: AsyncClient, seller_property: Property):
        response = await async_client.get(
            f"{API}/properties",
            params={"type": "", "minPrice": "", "maxPrice": "", "bedrooms": "", "city": ""}
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 1

    @pytest.mark.parametrize("params", [
        {"type": "CASTLE"},
        {"minPrice": "cheap"},
        {"bedrooms": "two"},
        {"bedrooms": "99999999999999999999"},
        {"bedrooms": "-1"},
    ])
    async def test_browse_rejects_malformed_filters(self, async_client: AsyncClient, params: dict):
        response = await async_client.get(f"{API}/properties", params=params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_browse_city_percent_is_not_a_wildcard(self, async_client: AsyncClient, seller_property: Property):
        response = await async_client.get(f"{API}/properties", params={"city": "%"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    async def test_property_detail_includes_owner_contact(
        self,
        async_client: AsyncClient,
        seller_property: Property,
        seller: User
    ):
        response = await async_client.get(f"{API}/properties/{seller_property.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["type"] == "HOUSE"
        assert data["zipCode"] == "90001"
        assert data["user"] == {"name": seller.name, "email": seller.email}

    async def test_property_detail_shows_sold_listing(
        self,
        async_client: AsyncClient,
        property_repository: PropertyRepository,
        seller: User
    ):
        sold = await PropertyFactory.create_property(property_repository, seller.id, status=PropertyStatus.SOLD)

        response = await async_client.get(f"{API}/properties/{sold.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "SOLD"

    @pytest.mark.parametrize("property_id", ["abc", str(uuid.UUID(int=1))])
    async def test_property_detail_not_found(self, async_client: AsyncClient, property_id: str):
        response = await async_client.get(f"{API}/properties/{property_id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["message"] == "Property not found"

    @pytest.mark.parametrize("overrides,message", [
        ({"title": "Hut"}, "Title must be at least 5 characters"),
        ({"description": "Too short"}, "Description must be at least 20 characters"),
        ({"price": 0}, "Price must be greater than 0"),
        ({"price": "250000"}, "Price must be a number"),
        ({"zipCode": "123"}, "Zip code must be at least 5 characters"),
    ])
    async def test_create_property_validation(
        self,
        async_client: AsyncClient,
        seller: User,
        overrides: dict,
        message: str
    ):
        response = await async_client.post(
            f"{API}/properties",
            headers=auth_headers(seller),
            json=PropertyFactory.create_payload(**overrides)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["message"] == message

    async def test_create_property_ignores_client_status(self, async_client: AsyncClient, buyer: User):
        response = await async_client.post(
            f"{API}/properties",
            headers=auth_headers(buyer),
            json=PropertyFactory.create_payload(status="SOLD")
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["status"] == "AVAILABLE"
        assert response.json()["userId"] == str(buyer.id)

    async def test_list_user_properties(
        self,
        async_client: AsyncClient,
        property_repository: PropertyRepository,
        seller: User,
        other_seller: User
    ):
        await PropertyFactory.create_property(property_repository, seller.id, title="First House")
        await PropertyFactory.create_property(property_repository, seller.id, title="Second House",
                                              status=PropertyStatus.RENTED)
        await PropertyFactory.create_property(property_repository, other_seller.id, title="Someone Else")

        response = await async_client.get(f"{API}/properties/user", headers=auth_headers(seller))

        assert response.status_code == status.HTTP_200_OK
        assert [p["title"] for p in response.json()] == ["Second House", "First House"]


class TestMessageEndpoints:
    """Threads and inbox."""

    async def test_post_to_missing_property_creates_nothing(
        self,
        async_client: AsyncClient,
        db_session,
        buyer: User
    ):
        for property_id in ["abc", str(uuid.UUID(int=2))]:
            response = await async_client.post(
                f"{API}/properties/{property_id}/messages",
                headers=auth_headers(buyer),
                json={"content": "hello"}
            )
            assert response.status_code == status.HTTP_404_NOT_FOUND

        count = await db_session.scalar(select(func.count(Message.id)))
        assert count == 0

    async def test_error_precedence(self, async_client: AsyncClient, buyer: User, seller_property: Property):
        missing = f"{API}/properties/{uuid.UUID(int=3)}/messages"
        existing = f"{API}/properties/{seller_property.id}/messages"

        # No session beats a missing property and an invalid body
        response = await async_client.post(missing, json={"content": ""})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

        # A missing property beats an invalid body
        response = await async_client.post(missing, headers=auth_headers(buyer), json={"content": ""})
        assert response.status_code == status.HTTP_404_NOT_FOUND

        response = await async_client.post(existing, headers=auth_headers(buyer), json={"content": "   "})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["message"] == "Message cannot be empty"

    async def test_owner_may_post_on_own_listing(
        self,
        async_client: AsyncClient,
        seller: User,
        seller_property: Property
    ):
        response = await async_client.post(
            f"{API}/properties/{seller_property.id}/messages",
            headers=auth_headers(seller),
            json={"content": "Open house on Sunday"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["senderId"] == str(seller.id)

    async def test_any_buyer_reads_any_thread(
        self,
        async_client: AsyncClient,
        buyer: User,
        seller_property: Property
    ):
        response = await async_client.get(
            f"{API}/properties/{seller_property.id}/messages",
            headers=auth_headers(buyer)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    async def test_inbox(
        self,
        async_client: AsyncClient,
        property_repository: PropertyRepository,
        seller: User,
        buyer: User,
        other_seller: User,
        seller_property: Property
    ):
        other_property = await PropertyFactory.create_property(property_repository, other_seller.id, title="Other House")

        await async_client.post(f"{API}/properties/{seller_property.id}/messages",
                                headers=auth_headers(buyer), json={"content": "to jo"})
        await async_client.post(f"{API}/properties/{other_property.id}/messages",
                                headers=auth_headers(seller), json={"content": "jo to sam"})
        await async_client.post(f"{API}/properties/{other_property.id}/messages",
                                headers=auth_headers(buyer), json={"content": "ann to sam"})

        response = await async_client.get(f"{API}/messages", headers=auth_headers(seller))

        assert response.status_code == status.HTTP_200_OK
        inbox = response.json()
        assert [m["content"] for m in inbox] == ["jo to sam", "to jo"]
        assert inbox[0]["property"] == {"id": str(other_property.id), "title": "Other House"}
        assert inbox[1]["sender"] == {"name": buyer.name, "email": buyer.email}


class TestSessionGating:
    """Anonymous requests to session-gated endpoints get 401 and no data."""

    @pytest.mark.parametrize("method,path", [
        ("POST", "/properties"),
        ("GET", "/properties/user"),
        ("GET", "/properties/{id}/messages"),
        ("POST", "/properties/{id}/messages"),
        ("GET", "/messages"),
        ("GET", "/auth/me"),
    ])
    async def test_requires_session(self, async_client: AsyncClient, seller_property: Property, method: str, path: str):
        url = API + path.format(id=seller_property.id)

        response = await async_client.request(method, url, json={})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert set(response.json()) == {"error"}
        assert response.headers["X-Request-ID"] == response.json()["error"]["request_id"]
