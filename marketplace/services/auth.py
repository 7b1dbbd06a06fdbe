"""
Authentication service for registration, login, and session resolution.
Handles password hashing, JWT issuance, and turning a token into a request principal.
"""

from typing import Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError
from marketplace.repositories.user import UserRepository
from marketplace.models.user import User
from marketplace.schemas.user import UserRegister
from marketplace.services.access_policy import Principal
from marketplace.utils.auth import create_access_token, verify_token
from marketplace.utils.exceptions import (
    InvalidCredentialsError,
    UnauthorizedError,
    UserAlreadyExistsError,
    ValidationError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for user registration and token-based sessions.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, user_data: UserRegister) -> User:
        """
        Register a new user.

        The email lookup is a fast path only; the unique constraint on
        users.email is what guarantees uniqueness under concurrent signups.

        Args:
            user_data: Validated registration payload

        Returns:
            Created user instance

        Raises:
            UserAlreadyExistsError: If the email is already registered
            ValidationError: If the payload fails model-level validation
        """
        if await self.user_repo.email_exists(user_data.email):
            logger.info(f"Registration rejected, email already registered: {user_data.email}")
            raise UserAlreadyExistsError()

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except IntegrityError:
            logger.warning(f"Registration lost a race on email: {user_data.email}")
            raise UserAlreadyExistsError()
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"User registered: {user.email} (ID: {user.id}, role: {user.role.value})")
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If credentials are invalid
        """
        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and issue an access token.

        Returns:
            Tuple of (user, access_token)
        """
        user = await self.authenticate_user(email, password)
        access_token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return user, access_token

    async def get_user_for_token(self, token: str) -> Optional[User]:
        """
        Load the user a token belongs to.

        Returns:
            User, or None if the token is invalid, expired, or names a user that no longer exists
        """
        try:
            token_payload = verify_token(token, token_type="access")
            user_id = uuid.UUID(token_payload.user_id)
        except (JWTError, ValueError) as e:
            logger.debug(f"Rejected session token: {e}")
            return None

        return await self.user_repo.get_by_id(user_id)

    async def resolve_principal(self, token: Optional[str]) -> Optional[Principal]:
        """
        Turn a bearer token into a request principal.

        Args:
            token: Raw bearer token, or None when the request carried no credentials

        Returns:
            Principal for a valid session, otherwise None
        """
        if not token:
            return None

        user = await self.get_user_for_token(token)
        if not user:
            return None

        return Principal(id=user.id, role=user.role)

    async def get_current_user(self, principal: Principal) -> User:
        """
        Load the full user record behind a principal.

        Raises:
            UnauthorizedError: If the user no longer exists
        """
        user = await self.user_repo.get_by_id(principal.id)
        if not user:
            raise UnauthorizedError()
        return user
