"""
Authentication API endpoints for registration, login, and the current user.
"""

from fastapi import APIRouter, Depends, status
from marketplace.models.user import User
from marketplace.services.auth import AuthService
from marketplace.schemas.auth import LoginRequest, LoginResponse, RegisterResponse
from marketplace.schemas.user import UserRegister, UserResponse
from marketplace.schemas.error import get_error_responses
from marketplace.utils.dependencies import get_auth_service, get_current_user
from marketplace.config import settings


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account; the email must not already be registered",
    responses=get_error_responses(400, 500)
)
async def register(
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service)
) -> RegisterResponse:
    """
    Register a user.

    Raises:
        ValidationError: If any field fails validation
        UserAlreadyExistsError: If the email is taken
    """
    user = await auth_service.register(user_data)
    return RegisterResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user.to_dict())
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns a JWT access token",
    responses=get_error_responses(400, 401, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    user, access_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user.to_dict())
    )


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    responses=get_error_responses(401, 500)
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> UserResponse:
    return UserResponse.model_validate(current_user.to_dict())
