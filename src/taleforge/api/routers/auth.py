"""Authentication router for registration, login and session info.

Tokens are stateless JWTs; logging out only tells the client to discard
its token.
"""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from taleforge.api.deps import AuthServiceDep, CurrentUserId

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================


class RegisterRequest(BaseModel):
    """User registration request."""

    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """User login request. The identifier may be a username or an email."""

    model_config = ConfigDict(populate_by_name=True)

    email_or_username: str = Field(default="", alias="emailOrUsername")
    password: str = ""


class UserResponse(BaseModel):
    """Minimal user info."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class UserDetailResponse(UserResponse):
    """User info including account creation time."""

    created_at: datetime


class TokenResponse(BaseModel):
    """Bearer token with the user it identifies."""

    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/register", response_model=TokenResponse)
async def register(
    body: RegisterRequest,
    auth: AuthServiceDep,
) -> TokenResponse:
    """Register a new user and log them in.

    Raises:
        InputValidationError: If a field is empty (400)
        DuplicateUserError: If username or email is taken (409)
    """
    result = await auth.register(body.username, body.email, body.password)
    return TokenResponse(
        token=result.token,
        expires_in=auth.tokens.expires_in,
        user=UserResponse.model_validate(result.user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    auth: AuthServiceDep,
) -> TokenResponse:
    """Login with username or email and password.

    Raises:
        InvalidCredentialsError: If credentials are invalid (400)
    """
    result = await auth.login(body.email_or_username, body.password)
    return TokenResponse(
        token=result.token,
        expires_in=auth.tokens.expires_in,
        user=UserResponse.model_validate(result.user),
    )


@router.get("/me", response_model=UserDetailResponse)
async def get_current_user_info(
    user_id: CurrentUserId,
    auth: AuthServiceDep,
) -> UserDetailResponse:
    """Get current authenticated user info."""
    user = await auth.get_user(user_id)
    return UserDetailResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(user_id: CurrentUserId) -> MessageResponse:
    """Logout current user.

    Tokens are not tracked server-side, so this only acknowledges the
    request; the client discards its token.
    """
    return MessageResponse(message="Successfully logged out")
