"""FastAPI dependencies for dependency injection.

Provides the bearer-token auth gate, database sessions and service
factories shared across endpoints.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taleforge.core.security import TokenError, TokenService
from taleforge.models.database import get_session
from taleforge.services import AuthService, StoryService, UnauthenticatedError

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_session)]


def get_token_service(request: Request) -> TokenService:
    """Token service configured at application start."""
    return request.app.state.token_service


Tokens = Annotated[TokenService, Depends(get_token_service)]


async def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Tokens,
) -> int:
    """Authenticate the request from its bearer token.

    The subject is trusted as issued; no database lookup is made. Every
    failure produces the same UnauthenticatedError.

    Returns:
        Authenticated user ID, also stored on ``request.state.user_id``

    Raises:
        UnauthenticatedError: If the token is missing, malformed, forged or expired
    """
    if credentials is None:
        raise UnauthenticatedError("Missing authentication token")

    try:
        subject = tokens.verify(credentials.credentials)
        user_id = int(subject)
    except (TokenError, ValueError) as e:
        logger.debug("Token rejected: %s", e)
        raise UnauthenticatedError() from e

    request.state.user_id = user_id
    return user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]


def get_auth_service(db: DBSession, tokens: Tokens) -> AuthService:
    return AuthService(db, tokens)


def get_story_service(db: DBSession) -> StoryService:
    return StoryService(db)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
StoryServiceDep = Annotated[StoryService, Depends(get_story_service)]
