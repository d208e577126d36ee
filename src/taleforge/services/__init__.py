"""Backend services for TaleForge.

Transport-agnostic business logic: each service takes an AsyncSession and
raises errors from :mod:`taleforge.services.errors`.

Services:
- auth_service: registration, login, user lookup
- story_service: story generation, persistence and owner-scoped listing

Usage:
    from taleforge.services import AuthService, StoryService

    result = await AuthService(db, tokens).register("alice", "alice@x.com", "pw1")
    story = await StoryService(db).create_story(result.user.id, "Test", "hints", ["Fantasy"])
"""

from .auth_service import AuthResult, AuthService
from .errors import (
    DuplicateUserError,
    InputValidationError,
    InvalidCredentialsError,
    StoreUnavailableError,
    TaleForgeError,
    UnauthenticatedError,
)
from .story_service import HINTS_PREVIEW_LENGTH, StoryService, render_story_content

__all__ = [
    "AuthService",
    "AuthResult",
    "StoryService",
    "render_story_content",
    "HINTS_PREVIEW_LENGTH",
    # Errors
    "TaleForgeError",
    "InputValidationError",
    "DuplicateUserError",
    "InvalidCredentialsError",
    "UnauthenticatedError",
    "StoreUnavailableError",
]
