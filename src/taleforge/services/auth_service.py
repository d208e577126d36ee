"""Registration and login flows.

Business logic for account creation and credential checks. Tokens are
minted through an injected :class:`TokenService`; the service never sees
HTTP requests.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taleforge.core.security import TokenService, hash_password, verify_password
from taleforge.models.user import User

from .errors import (
    DuplicateUserError,
    InputValidationError,
    InvalidCredentialsError,
    StoreUnavailableError,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Token plus the user it was issued for."""

    token: str
    user: User


class AuthService:
    """Service for user registration, login and lookup."""

    def __init__(self, db: AsyncSession, tokens: TokenService):
        self.db = db
        self.tokens = tokens

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """Create a user and authenticate them in one step.

        Username is checked before email; the first conflict is reported.

        Raises:
            InputValidationError: If any field is empty
            DuplicateUserError: If the username or email is taken
            StoreUnavailableError: If the database fails
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username or not email or not password:
            raise InputValidationError(
                "Username, email and password are required",
                fields=[
                    name
                    for name, value in (
                        ("username", username),
                        ("email", email),
                        ("password", password),
                    )
                    if not value
                ],
            )

        try:
            await self._ensure_available(username, email)

            user = User(
                username=username,
                email=email,
                hashed_password=hash_password(password),
            )
            self.db.add(user)
            try:
                await self.db.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration
                await self.db.rollback()
                await self._ensure_available(username, email)
                raise DuplicateUserError("username")
            await self.db.refresh(user)
        except SQLAlchemyError as e:
            logger.exception("Registration failed for username=%s", username)
            raise StoreUnavailableError() from e

        logger.info("Registered user id=%s", user.id)
        return AuthResult(token=self.tokens.issue(user.id), user=user)

    async def login(self, email_or_username: str, password: str) -> AuthResult:
        """Authenticate by username or email.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
            StoreUnavailableError: If the database fails
        """
        identifier = (email_or_username or "").strip()
        if not identifier or not password:
            raise InvalidCredentialsError()

        try:
            user = await self._find_by_username(identifier)
            if user is None:
                user = await self._find_by_email(identifier)
        except SQLAlchemyError as e:
            logger.exception("User lookup failed during login")
            raise StoreUnavailableError() from e

        if user is None or not verify_password(password, user.hashed_password):
            logger.debug("Rejected login attempt")
            raise InvalidCredentialsError()

        logger.info("User id=%s logged in", user.id)
        return AuthResult(token=self.tokens.issue(user.id), user=user)

    async def get_user(self, user_id: int) -> User:
        """Fetch the user a verified token refers to.

        Raises:
            UnauthenticatedError: If the user no longer exists
        """
        try:
            result = await self.db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("User lookup failed for id=%s", user_id)
            raise StoreUnavailableError() from e

        if user is None:
            raise UnauthenticatedError()
        return user

    async def _ensure_available(self, username: str, email: str) -> None:
        if await self._find_by_username(username) is not None:
            raise DuplicateUserError("username")
        if await self._find_by_email(email) is not None:
            raise DuplicateUserError("email")

    async def _find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
