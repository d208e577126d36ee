"""Security utilities: password hashing and signed identity tokens."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

if TYPE_CHECKING:
    from .config import Settings

DEFAULT_TOKEN_TTL = timedelta(days=7)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Every call draws a fresh salt, so hashing the same password twice
    yields two different digests that both verify.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string
    """
    # Bcrypt requires bytes and has 72-byte limit
    password_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Previously hashed password

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        password_bytes = plain_password.encode("utf-8")[:72]
        hashed_bytes = hashed_password.encode("utf-8")
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except (ValueError, TypeError, AttributeError):
        return False


class TokenError(Exception):
    """Base class for token verification failures."""


class MalformedTokenError(TokenError):
    """Token cannot be parsed or lacks required claims."""


class InvalidSignatureError(TokenError):
    """Token signature does not match the signing key."""


class TokenExpiredError(TokenError):
    """Token expiry has passed."""


class TokenService:
    """Issues and verifies signed, time-limited identity tokens.

    Tokens are JWTs carrying ``sub`` (the subject identifier), ``iat`` and
    ``exp``. Nothing is stored server-side; expiry is the only way a token
    stops being valid.

    Usage:
        tokens = TokenService.from_settings(get_settings())
        token = tokens.issue("42")
        subject = tokens.verify(token)  # "42"
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = DEFAULT_TOKEN_TTL,
    ):
        if not secret_key:
            raise ValueError("Token signing key must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        """Build a token service from application settings."""
        return cls(
            secret_key=settings.effective_jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

    @property
    def expires_in(self) -> int:
        """Default token lifetime in seconds."""
        return int(self.expires_delta.total_seconds())

    def issue(self, subject: str | int, expires_delta: timedelta | None = None) -> str:
        """Create a signed token for ``subject``.

        Args:
            subject: The subject of the token (the user ID)
            expires_delta: Optional custom lifetime, defaults to the configured one

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(UTC)
        to_encode: dict[str, Any] = {
            "sub": str(subject),
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.expires_delta),
        }
        encoded: str = jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)
        return encoded

    def verify(self, token: str) -> str:
        """Decode and validate a token, returning its subject.

        Raises:
            MalformedTokenError: If the token cannot be parsed or lacks claims
            InvalidSignatureError: If the signature does not match
            TokenExpiredError: If the token has expired
        """
        try:
            jwt.get_unverified_claims(token)
        except (JWTError, AttributeError, TypeError) as e:
            raise MalformedTokenError("Token could not be parsed") from e

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTClaimsError as e:
            # Signature checked out; a registered claim has the wrong shape
            raise MalformedTokenError("Token claims are invalid") from e
        except JWTError as e:
            raise InvalidSignatureError("Token signature verification failed") from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject or "exp" not in payload:
            raise MalformedTokenError("Token payload is missing required claims")
        return subject
