"""Service-layer error taxonomy.

Each error carries the HTTP status it maps to so any transport can render
it; the services themselves never touch HTTP.
"""

from typing import Any


class TaleForgeError(Exception):
    """Base exception for service errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InputValidationError(TaleForgeError):
    """Client input failed preconditions."""

    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message, details={"fields": self.fields} if self.fields else None)


class DuplicateUserError(TaleForgeError):
    """Registration conflicts with an existing username or email."""

    status_code = 409

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"A user with this {field} already exists", details={"field": field})


class InvalidCredentialsError(TaleForgeError):
    """Login failed. Deliberately does not say which part was wrong."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class UnauthenticatedError(TaleForgeError):
    """Missing, invalid or expired bearer token."""

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class StoreUnavailableError(TaleForgeError):
    """The backing store failed. Internal detail is only logged."""

    status_code = 503

    def __init__(self) -> None:
        super().__init__("Service temporarily unavailable")
