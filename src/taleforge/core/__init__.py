"""Core utilities and configuration for TaleForge.

This module contains:
- Configuration and settings management
- Security utilities (password hashing, signed identity tokens)
- Logging setup
"""
from .config import Settings, get_settings
from .logging import configure_logging
from .security import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenError,
    TokenExpiredError,
    TokenService,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "configure_logging",
    # Security - Password
    "hash_password",
    "verify_password",
    # Security - Tokens
    "TokenService",
    "TokenError",
    "MalformedTokenError",
    "InvalidSignatureError",
    "TokenExpiredError",
]
