"""API routers for different endpoint groups.

Routers:
- auth: Registration, login and session info
- health: Health check and monitoring endpoints
- stories: Story generation and listing
"""

from .auth import router as auth_router
from .health import router as health_router
from .stories import router as stories_router

__all__ = [
    "auth_router",
    "health_router",
    "stories_router",
]
