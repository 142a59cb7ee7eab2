"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shortlink.api.routes import health, redirect, shortener
from shortlink.core.config import settings

# Create root router
api_router = APIRouter()

api_router.include_router(
    shortener.router,
    prefix=settings.API_PREFIX
)

api_router.include_router(health.router)

# Redirect routes go last at the root path so /{shortcode}
# doesn't shadow the routes above
api_router.include_router(redirect.router)

__all__ = ["api_router"]
