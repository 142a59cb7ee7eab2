"""Service layer for the URL shortener application.

This package contains service classes implementing the business logic of the application.
Services orchestrate interactions between repositories and provide domain-specific operations.
"""

from shortlink.services.location import LocationResolver, StubLocationResolver
from shortlink.services.redirect import RedirectService
from shortlink.services.shortcode import ShortcodeGenerator, generate_shortcode
from shortlink.services.shortener import CreatedShortURL, ShortenedURLService
from shortlink.services.stats import StatsService

__all__ = [
    "ShortenedURLService",
    "CreatedShortURL",
    "RedirectService",
    "StatsService",
    "ShortcodeGenerator",
    "generate_shortcode",
    "LocationResolver",
    "StubLocationResolver",
]
