"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access repositories and service instances.
"""

from fastapi import Depends

from shortlink.core.config import settings
from shortlink.repositories.click_repository import ClickRepository
from shortlink.repositories.url_repository import URLRepository
from shortlink.services.location import LocationResolver, StubLocationResolver
from shortlink.services.redirect import RedirectService
from shortlink.services.shortener import ShortenedURLService
from shortlink.services.stats import StatsService

_location_resolver = StubLocationResolver()


async def get_url_repository() -> URLRepository:
    """Get an instance of the URL repository."""
    return URLRepository()


async def get_click_repository() -> ClickRepository:
    """Get an instance of the click repository."""
    return ClickRepository()


def get_location_resolver() -> LocationResolver:
    """Location resolver used for click events. Override to plug in real geolocation."""
    return _location_resolver


def get_base_url() -> str:
    """Get the base URL for short links."""
    return settings.BASE_URL


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
    base_url: str = Depends(get_base_url),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo, base_url=base_url)


async def get_redirect_service(
    url_repo: URLRepository = Depends(get_url_repository),
    click_repo: ClickRepository = Depends(get_click_repository),
    locator: LocationResolver = Depends(get_location_resolver),
) -> RedirectService:
    """Get an instance of the redirect service."""
    return RedirectService(url_repository=url_repo, click_repository=click_repo, locator=locator)


async def get_stats_service(
    url_repo: URLRepository = Depends(get_url_repository),
) -> StatsService:
    """Get an instance of the statistics service."""
    return StatsService(url_repository=url_repo)
