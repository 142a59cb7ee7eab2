"""Stats service for the URL shortener application.

This module contains the StatsService class which reports a short URL
together with its click history.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.config import settings
from shortlink.repositories.base import RepositoryError
from shortlink.repositories.url_repository import URLRepository
from shortlink.services.exceptions import ShortURLNotFoundError, StorageFailureError


class StatsService:
    """Read-only service for URL click statistics."""

    def __init__(self, url_repository: URLRepository, logger: Optional[logging.Logger] = None):
        """
        Initialize the stats service.

        Args:
            url_repository: Repository for URL data access
            logger: Logger to report to
        """
        self.url_repository = url_repository
        self.logger = logger or logging.getLogger(__name__)

    async def get_stats(self, db: AsyncSession, shortcode: str) -> Dict[str, Any]:
        """
        Get a URL's metadata and click history.

        click_count is the stored aggregate, not a recount of the clicks list.

        Args:
            db: Database session
            shortcode: The shortcode of the URL

        Returns:
            Dictionary with shortcode, original_url, created_at, expiry,
            click_count and clicks (most recent first)

        Raises:
            ShortURLNotFoundError: If no URL with this shortcode exists
            StorageFailureError: If the store fails
        """
        try:
            found = await self.url_repository.get_url_with_clicks(db, shortcode)
        except RepositoryError as e:
            self.logger.error(f"Error retrieving stats for '{shortcode}': {e}")
            raise StorageFailureError(f"Failed to retrieve statistics: {e}") from e

        if found is None:
            raise ShortURLNotFoundError(f"Short URL '{shortcode}' not found")

        url, clicks = found
        self.logger.info(
            f"URL statistics retrieved: shortcode={shortcode} "
            f"click_count={url.click_count} total_clicks={len(clicks)}"
        )

        return {
            "shortcode": url.shortcode,
            "original_url": url.original_url,
            "created_at": url.created_at,
            "expiry": url.expiry,
            "click_count": url.click_count,
            "clicks": [
                {
                    "timestamp": click.clicked_at,
                    "referrer": click.referrer or settings.DEFAULT_REFERRER,
                    "location": click.location,
                }
                for click in clicks
            ],
        }
