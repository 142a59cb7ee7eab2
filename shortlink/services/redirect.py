"""Redirect resolution and click recording.

This module contains the RedirectService class, the only writer of
ShortURL.click_count and of click events.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.clock import utcnow
from shortlink.core.config import settings
from shortlink.db.session import db_transaction
from shortlink.models.url import ShortURL
from shortlink.repositories.base import RepositoryError
from shortlink.repositories.click_repository import ClickRepository
from shortlink.repositories.url_repository import URLRepository
from shortlink.services.exceptions import ShortURLNotFoundError, StorageFailureError
from shortlink.services.location import LocationResolver, StubLocationResolver


class RedirectService:
    """
    Service resolving shortcodes and recording clicks.

    Expiry is not enforced here: resolve returns expired rows too and the
    caller decides with is_expired.
    """

    def __init__(
        self,
        url_repository: URLRepository,
        click_repository: ClickRepository,
        locator: Optional[LocationResolver] = None,
        clock: Callable[[], datetime] = utcnow,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the redirect service.

        Args:
            url_repository: Repository for URL data access
            click_repository: Repository for click event data access
            locator: Location resolver, the stub resolver by default
            clock: Source of the current UTC time
            logger: Logger to report to
        """
        self.url_repository = url_repository
        self.click_repository = click_repository
        self.locator = locator or StubLocationResolver()
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, db: AsyncSession, shortcode: str) -> ShortURL:
        """
        Look up the ShortURL for a shortcode.

        Raises:
            ShortURLNotFoundError: If no URL with this shortcode exists
            StorageFailureError: If the store fails
        """
        try:
            url = await self.url_repository.get_by_shortcode(db, shortcode)
        except RepositoryError as e:
            self.logger.error(f"Error resolving shortcode '{shortcode}': {e}")
            raise StorageFailureError(f"Failed to resolve shortcode '{shortcode}': {e}") from e

        if url is None:
            raise ShortURLNotFoundError(f"Short URL '{shortcode}' not found")

        return url

    def is_expired(self, url: ShortURL, now: Optional[datetime] = None) -> bool:
        """True once now is past the URL's expiry."""
        return url.is_expired(now or self._clock())

    @db_transaction(db_param_name="db")
    async def record_click(
        self,
        db: AsyncSession,
        shortcode: str,
        referrer: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """
        Record one click: increment the counter and append a click event.

        Both writes run in one transaction. The counter goes first: its
        UPDATE doubles as the existence check, so an unknown shortcode
        writes nothing.

        Args:
            db: Database session
            shortcode: The clicked shortcode
            referrer: Referring page, settings.DEFAULT_REFERRER when empty
            ip_address: Caller address as seen by the boundary layer
            user_agent: Caller user agent

        Raises:
            ShortURLNotFoundError: If no URL with this shortcode exists
            StorageFailureError: If the store fails; neither write persists
        """
        referrer = referrer or settings.DEFAULT_REFERRER
        location = self.locator.locate(ip_address)

        try:
            updated = await self.url_repository.increment_click_count(db, shortcode)
            if not updated:
                raise ShortURLNotFoundError(f"Short URL '{shortcode}' not found")

            await self.click_repository.create_click_event(db, {
                "shortcode": shortcode,
                "clicked_at": self._clock(),
                "referrer": referrer,
                "ip_address": ip_address,
                "user_agent": user_agent,
                "location": location,
            })
        except RepositoryError as e:
            self.logger.error(f"Error recording click for '{shortcode}': {e}")
            raise StorageFailureError(f"Failed to record click for '{shortcode}': {e}") from e

        self.logger.info(
            f"Click recorded: shortcode={shortcode} referrer={referrer} location={location}"
        )
