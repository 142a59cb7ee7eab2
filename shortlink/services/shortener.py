"""URL shortening service for the URL shortener application.

This module contains the ShortenedURLService class which implements business logic
for creating short links.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from numbers import Real
from typing import Any, Callable, Dict, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.clock import to_iso, utcnow
from shortlink.core.config import settings
from shortlink.db.session import db_transaction
from shortlink.models.url import ShortURL
from shortlink.repositories.base import DuplicateEntityError, RepositoryError
from shortlink.repositories.url_repository import URLRepository
from shortlink.services.exceptions import (
    GenerationExhaustedError,
    InvalidShortcodeError,
    InvalidURLError,
    InvalidValidityError,
    ShortcodeConflictError,
    StorageFailureError,
)
from shortlink.services.shortcode import ShortcodeGenerator


@dataclass(frozen=True)
class CreatedShortURL:
    """Result of a successful creation."""
    short_link: str
    expiry: str
    shortcode: str
    url: ShortURL


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    Uniqueness is decided by the unique index on urls.shortcode. The
    existence pre-check only avoids pointless inserts; a lost race still
    surfaces as a conflict (custom code) or a retry (generated code).
    """

    def __init__(
        self,
        url_repository: URLRepository,
        generator: Optional[ShortcodeGenerator] = None,
        base_url: Optional[str] = None,
        max_attempts: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository for URL data access
            generator: Shortcode generator, a ShortcodeGenerator by default
            base_url: Prefix of returned short links, settings.BASE_URL by default
            max_attempts: Cap on generated candidates per creation
            clock: Source of the current UTC time
            logger: Logger to report to
        """
        self.url_repository = url_repository
        self.generator = generator or ShortcodeGenerator()
        self.base_url = (base_url or settings.BASE_URL).rstrip("/")
        if max_attempts is None:
            max_attempts = settings.SHORTCODE_MAX_ATTEMPTS
        if max_attempts <= 0:
            raise ValueError("max_attempts must be a positive integer")
        self.max_attempts = max_attempts
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def build_short_link(self, shortcode: str) -> str:
        return f"{self.base_url}/{shortcode}"

    @db_transaction(db_param_name="db")
    async def create_short_url(
        self,
        db: AsyncSession,
        original_url: str,
        validity_minutes: Optional[Union[int, float]] = None,
        custom_shortcode: Optional[str] = None,
    ) -> CreatedShortURL:
        """
        Create a short URL with an optional custom shortcode.

        Args:
            db: Database session
            original_url: The redirect target, stored as provided
            validity_minutes: Minutes until expiry, settings.DEFAULT_VALIDITY_MINUTES when None
            custom_shortcode: Shortcode requested by the caller, generated when None

        Returns:
            CreatedShortURL: short link, ISO expiry and shortcode

        Raises:
            InvalidURLError: If original_url is not a non-empty string
            InvalidValidityError: If validity_minutes is not a positive number
            InvalidShortcodeError: If the custom shortcode is malformed or reserved
            ShortcodeConflictError: If the custom shortcode is already in use
            GenerationExhaustedError: If no unused shortcode was generated in time
            StorageFailureError: If the store fails
        """
        if not isinstance(original_url, str) or not original_url.strip():
            raise InvalidURLError(f"Original URL must be a non-empty string, got {original_url!r}")

        now = self._clock()
        expiry = self._compute_expiry(validity_minutes, now)

        try:
            if custom_shortcode is not None:
                self._validate_custom_shortcode(custom_shortcode)
                url = await self._create_with_custom_shortcode(
                    db, original_url, custom_shortcode, now, expiry
                )
            else:
                url = await self._create_with_generated_shortcode(
                    db, original_url, now, expiry
                )
        except RepositoryError as e:
            self.logger.error(f"Error creating short URL: {e}")
            raise StorageFailureError(f"Failed to create short URL: {e}") from e

        self.logger.info(
            f"Short URL created: shortcode={url.shortcode} "
            f"original_url={original_url} expiry={to_iso(url.expiry)}"
        )
        return CreatedShortURL(
            short_link=self.build_short_link(url.shortcode),
            expiry=to_iso(url.expiry),
            shortcode=url.shortcode,
            url=url,
        )

    def _compute_expiry(self, validity_minutes: Any, now: datetime) -> datetime:
        if validity_minutes is None:
            validity_minutes = settings.DEFAULT_VALIDITY_MINUTES

        if (
            isinstance(validity_minutes, bool)
            or not isinstance(validity_minutes, Real)
            or not math.isfinite(validity_minutes)
            or validity_minutes <= 0
        ):
            raise InvalidValidityError(
                f"Validity must be a positive number of minutes, got {validity_minutes!r}"
            )

        try:
            return ShortURL.generate_expiration(validity_minutes, now)
        except OverflowError as e:
            raise InvalidValidityError(f"Validity of {validity_minutes} minutes is out of range") from e

    def _validate_custom_shortcode(self, shortcode: str) -> None:
        if not isinstance(shortcode, str) or not shortcode:
            raise InvalidShortcodeError("Custom shortcode must be a non-empty string")

        if len(shortcode) > settings.CUSTOM_SHORTCODE_MAX_LENGTH:
            raise InvalidShortcodeError(
                f"Custom shortcode must be {settings.CUSTOM_SHORTCODE_MAX_LENGTH} characters or less"
            )

        if any(ch.isspace() or not ch.isprintable() or ch == "/" for ch in shortcode):
            raise InvalidShortcodeError(
                f"Custom shortcode {shortcode!r} contains whitespace, control or '/' characters"
            )

        reserved = {code.lower() for code in settings.RESERVED_SHORTCODES}
        if shortcode.lower() in reserved:
            raise InvalidShortcodeError(f"Custom shortcode '{shortcode}' is reserved")

    @staticmethod
    def _row(original_url: str, shortcode: str, now: datetime, expiry: datetime) -> Dict[str, Any]:
        return {
            "shortcode": shortcode,
            "original_url": original_url,
            "created_at": now,
            "expiry": expiry,
            "click_count": 0,
        }

    async def _create_with_custom_shortcode(
        self,
        db: AsyncSession,
        original_url: str,
        shortcode: str,
        now: datetime,
        expiry: datetime,
    ) -> ShortURL:
        if await self.url_repository.check_shortcode_exists(db, shortcode):
            self.logger.warning(f"Custom shortcode '{shortcode}' is already in use")
            raise ShortcodeConflictError(f"Shortcode '{shortcode}' is already in use")

        try:
            return await self.url_repository.create_short_url(
                db, self._row(original_url, shortcode, now, expiry)
            )
        except DuplicateEntityError as e:
            # Lost the race against a concurrent insert of the same code
            self.logger.warning(f"Custom shortcode '{shortcode}' was taken concurrently")
            raise ShortcodeConflictError(f"Shortcode '{shortcode}' is already in use") from e

    async def _create_with_generated_shortcode(
        self,
        db: AsyncSession,
        original_url: str,
        now: datetime,
        expiry: datetime,
    ) -> ShortURL:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generator.generate()

            if await self.url_repository.check_shortcode_exists(db, candidate):
                self.logger.debug(f"Generated shortcode {candidate} exists (attempt {attempt})")
                continue

            try:
                return await self.url_repository.create_short_url(
                    db, self._row(original_url, candidate, now, expiry)
                )
            except DuplicateEntityError:
                self.logger.warning(
                    f"Generated shortcode {candidate} was taken concurrently (attempt {attempt})"
                )

        self.logger.error(f"No unused shortcode after {self.max_attempts} attempts")
        raise GenerationExhaustedError(
            f"Failed to generate a unique shortcode after {self.max_attempts} attempts. "
            "Try again later or use a custom shortcode."
        )
