"""URL Repository for the URL shortener application.

This module provides the URLRepository class for database operations related to ShortURL models.
Following the Repository pattern, it abstracts database interactions for the urls table.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import desc, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.models.click import ClickEvent
from shortlink.models.url import ShortURL, ShortURLCreate
from shortlink.repositories.base import BaseRepository, DuplicateEntityError, RepositoryError


class URLRepository(BaseRepository[ShortURL, ShortURLCreate]):
    """
    Repository for ShortURL model database operations.

    Besides lookups it owns the only mutation of an existing row: the
    click counter increment.
    """

    def __init__(self):
        """Initialize the repository with the ShortURL model type."""
        super().__init__(ShortURL)

    async def create_short_url(
        self,
        db: AsyncSession,
        data: Union[ShortURLCreate, Dict[str, Any]]
    ) -> ShortURL:
        """
        Insert a new ShortURL row.

        The unique index on shortcode decides uniqueness. On any constraint
        violation the session is rolled back, since a failed flush leaves it
        unusable; only a shortcode violation counts as a duplicate.

        Args:
            db: Database session
            data: Short URL data (either as a ShortURLCreate model or dictionary)

        Returns:
            The created ShortURL entity

        Raises:
            DuplicateEntityError: If the shortcode already exists
            RepositoryError: On other constraint violations and database errors
        """
        values = self._to_dict(data)
        try:
            entity = self.model_type(**values)
            db.add(entity)
            await db.flush()
            return entity
        except IntegrityError as e:
            await db.rollback()
            if self._is_shortcode_violation(e):
                raise DuplicateEntityError(self.model_type, "shortcode", values.get("shortcode")) from e
            raise RepositoryError(f"Constraint violation creating short URL: {e}") from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error creating short URL: {e}") from e

    @staticmethod
    def _is_shortcode_violation(error: IntegrityError) -> bool:
        # SQLite: "UNIQUE constraint failed: urls.shortcode"
        # PostgreSQL: duplicate key value violates unique constraint "ix_urls_shortcode"
        message = str(error.orig).lower()
        return "shortcode" in message and ("unique" in message or "duplicate" in message)

    async def get_by_shortcode(self, db: AsyncSession, shortcode: str) -> Optional[ShortURL]:
        """
        Find a URL by its shortcode, expired or not.

        Args:
            db: Database session
            shortcode: The unique shortcode to look up

        Returns:
            The ShortURL if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = (
                select(self.model_type)
                .where(self.model_type.shortcode == shortcode)
                .execution_options(populate_existing=True)
            )
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving URL by shortcode: {e}") from e

    async def check_shortcode_exists(self, db: AsyncSession, shortcode: str) -> bool:
        """
        Check if a shortcode is already taken.

        Raises:
            RepositoryError: On database errors
        """
        return await self.exists(db, shortcode=shortcode)

    async def increment_click_count(self, db: AsyncSession, shortcode: str) -> int:
        """
        Increment the click counter of a URL by exactly one.

        Uses a single UPDATE so concurrent increments never lose an update.

        Args:
            db: Database session
            shortcode: Shortcode of the URL to update

        Returns:
            Number of rows matched, 0 when the shortcode is unknown

        Raises:
            RepositoryError: On database errors
        """
        try:
            stmt = (
                update(self.model_type)
                .where(self.model_type.shortcode == shortcode)
                .values(click_count=self.model_type.click_count + 1)
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            return result.rowcount
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error incrementing click count: {e}") from e

    async def get_url_with_clicks(
        self,
        db: AsyncSession,
        shortcode: str
    ) -> Optional[Tuple[ShortURL, List[ClickEvent]]]:
        """
        Get a URL and its click history with one statement.

        A single outer join reads the counter and the click rows from the same
        snapshot, so a concurrently committing click is either fully visible
        or not at all.

        Args:
            db: Database session
            shortcode: The unique shortcode to look up

        Returns:
            (ShortURL, clicks most recent first) if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = (
                select(self.model_type, ClickEvent)
                .outerjoin(ClickEvent, ClickEvent.shortcode == self.model_type.shortcode)
                .where(self.model_type.shortcode == shortcode)
                .order_by(desc(ClickEvent.clicked_at), desc(ClickEvent.id))
                .execution_options(populate_existing=True)
            )
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving URL with clicks: {e}") from e

        if not rows:
            return None

        url = rows[0][0]
        clicks = [click for _, click in rows if click is not None]
        return url, clicks
