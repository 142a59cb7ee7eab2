"""Click Repository for click event tracking in the URL shortener application.

This module provides the ClickRepository class for database operations related to ClickEvent models.
Click events are append-only: there is no update or delete here.
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.models.click import ClickEvent, ClickEventCreate
from shortlink.repositories.base import BaseRepository, RepositoryError


class ClickRepository(BaseRepository[ClickEvent, ClickEventCreate]):
    """Repository for ClickEvent model database operations."""

    def __init__(self):
        """Initialize the repository with the ClickEvent model type."""
        super().__init__(ClickEvent)

    async def create_click_event(
        self,
        db: AsyncSession,
        data: Union[ClickEventCreate, Dict[str, Any]]
    ) -> ClickEvent:
        """
        Record a new click event in the current transaction.

        Raises:
            RepositoryError: On database errors
        """
        return await self.create(db, data)

    async def get_clicks_for_shortcode(
        self,
        db: AsyncSession,
        shortcode: str,
        limit: Optional[int] = None
    ) -> List[ClickEvent]:
        """
        Get click events for a shortcode, most recent first.

        Args:
            db: Database session
            shortcode: Shortcode of the ShortURL
            limit: Maximum number of records to return, all when None

        Returns:
            List of ClickEvent entities

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = (
                select(self.model_type)
                .where(self.model_type.shortcode == shortcode)
                .order_by(desc(self.model_type.clicked_at), desc(self.model_type.id))
            )
            if limit is not None:
                query = query.limit(limit)

            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving clicks for {shortcode}: {e}") from e

    async def count_clicks(self, db: AsyncSession, shortcode: str) -> int:
        """Number of click events recorded for a shortcode."""
        return await self.count(db, shortcode=shortcode)
