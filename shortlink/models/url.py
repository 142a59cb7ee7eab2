"""Short URL data models.

This module defines the ShortURL model for storing shortcode mappings in the database.
"""
from datetime import datetime, timedelta
from typing import Optional, Union

from pydantic import NaiveDatetime
from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel

from shortlink.core.clock import utcnow


class ShortURLBase(SQLModel):
    """Base model for short URL data."""

    shortcode: str = Field(
        description="Unique identifier used in the short link path",
        unique=True,  # Unique index, the source of truth for shortcode uniqueness
        index=True,
        max_length=64,
    )
    original_url: str = Field(
        description="Redirect target, stored as provided"
    )
    expiry: NaiveDatetime = Field(
        sa_type=DateTime,
        description="Moment after which the mapping is logically expired"
    )


class ShortURL(ShortURLBase, table=True):
    """
    Short URL model for storing shortcode mappings in the database.

    Rows are never updated except for click_count, and never deleted:
    expiry is a read-time predicate.
    """

    __tablename__ = "urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: NaiveDatetime = Field(
        sa_type=DateTime,
        default_factory=utcnow,
        description="Timestamp when this short URL was created"
    )
    click_count: int = Field(
        default=0,
        description="Aggregate number of recorded clicks"
    )

    __table_args__ = (
        Index("ix_urls_expiry", "expiry"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the short URL has expired.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            bool: True if now is past the expiry
        """
        return (now or utcnow()) > self.expiry

    @classmethod
    def generate_expiration(
        cls,
        validity_minutes: Union[int, float],
        now: Optional[datetime] = None
    ) -> datetime:
        """Compute the expiry for a validity window starting at now."""
        return (now or utcnow()) + timedelta(minutes=validity_minutes)


class ShortURLCreate(ShortURLBase):
    """Schema for creating a new short URL."""
    created_at: Optional[NaiveDatetime] = None
