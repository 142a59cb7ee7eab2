"""
Click event tracking data models.

This module defines the ClickEvent model, one row per resolved redirect.
"""

from typing import Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel

from shortlink.core.clock import utcnow


class ClickEventBase(SQLModel):
    """Base model for click event data."""

    shortcode: str = Field(
        description="Shortcode of the clicked ShortURL",
        max_length=64,
    )
    clicked_at: NaiveDatetime = Field(
        sa_type=DateTime,
        default_factory=utcnow,
        description="Timestamp when the short URL was clicked"
    )
    referrer: str = Field(
        default="direct",
        description="Referring page, 'direct' when absent"
    )
    ip_address: Optional[str] = Field(
        default=None,
        description="Network address of the visitor as seen by the boundary layer",
        max_length=45  # IPv4 and IPv6
    )
    user_agent: Optional[str] = Field(
        default=None,
        description="User agent string of the visitor's browser/device",
        max_length=1024
    )
    location: str = Field(
        description="Location label derived from the IP address"
    )


class ClickEvent(ClickEventBase, table=True):
    """
    Click event model, append-only.

    The shortcode is an application-level reference to urls.shortcode;
    no foreign key is declared.
    """

    __tablename__ = "clicks"

    id: Optional[int] = Field(default=None, primary_key=True)

    __table_args__ = (
        # Per-shortcode history, most recent first
        Index("ix_clicks_shortcode_clicked_at", "shortcode", "clicked_at"),
    )


class ClickEventCreate(ClickEventBase):
    """Schema for creating a new click event tracking record."""
    pass
