"""
Data models for the URL shortener application.

This module imports and exports all SQLModel models used in the application.
"""

from sqlmodel import SQLModel

from shortlink.models.url import ShortURL, ShortURLBase, ShortURLCreate
from shortlink.models.click import ClickEvent, ClickEventBase, ClickEventCreate

__all__ = [
    "SQLModel",

    # Click event models
    "ClickEvent",
    "ClickEventBase",
    "ClickEventCreate",

    # Short URL models
    "ShortURL",
    "ShortURLBase",
    "ShortURLCreate",
]
