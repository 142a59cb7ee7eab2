"""Repository layer for the URL shortener application.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from shortlink.repositories.base import (
    BaseRepository,
    DuplicateEntityError,
    RepositoryError,
)
from shortlink.repositories.click_repository import ClickRepository
from shortlink.repositories.url_repository import URLRepository

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "RepositoryError",
    "DuplicateEntityError",

    # Concrete repositories
    "URLRepository",
    "ClickRepository",
]
