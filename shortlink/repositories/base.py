"""Base repository implementation for the URL shortener application.

This module provides a generic BaseRepository class that follows the Repository pattern
for database operations, serving as a foundation for more specific repositories.
"""

import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

# Type variable for model types
T = TypeVar("T", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")


class BaseRepository(Generic[T, CreateSchemaType]):
    """
    Base repository implementing common operations for SQLModel entities.

    Every SQLAlchemy error is surfaced as a RepositoryError; nothing is
    swallowed.

    Type parameters:
        T: The SQLModel type this repository manages
        CreateSchemaType: The Pydantic model type for creation operations
    """

    def __init__(self, model_type: Type[T]):
        """
        Initialize the repository with a specific model type.

        Args:
            model_type: The SQLModel class this repository will work with
        """
        self.model_type = model_type

    @staticmethod
    def _to_dict(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_none=True)
        return {key: value for key, value in data.items() if value is not None}

    def _conditions(self, filters: Dict[str, Any]) -> list:
        if not filters:
            raise ValueError("No conditions provided")
        return [getattr(self.model_type, field) == value for field, value in filters.items()]

    async def get_by_id(self, db: AsyncSession, id: Any) -> Optional[T]:
        """
        Get an entity by its ID.

        Args:
            db: Database session
            id: Entity ID

        Returns:
            The entity if found, None otherwise
        """
        try:
            return await db.get(self.model_type, id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model_type.__name__} with id {id}: {e}")
            raise RepositoryError(f"Database error retrieving entity: {e}") from e

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> T:
        """
        Create a new entity in the current transaction.

        The row is flushed but not committed; the caller owns the transaction.

        Args:
            db: Database session
            data: Entity data (either as a Pydantic model or dictionary)

        Returns:
            The created entity

        Raises:
            RepositoryError: On database errors
        """
        try:
            entity = self.model_type(**self._to_dict(data))
            db.add(entity)
            await db.flush()
            return entity
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model_type.__name__}: {e}")
            raise RepositoryError(f"Database error creating entity: {e}") from e

    async def exists(self, db: AsyncSession, **kwargs) -> bool:
        """
        Check if an entity exists with the given filters.

        Args:
            db: Database session
            **kwargs: Field=value pairs to filter by

        Returns:
            True if entity exists, False otherwise

        Raises:
            RepositoryError: On database errors
        """
        return await self.count(db, **kwargs) > 0

    async def count(self, db: AsyncSession, **kwargs) -> int:
        """
        Count entities, optionally restricted by Field=value filters.

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(func.count()).select_from(self.model_type)
            if kwargs:
                query = query.where(*self._conditions(kwargs))
            result = await db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model_type.__name__} records: {e}")
            raise RepositoryError(f"Database error counting entities: {e}") from e
