"""Session management for database operations.

This module provides utilities for handling SQLAlchemy async sessions
with proper lifecycle management, error handling, and transaction support.
"""

import inspect
import logging
from functools import wraps
from typing import AsyncGenerator, Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.db.base import get_session

logger = logging.getLogger(__name__)

# Generic return type for function decorators
T = TypeVar("T")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Yields:
        AsyncSession: A SQLAlchemy async session object.
    """
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Decorator to wrap a coroutine in a database transaction.

    Commits on success and rolls back on any exception, so every write the
    wrapped function performs is applied together or not at all.

    Args:
        db_param_name: Optional name of the database session parameter.
            If not provided, the first parameter annotated as AsyncSession is used.

    Returns:
        Callable: Decorator function

    Example:
        ```python
        @db_transaction(db_param_name="db")
        async def record(self, db: AsyncSession, shortcode: str) -> None:
            ...
        ```
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        parameters = inspect.signature(func).parameters
        db_param_pos = None
        db_param_key = None

        for i, (param_name, param) in enumerate(parameters.items()):
            is_async_session = param.annotation is AsyncSession or param.annotation == "AsyncSession"

            if db_param_name and param_name == db_param_name:
                if not is_async_session:
                    logger.warning(
                        f"Parameter '{db_param_name}' in function '{func.__name__}' is not annotated "
                        f"as AsyncSession."
                    )
                db_param_pos = i
                db_param_key = param_name
                break

            elif is_async_session and db_param_name is None:
                db_param_pos = i
                db_param_key = param_name
                break

        if db_param_key is None:
            logger.warning(
                f"Unable to find database session parameter in function '{func.__name__}'"
            )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            db = None

            if db_param_pos is not None and len(args) > db_param_pos:
                db = args[db_param_pos]
            elif db_param_key is not None and db_param_key in kwargs:
                db = kwargs[db_param_key]
            else:
                for value in list(args) + list(kwargs.values()):
                    if isinstance(value, AsyncSession):
                        db = value
                        break

            if db is None:
                raise ValueError(
                    f"Database session not found in function arguments for '{func.__name__}'. "
                    f"Ensure a parameter of type AsyncSession is passed to the function."
                )

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.debug(f"Transaction rolled back in '{func.__name__}': {e!r}")
                raise

        return wrapper
    return decorator

