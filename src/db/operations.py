"""Database operations and utilities.

This module provides common database operations and utilities,
including retry logic for transient failures and a bounded unit of work.
"""

import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..errors import DevEventError
from .db_core import Database, ConnectionError, DatabaseError, DatabaseTimeoutError, SessionError

logger = logging.getLogger(__name__)

# Type variable for generic return type
T = TypeVar('T')

def with_retry(
    max_attempts: int = 3,
    delay: float = 0.1,
    backoff: float = 2,
    exceptions: tuple = (ConnectionError,)
) -> Callable:
    """
    Decorator that implements retry logic for async database operations.

    Only connection failures are retried by default. Validation, conflict and
    timeout errors are surfaced on the first occurrence.

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for delay between retries
        exceptions: Tuple of exceptions to catch and retry

    Example:
        @with_retry(max_attempts=3)
        async def count_events(database):
            ...
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt + 1 == max_attempts:
                        logger.error(
                            f"Final attempt failed for {func.__name__}: {str(e)}"
                        )
                        raise

                    logger.warning(
                        f"Attempt {attempt + 1}/{max_attempts} failed for "
                        f"{func.__name__}: {str(e)}. Retrying in {current_delay}s..."
                    )

                    await asyncio.sleep(current_delay)
                    current_delay *= backoff

            raise DatabaseError(f"{func.__name__} was attempted {max_attempts} times without a result")

        return wrapper
    return decorator

@with_retry()
async def execute_in_transaction(
    database: Database,
    operation: Callable[..., Awaitable[T]],
    *args: Any,
    key: Optional[Any] = None,
    **kwargs: Any
) -> T:
    """
    Execute a database operation within a transaction, bounded by the
    configured operation timeout.

    Args:
        database: The shared connection manager
        operation: Coroutine function taking the session as first argument
        *args: Positional arguments to pass to the operation
        key: Identifying key (slug, id) included in diagnostics
        **kwargs: Keyword arguments to pass to the operation

    Returns:
        The result of the operation

    Raises:
        DatabaseTimeoutError: If the unit of work exceeded operation_timeout
        SessionError: For unexpected failures, with the operation name and key

    Example:
        async def rename_venue(session, event_id, venue):
            event = await session.get(Event, event_id)
            event.venue = venue
            return event

        await execute_in_transaction(database, rename_venue, 1, "Main Hall", key=1)
    """
    name = operation.__name__
    timeout = database.config.operation_timeout

    async def unit_of_work() -> T:
        async with database.session() as session:
            return await operation(session, *args, **kwargs)

    try:
        return await asyncio.wait_for(unit_of_work(), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"{name} (key={key!r}) timed out after {timeout}s")
        raise DatabaseTimeoutError(f"{name} timed out after {timeout}s") from e
    except SessionError:
        logger.exception(f"Database session failed during {name} (key={key!r})")
        raise
    except DevEventError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected failure during {name} (key={key!r})")
        raise SessionError(f"{name} failed for key {key!r}") from e

