"""Core database functionality and configuration.

This module owns the process-wide connection to the store. A single
:class:`Database` instance is created per application and shared by every
request path; it establishes the connection lazily and at most once, so
concurrent callers and repeated invocations reuse the same engine instead of
exhausting the connection pool.
"""

import asyncio
from contextlib import asynccontextmanager
from enum import Enum
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..errors import DevEventError
from ..models import Base
from ..config.environment import get_database_url, get_float_setting, get_bool_setting

logger = logging.getLogger(__name__)

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
        connect_timeout: float = 10.0,
        operation_timeout: float = 5.0,
        pool_size: int = 3,
        max_overflow: int = 4,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        Args:
            database_url: SQLAlchemy async URL. If not provided, DATABASE_URL
                        from the environment is used.
            echo: Whether to echo SQL statements
            connect_timeout: Seconds allowed for establishing the connection
            operation_timeout: Seconds allowed for a single unit of work
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ConfigurationError: If no database URL is provided either via
                      database_url or the DATABASE_URL environment variable
        """
        self.database_url = database_url or get_database_url()
        self.echo = echo
        self.connect_timeout = connect_timeout
        self.operation_timeout = operation_timeout
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @classmethod
    def from_environment(cls) -> 'DatabaseConfig':
        """Build a configuration from DATABASE_URL and the DB_* tuning variables."""
        return cls(
            database_url=get_database_url(),
            echo=get_bool_setting('DB_ECHO'),
            connect_timeout=get_float_setting('DB_CONNECT_TIMEOUT', 10.0),
            operation_timeout=get_float_setting('DB_OPERATION_TIMEOUT', 5.0),
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith('sqlite')

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args: Dict[str, Any] = {"echo": self.echo}

        # SQLite: one shared connection so in-memory databases survive across sessions
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            args["poolclass"] = StaticPool

        # Server databases
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })

        return args

class DatabaseError(DevEventError):
    """Base exception for database-related errors."""
    pass

class ConnectionError(DatabaseError):
    """Raised when the store is unreachable. Retryable on a later call."""
    pass

class DatabaseTimeoutError(DatabaseError):
    """
    Raised when connecting or a unit of work exceeds its time bound.

    Not retried automatically: a timed-out write may already have committed.
    The caller can retry, since a later call starts a fresh attempt.
    """
    pass

class ConflictError(DatabaseError):
    """Raised when a write violates a uniqueness constraint (e.g. duplicate slug)."""
    pass

class SessionError(DatabaseError):
    """Raised when there are unexpected issues inside a database session."""
    pass

class ConnectionState(Enum):
    UNCONNECTED = 'unconnected'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'

Connector = Callable[[DatabaseConfig], Awaitable[AsyncEngine]]

async def open_engine(config: DatabaseConfig) -> AsyncEngine:
    """
    Create the engine and make sure the schema exists.

    Opening a connection here means a bad URL or unreachable server fails the
    connect attempt itself instead of the first query that happens to run.
    """
    engine = create_async_engine(config.database_url, **config.get_engine_args())
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except BaseException:
        await engine.dispose()
        raise
    return engine

class Database:
    """
    Process-wide connection manager.

    State moves Unconnected -> Connecting -> Connected. A failed attempt goes
    back to Unconnected so the next call starts over. While an attempt is in
    flight every caller awaits that same attempt.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None, connector: Optional[Connector] = None):
        self.config = config or DatabaseConfig.from_environment()
        self._connector = connector or open_engine
        self._engine: Optional[AsyncEngine] = None
        self._pending: Optional[asyncio.Future] = None
        self._session_factory: Optional[async_sessionmaker] = None
        # Bumped by dispose() so attempts started earlier discard their result
        self._generation = 0
        self.connect_attempts = 0

    @property
    def state(self) -> ConnectionState:
        if self._engine is not None:
            return ConnectionState.CONNECTED
        if self._pending is not None and not self._pending.done():
            return ConnectionState.CONNECTING
        return ConnectionState.UNCONNECTED

    async def get_connection(self) -> AsyncEngine:
        """
        Return the shared engine, connecting first if needed.

        Raises:
            ConnectionError: If the store could not be reached
            DatabaseTimeoutError: If connecting took longer than connect_timeout
        """
        if self._engine is not None:
            return self._engine

        # Register the attempt before awaiting so callers arriving meanwhile join it
        if self._pending is None or self._pending.done():
            self._pending = asyncio.ensure_future(self._connect())

        # shield: a cancelled waiter must not cancel the attempt the others share
        return await asyncio.shield(self._pending)

    async def _connect(self) -> AsyncEngine:
        generation = self._generation
        self.connect_attempts += 1
        try:
            engine = await asyncio.wait_for(
                self._connector(self.config),
                timeout=self.config.connect_timeout
            )
        except asyncio.TimeoutError as e:
            self._clear_pending(generation)
            logger.error(f"Database connection timed out after {self.config.connect_timeout}s")
            raise DatabaseTimeoutError(
                f"Connecting to the database timed out after {self.config.connect_timeout}s"
            ) from e
        except Exception as e:
            self._clear_pending(generation)
            logger.error(f"Database connection error: {e}")
            raise ConnectionError(f"Failed to connect to database: {e}") from e

        if generation != self._generation:
            await engine.dispose()
            logger.warning("Database was closed while connecting; discarded the new connection")
            raise ConnectionError("Database was closed while the connection was being established")

        self._engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        logger.info("Database connected successfully")
        return engine

    def _clear_pending(self, generation: int) -> None:
        if generation == self._generation:
            self._pending = None

    async def dispose(self) -> None:
        """Close the engine and return to the Unconnected state."""
        self._generation += 1
        engine = self._engine
        self._engine = None
        self._pending = None
        self._session_factory = None
        if engine is not None:
            await engine.dispose()
            logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional scope around a series of operations.

        Commits when the block exits normally, rolls back otherwise.

        Example:
            async with database.session() as session:
                event = await session.get(Event, 1)
                event.venue = "Main Hall"

        Raises:
            ConflictError: If the commit violates a unique constraint
            ConnectionError: If the connection dropped before the commit
            SessionError: If the connection dropped during the commit
                or for any other SQLAlchemy failure
        """
        await self.get_connection()
        session = self._session_factory()
        committing = False
        try:
            yield session
            committing = True
            await session.commit()
        except DevEventError:
            await session.rollback()
            raise
        except sa_exc.IntegrityError as e:
            await session.rollback()
            raise ConflictError(f"Write conflicts with an existing record: {e.orig}") from e
        except (sa_exc.OperationalError, sa_exc.InterfaceError) as e:
            await session.rollback()
            if committing:
                # The server may have applied the commit; replaying it could duplicate the write
                raise SessionError(f"Connection lost while committing, outcome unknown: {e.orig}") from e
            raise ConnectionError(f"Lost connection to database: {e.orig}") from e
        except sa_exc.SQLAlchemyError as e:
            await session.rollback()
            raise SessionError(f"Database session error: {e}") from e
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()
