"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Internal imports
from src.config.environment import IS_PRODUCTION_ENVIRONMENT # Environment must be imported first
from src.config.cors import CORS_CONFIG
from src.utils.logging_config import setup_logging
from src import __version__
from src.db import Database, DatabaseConfig, DatabaseError
from .errors import register_exception_handlers
from .routes import bookings, events, health

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    database: Database = app.state.database
    # Startup
    try:
        await database.get_connection()
        logger.info("Database initialized successfully")
    except DatabaseError as e:
        # Don't raise - the next request starts a fresh connection attempt
        logger.error(f"Database initialization failed: {e}")
    yield
    # Shutdown
    await database.dispose()

def create_application(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The Database is built here, so a missing DATABASE_URL stops the process
    at startup with a ConfigurationError.
    """
    if database is None:
        database = Database(DatabaseConfig.from_environment())

    app = FastAPI(
        title="DevEvent API",
        description="Developer events (hackathons, meetups, conferences) and seat bookings",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )
    app.state.database = database

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)
    register_exception_handlers(app)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api")
    app.include_router(bookings.router, prefix="/api")

    return app

# Create the application instance
app = create_application()
