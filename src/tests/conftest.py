"""Pytest configuration and shared fixtures."""

import asyncio
import os

# The application module builds its Database at import time
os.environ.setdefault('DATABASE_URL', 'sqlite+aiosqlite:///:memory:')

import pytest
from fastapi.testclient import TestClient

from src.db import Database, DatabaseConfig

MEMORY_URL = 'sqlite+aiosqlite:///:memory:'


class FakeEngine:
    """Stands in for an AsyncEngine in connection manager tests."""

    def __init__(self):
        self.disposed = 0

    async def dispose(self):
        self.disposed += 1


@pytest.fixture
def database_config() -> DatabaseConfig:
    return DatabaseConfig(database_url=MEMORY_URL, connect_timeout=2.0, operation_timeout=2.0)


@pytest.fixture
def run_with_database(database_config):
    """Run ``scenario(database)`` on a fresh in-memory database."""
    def runner(scenario):
        async def main():
            database = Database(database_config)
            try:
                return await scenario(database)
            finally:
                await database.dispose()
        return asyncio.run(main())
    return runner


@pytest.fixture
def client(database_config):
    from src.api.app import create_application

    app = create_application(Database(database_config))
    with TestClient(app) as test_client:
        yield test_client


def make_event_fields(**overrides):
    fields = {
        "title": "Re Act Conf 2025",
        "description": "The React community conference.",
        "overview": "Talks and workshops about React.",
        "image": "/images/react-conf.png",
        "venue": "Convention Center",
        "location": "Henderson, NV",
        "date": "2025-10-07",
        "time": "09:00 AM",
        "mode": "hybrid",
        "audience": "Frontend developers",
        "agenda": ["Keynote", "Workshops"],
        "organizer": "React Team",
        "tags": ["react", "frontend"],
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def event_fields():
    return make_event_fields
