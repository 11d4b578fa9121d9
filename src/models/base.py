"""Declarative base shared by all models."""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def now_utc() -> datetime:
    """Timezone-aware current time used for createdAt/updatedAt."""
    return datetime.now(timezone.utc)


def isoformat(value: datetime):
    return value.isoformat() if value is not None else None
