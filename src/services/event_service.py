"""Event persistence operations.

Every write goes through :func:`prepare_event` before the store is touched,
and the unique index on ``slug`` is the final word on duplicates.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import Database, ConflictError, execute_in_transaction
from ..models import Event
from ..validation import prepare_event, validate_slug
from ..validation.event import EVENT_FIELDS

logger = logging.getLogger(__name__)


def event_fields(event: Event) -> Dict[str, Any]:
    """Writable fields of a stored event, as plain values."""
    return {name: getattr(event, name) for name in EVENT_FIELDS}


async def _find_by_slug(session: AsyncSession, slug: str) -> Optional[Event]:
    result = await session.execute(select(Event).where(Event.slug == slug))
    return result.scalar_one_or_none()


async def _insert_event(session: AsyncSession, values: Dict[str, Any]) -> Event:
    event = Event(**values)
    session.add(event)
    await session.flush()
    return event


async def _update_event(session: AsyncSession, slug: str, changes: Mapping[str, Any]) -> Optional[Event]:
    event = await _find_by_slug(session, slug)
    if event is None:
        return None
    values = prepare_event(changes, current=event_fields(event))
    for name, value in values.items():
        setattr(event, name, value)
    await session.flush()
    return event


async def _list_events(session: AsyncSession, limit: Optional[int]) -> List[Event]:
    query = select(Event).order_by(Event.created_at.desc(), Event.id.desc())
    if limit is not None:
        query = query.limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())


async def _similar_events(session: AsyncSession, slug: str, limit: int) -> Optional[List[Event]]:
    event = await _find_by_slug(session, slug)
    if event is None:
        return None
    tags = set(event.tags or [])
    result = await session.execute(
        select(Event).where(Event.id != event.id).order_by(Event.created_at.desc(), Event.id.desc())
    )
    # Tags live in a JSON column, so overlap is computed here rather than in SQL
    candidates = [
        (len(tags.intersection(other.tags or [])), index, other)
        for index, other in enumerate(result.scalars().all())
    ]
    ranked = sorted((c for c in candidates if c[0] > 0), key=lambda c: (-c[0], c[1]))
    return [other for _, _, other in ranked[:limit]]


class EventService:
    """Create, update and look up events."""

    def __init__(self, database: Database):
        self._database = database

    async def create_event(self, fields: Mapping[str, Any]) -> Event:
        """
        Validate, normalize and insert a new event.

        Raises:
            ValidationError: If any field is missing or malformed
            ConflictError: If another event already has the derived slug
        """
        values = prepare_event(fields)
        slug = values['slug']
        try:
            event = await execute_in_transaction(self._database, _insert_event, values, key=slug)
        except ConflictError as e:
            logger.warning(f"Rejected event '{values['title']}': slug '{slug}' already exists")
            raise ConflictError(f'An event with slug "{slug}" already exists') from e
        logger.info(f"Created event {event.id} with slug '{slug}'")
        return event

    async def update_event(self, slug: str, changes: Mapping[str, Any]) -> Optional[Event]:
        """
        Apply a partial update to the event with the given slug.

        Only changed fields are normalized; the slug is re-derived only when
        the title changes. Returns None when no such event exists.

        Raises:
            InvalidSlugError: If ``slug`` is not in slug format
            ValidationError: If the merged record is invalid
            ConflictError: If a new title collides with another event's slug
        """
        validate_slug(slug)
        try:
            event = await execute_in_transaction(self._database, _update_event, slug, changes, key=slug)
        except ConflictError as e:
            logger.warning(f"Rejected update of '{slug}': new slug already exists")
            raise ConflictError("An event with the new title's slug already exists") from e
        if event is not None:
            logger.info(f"Updated event {event.id} ('{slug}' -> '{event.slug}')")
        return event

    async def get_event_by_slug(self, slug: str) -> Optional[Event]:
        """
        Return the event with this slug, or None.

        Raises:
            InvalidSlugError: Before any store access, if ``slug`` is malformed
        """
        validate_slug(slug)
        return await execute_in_transaction(self._database, _find_by_slug, slug, key=slug)

    async def list_events(self, limit: Optional[int] = None) -> List[Event]:
        """Return events, newest first."""
        return await execute_in_transaction(self._database, _list_events, limit)

    async def get_similar_events(self, slug: str, limit: int = 3) -> Optional[List[Event]]:
        """Return events sharing at least one tag with ``slug``, most overlap first."""
        validate_slug(slug)
        return await execute_in_transaction(self._database, _similar_events, slug, limit, key=slug)
