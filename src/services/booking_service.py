"""Booking persistence operations.

A booking is only written after its event has been found in the same unit
of work.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import Database, execute_in_transaction
from ..models import Booking, Event
from ..validation import (
    ReferentialIntegrityError,
    prepare_booking,
    validate_email,
    validate_event_reference,
)

logger = logging.getLogger(__name__)


async def _ensure_event_exists(session: AsyncSession, event_id: int) -> None:
    result = await session.execute(select(Event.id).where(Event.id == event_id))
    if result.scalar_one_or_none() is None:
        raise ReferentialIntegrityError(event_id)


async def _insert_booking(session: AsyncSession, event_id: int, email: str) -> Booking:
    await _ensure_event_exists(session, event_id)
    booking = Booking(event_id=event_id, email=email)
    session.add(booking)
    await session.flush()
    return booking


async def _update_booking(
    session: AsyncSession,
    booking_id: int,
    event_id: Optional[int],
    email: Optional[str]
) -> Optional[Booking]:
    booking = await session.get(Booking, booking_id)
    if booking is None:
        return None
    if event_id is not None and event_id != booking.event_id:
        await _ensure_event_exists(session, event_id)
        booking.event_id = event_id
    if email is not None:
        booking.email = email
    await session.flush()
    return booking


async def _bookings_for_event(session: AsyncSession, event_id: int) -> List[Booking]:
    result = await session.execute(
        select(Booking).where(Booking.event_id == event_id).order_by(Booking.created_at, Booking.id)
    )
    return list(result.scalars().all())


async def _count_for_event(session: AsyncSession, event_id: int) -> int:
    result = await session.execute(
        select(func.count(Booking.id)).where(Booking.event_id == event_id)
    )
    return result.scalar_one()


class BookingService:
    """Create and query event signups."""

    def __init__(self, database: Database):
        self._database = database

    async def create_booking(self, event_id: Any, email: Any) -> Booking:
        """
        Book a seat on an event.

        Raises:
            ValidationError: If the event id or email is malformed
            ReferentialIntegrityError: If the event does not exist; nothing is written
        """
        values = prepare_booking(event_id, email)
        try:
            booking = await execute_in_transaction(
                self._database, _insert_booking, values['event_id'], values['email'], key=values['event_id']
            )
        except ReferentialIntegrityError:
            logger.warning(f"Rejected booking for missing event {values['event_id']}")
            raise
        logger.info(f"Created booking {booking.id} for event {booking.event_id}")
        return booking

    async def update_booking(
        self,
        booking_id: int,
        event_id: Optional[Any] = None,
        email: Optional[Any] = None
    ) -> Optional[Booking]:
        """
        Change a booking's event and/or email. Returns None if it does not exist.

        The event reference is re-checked only when it actually changes.
        """
        new_event_id = validate_event_reference(event_id) if event_id is not None else None
        new_email = validate_email(email) if email is not None else None
        return await execute_in_transaction(
            self._database, _update_booking, booking_id, new_event_id, new_email, key=booking_id
        )

    async def list_bookings_for_event(self, event_id: int) -> List[Booking]:
        return await execute_in_transaction(self._database, _bookings_for_event, event_id, key=event_id)

    async def count_bookings_for_event(self, event_id: int) -> int:
        return await execute_in_transaction(self._database, _count_for_event, event_id, key=event_id)
