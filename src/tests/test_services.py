"""Tests for EventService and BookingService against an in-memory SQLite database.

Run with: pytest src/tests/test_services.py -v
"""

import asyncio

import pytest
from sqlalchemy import func, select

from src.db import ConflictError, Database
from src.models import Booking, Event
from src.services import BookingService, EventService
from src.validation import InvalidSlugError, ReferentialIntegrityError, ValidationError


async def count_rows(database, model):
    async with database.session() as session:
        return (await session.execute(select(func.count(model.id)))).scalar_one()


class TestEventService:
    """Tests for event persistence."""

    def test_create_event_stores_normalized_record(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            created = await events.create_event(event_fields(date="January 5, 2025", time="9:00am"))
            fetched = await events.get_event_by_slug("re-act-conf-2025")
            return created, fetched

        created, fetched = run_with_database(scenario)
        assert created.id is not None
        assert fetched.id == created.id
        assert fetched.slug == "re-act-conf-2025"
        assert fetched.date == "2025-01-05"
        assert fetched.time == "9:00 AM"
        assert fetched.agenda == ["Keynote", "Workshops"]
        assert fetched.created_at is not None
        assert fetched.updated_at is not None

    def test_invalid_event_is_not_written(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            with pytest.raises(ValidationError) as exc_info:
                await events.create_event(event_fields(time="25:00", tags=[]))
            return exc_info.value, await count_rows(database, Event)

        error, count = run_with_database(scenario)
        assert set(error.errors) == {"time", "tags"}
        assert count == 0

    def test_duplicate_slug_conflicts(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            await events.create_event(event_fields(title="React Conf 2025"))
            with pytest.raises(ConflictError) as exc_info:
                await events.create_event(event_fields(title="React Conf 2025!"))
            return exc_info.value, await count_rows(database, Event)

        error, count = run_with_database(scenario)
        assert "react-conf-2025" in str(error)
        assert count == 1

    def test_lookup_of_malformed_slug_never_touches_store(self, database_config):
        async def connector(config):
            raise AssertionError("store must not be contacted")

        async def scenario():
            database = Database(database_config, connector=connector)
            with pytest.raises(InvalidSlugError):
                await EventService(database).get_event_by_slug("Invalid Slug!")
            return database.connect_attempts

        assert asyncio.run(scenario()) == 0

    def test_unknown_slug_is_not_found(self, run_with_database):
        async def scenario(database):
            return await EventService(database).get_event_by_slug("no-such-event")

        assert run_with_database(scenario) is None

    def test_update_of_unrelated_field_keeps_slug_and_date(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            await events.create_event(event_fields(date="January 5, 2025"))
            return await events.update_event("re-act-conf-2025", {"venue": "Main Hall"})

        updated = run_with_database(scenario)
        assert updated.venue == "Main Hall"
        assert updated.slug == "re-act-conf-2025"
        assert updated.date == "2025-01-05"

    def test_update_title_moves_slug(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            await events.create_event(event_fields())
            await events.update_event("re-act-conf-2025", {"title": "React Summit 2026", "time": "6:30 pm"})
            return (
                await events.get_event_by_slug("re-act-conf-2025"),
                await events.get_event_by_slug("react-summit-2026"),
            )

        old, new = run_with_database(scenario)
        assert old is None
        assert new.title == "React Summit 2026"
        assert new.time == "6:30 PM"

    def test_update_into_existing_slug_conflicts(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            await events.create_event(event_fields(title="First Event"))
            await events.create_event(event_fields(title="Second Event"))
            with pytest.raises(ConflictError):
                await events.update_event("second-event", {"title": "First Event"})
            return await events.get_event_by_slug("second-event")

        assert run_with_database(scenario).title == "Second Event"

    def test_invalid_update_leaves_record_unchanged(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            await events.create_event(event_fields())
            with pytest.raises(ValidationError):
                await events.update_event("re-act-conf-2025", {"date": "2025-13-40", "venue": "Elsewhere"})
            return await events.get_event_by_slug("re-act-conf-2025")

        stored = run_with_database(scenario)
        assert stored.date == "2025-10-07"
        assert stored.venue == "Convention Center"

    def test_update_missing_event_returns_none(self, run_with_database):
        async def scenario(database):
            return await EventService(database).update_event("ghost", {"venue": "Nowhere"})

        assert run_with_database(scenario) is None

    def test_list_events_newest_first(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            for title in ("One", "Two", "Three"):
                await events.create_event(event_fields(title=title))
            return await events.list_events(), await events.list_events(limit=2)

        everything, limited = run_with_database(scenario)
        assert [event.slug for event in everything] == ["three", "two", "one"]
        assert [event.slug for event in limited] == ["three", "two"]

    def test_similar_events_share_tags(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            await events.create_event(event_fields(title="Base", tags=["react", "frontend"]))
            await events.create_event(event_fields(title="Partial", tags=["react", "mobile"]))
            await events.create_event(event_fields(title="Full", tags=["frontend", "react"]))
            await events.create_event(event_fields(title="Unrelated", tags=["rust"]))
            return await events.get_similar_events("base"), await events.get_similar_events("missing")

        similar, missing = run_with_database(scenario)
        assert [event.slug for event in similar] == ["full", "partial"]
        assert missing is None


class TestBookingService:
    """Tests for booking persistence and referential integrity."""

    def test_booking_for_missing_event_is_rejected(self, run_with_database):
        async def scenario(database):
            with pytest.raises(ReferentialIntegrityError) as exc_info:
                await BookingService(database).create_booking(999, "user@example.com")
            return exc_info.value, await count_rows(database, Booking)

        error, count = run_with_database(scenario)
        assert error.event_id == 999
        assert "999" in str(error)
        assert count == 0

    def test_invalid_email_is_rejected(self, run_with_database, event_fields):
        async def scenario(database):
            event = await EventService(database).create_event(event_fields())
            with pytest.raises(ValidationError):
                await BookingService(database).create_booking(event.id, "not-an-email")
            return await count_rows(database, Booking)

        assert run_with_database(scenario) == 0

    def test_end_to_end_signup(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            bookings = BookingService(database)
            event = await events.create_event(event_fields(title="Re Act Conf 2025"))
            booking = await bookings.create_booking(str(event.id), "  USER@Example.com ")
            fetched = await events.get_event_by_slug("re-act-conf-2025")
            return (
                event,
                booking,
                fetched,
                await bookings.list_bookings_for_event(fetched.id),
                await bookings.count_bookings_for_event(fetched.id),
            )

        event, booking, fetched, listed, count = run_with_database(scenario)
        assert event.slug == "re-act-conf-2025"
        assert booking.email == "user@example.com"
        assert booking.event_id == event.id
        assert fetched.id == event.id
        assert [b.id for b in listed] == [booking.id]
        assert count == 1

    def test_update_booking_rechecks_changed_event(self, run_with_database, event_fields):
        async def scenario(database):
            events = EventService(database)
            bookings = BookingService(database)
            first = await events.create_event(event_fields(title="First"))
            second = await events.create_event(event_fields(title="Second"))
            booking = await bookings.create_booking(first.id, "a@example.com")

            with pytest.raises(ReferentialIntegrityError):
                await bookings.update_booking(booking.id, event_id=404)
            moved = await bookings.update_booking(booking.id, event_id=second.id, email=" B@Example.com")
            missing = await bookings.update_booking(12345, email="c@example.com")
            return second, moved, missing

        second, moved, missing = run_with_database(scenario)
        assert moved.event_id == second.id
        assert moved.email == "b@example.com"
        assert missing is None

    def test_many_bookings_per_event(self, run_with_database, event_fields):
        async def scenario(database):
            event = await EventService(database).create_event(event_fields())
            bookings = BookingService(database)
            for i in range(5):
                await bookings.create_booking(event.id, f"user{i}@example.com")
            return await bookings.count_bookings_for_event(event.id)

        assert run_with_database(scenario) == 5
