"""Events router module."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..dependencies import get_booking_service, get_event_service
from ..schemas import EventPayload
from ...services import BookingService, EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _not_found(slug: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": f'Event with slug "{slug}" not found'})


@router.get("")
async def list_events(
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    events: EventService = Depends(get_event_service)
):
    """List events, newest first."""
    found = await events.list_events(limit=limit)
    return {
        "message": "Events fetched successfully",
        "events": [event.to_dict() for event in found]
    }


@router.post("", status_code=201)
async def create_event(payload: EventPayload, events: EventService = Depends(get_event_service)):
    """Create an event. The slug is derived from the title."""
    event = await events.create_event(payload.model_dump(exclude_unset=True))
    return {"message": "Event created successfully", "event": event.to_dict()}


@router.get("/{slug}")
async def get_event(slug: str, events: EventService = Depends(get_event_service)):
    """Get a single event by its slug."""
    event = await events.get_event_by_slug(slug)
    if event is None:
        return _not_found(slug)
    return {"message": "Event fetched successfully", "event": event.to_dict()}


@router.patch("/{slug}")
async def update_event(slug: str, payload: EventPayload, events: EventService = Depends(get_event_service)):
    """Partially update an event. A new title moves the event to a new slug."""
    event = await events.update_event(slug, payload.model_dump(exclude_unset=True))
    if event is None:
        return _not_found(slug)
    return {"message": "Event updated successfully", "event": event.to_dict()}


@router.get("/{slug}/similar")
async def get_similar_events(
    slug: str,
    limit: int = Query(default=3, ge=1, le=20),
    events: EventService = Depends(get_event_service)
):
    """Events sharing tags with the given event."""
    similar = await events.get_similar_events(slug, limit=limit)
    if similar is None:
        return _not_found(slug)
    return {
        "message": "Similar events fetched successfully",
        "events": [event.to_dict() for event in similar]
    }


@router.get("/{slug}/bookings")
async def get_event_bookings(
    slug: str,
    events: EventService = Depends(get_event_service),
    bookings: BookingService = Depends(get_booking_service)
):
    """Bookings made for an event."""
    event = await events.get_event_by_slug(slug)
    if event is None:
        return _not_found(slug)
    found = await bookings.list_bookings_for_event(event.id)
    return {
        "message": "Bookings fetched successfully",
        "count": len(found),
        "bookings": [booking.to_dict() for booking in found]
    }
