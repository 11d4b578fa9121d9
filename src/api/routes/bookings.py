"""Bookings router module."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_booking_service
from ..errors import error_body, status_for
from ..schemas import BookingPayload
from ...errors import DevEventError
from ...services import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", status_code=201)
async def create_booking(payload: BookingPayload, bookings: BookingService = Depends(get_booking_service)):
    """
    Sign up for an event by email.

    Responds with ``{"success": true, "booking": ...}`` or
    ``{"success": false, "message": ...}`` so the signup form only has to
    check one flag.
    """
    try:
        booking = await bookings.create_booking(payload.event_id, payload.email)
    except DevEventError as e:
        logger.info(f"Booking failed for event {payload.event_id!r} ({payload.slug or 'no slug'}): {e}")
        return JSONResponse(
            status_code=status_for(e),
            content={"success": False, **error_body(e)}
        )
    return {"success": True, "booking": booking.to_dict()}
