"""Services package initialization."""

from .event_service import EventService
from .booking_service import BookingService

__all__ = ['EventService', 'BookingService']
