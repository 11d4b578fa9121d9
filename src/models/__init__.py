"""Models package initialization."""

from .base import Base
from .event import Event, EVENT_MODES
from .booking import Booking

__all__ = ['Base', 'Event', 'Booking', 'EVENT_MODES']
