"""Model for seat bookings made by email signup."""

from typing import Dict, Any
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from .base import Base, now_utc, isoformat

class Booking(Base):
    """
    A signup for an event.
    
    Bookings hold a non-owning reference to their event; events keep no
    back-reference. No cascade is configured for event deletion.
    
    Fields:
        id: Unique identifier (auto-generated)
        event_id: Referenced event (indexed, the dominant lookup)
        email: Lower-cased, trimmed signup email
        created_at: When the booking was made
        updated_at: When the booking was last modified
    """
    __tablename__ = 'bookings'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey('events.id'), nullable=False, index=True)
    email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'eventId': self.event_id,
            'email': self.email,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
    
    def __str__(self) -> str:
        """String representation."""
        return f"Booking(id={self.id}, event_id={self.event_id}, email={self.email})"
