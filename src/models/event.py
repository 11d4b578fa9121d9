"""Event model definition."""

from typing import Dict, Any
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON

from .base import Base, now_utc, isoformat

EVENT_MODES = ('online', 'offline', 'hybrid')

class Event(Base):
    """
    A developer event (hackathon, meetup, conference).
    
    Fields:
        id: Unique identifier (auto-generated), referenced by bookings
        title: Event title
        slug: URL-safe identity derived from the title (unique)
        description: Short description
        overview: Longer overview text
        image: Image reference (URL or asset path)
        venue: Venue name
        location: City / address
        date: Calendar date, stored as YYYY-MM-DD
        time: Start time, stored as HH:MM AM/PM
        mode: One of 'online', 'offline', 'hybrid'
        audience: Who the event is for
        agenda: Ordered, non-empty list of agenda items
        organizer: Organizer description
        tags: Non-empty list of tags
        created_at: When the event was first stored
        updated_at: When the event was last modified
    """
    __tablename__ = 'events'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String, nullable=False)
    venue = Column(String, nullable=False)
    location = Column(String, nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String(8), nullable=False)
    mode = Column(String(16), nullable=False)
    audience = Column(String, nullable=False)
    agenda = Column(JSON, nullable=False, default=list)
    organizer = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record shape used in API responses."""
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'description': self.description,
            'overview': self.overview,
            'image': self.image,
            'venue': self.venue,
            'location': self.location,
            'date': self.date,
            'time': self.time,
            'mode': self.mode,
            'audience': self.audience,
            'agenda': list(self.agenda or []),
            'organizer': self.organizer,
            'tags': list(self.tags or []),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
    
    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, slug={self.slug}, date={self.date})"
