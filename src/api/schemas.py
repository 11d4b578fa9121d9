"""Request bodies.

Fields are optional here; missing values are reported by the validation
layer on the write path. Only unknown keys are rejected at this layer.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventPayload(BaseModel):
    """Body of POST (full record) and PATCH (changed fields) on events."""

    model_config = ConfigDict(extra='forbid')

    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None


class BookingPayload(BaseModel):
    """Body of POST /api/bookings, as sent by the signup form."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: Optional[Union[int, str]] = Field(default=None, alias='eventId')
    email: Optional[str] = None
    slug: Optional[str] = None
