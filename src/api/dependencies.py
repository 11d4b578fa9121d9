"""FastAPI dependencies handing the shared Database to route handlers."""

from fastapi import Depends, Request

from ..db import Database
from ..services import BookingService, EventService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_event_service(database: Database = Depends(get_database)) -> EventService:
    return EventService(database)


def get_booking_service(database: Database = Depends(get_database)) -> BookingService:
    return BookingService(database)
