#!/usr/bin/env python3
"""Insert a handful of sample events through the event service."""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from src.db import Database, ConflictError
from src.services import EventService
from src.validation import ValidationError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_EVENTS = [
    {
        "title": "React Conf 2025",
        "description": "The official React community conference.",
        "overview": "Two days of talks on React, Server Components and the future of the web.",
        "image": "/images/event1.png",
        "venue": "Henderson Convention Center",
        "location": "Henderson, NV, USA",
        "date": "2025-10-07",
        "time": "09:00 AM",
        "mode": "hybrid",
        "audience": "Frontend and full-stack developers",
        "agenda": ["Keynote", "Server Components deep dive", "Community lightning talks"],
        "organizer": "Meta Open Source",
        "tags": ["react", "frontend", "javascript"],
    },
    {
        "title": "PyData Berlin Meetup",
        "description": "Monthly meetup for the Berlin data community.",
        "overview": "Talks on data engineering and machine learning followed by networking.",
        "image": "/images/event2.png",
        "venue": "Factory Berlin",
        "location": "Berlin, Germany",
        "date": "November 12, 2025",
        "time": "6:30 pm",
        "mode": "offline",
        "audience": "Data scientists and Python developers",
        "agenda": ["Doors open", "Talk: Polars in production", "Networking"],
        "organizer": "PyData Berlin",
        "tags": ["python", "data", "machine-learning"],
    },
    {
        "title": "Global AI Hackathon",
        "description": "A 48 hour online hackathon building with open models.",
        "overview": "Form a team, pick a challenge, ship a prototype in a weekend.",
        "image": "/images/event3.png",
        "venue": "Online",
        "location": "Worldwide",
        "date": "2025-12-05",
        "time": "10:00 AM",
        "mode": "online",
        "audience": "Developers of all levels",
        "agenda": ["Kickoff", "Hacking", "Demos and judging"],
        "organizer": "Open AI Builders",
        "tags": ["ai", "hackathon", "python"],
    },
]

async def seed_events():
    database = Database()
    events = EventService(database)
    try:
        for fields in SAMPLE_EVENTS:
            try:
                event = await events.create_event(fields)
                logger.info(f"Seeded {event.slug}")
            except ConflictError:
                logger.info(f"Skipping '{fields['title']}', already present")
            except ValidationError as e:
                logger.error(f"Invalid sample event '{fields['title']}': {e.errors}")
    finally:
        await database.dispose()

if __name__ == "__main__":
    asyncio.run(seed_events())
