"""HTTP tests for the FastAPI application.

Run with: pytest src/tests/test_api.py -v
"""

from src.db import Database


def create_event(client, event_fields, **overrides):
    response = client.post("/api/events", json=event_fields(**overrides))
    assert response.status_code == 201, response.json()
    return response.json()["event"]


class TestHealth:
    """Tests for GET /"""

    def test_health_reports_connected_database(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestEvents:
    """Tests for the events endpoints."""

    def test_create_and_fetch_by_slug(self, client, event_fields):
        created = create_event(client, event_fields, date="January 5, 2025", time="9:00am")
        assert created["slug"] == "re-act-conf-2025"

        response = client.get("/api/events/re-act-conf-2025")
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Event fetched successfully"
        assert body["event"]["date"] == "2025-01-05"
        assert body["event"]["time"] == "9:00 AM"
        assert body["event"]["createdAt"] is not None

    def test_malformed_slug_is_rejected(self, client):
        response = client.get("/api/events/Invalid Slug!")
        assert response.status_code == 400
        assert "Invalid slug format" in response.json()["message"]

    def test_unknown_slug_is_not_found(self, client):
        response = client.get("/api/events/missing-event")
        assert response.status_code == 404
        assert response.json() == {"message": 'Event with slug "missing-event" not found'}

    def test_create_with_invalid_fields(self, client, event_fields):
        response = client.post("/api/events", json=event_fields(mode="in-person", agenda=[]))
        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"mode", "agenda"}

    def test_create_with_missing_fields(self, client):
        response = client.post("/api/events", json={"title": "Lonely"})
        assert response.status_code == 400
        assert "venue" in response.json()["errors"]

    def test_duplicate_slug_is_a_conflict(self, client, event_fields):
        create_event(client, event_fields, title="DevFest 2025")
        response = client.post("/api/events", json=event_fields(title="devfest 2025!!"))
        assert response.status_code == 409

    def test_list_events(self, client, event_fields):
        create_event(client, event_fields, title="Alpha")
        create_event(client, event_fields, title="Beta")
        response = client.get("/api/events")
        assert response.status_code == 200
        assert [event["slug"] for event in response.json()["events"]] == ["beta", "alpha"]

    def test_patch_updates_fields(self, client, event_fields):
        create_event(client, event_fields)
        response = client.patch("/api/events/re-act-conf-2025", json={"title": "React Summit", "venue": "Pier 1"})
        assert response.status_code == 200
        event = response.json()["event"]
        assert event["slug"] == "react-summit"
        assert event["venue"] == "Pier 1"
        assert client.get("/api/events/re-act-conf-2025").status_code == 404

    def test_patch_missing_event(self, client):
        response = client.patch("/api/events/ghost", json={"venue": "Nowhere"})
        assert response.status_code == 404

    def test_similar_events(self, client, event_fields):
        create_event(client, event_fields, title="Base", tags=["python"])
        create_event(client, event_fields, title="Other Python", tags=["python", "data"])
        create_event(client, event_fields, title="Go Day", tags=["go"])
        response = client.get("/api/events/base/similar")
        assert response.status_code == 200
        assert [event["slug"] for event in response.json()["events"]] == ["other-python"]


class TestBookings:
    """Tests for POST /api/bookings"""

    def test_signup_normalizes_email(self, client, event_fields):
        event = create_event(client, event_fields)
        response = client.post(
            "/api/bookings",
            json={"eventId": event["id"], "slug": event["slug"], "email": "  USER@Example.com "}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["booking"]["email"] == "user@example.com"
        assert body["booking"]["eventId"] == event["id"]

        listed = client.get(f"/api/events/{event['slug']}/bookings").json()
        assert listed["count"] == 1
        assert listed["bookings"][0]["email"] == "user@example.com"

    def test_signup_for_missing_event(self, client):
        response = client.post("/api/bookings", json={"eventId": 999, "email": "user@example.com"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "999" in body["message"]

    def test_signup_with_invalid_email(self, client, event_fields):
        event = create_event(client, event_fields)
        response = client.post("/api/bookings", json={"eventId": event["id"], "email": "nope"})
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "email" in response.json()["errors"]


class TestUnavailableDatabase:
    """Tests for behaviour when the store cannot be reached."""

    def test_connection_failure_maps_to_503(self, database_config):
        from fastapi.testclient import TestClient

        from src.api.app import create_application

        async def connector(config):
            raise OSError("connection refused")

        app = create_application(Database(database_config, connector=connector))
        with TestClient(app) as client:
            response = client.get("/api/events/some-event")
            assert response.status_code == 503
            assert response.json()["message"] == "Database unavailable"
            assert "refused" not in response.text
