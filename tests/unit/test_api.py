"""
API tests through FastAPI's TestClient against the seeded in-memory services.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import FIXED_NOW
from mentorverse.core.config import settings
from mentorverse.main import app
from mentorverse.services.cache.session_cache import session_cache
from mentorverse.services.catalog.catalog_service import catalog_service
from mentorverse.services.recommendation.pipeline import recommendation_pipeline
from mentorverse.services.recommendation.suggesters import BaseSuggester, MockSuggester
from mentorverse.services.store.profile_store import profile_store
from mentorverse.services.store.seed import seed_demo_data


@pytest.fixture
def client(monkeypatch):
    seed_demo_data(profile_store, catalog_service, now=FIXED_NOW)
    session_cache.clear()
    monkeypatch.setattr(recommendation_pipeline, "suggester", MockSuggester(limit=3))
    monkeypatch.setattr(settings, "suggestion_failure_policy", "empty")
    return TestClient(app)


def _login(client, email, role=None):
    body = {"email": email}
    if role:
        body["role"] = role
    response = client.post("/auth/login", json=body)
    assert response.status_code == 200
    data = response.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data


class TestAuthRoutes:
    """Test cases for the auth endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_login_new_email(self, client):
        """Test that a first login yields an incomplete profile."""
        # Act
        _, data = _login(client, "new@example.com")

        # Assert
        assert data["token_type"] == "bearer"
        assert data["session_state"] == "profile_incomplete"
        assert data["user"]["role"] is None
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["id"].startswith("user-")

    def test_login_rejects_invalid_email(self, client):
        response = client.post("/auth/login", json={"email": "not-an-email"})
        assert response.status_code == 422

    def test_complete_profile_then_read_back(self, client):
        """Test completing a profile and reading it through /users/me."""
        # Arrange
        headers, _ = _login(client, "alex@example.com")

        # Act
        response = client.post(
            "/auth/complete-profile",
            json={"role": "mentee", "profile": {"name": "Alex", "bio": "X"}},
            headers=headers,
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["session_state"] == "profile_complete"
        me = client.get("/users/me", headers=headers).json()
        assert me["role"] == "mentee"
        assert me["bio"] == "X"
        assert me["learning_goals"] == ""

    def test_session_restore_and_logout(self, client):
        """Test restoring the cached session and ending it."""
        # Arrange
        headers, data = _login(client, "mentee@example.com")

        # Act
        restored = client.get("/auth/session", headers=headers).json()
        logout = client.post("/auth/logout", headers=headers)
        after = client.get("/auth/session", headers=headers).json()

        # Assert
        assert restored["session_state"] == "profile_complete"
        assert restored["user"]["id"] == "mentee1"
        assert logout.status_code == 200
        assert after == {"session_state": "anonymous", "user": None}

    def test_session_without_token_is_anonymous(self, client):
        assert client.get("/auth/session").json()["session_state"] == "anonymous"

    def test_protected_route_requires_token(self, client):
        assert client.get("/users/me").status_code in (401, 403)
        bad = client.get("/users/me", headers={"Authorization": "Bearer garbage"})
        assert bad.status_code == 401

    def test_patch_profile(self, client):
        headers, _ = _login(client, "mentee@example.com")
        response = client.patch("/users/me", json={"bio": "Updated bio"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["bio"] == "Updated bio"
        assert response.json()["role"] == "mentee"


class TestMentorAndBookingRoutes:
    """Test cases for mentor directory, availability and bookings."""

    def test_mentor_directory_filters(self, client):
        assert [m["id"] for m in client.get("/mentors").json()] == ["mentor1"]
        assert len(client.get("/mentors", params={"university": "stanford"}).json()) == 1
        assert client.get("/mentors", params={"company": "meta"}).json() == []

    def test_get_mentor(self, client):
        assert client.get("/mentors/mentor1").json()["name"] == "Dr. Eleanor Vance"
        assert client.get("/mentors/mentee1").status_code == 404

    def test_booking_flow(self, client):
        """Test booking, the version counter, and the double-booking conflict."""
        # Arrange
        headers, _ = _login(client, "mentee@example.com")
        payload = {"mentor_id": "mentor@example.com", "slot_id": "slot1"}

        # Act
        first = client.post("/bookings", json=payload, headers=headers)
        second = client.post("/bookings", json=payload, headers=headers)

        # Assert
        assert first.status_code == 201
        assert first.json()["title"] == "Session with Dr. Eleanor Vance for Alex Chen"
        assert first.json()["meeting_link"].startswith("https://meet.google.com/")
        assert second.status_code == 409
        assert client.get("/bookings/version").json() == {"version": 1}
        schedule = client.get("/bookings/schedule", headers=headers).json()
        assert [b["slot_id"] for b in schedule] == ["slot1", "slot2"]

    def test_booking_unknown_slot(self, client):
        headers, _ = _login(client, "mentee@example.com")
        response = client.post("/bookings", json={"mentor_id": "mentor1", "slot_id": "nope"}, headers=headers)
        assert response.status_code == 404

    def test_mentor_cannot_book(self, client):
        headers, _ = _login(client, "mentor@example.com")
        response = client.post("/bookings", json={"mentor_id": "mentor1", "slot_id": "slot1"}, headers=headers)
        assert response.status_code == 403

    def test_calendar_link_for_participants_only(self, client):
        """Test calendar link access for a participant, a stranger and a missing booking."""
        # Arrange
        mentee_headers, _ = _login(client, "mentee@example.com")
        stranger_headers, _ = _login(client, "new@example.com")

        # Act
        ok = client.get("/bookings/mentor1/slot2/calendar-link", headers=mentee_headers)
        forbidden = client.get("/bookings/mentor1/slot2/calendar-link", headers=stranger_headers)
        missing = client.get("/bookings/mentor1/slot1/calendar-link", headers=mentee_headers)

        # Assert
        assert ok.status_code == 200
        assert "dates=20300103T120000Z%2F20300103T130000Z" in ok.json()["url"]
        assert forbidden.status_code == 403
        assert missing.status_code == 404

    def test_update_availability(self, client):
        """Test that a mentor replaces their slots and mentees cannot."""
        # Arrange
        mentor_headers, _ = _login(client, "mentor@example.com")
        mentee_headers, _ = _login(client, "mentee@example.com")
        body = {"slots": [{
            "id": "a1",
            "start_time": "2030-02-01T09:00:00",
            "end_time": "2030-02-01T10:00:00",
            "timezone": "PST",
        }, {
            "id": "slot2",
            "start_time": "2030-01-03T12:00:00Z",
            "end_time": "2030-01-03T13:00:00Z",
        }]}

        # Act
        response = client.put("/mentors/me/availability", json=body, headers=mentor_headers)

        # Assert
        assert response.status_code == 200
        slots = response.json()["availability_slots"]
        assert [s["id"] for s in slots] == ["a1", "slot2"]
        assert slots[1]["is_booked"] is True
        assert slots[0]["start_time"].startswith("2030-02-01T17:00:00")
        assert client.put("/mentors/me/availability", json=body, headers=mentee_headers).status_code == 403

    def test_update_availability_keeps_booked_slots(self, client):
        """Test that dropping the booked slot or patching slots via the profile is refused."""
        # Arrange
        headers, _ = _login(client, "mentor@example.com")
        version_before = client.get("/bookings/version", headers=headers).json()["version"]

        # Act
        dropped = client.put("/mentors/me/availability", json={"slots": []}, headers=headers)
        patched = client.patch("/users/me", json={"availability_slots": []}, headers=headers)

        # Assert
        assert dropped.status_code == 409
        assert patched.status_code == 200
        assert [s["id"] for s in patched.json()["availability_slots"]] == ["slot1", "slot2"]
        assert client.get("/bookings/version", headers=headers).json()["version"] == version_before

    def test_update_availability_bad_timezone(self, client):
        headers, _ = _login(client, "mentor@example.com")
        body = {"slots": [{
            "start_time": "2030-02-01T09:00:00",
            "end_time": "2030-02-01T10:00:00",
            "timezone": "Nowhere/Special",
        }]}
        assert client.put("/mentors/me/availability", json=body, headers=headers).status_code == 400


class TestCatalogRoutes:
    """Test cases for group session and webinar endpoints."""

    def test_group_session_lifecycle(self, client):
        """Test create, list, join and delete of a group session."""
        # Arrange
        mentor_headers, _ = _login(client, "mentor@example.com")
        mentee_headers, _ = _login(client, "mentee@example.com")

        # Act
        created = client.post(
            "/group-sessions",
            json={"title": "Resume Review", "date": "Dec 1st", "max_participants": 10},
            headers=mentor_headers,
        )
        session_id = created.json()["id"]
        joined = client.post(f"/group-sessions/{session_id}/join", headers=mentee_headers)
        mine = client.get("/group-sessions/mine", headers=mentor_headers)
        deleted = client.delete(f"/group-sessions/{session_id}", headers=mentor_headers)

        # Assert
        assert created.status_code == 201
        assert created.json()["host_name"] == "Dr. Eleanor Vance"
        assert joined.json()["participant_count"] == 1
        assert len(mine.json()) == 4
        assert deleted.status_code == 200
        assert client.get(f"/group-sessions/{session_id}").status_code == 404
        assert len(client.get("/group-sessions").json()) == 3

    def test_mentee_cannot_create_group_session(self, client):
        headers, _ = _login(client, "mentee@example.com")
        response = client.post("/group-sessions", json={"title": "x", "date": "y"}, headers=headers)
        assert response.status_code == 403

    def test_webinar_create_and_delete(self, client):
        headers, _ = _login(client, "mentor@example.com")
        created = client.post("/webinars", json={"title": "Essays", "date": "Dec 3rd"}, headers=headers)
        assert created.status_code == 201
        assert len(client.get("/webinars/mine", headers=headers).json()) == 4
        assert client.delete(f"/webinars/{created.json()['id']}", headers=headers).status_code == 200
        assert client.get("/webinars/web-missing").status_code == 404

    def test_webinar_reminder(self, client):
        """Test reminder intake acknowledgement and validation."""
        # Act
        ok = client.post(
            "/webinars/web1/reminders",
            json={"contact_info": "alex@example.com", "event_title": "The Future of Generative AI",
                  "event_date": "November 8th, 2024"},
        )
        empty = client.post(
            "/webinars/web1/reminders",
            json={"contact_info": "", "event_title": "T", "event_date": "D"},
        )
        missing = client.post(
            "/webinars/web-missing/reminders",
            json={"contact_info": "a", "event_title": "T", "event_date": "D"},
        )

        # Assert
        assert ok.status_code == 200
        assert ok.json()["success"] is True
        assert "The Future of Generative AI" in ok.json()["message"]
        assert empty.status_code == 422
        assert missing.status_code == 404


class TestRecommendationRoutes:
    """Test cases for the suggestion endpoints."""

    def test_suggestions_for_mentee(self, client):
        headers, _ = _login(client, "mentee@example.com")

        mentors = client.get("/recommendations/mentors", headers=headers)
        sessions = client.get("/recommendations/group-sessions", headers=headers)
        webinars = client.get("/recommendations/webinars", headers=headers)

        assert mentors.status_code == 200
        assert mentors.json()[0]["mentor"]["id"] == "mentor1"
        assert 0 <= mentors.json()[0]["relevance_score"] <= 1
        assert 1 <= len(sessions.json()) <= 3
        assert all(item["webinar"]["id"].startswith("web") for item in webinars.json())

    def test_mentor_cannot_request_suggestions(self, client):
        headers, _ = _login(client, "mentor@example.com")
        assert client.get("/recommendations/mentors", headers=headers).status_code == 403

    def test_failure_policy(self, client, monkeypatch):
        """Test that a failing suggester yields [] or 502 depending on policy."""
        # Arrange
        failing = MagicMock(spec=BaseSuggester)
        failing.suggest_mentors = AsyncMock(side_effect=RuntimeError("model down"))
        monkeypatch.setattr(recommendation_pipeline, "suggester", failing)
        headers, _ = _login(client, "mentee@example.com")

        # Act
        soft = client.get("/recommendations/mentors", headers=headers)
        monkeypatch.setattr(settings, "suggestion_failure_policy", "raise")
        hard = client.get("/recommendations/mentors", headers=headers)

        # Assert
        assert soft.status_code == 200
        assert soft.json() == []
        assert hard.status_code == 502
