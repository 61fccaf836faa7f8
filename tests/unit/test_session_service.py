"""
Unit tests for the session facade.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from conftest import FIXED_NOW
from mentorverse.core.security.jwt_auth import verify_token
from mentorverse.models.models import (
    AvailabilitySlotInput, ExperienceItem, IncompleteProfile, MenteeProfile, MentorProfile,
    ProfileDetails, SessionState, UserRole
)
from mentorverse.services.auth.session_service import SessionService


def _session_id(token: str) -> str:
    return verify_token(token)["sid"]


@pytest.fixture
def facade(seeded_store, cache, booking_svc) -> SessionService:
    return SessionService(store=seeded_store, cache=cache, bookings=booking_svc, latency_ms=0)


class TestLogin:
    """Test cases for SessionService.login."""

    @pytest.mark.asyncio
    async def test_login_unknown_email_creates_bare_profile(self, facade, seeded_store):
        """Test that a new email gets a role-less profile with a fresh id."""
        # Act
        profile, token = await facade.login("new@example.com")

        # Assert
        assert isinstance(profile, IncompleteProfile)
        assert profile.role is None
        assert profile.email == "new@example.com"
        assert profile.name == "new"
        assert profile.id.startswith("user-")
        assert seeded_store.get("new@example.com").id == profile.id
        assert facade.session_state(profile) == SessionState.PROFILE_INCOMPLETE

    @pytest.mark.asyncio
    async def test_token_identifies_user_and_session(self, facade):
        """Test the claims carried by the access token."""
        # Act
        profile, token = await facade.login("new@example.com")

        # Assert
        payload = verify_token(token)
        assert payload["user_id"] == profile.id
        assert payload["email"] == "new@example.com"
        assert payload["sid"]

    @pytest.mark.asyncio
    async def test_login_again_reuses_profile(self, facade):
        """Test that logging in twice keeps the same id."""
        first, _ = await facade.login("new@example.com")
        second, _ = await facade.login("new@example.com")
        assert first.id == second.id

    @pytest.mark.asyncio
    async def test_login_with_role_creates_completed_variant(self, facade):
        """Test that a role given at signup yields that variant with defaults."""
        # Act
        profile, _ = await facade.login("fresh@example.com", UserRole.MENTEE)

        # Assert
        assert isinstance(profile, MenteeProfile)
        assert profile.learning_goals == ""
        assert profile.desired_universities == []
        assert facade.session_state(profile) == SessionState.PROFILE_COMPLETE

    @pytest.mark.asyncio
    async def test_login_known_email_same_role_keeps_fields(self, facade):
        """Test that a matching role leaves the stored profile as it is."""
        profile, _ = await facade.login("mentee@example.com", UserRole.MENTEE)
        assert profile.id == "mentee1"
        assert profile.desired_companies == ["Google", "Meta", "Netflix"]

    @pytest.mark.asyncio
    async def test_login_known_email_other_role_overwrites_role(self, facade, seeded_store):
        """Test that a differing role rebuilds the profile as the other variant."""
        # Act
        profile, _ = await facade.login("mentee@example.com", UserRole.MENTOR)

        # Assert
        assert isinstance(profile, MentorProfile)
        assert profile.id == "mentee1"
        assert profile.name == "Alex Chen"
        assert profile.expertise == []
        assert profile.years_of_experience == 0
        assert seeded_store.get("mentee@example.com").role == UserRole.MENTOR

    @pytest.mark.asyncio
    async def test_login_writes_session_through_to_cache(self, facade, cache):
        """Test that the new session can be restored from the cache."""
        # Act
        profile, token = await facade.login("new@example.com")

        # Assert
        restored = await facade.restore_session(_session_id(token))
        assert restored == profile

    @pytest.mark.asyncio
    async def test_simulated_latency(self, seeded_store, cache, booking_svc, monkeypatch):
        """Test that configured latency is awaited before the operation."""
        # Arrange
        sleep = AsyncMock()
        monkeypatch.setattr("mentorverse.services.auth.session_service.asyncio.sleep", sleep)
        facade = SessionService(store=seeded_store, cache=cache, bookings=booking_svc, latency_ms=500)

        # Act
        await facade.login("new@example.com")

        # Assert
        sleep.assert_awaited_once_with(0.5)


class TestProfileLifecycle:
    """Test cases for completing and updating profiles."""

    @pytest.mark.asyncio
    async def test_complete_profile_round_trip(self, facade, seeded_store):
        """Test that completed fields are readable back from the store."""
        # Arrange
        profile, token = await facade.login("alex@example.com")

        # Act
        await facade.complete_profile(
            _session_id(token), profile, ProfileDetails(name="Alex", bio="X"), UserRole.MENTEE
        )

        # Assert
        stored = seeded_store.get("alex@example.com")
        assert stored.role == "mentee"
        assert stored.bio == "X"
        assert stored.name == "Alex"
        assert stored.id == profile.id
        assert stored.desired_job_roles == []

    @pytest.mark.asyncio
    async def test_complete_profile_resubmission_is_stable(self, facade, seeded_store):
        """Test that submitting the same data twice leaves the fields equal."""
        # Arrange
        profile, token = await facade.login("eve@example.com")
        sid = _session_id(token)
        details = ProfileDetails(
            name="Eve",
            expertise=["Distributed Systems"],
            companies=[
                ExperienceItem(institution_name="Acme", role_or_degree="Staff Engineer", start_date="2019-01-01"),
            ],
            years_of_experience=7,
        )

        # Act
        first = await facade.complete_profile(sid, profile, details, UserRole.MENTOR)
        second = await facade.complete_profile(sid, first, details, UserRole.MENTOR)

        # Assert
        assert first.model_dump() == second.model_dump()
        assert seeded_store.get("eve@example.com").model_dump() == first.model_dump()

    @pytest.mark.asyncio
    async def test_complete_profile_drops_other_variant_fields(self, facade):
        """Test that switching variant leaves no fields of the old one behind."""
        # Arrange
        profile, token = await facade.login("new@example.com")

        # Act
        completed = await facade.complete_profile(
            _session_id(token),
            profile,
            ProfileDetails(expertise=["Rust"], learning_goals="ignored for mentors"),
            UserRole.MENTOR,
        )

        # Assert
        assert isinstance(completed, MentorProfile)
        assert completed.expertise == ["Rust"]
        assert not hasattr(completed, "learning_goals")

    @pytest.mark.asyncio
    async def test_complete_profile_updates_cache(self, facade, cache):
        """Test the write-through after completing a profile."""
        # Arrange
        profile, token = await facade.login("new@example.com")
        sid = _session_id(token)

        # Act
        completed = await facade.complete_profile(sid, profile, ProfileDetails(bio="hi"), UserRole.MENTEE)

        # Assert
        assert cache.get(sid) == completed

    @pytest.mark.asyncio
    async def test_update_profile_patches_fields_and_keeps_role(self, facade, seeded_store):
        """Test that a partial update touches only the given fields."""
        # Arrange
        mentee, token = await facade.login("mentee@example.com")

        # Act
        updated = await facade.update_profile(_session_id(token), mentee, ProfileDetails(bio="New bio"))

        # Assert
        assert updated.role == "mentee"
        assert updated.bio == "New bio"
        assert updated.desired_universities == ["Stanford University", "Carnegie Mellon University"]
        assert seeded_store.get("mentee@example.com").bio == "New bio"

    @pytest.mark.asyncio
    async def test_update_profile_cannot_touch_availability(self, facade, seeded_store, booking_svc):
        """Test that slots sent with a profile update are ignored; availability has its own path."""
        # Arrange
        mentor, token = await facade.login("mentor@example.com")
        version_before = seeded_store.version
        partial = ProfileDetails.model_validate({"bio": "Updated", "availability_slots": []})

        # Act
        updated = await facade.update_profile(_session_id(token), mentor, partial)

        # Assert
        assert updated.bio == "Updated"
        assert [s.id for s in updated.availability_slots] == ["slot1", "slot2"]
        assert seeded_store.version == version_before
        schedule = await booking_svc.list_scheduled_sessions_for("mentee1")
        assert [b.slot_id for b in schedule] == ["slot2"]

    @pytest.mark.asyncio
    async def test_logout_clears_session_but_keeps_profile(self, facade, seeded_store):
        """Test that logout only forgets the cached session."""
        # Arrange
        profile, token = await facade.login("new@example.com")
        sid = _session_id(token)

        # Act
        await facade.logout(sid)

        # Assert
        assert await facade.restore_session(sid) is None
        assert seeded_store.get("new@example.com").id == profile.id
        assert facade.session_state(None) == SessionState.ANONYMOUS


class TestFacadeBookingOperations:
    """Test cases for booking operations exposed by the facade."""

    @pytest.mark.asyncio
    async def test_confirm_booking_writes_through(self, facade, cache, seeded_store):
        """Test that confirming a booking refreshes the cached mentee."""
        # Arrange
        mentee, token = await facade.login("mentee@example.com")
        sid = _session_id(token)

        # Act
        booking = await facade.confirm_booking(sid, mentee, "mentor@example.com", "slot1")

        # Assert
        assert booking.slot_id == "slot1"
        assert cache.get(sid).id == "mentee1"
        assert seeded_store.version == 1

    @pytest.mark.asyncio
    async def test_update_availability_writes_through(self, facade, cache):
        """Test that the mentor's cached record shows the new slots."""
        # Arrange
        mentor, token = await facade.login("mentor@example.com")
        sid = _session_id(token)

        # Act
        await facade.update_availability(sid, mentor, [
            AvailabilitySlotInput(id="new-slot", start_time=datetime(2030, 5, 1, 9), end_time=datetime(2030, 5, 1, 10)),
            AvailabilitySlotInput(
                id="slot2",
                start_time=FIXED_NOW + timedelta(hours=48),
                end_time=FIXED_NOW + timedelta(hours=49),
            ),
        ])

        # Assert
        assert [s.id for s in cache.get(sid).availability_slots] == ["new-slot", "slot2"]

    @pytest.mark.asyncio
    async def test_fetch_schedule(self, facade):
        """Test that the seeded booking shows up in the mentee's schedule."""
        # Arrange
        mentee, token = await facade.login("mentee@example.com")

        # Act
        schedule = await facade.fetch_schedule(_session_id(token), mentee)

        # Assert
        assert [b.id for b in schedule] == ["mentor1:slot2"]
