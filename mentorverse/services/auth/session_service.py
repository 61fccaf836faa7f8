"""
Session facade: login, profile completion and the booking operations the client
calls, with every mutation written through to the session cache.

Sessions are identified by an id carried in the access token. Login is a mock:
any email is accepted and no credential is checked.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Type

from mentorverse.core.config import settings
from mentorverse.core.security.jwt_auth import create_user_token
from mentorverse.models.models import (
    AvailabilitySlotInput, Booking, IncompleteProfile, MentorProfile, ProfileBase,
    ProfileDetails, ROLE_PROFILE_MODELS, SessionState, UserProfile, UserRole
)
from mentorverse.services.booking.booking_service import BookingService, booking_service
from mentorverse.services.cache.session_cache import SessionCache, session_cache
from mentorverse.services.store.profile_store import ProfileStore, profile_store

logger = logging.getLogger(__name__)

COMMON_FIELDS = set(ProfileBase.model_fields)


def _model_for(role: Optional[UserRole]) -> Type[ProfileBase]:
    if role is None:
        return IncompleteProfile
    return ROLE_PROFILE_MODELS[UserRole(role)]


def _rebuild(current: UserProfile, role: Optional[UserRole], updates: Dict[str, Any]) -> UserProfile:
    """Build the `role` variant from the current record plus updates.

    Common fields always carry over; role-specific fields carry over only when
    the variant is unchanged. Fields the variant does not have are dropped and
    missing ones take the variant's defaults.
    """
    model = _model_for(role)
    record = current.model_dump()
    if type(current) is not model:
        record = {k: v for k, v in record.items() if k in COMMON_FIELDS}
    record.pop("role", None)
    record.update({k: v for k, v in updates.items() if k in model.model_fields and k != "role"})
    return model.model_validate(record)


def _submitted_fields(details: ProfileDetails) -> Dict[str, Any]:
    """Fields the caller actually sent; nested records are dumped whole"""
    return details.model_dump(include=details.model_fields_set, exclude_none=True)


def _default_name(email: str) -> str:
    return email.split("@")[0] or "New User"


class SessionService:
    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        cache: Optional[SessionCache] = None,
        bookings: Optional[BookingService] = None,
        latency_ms: Optional[int] = None,
    ):
        self.store = store or profile_store
        self.cache = cache or session_cache
        self.bookings = bookings or booking_service
        self.latency_ms = settings.simulated_latency_ms if latency_ms is None else latency_ms

    async def _simulate_latency(self) -> None:
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000)

    def _write_through(self, session_id: str, profile: UserProfile) -> UserProfile:
        self.cache.put(session_id, profile)
        return profile

    @staticmethod
    def session_state(profile: Optional[UserProfile]) -> SessionState:
        if profile is None:
            return SessionState.ANONYMOUS
        if profile.role is None:
            return SessionState.PROFILE_INCOMPLETE
        return SessionState.PROFILE_COMPLETE

    async def login(self, email: str, role: Optional[UserRole] = None) -> Tuple[UserProfile, str]:
        """Start a session for an email, creating a bare profile for unknown emails.

        A known user logging in with a different role has the role overwritten;
        the profile is rebuilt as the new variant with its default fields.
        """
        role = UserRole(role) if role is not None else None
        await self._simulate_latency()

        profile = self.store.get(email)
        if profile is None:
            profile = _model_for(role)(
                id=f"user-{uuid.uuid4().hex}",
                email=email,
                name=_default_name(email),
            )
            profile = self.store.upsert(email, profile)
            logger.info(f"Created profile {profile.id} for {email} (role: {role.value if role else 'unset'})")
        elif role is not None and profile.role != role:
            logger.info(f"Switching {email} from role {profile.role or 'unset'} to {role.value}")
            profile = self.store.upsert(email, _rebuild(profile, role, {}))

        session_id = uuid.uuid4().hex
        token = create_user_token(user_id=profile.id, email=profile.email, session_id=session_id)
        self._write_through(session_id, profile)
        logger.info(f"User {profile.id} logged in, session {session_id}")
        return profile, token

    async def complete_profile(
        self, session_id: str, user: UserProfile, data: ProfileDetails, role: UserRole
    ) -> UserProfile:
        """Set the role and merge submitted fields over role defaults"""
        role = UserRole(role)
        await self._simulate_latency()

        current = self.store.get(user.email) or user
        updates = _submitted_fields(data)
        completed = self.store.upsert(current.email, _rebuild(current, role, updates))
        logger.info(f"Profile {completed.id} completed as {role.value}")
        return self._write_through(session_id, completed)

    async def update_profile(
        self, session_id: str, user: UserProfile, partial: ProfileDetails
    ) -> UserProfile:
        """Patch the current record's fields; the role is left as it is"""
        await self._simulate_latency()

        current = self.store.get(user.email) or user
        updates = _submitted_fields(partial)
        updated = self.store.upsert(current.email, _rebuild(current, current.role, updates))
        logger.info(f"Profile {updated.id} updated: {sorted(updates)}")
        return self._write_through(session_id, updated)

    async def logout(self, session_id: str) -> None:
        """Forget the session; the stored profile is kept"""
        self.cache.remove(session_id)
        logger.info(f"Session {session_id} logged out")

    async def restore_session(self, session_id: str) -> Optional[UserProfile]:
        return self.cache.get(session_id)

    async def confirm_booking(
        self, session_id: str, mentee: UserProfile, mentor_key: str, slot_id: str
    ) -> Booking:
        await self._simulate_latency()
        booking = await self.bookings.confirm_booking(mentor_key, slot_id, mentee)
        self._write_through(session_id, booking.mentee)
        return booking

    async def update_availability(
        self, session_id: str, mentor: UserProfile, slots: List[AvailabilitySlotInput]
    ) -> MentorProfile:
        await self._simulate_latency()
        updated = await self.bookings.update_availability(mentor.id, slots)
        return self._write_through(session_id, updated)

    async def fetch_schedule(self, session_id: str, user: UserProfile) -> List[Booking]:
        await self._simulate_latency()
        schedule = await self.bookings.list_scheduled_sessions_for(user.id)
        fresh = self.store.get_by_id(user.id)
        if fresh is not None:
            self._write_through(session_id, fresh)
        return schedule


# Service instance
session_service = SessionService()
