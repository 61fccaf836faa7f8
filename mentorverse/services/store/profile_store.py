"""
In-memory profile store.

The store is the only source of truth for user records, keyed by email. All
mutations go through `execute()`, which applies a command object under a single
lock; records are copied on the way in and on the way out so callers never hold
a reference into stored state.
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel

from mentorverse.models.models import MentorProfile, UserProfile, UserRole

logger = logging.getLogger(__name__)

BookingKey = Tuple[str, str]  # (mentor_id, slot_id)


def _copy(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    if isinstance(value, list):
        return [_copy(item) for item in value]
    return value


class StoreState:
    """Mutable state handed to commands while the store lock is held"""

    def __init__(self):
        self.profiles: Dict[str, UserProfile] = {}
        self.email_by_id: Dict[str, str] = {}
        self.bookings_by_user: Dict[str, Set[BookingKey]] = defaultdict(set)
        self.version = 0

    def get(self, email: str) -> Optional[UserProfile]:
        return self.profiles.get(email)

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        email = self.email_by_id.get(user_id)
        return self.profiles.get(email) if email else None

    def resolve(self, key: str) -> Optional[UserProfile]:
        """Look a user up by email first, then by id"""
        return self.get(key) or self.get_by_id(key)

    def put(self, email: str, profile: UserProfile) -> UserProfile:
        previous = self.profiles.get(email)
        if previous is not None:
            self._unindex(previous)
        stored = _copy(profile)
        self.profiles[email] = stored
        self._index(email, stored)
        return stored

    def _index(self, email: str, profile: UserProfile) -> None:
        self.email_by_id[profile.id] = email
        if isinstance(profile, MentorProfile):
            for slot in profile.availability_slots:
                if slot.is_booked:
                    key = (profile.id, slot.id)
                    self.bookings_by_user[profile.id].add(key)
                    if slot.booked_by_mentee_id:
                        self.bookings_by_user[slot.booked_by_mentee_id].add(key)

    def _unindex(self, profile: UserProfile) -> None:
        self.email_by_id.pop(profile.id, None)
        if isinstance(profile, MentorProfile):
            for slot in profile.availability_slots:
                key = (profile.id, slot.id)
                self.bookings_by_user[profile.id].discard(key)
                if slot.booked_by_mentee_id:
                    self.bookings_by_user[slot.booked_by_mentee_id].discard(key)


class StoreCommand:
    """A mutation applied to the store state under the store lock"""

    bumps_version = False

    def apply(self, state: StoreState) -> Any:
        raise NotImplementedError


class UpsertProfile(StoreCommand):
    def __init__(self, email: str, record: UserProfile):
        self.email = email
        self.record = record

    def apply(self, state: StoreState) -> UserProfile:
        return state.put(self.email, self.record)


class ProfileStore:
    def __init__(self):
        self._lock = threading.RLock()
        self._state = StoreState()

    @property
    def version(self) -> int:
        with self._lock:
            return self._state.version

    def execute(self, command: StoreCommand) -> Any:
        """Apply a command atomically; the version only moves when it succeeds"""
        with self._lock:
            result = command.apply(self._state)
            if command.bumps_version:
                self._state.version += 1
                logger.info(f"Store version bumped to {self._state.version} by {type(command).__name__}")
            return _copy(result)

    def get(self, email: str) -> Optional[UserProfile]:
        with self._lock:
            return _copy(self._state.get(email))

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            return _copy(self._state.get_by_id(user_id))

    def upsert(self, email: str, record: UserProfile) -> UserProfile:
        """Replace or insert a record; callers merge prior fields themselves"""
        return self.execute(UpsertProfile(email, record))

    def list_profiles(self, role: Optional[UserRole] = None) -> List[UserProfile]:
        with self._lock:
            profiles = list(self._state.profiles.values())
            if role is not None:
                profiles = [p for p in profiles if p.role == role]
            return _copy(profiles)

    def booking_keys_for(self, user_id: str) -> List[BookingKey]:
        """(mentor_id, slot_id) pairs of booked slots involving the user"""
        with self._lock:
            return sorted(self._state.bookings_by_user.get(user_id, set()))

    def reset(self) -> None:
        with self._lock:
            self._state = StoreState()


# Store instance
profile_store = ProfileStore()
