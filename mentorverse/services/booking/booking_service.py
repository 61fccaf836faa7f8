"""
Booking ledger: per-mentor availability slots and the bookings derived from them
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from mentorverse.core.config import settings
from mentorverse.core.errors import (
    BookingRuleViolation, ConflictError, NotFoundError, PermissionDeniedError
)
from mentorverse.models.models import (
    AvailabilitySlot, AvailabilitySlotInput, Booking, MenteeProfile, MentorProfile,
    UserProfile, UserRole
)
from mentorverse.services.store.profile_store import (
    ProfileStore, StoreCommand, StoreState, profile_store
)
from mentorverse.utils.calendar_links import build_google_calendar_link, generate_meeting_link
from mentorverse.utils.timezone_utils import timezone_utils

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _find_slot(mentor: MentorProfile, slot_id: str) -> Optional[AvailabilitySlot]:
    return next((slot for slot in mentor.availability_slots if slot.id == slot_id), None)


@dataclass
class BookingRules:
    """Optional checks applied before a slot is booked; all off by default"""
    reject_past_slots: bool = False
    reject_overlapping_bookings: bool = False

    @classmethod
    def from_settings(cls) -> "BookingRules":
        return cls(
            reject_past_slots=settings.reject_past_slots,
            reject_overlapping_bookings=settings.reject_overlapping_bookings,
        )

    def check(self, slot: AvailabilitySlot, mentee_id: str, state: StoreState, now: datetime) -> None:
        if self.reject_past_slots and slot.start_time <= now:
            raise BookingRuleViolation(f"Slot {slot.id} has already started")

        if self.reject_overlapping_bookings:
            for mentor_id, other_slot_id in state.bookings_by_user.get(mentee_id, set()):
                mentor = state.get_by_id(mentor_id)
                if not isinstance(mentor, MentorProfile):
                    continue
                other = _find_slot(mentor, other_slot_id)
                if other and other.start_time < slot.end_time and slot.start_time < other.end_time:
                    raise BookingRuleViolation(
                        f"Slot {slot.id} overlaps an existing booking with {mentor.name}"
                    )


class BookSlot(StoreCommand):
    """Mark an unbooked slot as booked by a mentee"""

    bumps_version = True

    def __init__(
        self,
        mentor_key: str,
        slot_id: str,
        mentee_id: str,
        rules: BookingRules,
        meeting_link: Optional[str] = None,
        now: Optional[datetime] = None,
    ):
        self.mentor_key = mentor_key
        self.slot_id = slot_id
        self.mentee_id = mentee_id
        self.rules = rules
        self.meeting_link = meeting_link
        self.now = now or datetime.now(timezone.utc)

    def apply(self, state: StoreState) -> MentorProfile:
        mentor = state.resolve(self.mentor_key)
        if not isinstance(mentor, MentorProfile):
            raise NotFoundError(f"Mentor {self.mentor_key} not found")

        slot = _find_slot(mentor, self.slot_id)
        if slot is None:
            raise NotFoundError(f"Slot {self.slot_id} not found for mentor {mentor.name}")
        if slot.is_booked:
            raise ConflictError(f"Slot {self.slot_id} is already booked")

        self.rules.check(slot, self.mentee_id, state, self.now)

        updated = mentor.model_copy(deep=True)
        booked = _find_slot(updated, self.slot_id)
        booked.is_booked = True
        booked.booked_by_mentee_id = self.mentee_id
        booked.meeting_link = booked.meeting_link or self.meeting_link
        return state.put(mentor.email, updated)


class ReplaceAvailability(StoreCommand):
    """Replace a mentor's open slots; booked slots are carried over unchanged.

    Every booked slot must be resubmitted with its original times. New or
    moved slots must start in the future and no two slots may overlap.
    """

    bumps_version = True

    def __init__(self, mentor_id: str, slots: List[AvailabilitySlot], now: Optional[datetime] = None):
        self.mentor_id = mentor_id
        self.slots = slots
        self.now = now or datetime.now(timezone.utc)

    def apply(self, state: StoreState) -> MentorProfile:
        profile = state.get_by_id(self.mentor_id)
        if profile is None:
            raise NotFoundError(f"User {self.mentor_id} not found")
        if not isinstance(profile, MentorProfile):
            raise PermissionDeniedError("Only mentors can set availability")

        current = {slot.id: slot for slot in profile.availability_slots}
        submitted = {slot.id: slot for slot in self.slots}

        for slot in profile.availability_slots:
            if not slot.is_booked:
                continue
            resubmitted = submitted.get(slot.id)
            if resubmitted is None:
                raise ConflictError(f"Slot {slot.id} is booked and cannot be removed")
            if (resubmitted.start_time, resubmitted.end_time) != (slot.start_time, slot.end_time):
                raise ConflictError(f"Slot {slot.id} is booked and cannot be moved")

        replacement = []
        for slot in self.slots:
            existing = current.get(slot.id)
            if existing is not None and (existing.start_time, existing.end_time) == (slot.start_time, slot.end_time):
                replacement.append(existing.model_copy(deep=True))
                continue
            if slot.start_time <= self.now:
                raise ValueError(f"Slot {slot.id} starts in the past")
            replacement.append(slot.model_copy(deep=True))

        ordered = sorted(replacement, key=lambda slot: slot.start_time)
        for earlier, later in zip(ordered, ordered[1:]):
            if later.start_time < earlier.end_time:
                raise ValueError(f"Slot {later.id} overlaps slot {earlier.id}")

        updated = profile.model_copy(deep=True)
        updated.availability_slots = replacement
        return state.put(profile.email, updated)


class BookingService:
    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        rules: Optional[BookingRules] = None,
        meeting_link_factory: Callable[[], str] = generate_meeting_link,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store or profile_store
        self.rules = rules or BookingRules.from_settings()
        self.meeting_link_factory = meeting_link_factory
        self.clock = clock

    @property
    def version(self) -> int:
        return self.store.version

    async def confirm_booking(self, mentor_key: str, slot_id: str, mentee: UserProfile) -> Booking:
        """Book one of a mentor's slots for the calling mentee"""
        if mentee.role != UserRole.MENTEE:
            raise PermissionDeniedError("Only mentees can book sessions")

        mentor = self.store.execute(
            BookSlot(
                mentor_key=mentor_key,
                slot_id=slot_id,
                mentee_id=mentee.id,
                rules=self.rules,
                meeting_link=self.meeting_link_factory(),
                now=self.clock(),
            )
        )
        logger.info(f"Slot {slot_id} of mentor {mentor.id} booked by mentee {mentee.id}")

        stored_mentee = self.store.get_by_id(mentee.id)
        if not isinstance(stored_mentee, MenteeProfile):
            stored_mentee = mentee
        return self._build_booking(mentor, _find_slot(mentor, slot_id), stored_mentee)

    async def update_availability(
        self, mentor_id: str, slots: List[AvailabilitySlotInput]
    ) -> MentorProfile:
        """Replace the mentor's availability; booked slots must be kept as they are"""
        converted = []
        seen_ids = set()
        for slot_input in slots:
            slot = AvailabilitySlot(
                start_time=timezone_utils.convert_to_utc(slot_input.start_time, slot_input.timezone),
                end_time=timezone_utils.convert_to_utc(slot_input.end_time, slot_input.timezone),
                **({"id": slot_input.id} if slot_input.id else {}),
            )
            if slot.id in seen_ids:
                raise ValueError(f"Duplicate slot id {slot.id}")
            seen_ids.add(slot.id)
            converted.append(slot)

        mentor = self.store.execute(ReplaceAvailability(mentor_id, converted, now=self.clock()))
        logger.info(f"Availability for mentor {mentor_id} replaced with {len(converted)} slots")
        return mentor

    async def list_scheduled_sessions_for(self, user_id: str) -> List[Booking]:
        """Booked slots where the user is the mentor or the mentee, oldest first"""
        bookings = []
        for mentor_id, slot_id in self.store.booking_keys_for(user_id):
            booking = self._load_booking(mentor_id, slot_id)
            if booking is not None:
                bookings.append(booking)

        bookings.sort(key=lambda booking: booking.start_time)
        return bookings

    async def get_booking(self, mentor_id: str, slot_id: str) -> Booking:
        booking = self._load_booking(mentor_id, slot_id)
        if booking is None:
            raise NotFoundError(f"Booking {mentor_id}:{slot_id} not found")
        return booking

    def calendar_link_for(self, booking: Booking) -> str:
        return build_google_calendar_link(
            title=booking.title,
            start_time=booking.start_time,
            end_time=booking.end_time,
            details=f"Mentorship session between {booking.mentor.name} and {booking.mentee.name}.",
            location=booking.meeting_link,
        )

    def _load_booking(self, mentor_id: str, slot_id: str) -> Optional[Booking]:
        mentor = self.store.get_by_id(mentor_id)
        if not isinstance(mentor, MentorProfile):
            return None
        slot = _find_slot(mentor, slot_id)
        if slot is None or not slot.is_booked or not slot.booked_by_mentee_id:
            return None

        mentee = self.store.get_by_id(slot.booked_by_mentee_id)
        if not isinstance(mentee, MenteeProfile):
            # Dangling reference: the booking is left out of every listing
            logger.debug(f"Skipping booking {mentor_id}:{slot_id}, mentee {slot.booked_by_mentee_id} not found")
            return None
        return self._build_booking(mentor, slot, mentee)

    @staticmethod
    def _build_booking(mentor: MentorProfile, slot: AvailabilitySlot, mentee: MenteeProfile) -> Booking:
        return Booking(
            id=f"{mentor.id}:{slot.id}",
            mentor_id=mentor.id,
            mentee_id=mentee.id,
            slot_id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            title=f"Session with {mentor.name} for {mentee.name}",
            meeting_link=slot.meeting_link,
            mentor=mentor,
            mentee=mentee,
        )


# Service instance
booking_service = BookingService()
