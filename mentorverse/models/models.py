from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal, Union
from datetime import date, datetime, timezone
from enum import Enum
import uuid


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class UserRole(str, Enum):
    MENTEE = "mentee"
    MENTOR = "mentor"


class MentorshipFocus(str, Enum):
    CAREER = "career"
    UNIVERSITY = "university"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    PROFILE_INCOMPLETE = "profile_incomplete"
    PROFILE_COMPLETE = "profile_complete"


# Profile building blocks
class ExperienceItem(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("exp"))
    institution_name: str  # University or company name
    role_or_degree: str  # Job title or degree
    start_date: date
    end_date: Optional[date] = None  # None means ongoing
    description: Optional[str] = None


class AvailabilitySlot(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("slot"))
    start_time: datetime
    end_time: datetime
    is_booked: bool = False
    booked_by_mentee_id: Optional[str] = None
    meeting_link: Optional[str] = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive datetimes are stored as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode='after')
    def check_slot(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        if self.is_booked != bool(self.booked_by_mentee_id):
            raise ValueError("booked_by_mentee_id must be set exactly when the slot is booked")
        return self


# User profiles: one shared base, three sibling variants
class ProfileBase(BaseModel):
    id: str
    email: str
    name: str
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    interests: List[str] = []


class IncompleteProfile(ProfileBase):
    """Profile created at first login, before a role has been chosen"""
    role: None = None


class MentorProfile(ProfileBase):
    role: Literal["mentor"] = "mentor"
    expertise: List[str] = []
    universities: List[ExperienceItem] = []
    companies: List[ExperienceItem] = []
    availability_slots: List[AvailabilitySlot] = []
    years_of_experience: int = 0
    hourly_rate: Optional[float] = None
    mentorship_focus: List[MentorshipFocus] = []
    # University guidance
    target_degree_levels: List[str] = []
    guided_universities: List[str] = []
    application_expertise: List[str] = []


class MenteeProfile(ProfileBase):
    role: Literal["mentee"] = "mentee"
    learning_goals: str = ""
    desired_universities: List[str] = []
    desired_job_roles: List[str] = []
    desired_companies: List[str] = []
    seeking_mentorship_for: List[MentorshipFocus] = []
    # University aspirations
    current_education_level: Optional[str] = None
    target_degree_level: Optional[str] = None
    target_fields_of_study: List[str] = []


UserProfile = Union[MentorProfile, MenteeProfile, IncompleteProfile]

ROLE_PROFILE_MODELS = {
    UserRole.MENTOR: MentorProfile,
    UserRole.MENTEE: MenteeProfile,
}


def profile_from_record(record: Dict[str, Any]) -> UserProfile:
    """Build the profile variant matching the record's role.

    Keys that belong to another variant are dropped by the model.
    """
    role = record.get("role")
    if role is None:
        return IncompleteProfile.model_validate(record)
    model = ROLE_PROFILE_MODELS[UserRole(role)]
    return model.model_validate(record)


# Authentication Models
class LoginRequest(BaseModel):
    email: EmailStr
    role: Optional[UserRole] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    session_state: SessionState
    user: UserProfile


class TokenData(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None
    session_id: Optional[str] = None


class SessionResponse(BaseModel):
    session_state: SessionState
    user: Optional[UserProfile] = None


class ProfileDetails(BaseModel):
    """Submitted profile fields for both roles; only set fields are applied"""
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    interests: Optional[List[str]] = None
    # Mentor fields
    expertise: Optional[List[str]] = None
    universities: Optional[List[ExperienceItem]] = None
    companies: Optional[List[ExperienceItem]] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    mentorship_focus: Optional[List[MentorshipFocus]] = None
    target_degree_levels: Optional[List[str]] = None
    guided_universities: Optional[List[str]] = None
    application_expertise: Optional[List[str]] = None
    # Mentee fields
    learning_goals: Optional[str] = None
    desired_universities: Optional[List[str]] = None
    desired_job_roles: Optional[List[str]] = None
    desired_companies: Optional[List[str]] = None
    seeking_mentorship_for: Optional[List[MentorshipFocus]] = None
    current_education_level: Optional[str] = None
    target_degree_level: Optional[str] = None
    target_fields_of_study: Optional[List[str]] = None


class CompleteProfileRequest(BaseModel):
    role: UserRole
    profile: ProfileDetails = ProfileDetails()


# Availability and bookings
class AvailabilitySlotInput(BaseModel):
    id: Optional[str] = None
    start_time: datetime
    end_time: datetime
    timezone: str = Field(default="UTC", description="Timezone of naive start/end times")


class AvailabilityUpdate(BaseModel):
    slots: List[AvailabilitySlotInput] = []


class BookingCreate(BaseModel):
    mentor_id: str = Field(..., description="Mentor user ID or email")
    slot_id: str


class Booking(BaseModel):
    id: str
    mentor_id: str
    mentee_id: str
    slot_id: str
    start_time: datetime
    end_time: datetime
    status: str = "confirmed"
    title: str
    meeting_link: Optional[str] = None
    mentor: MentorProfile
    mentee: MenteeProfile


class VersionResponse(BaseModel):
    version: int


class CalendarLinkResponse(BaseModel):
    url: str


class MentorSearchFilters(BaseModel):
    query: Optional[str] = None
    university: Optional[str] = None
    job_role: Optional[str] = None
    company: Optional[str] = None
    mentorship_focus: Optional[MentorshipFocus] = None


# Group sessions and webinars
class GroupSessionCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    date: str = Field(..., min_length=1, description='Free text, e.g. "November 5th, 2024 at 4:00 PM PST"')
    tags: List[str] = []
    image_url: Optional[str] = None
    max_participants: Optional[int] = Field(None, ge=1, le=100)
    price: Optional[str] = None  # e.g. "Free", "$20"
    duration: Optional[str] = None


class GroupSession(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("gs"))
    title: str
    description: str = ""
    host_id: str
    host_name: str
    host_profile_image_url: Optional[str] = None
    date: str
    tags: List[str] = []
    image_url: Optional[str] = None
    participant_count: int = 0
    max_participants: Optional[int] = None
    price: Optional[str] = None
    duration: Optional[str] = None


class WebinarCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    date: str = Field(..., min_length=1)
    topic: Optional[str] = None
    tags: List[str] = []
    image_url: Optional[str] = None
    duration: Optional[str] = None  # e.g. "60 minutes"


class Webinar(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("web"))
    title: str
    description: str = ""
    host_id: str
    host_name: str
    date: str
    topic: Optional[str] = None
    tags: List[str] = []
    image_url: Optional[str] = None
    duration: Optional[str] = None


# Reminder intake
class ReminderRequest(BaseModel):
    contact_info: str = Field(..., min_length=1, description="Email address or phone number")
    event_title: str = Field(..., min_length=1)
    event_date: str = Field(..., min_length=1)


class ReminderResponse(BaseModel):
    success: bool
    message: str


# Suggestion Models
class MentorCandidate(BaseModel):
    mentor_id: str
    profile_text: str


class GroupSessionCandidate(BaseModel):
    """Shape a group session must have to be offered to the suggester"""
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str
    host_name: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    tags: List[str]
    image_url: Optional[str] = None
    price: Optional[str] = None


class WebinarCandidate(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str
    host_name: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    topic: Optional[str] = None
    tags: List[str] = []
    image_url: Optional[str] = None
    duration: Optional[str] = None


class MentorSuggestionItem(BaseModel):
    mentor_profile: str
    mentor_id: Optional[str] = None
    relevance_score: float = Field(..., ge=0, le=1)
    reason: str = ""


class CatalogSuggestionItem(BaseModel):
    id: str
    reason: Optional[str] = None


class MentorSuggestionResponse(BaseModel):
    mentor: MentorProfile
    relevance_score: float
    reason: str


class GroupSessionSuggestionResponse(BaseModel):
    session: GroupSession
    reason: Optional[str] = None


class WebinarSuggestionResponse(BaseModel):
    webinar: Webinar
    reason: Optional[str] = None


# Response Models
class SuccessResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error_code: Optional[str] = None
