"""
Domain exceptions raised by the services and translated to HTTP errors by the routes
"""


class MentorverseError(Exception):
    """Base class for errors the API reports back to the caller"""


class NotFoundError(MentorverseError):
    """A mentor, mentee, slot, session or webinar id did not resolve"""


class ConflictError(MentorverseError):
    """The requested change conflicts with current state (e.g. slot already booked)"""


class BookingRuleViolation(ConflictError):
    """An optional booking rule (past slot, overlapping booking) rejected the booking"""


class PermissionDeniedError(MentorverseError):
    """The caller's role or ownership does not allow the operation"""


class SuggestionError(MentorverseError):
    """The external suggestion capability failed or returned unusable data"""
