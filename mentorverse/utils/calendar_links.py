"""
Calendar export helpers.

Builds "add to calendar" deep links for confirmed bookings. These are pure
formatting functions; nothing is written to any calendar.
"""
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode
import secrets
import string

from mentorverse.utils.timezone_utils import timezone_utils

GOOGLE_CALENDAR_TEMPLATE_URL = "https://calendar.google.com/calendar/render"
MEET_BASE_URL = "https://meet.google.com"


def build_google_calendar_link(
    title: str,
    start_time: datetime,
    end_time: datetime,
    details: str = "",
    location: Optional[str] = None,
) -> str:
    """
    Build a Google Calendar event template link.

    Args:
        title: Event title, e.g. "Session with Dr. Eleanor Vance for Alex Chen"
        start_time: Event start (naive values are treated as UTC)
        end_time: Event end
        details: Free-text description shown in the event body
        location: Optional location, usually the meeting link

    Returns:
        A URL that opens a pre-filled event in Google Calendar
    """
    params = {
        "action": "TEMPLATE",
        "text": title,
        "dates": (
            f"{timezone_utils.format_calendar_timestamp(start_time)}"
            f"/{timezone_utils.format_calendar_timestamp(end_time)}"
        ),
        "details": details,
    }
    if location:
        params["location"] = location
    return f"{GOOGLE_CALENDAR_TEMPLATE_URL}?{urlencode(params)}"


def generate_meeting_link() -> str:
    """Mock Google Meet link in the usual abc-defg-hij shape"""
    letters = string.ascii_lowercase
    parts = [
        "".join(secrets.choice(letters) for _ in range(size))
        for size in (3, 4, 3)
    ]
    return f"{MEET_BASE_URL}/{'-'.join(parts)}"
