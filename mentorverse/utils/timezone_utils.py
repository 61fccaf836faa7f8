"""
Timezone utilities for mentors and mentees in different regions
"""
import pytz
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

class TimezoneUtils:
    """Utility class for timezone operations"""

    # Short codes accepted in availability forms
    COMMON_TIMEZONES = {
        'IST': 'Asia/Kolkata',      # India
        'GMT': 'Europe/London',     # UK
        'EST': 'America/New_York',  # US East
        'PST': 'America/Los_Angeles', # US West
        'CET': 'Europe/Paris',     # Central Europe
        'JST': 'Asia/Tokyo',       # Japan
        'AEST': 'Australia/Sydney', # Australia
        'UTC': 'UTC'               # UTC
    }

    @staticmethod
    def resolve_timezone(user_timezone: str = None) -> str:
        """Resolve a short code or IANA name, default to UTC if not provided"""
        if not user_timezone:
            return 'UTC'
        if user_timezone in TimezoneUtils.COMMON_TIMEZONES:
            return TimezoneUtils.COMMON_TIMEZONES[user_timezone]
        if user_timezone in pytz.all_timezones_set:
            return user_timezone
        raise ValueError(f"Unknown timezone: {user_timezone}")

    @staticmethod
    def convert_to_utc(dt: datetime, from_timezone: str) -> datetime:
        """Convert datetime from user timezone to UTC"""
        try:
            if dt.tzinfo is None:
                # If datetime is naive, assume it's in the user's timezone
                user_tz = pytz.timezone(TimezoneUtils.resolve_timezone(from_timezone))
                dt = user_tz.localize(dt)

            return dt.astimezone(pytz.UTC)
        except Exception as e:
            logger.error(f"Error converting to UTC: {e}")
            raise ValueError(f"Invalid timezone conversion: {e}")

    @staticmethod
    def format_calendar_timestamp(dt: datetime) -> str:
        """Format as the compact UTC form calendar links expect (20241105T160000Z)"""
        if dt.tzinfo is None:
            dt = pytz.UTC.localize(dt)
        return dt.astimezone(pytz.UTC).strftime("%Y%m%dT%H%M%SZ")

# Create utility instance
timezone_utils = TimezoneUtils()
