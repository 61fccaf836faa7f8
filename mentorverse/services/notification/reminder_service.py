"""
Reminder intake for webinars and group sessions.

Requests are acknowledged and logged only; nothing is scheduled or delivered.
"""

import logging
from typing import List

from mentorverse.models.models import ReminderRequest, ReminderResponse

logger = logging.getLogger(__name__)


class ReminderService:
    """Accepts reminder requests (email or WhatsApp contact) and acknowledges them"""

    def __init__(self) -> None:
        self.received: List[ReminderRequest] = []

    async def request_reminder(self, request: ReminderRequest) -> ReminderResponse:
        self.received.append(request)
        logger.info(
            f"Reminder request received: event='{request.event_title}' "
            f"date='{request.event_date}' contact='{request.contact_info}'"
        )
        return ReminderResponse(
            success=True,
            message=f'Reminder request for "{request.event_title}" to {request.contact_info} has been received.',
        )


reminder_service = ReminderService()
