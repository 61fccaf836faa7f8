"""
Catalog of mentor-hosted group sessions and webinars
"""

import logging
import threading
from typing import Dict, List, Optional

from mentorverse.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from mentorverse.models.models import (
    GroupSession, GroupSessionCreate, UserProfile, UserRole, Webinar, WebinarCreate
)

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self):
        self._lock = threading.RLock()
        self._group_sessions: Dict[str, GroupSession] = {}
        self._webinars: Dict[str, Webinar] = {}
        self.group_sessions_version = 0
        self.webinars_version = 0

    @staticmethod
    def _require_mentor(user: UserProfile, action: str) -> None:
        if user.role != UserRole.MENTOR:
            raise PermissionDeniedError(f"Only mentors can {action}")

    # Group sessions

    async def create_group_session(self, host: UserProfile, data: GroupSessionCreate) -> GroupSession:
        """Create a group session hosted by the given mentor"""
        self._require_mentor(host, "create group sessions")
        session = GroupSession(
            host_id=host.id,
            host_name=host.name,
            host_profile_image_url=host.profile_image_url,
            participant_count=0,
            **data.model_dump(),
        )
        with self._lock:
            self._group_sessions[session.id] = session
            self.group_sessions_version += 1
        logger.info(f"Group session {session.id} created by mentor {host.id}")
        return session.model_copy(deep=True)

    async def delete_group_session(self, host: UserProfile, session_id: str) -> None:
        with self._lock:
            session = self._group_sessions.get(session_id)
            if session is None:
                raise NotFoundError(f"Group session {session_id} not found")
            if session.host_id != host.id:
                raise PermissionDeniedError("You can only delete your own group sessions")
            del self._group_sessions[session_id]
            self.group_sessions_version += 1
        logger.info(f"Group session {session_id} deleted by mentor {host.id}")

    async def get_group_session(self, session_id: str) -> GroupSession:
        with self._lock:
            session = self._group_sessions.get(session_id)
            if session is None:
                raise NotFoundError(f"Group session {session_id} not found")
            return session.model_copy(deep=True)

    async def list_group_sessions(self, host_id: Optional[str] = None) -> List[GroupSession]:
        with self._lock:
            return [
                session.model_copy(deep=True)
                for session in self._group_sessions.values()
                if host_id is None or session.host_id == host_id
            ]

    async def join_group_session(self, user: UserProfile, session_id: str) -> GroupSession:
        """Take one participant spot in a group session"""
        if user.role != UserRole.MENTEE:
            raise PermissionDeniedError("Only mentees can join group sessions")
        with self._lock:
            session = self._group_sessions.get(session_id)
            if session is None:
                raise NotFoundError(f"Group session {session_id} not found")
            if session.max_participants is not None and session.participant_count >= session.max_participants:
                raise ConflictError(f"Group session {session_id} is full")
            session.participant_count += 1
            self.group_sessions_version += 1
            joined = session.model_copy(deep=True)
        logger.info(f"Mentee {user.id} joined group session {session_id} ({joined.participant_count} participants)")
        return joined

    # Webinars

    async def create_webinar(self, host: UserProfile, data: WebinarCreate) -> Webinar:
        self._require_mentor(host, "create webinars")
        webinar = Webinar(host_id=host.id, host_name=host.name, **data.model_dump())
        with self._lock:
            self._webinars[webinar.id] = webinar
            self.webinars_version += 1
        logger.info(f"Webinar {webinar.id} created by mentor {host.id}")
        return webinar.model_copy(deep=True)

    async def delete_webinar(self, host: UserProfile, webinar_id: str) -> None:
        with self._lock:
            webinar = self._webinars.get(webinar_id)
            if webinar is None:
                raise NotFoundError(f"Webinar {webinar_id} not found")
            if webinar.host_id != host.id:
                raise PermissionDeniedError("You can only delete your own webinars")
            del self._webinars[webinar_id]
            self.webinars_version += 1
        logger.info(f"Webinar {webinar_id} deleted by mentor {host.id}")

    async def get_webinar(self, webinar_id: str) -> Webinar:
        with self._lock:
            webinar = self._webinars.get(webinar_id)
            if webinar is None:
                raise NotFoundError(f"Webinar {webinar_id} not found")
            return webinar.model_copy(deep=True)

    async def list_webinars(self, host_id: Optional[str] = None) -> List[Webinar]:
        with self._lock:
            return [
                webinar.model_copy(deep=True)
                for webinar in self._webinars.values()
                if host_id is None or webinar.host_id == host_id
            ]

    def add_group_session(self, session: GroupSession) -> None:
        """Insert a ready-made record (demo seeding)"""
        with self._lock:
            self._group_sessions[session.id] = session.model_copy(deep=True)

    def add_webinar(self, webinar: Webinar) -> None:
        with self._lock:
            self._webinars[webinar.id] = webinar.model_copy(deep=True)

    def reset(self) -> None:
        with self._lock:
            self._group_sessions.clear()
            self._webinars.clear()
            self.group_sessions_version = 0
            self.webinars_version = 0


# Service instance
catalog_service = CatalogService()
