"""
Session cache: keeps the current session's profile so a client can restore it
after a reload without logging in again
"""

import json
import logging
from typing import Dict, Optional

import redis

from mentorverse.core.config import settings
from mentorverse.models.models import UserProfile, profile_from_record

logger = logging.getLogger(__name__)


class SessionCache:
    """Key-value store of serialized profiles, Redis-backed when configured"""

    def __init__(self, redis_url: Optional[str] = None, ttl_seconds: Optional[int] = None):
        self.prefix = settings.session_cache_prefix
        self.ttl_seconds = ttl_seconds or settings.session_cache_ttl_seconds
        # In-memory storage when Redis is not configured
        self.memory_storage: Dict[str, str] = {}
        self.redis_client = None
        self._init_redis(redis_url if redis_url is not None else settings.redis_url)

    def _init_redis(self, redis_url: Optional[str]):
        """Initialize Redis client if configured"""
        if redis_url:
            self.redis_client = redis.from_url(redis_url)
            logger.info("Redis client initialized for session cache")
        else:
            logger.info("Redis not configured, using in-memory session cache")

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}:session:{session_id}"

    def put(self, session_id: str, profile: UserProfile) -> None:
        payload = profile.model_dump_json()
        if self.redis_client:
            self.redis_client.setex(self._key(session_id), self.ttl_seconds, payload)
        else:
            self.memory_storage[self._key(session_id)] = payload

    def get(self, session_id: str) -> Optional[UserProfile]:
        if self.redis_client:
            payload = self.redis_client.get(self._key(session_id))
        else:
            payload = self.memory_storage.get(self._key(session_id))
        if not payload:
            return None

        try:
            record = json.loads(payload)
            if (
                not isinstance(record, dict)
                or not isinstance(record.get("id"), str)
                or not isinstance(record.get("email"), str)
            ):
                raise ValueError("cached profile has no id/email")
            return profile_from_record(record)
        except ValueError as e:
            # Corrupted entries are dropped rather than served
            logger.error(f"Failed to parse cached profile for session {session_id}: {e}")
            self.remove(session_id)
            return None

    def remove(self, session_id: str) -> None:
        if self.redis_client:
            self.redis_client.delete(self._key(session_id))
        else:
            self.memory_storage.pop(self._key(session_id), None)

    def clear(self) -> None:
        if self.redis_client:
            for key in self.redis_client.scan_iter(f"{self.prefix}:session:*"):
                self.redis_client.delete(key)
        else:
            self.memory_storage.clear()


# Cache instance
session_cache = SessionCache()
