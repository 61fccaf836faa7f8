"""
Read-side profile queries: mentor directory and mentor lookup
"""

import logging
from typing import List, Optional

from mentorverse.core.errors import NotFoundError
from mentorverse.models.models import MentorProfile, MentorSearchFilters, UserRole
from mentorverse.services.store.profile_store import ProfileStore, profile_store

logger = logging.getLogger(__name__)


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


class ProfileService:
    def __init__(self, store: Optional[ProfileStore] = None):
        self.store = store or profile_store

    async def get_mentor(self, mentor_id: str) -> MentorProfile:
        profile = self.store.get_by_id(mentor_id)
        if not isinstance(profile, MentorProfile):
            raise NotFoundError(f"Mentor {mentor_id} not found")
        return profile

    async def list_mentors(self) -> List[MentorProfile]:
        return self.store.list_profiles(UserRole.MENTOR)

    async def search_mentors(self, filters: MentorSearchFilters) -> List[MentorProfile]:
        """Case-insensitive substring search over the mentor directory"""
        mentors = await self.list_mentors()
        query = filters.query.lower() if filters.query else None
        university = filters.university.lower() if filters.university else None
        job_role = filters.job_role.lower() if filters.job_role else None
        company = filters.company.lower() if filters.company else None

        results = []
        for mentor in mentors:
            if query and not (
                _contains(mentor.name, query)
                or _contains(mentor.bio, query)
                or any(_contains(e, query) for e in mentor.expertise)
            ):
                continue
            if university and not any(_contains(u.institution_name, university) for u in mentor.universities):
                continue
            if job_role and not (
                any(_contains(c.role_or_degree, job_role) for c in mentor.companies)
                or any(_contains(e, job_role) for e in mentor.expertise)
            ):
                continue
            if company and not any(_contains(c.institution_name, company) for c in mentor.companies):
                continue
            if filters.mentorship_focus and filters.mentorship_focus not in mentor.mentorship_focus:
                continue
            results.append(mentor)

        logger.info(f"Mentor search matched {len(results)} of {len(mentors)} mentors")
        return results


# Service instance
profile_service = ProfileService()
