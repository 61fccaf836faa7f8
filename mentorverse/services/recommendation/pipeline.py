"""
Recommendation pipeline for matching mentees with mentors, group sessions and webinars.

For each candidate type the pipeline:
- describes the mentee as text,
- prepares the candidates (mentor descriptions, or schema-checked session/webinar records),
- asks the suggester,
- maps the returned items back to the authoritative records.

Suggestions are best-effort. Failures of the suggester are logged and reported
through `SuggestionResult`, never raised directly; callers decide whether to
unwrap into an empty list or propagate.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from mentorverse.core.config import settings
from mentorverse.core.errors import SuggestionError
from mentorverse.models.models import (
    CatalogSuggestionItem, GroupSession, GroupSessionCandidate, GroupSessionSuggestionResponse,
    MenteeProfile, MentorCandidate, MentorProfile, MentorSuggestionItem,
    MentorSuggestionResponse, UserRole, Webinar, WebinarCandidate, WebinarSuggestionResponse
)
from mentorverse.services.catalog.catalog_service import CatalogService, catalog_service
from mentorverse.services.recommendation.profile_text import (
    build_mentee_profile_text, build_mentor_profile_text
)
from mentorverse.services.recommendation.suggesters import BaseSuggester, get_default_suggester
from mentorverse.services.store.profile_store import ProfileStore, profile_store

logger = logging.getLogger(__name__)


@dataclass
class SuggestionResult:
    """Suggestions, or the reason the suggester could not produce any"""
    items: List[Any] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> List[Any]:
        if self.error is not None:
            raise SuggestionError(self.error)
        return self.items

    def unwrap_or_empty(self) -> List[Any]:
        return self.items if self.ok else []

    @classmethod
    def failure(cls, error: str) -> "SuggestionResult":
        return cls(items=[], error=error)


class RecommendationPipeline:
    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        catalog: Optional[CatalogService] = None,
        suggester: Optional[BaseSuggester] = None,
        limit: Optional[int] = None,
    ):
        self.store = store or profile_store
        self.catalog = catalog or catalog_service
        self.suggester = suggester or get_default_suggester()
        self.limit = limit or settings.suggestion_limit

    def _get_mentee(self, mentee_id: str) -> Optional[MenteeProfile]:
        profile = self.store.get_by_id(mentee_id)
        if not isinstance(profile, MenteeProfile):
            logger.info(f"No mentee profile for {mentee_id}, skipping suggestions")
            return None
        return profile

    # Mentors

    async def suggest_mentors(self, mentee_id: str) -> SuggestionResult:
        """Suggest mentors from the directory for a stored mentee"""
        mentee = self._get_mentee(mentee_id)
        if mentee is None:
            return SuggestionResult()
        mentors = self.store.list_profiles(UserRole.MENTOR)
        return await self.rank_mentors(build_mentee_profile_text(mentee), mentors)

    async def rank_mentors(
        self, mentee_profile: str, mentors: Sequence[MentorProfile]
    ) -> SuggestionResult:
        """Ask the suggester about the given mentors and reconcile its answer"""
        if not mentors:
            logger.info("No mentor candidates, suggester not called")
            return SuggestionResult()

        candidates = []
        by_id: Dict[str, MentorProfile] = {}
        by_text: Dict[str, MentorProfile] = {}
        for mentor in mentors:
            text = build_mentor_profile_text(mentor)
            candidates.append(MentorCandidate(mentor_id=mentor.id, profile_text=text))
            by_id[mentor.id] = mentor
            by_text.setdefault(text, mentor)

        try:
            raw_items = await self.suggester.suggest_mentors(mentee_profile, candidates)
        except Exception as e:
            logger.error(f"Mentor suggestion failed: {e}")
            return SuggestionResult.failure(str(e))
        if not isinstance(raw_items, list):
            logger.error(f"Mentor suggester returned {type(raw_items).__name__}, expected a list")
            return SuggestionResult.failure("Malformed suggestion response")

        suggestions = []
        seen = set()
        for raw in raw_items:
            item = self._validate(MentorSuggestionItem, raw)
            if item is None:
                continue
            mentor = by_id.get(item.mentor_id) if item.mentor_id else None
            if mentor is None:
                mentor = by_text.get(item.mentor_profile)
            if mentor is None:
                logger.info("Dropping mentor suggestion that matches no candidate")
                continue
            if mentor.id in seen:
                continue
            seen.add(mentor.id)
            suggestions.append(
                MentorSuggestionResponse(
                    mentor=mentor, relevance_score=item.relevance_score, reason=item.reason
                )
            )

        suggestions.sort(key=lambda s: s.relevance_score, reverse=True)
        return SuggestionResult(items=suggestions[:self.limit])

    # Group sessions and webinars

    async def suggest_group_sessions(self, mentee_id: str) -> SuggestionResult:
        mentee = self._get_mentee(mentee_id)
        if mentee is None:
            return SuggestionResult()
        sessions = await self.catalog.list_group_sessions()
        return await self.rank_group_sessions(build_mentee_profile_text(mentee), sessions)

    async def rank_group_sessions(
        self, mentee_profile: str, sessions: Sequence[GroupSession]
    ) -> SuggestionResult:
        return await self._rank_catalog(
            kind="group session",
            mentee_profile=mentee_profile,
            records=sessions,
            candidate_model=GroupSessionCandidate,
            suggest=self.suggester.suggest_group_sessions,
            wrap=lambda record, reason: GroupSessionSuggestionResponse(session=record, reason=reason),
        )

    async def suggest_webinars(self, mentee_id: str) -> SuggestionResult:
        mentee = self._get_mentee(mentee_id)
        if mentee is None:
            return SuggestionResult()
        webinars = await self.catalog.list_webinars()
        return await self.rank_webinars(build_mentee_profile_text(mentee), webinars)

    async def rank_webinars(
        self, mentee_profile: str, webinars: Sequence[Webinar]
    ) -> SuggestionResult:
        return await self._rank_catalog(
            kind="webinar",
            mentee_profile=mentee_profile,
            records=webinars,
            candidate_model=WebinarCandidate,
            suggest=self.suggester.suggest_webinars,
            wrap=lambda record, reason: WebinarSuggestionResponse(webinar=record, reason=reason),
        )

    async def _rank_catalog(
        self,
        kind: str,
        mentee_profile: str,
        records: Sequence[BaseModel],
        candidate_model: Type[BaseModel],
        suggest: Callable,
        wrap: Callable[[Any, Optional[str]], Any],
    ) -> SuggestionResult:
        candidates = []
        by_id: Dict[str, BaseModel] = {}
        for record in records:
            candidate = self._validate(candidate_model, record.model_dump())
            if candidate is None:
                logger.warning(f"Excluding invalid {kind} {getattr(record, 'id', '?')} from suggestions")
                continue
            candidates.append(candidate)
            by_id[candidate.id] = record

        if not candidates:
            logger.info(f"No valid {kind} candidates, suggester not called")
            return SuggestionResult()

        try:
            raw_items = await suggest(mentee_profile, candidates)
        except Exception as e:
            logger.error(f"{kind.capitalize()} suggestion failed: {e}")
            return SuggestionResult.failure(str(e))
        if not isinstance(raw_items, list):
            logger.error(f"{kind.capitalize()} suggester returned {type(raw_items).__name__}, expected a list")
            return SuggestionResult.failure("Malformed suggestion response")

        suggestions = []
        seen = set()
        for raw in raw_items:
            item = self._validate(CatalogSuggestionItem, raw)
            if item is None:
                continue
            record = by_id.get(item.id)
            if record is None:
                logger.info(f"Dropping {kind} suggestion {item.id}: not a candidate")
                continue
            if item.id in seen:
                continue
            seen.add(item.id)
            suggestions.append(wrap(record, item.reason))

        # Suggester order is kept as-is
        return SuggestionResult(items=suggestions[:self.limit])

    @staticmethod
    def _validate(model: Type[BaseModel], raw: Any) -> Optional[BaseModel]:
        try:
            if isinstance(raw, BaseModel):
                raw = raw.model_dump()
            return model.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Invalid {model.__name__}: {e.error_count()} error(s), skipped")
            return None


# Pipeline instance
recommendation_pipeline = RecommendationPipeline()
