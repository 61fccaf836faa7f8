"""
Suggestion backends for the recommendation pipeline.

`LLMSuggester` asks a hosted language model (Gemini REST API by default).
`MockSuggester` is the deterministic stand-in used when no model API key is
configured. Both return raw, unvalidated items; the pipeline validates and
reconciles them.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import httpx

from mentorverse.core.config import settings
from mentorverse.core.errors import SuggestionError
from mentorverse.models.models import (
    GroupSessionCandidate, MentorCandidate, WebinarCandidate
)
from mentorverse.utils.prompt_loader import render_prompt

logger = logging.getLogger(__name__)


class BaseSuggester:
    """Contract of the external suggestion capability"""

    async def suggest_mentors(
        self, mentee_profile: str, candidates: Sequence[MentorCandidate]
    ) -> List[Dict[str, Any]]:
        """Items: mentor_profile, mentor_id, relevance_score (0-1), reason"""
        raise NotImplementedError

    async def suggest_group_sessions(
        self, mentee_profile: str, candidates: Sequence[GroupSessionCandidate]
    ) -> List[Dict[str, Any]]:
        """Items: id, reason"""
        raise NotImplementedError

    async def suggest_webinars(
        self, mentee_profile: str, candidates: Sequence[WebinarCandidate]
    ) -> List[Dict[str, Any]]:
        """Items: id, reason"""
        raise NotImplementedError


def _extract_json_from_markdown(response_text: str) -> str:
    """Strip ```json fences some models wrap around their output"""
    json_text = response_text.strip()
    if json_text.startswith("```json"):
        json_text = json_text[7:]
    elif json_text.startswith("```"):
        json_text = json_text[3:]
    if json_text.endswith("```"):
        json_text = json_text[:-3]
    return json_text.strip()


class LLMSuggester(BaseSuggester):
    """Client for a hosted model's generateContent endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        limit: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key or settings.llm_api_key
        self.model = model or settings.llm_model
        self.base_url = (base_url or settings.llm_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self.limit = limit or settings.suggestion_limit
        self.transport = transport

    async def _generate(self, prompt: str) -> Any:
        if not self.api_key:
            raise SuggestionError("Language model API key is not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json", "temperature": 0.2},
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(url, params={"key": self.api_key}, json=payload)

        if resp.status_code < 200 or resp.status_code >= 300:
            raise SuggestionError(f"Model request failed: {resp.status_code} {resp.text[:200]}")

        try:
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            return json.loads(_extract_json_from_markdown(text))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise SuggestionError(f"Unexpected model response: {e}")

    async def _generate_list(self, prompt: str) -> List[Dict[str, Any]]:
        result = await self._generate(prompt)
        if not isinstance(result, list):
            raise SuggestionError("Model response is not a JSON array")
        return result

    async def suggest_mentors(self, mentee_profile, candidates):
        prompt = render_prompt(
            "suggestions/mentors.j2",
            mentee_profile=mentee_profile,
            candidates=candidates,
            limit=self.limit,
        )
        return await self._generate_list(prompt)

    async def suggest_group_sessions(self, mentee_profile, candidates):
        prompt = render_prompt(
            "suggestions/group_sessions.j2",
            mentee_profile=mentee_profile,
            candidates_json=json.dumps([c.model_dump() for c in candidates], indent=2),
            limit=self.limit,
        )
        return await self._generate_list(prompt)

    async def suggest_webinars(self, mentee_profile, candidates):
        prompt = render_prompt(
            "suggestions/webinars.j2",
            mentee_profile=mentee_profile,
            candidates_json=json.dumps([c.model_dump() for c in candidates], indent=2),
            limit=self.limit,
        )
        return await self._generate_list(prompt)


STOPWORDS = {
    "and", "the", "to", "of", "for", "in", "on", "with", "an", "by", "is", "be",
    "as", "or", "at", "from", "into", "will", "that", "about", "their", "your",
    "name", "bio", "expertise", "universities", "companies", "years", "exp",
    "interests", "learning", "goals", "desired", "job", "roles", "seeking",
    "mentorship", "current", "education", "level", "target", "degree", "fields",
    "study", "n/a", "na",
}


def _keywords(text: str) -> set:
    words = re.findall(r"[a-z0-9+#]+", text.lower())
    return {w for w in words if len(w) >= 2 and w not in STOPWORDS}


class MockSuggester(BaseSuggester):
    """Keyword-overlap heuristic standing in for the hosted model"""

    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit or settings.suggestion_limit

    async def suggest_mentors(self, mentee_profile, candidates):
        mentee_words = _keywords(mentee_profile)
        scored = []
        for candidate in candidates:
            shared = sorted(mentee_words & _keywords(candidate.profile_text))
            score = round(min(0.95, 0.3 + 0.1 * len(shared)), 2)
            reason = (
                f"Shares your focus on {', '.join(shared[:4])}."
                if shared else "Experienced mentor with a broad background."
            )
            scored.append({
                "mentor_id": candidate.mentor_id,
                "mentor_profile": candidate.profile_text,
                "relevance_score": score,
                "reason": reason,
            })
        scored.sort(key=lambda item: item["relevance_score"], reverse=True)
        return scored[:self.limit]

    def _rank_catalog(self, mentee_profile: str, candidates, describe) -> List[Dict[str, Any]]:
        mentee_words = _keywords(mentee_profile)
        matches = []
        for candidate in candidates:
            shared = sorted(mentee_words & _keywords(describe(candidate)))
            if shared:
                matches.append((len(shared), candidate.id, f"Matches your interest in {', '.join(shared[:3])}."))
        if not matches:
            # Nothing specific: fall back to the first few in catalog order
            return [{"id": c.id, "reason": "Popular with mentees like you."} for c in candidates[:self.limit]]
        matches.sort(key=lambda match: match[0], reverse=True)
        return [{"id": cid, "reason": reason} for _, cid, reason in matches[:self.limit]]

    async def suggest_group_sessions(self, mentee_profile, candidates):
        return self._rank_catalog(
            mentee_profile,
            list(candidates),
            lambda c: " ".join([c.title, c.description, " ".join(c.tags)]),
        )

    async def suggest_webinars(self, mentee_profile, candidates):
        return self._rank_catalog(
            mentee_profile,
            list(candidates),
            lambda c: " ".join([c.title, c.description, c.topic or "", " ".join(c.tags)]),
        )


def get_default_suggester() -> BaseSuggester:
    """Hosted model when an API key is configured, otherwise the mock"""
    if settings.llm_api_key:
        logger.info(f"Using hosted model {settings.llm_model} for suggestions")
        return LLMSuggester()
    logger.info("No model API key configured, using mock suggester")
    return MockSuggester()
