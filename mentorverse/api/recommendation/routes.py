"""
Recommendation API routes: suggested mentors, group sessions and webinars for the current mentee
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from mentorverse.core.config import settings
from mentorverse.core.errors import SuggestionError
from mentorverse.core.security.auth_dependencies import get_current_mentee_user
from mentorverse.models.models import (
    GroupSessionSuggestionResponse, MenteeProfile, MentorSuggestionResponse,
    WebinarSuggestionResponse
)
from mentorverse.services.recommendation.pipeline import SuggestionResult, recommendation_pipeline

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

def _resolve(result: SuggestionResult) -> list:
    """Apply the configured failure policy: empty list or 502"""
    if settings.suggestion_failure_policy == "raise":
        try:
            return result.unwrap()
        except SuggestionError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Suggestion service failed: {str(e)}"
            )
    return result.unwrap_or_empty()

@router.get("/mentors", response_model=List[MentorSuggestionResponse])
async def suggest_mentors(current_user: MenteeProfile = Depends(get_current_mentee_user)):
    """Mentors suggested for the current mentee, most relevant first"""
    result = await recommendation_pipeline.suggest_mentors(current_user.id)
    return _resolve(result)

@router.get("/group-sessions", response_model=List[GroupSessionSuggestionResponse])
async def suggest_group_sessions(current_user: MenteeProfile = Depends(get_current_mentee_user)):
    """Group sessions suggested for the current mentee"""
    result = await recommendation_pipeline.suggest_group_sessions(current_user.id)
    return _resolve(result)

@router.get("/webinars", response_model=List[WebinarSuggestionResponse])
async def suggest_webinars(current_user: MenteeProfile = Depends(get_current_mentee_user)):
    """Webinars suggested for the current mentee"""
    result = await recommendation_pipeline.suggest_webinars(current_user.id)
    return _resolve(result)
