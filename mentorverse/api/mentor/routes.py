"""
Mentor directory and availability API routes
"""
from fastapi import APIRouter, HTTPException, Depends, status, Query
from typing import List, Optional
import logging

from mentorverse.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from mentorverse.core.security.auth_dependencies import get_current_mentor_user, get_token_data
from mentorverse.models.models import (
    AvailabilityUpdate, MentorProfile, MentorSearchFilters, MentorshipFocus, TokenData
)
from mentorverse.services.auth.session_service import session_service
from mentorverse.services.user.profile_service import profile_service

router = APIRouter(prefix="/mentors", tags=["mentors"])
logger = logging.getLogger(__name__)

@router.get("", response_model=List[MentorProfile])
async def list_mentors(
    query: Optional[str] = Query(None, description="Matches name, bio or expertise"),
    university: Optional[str] = Query(None, description="Matches education institutions"),
    job_role: Optional[str] = Query(None, description="Matches company roles or expertise"),
    company: Optional[str] = Query(None, description="Matches company names"),
    mentorship_focus: Optional[MentorshipFocus] = Query(None)
):
    """Browse the mentor directory, optionally filtered"""
    try:
        filters = MentorSearchFilters(
            query=query,
            university=university,
            job_role=job_role,
            company=company,
            mentorship_focus=mentorship_focus
        )
        return await profile_service.search_mentors(filters)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get mentors: {str(e)}"
        )

@router.get("/{mentor_id}", response_model=MentorProfile)
async def get_mentor(mentor_id: str):
    """Get a mentor's full profile"""
    try:
        return await profile_service.get_mentor(mentor_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get mentor: {str(e)}"
        )

@router.put("/me/availability", response_model=MentorProfile)
async def update_my_availability(
    availability: AvailabilityUpdate,
    token_data: TokenData = Depends(get_token_data),
    current_user: MentorProfile = Depends(get_current_mentor_user)
):
    """Replace the current mentor's availability slots"""
    try:
        return await session_service.update_availability(
            token_data.session_id, current_user, availability.slots
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Failed to update availability for {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update availability: {str(e)}"
        )
