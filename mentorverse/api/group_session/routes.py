"""
Group session API routes
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
import logging

from mentorverse.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from mentorverse.core.security.auth_dependencies import get_current_mentee_user, get_current_mentor_user
from mentorverse.models.models import (
    GroupSession, GroupSessionCreate, MenteeProfile, MentorProfile, SuccessResponse
)
from mentorverse.services.catalog.catalog_service import catalog_service

router = APIRouter(prefix="/group-sessions", tags=["group-sessions"])
logger = logging.getLogger(__name__)

@router.get("", response_model=List[GroupSession])
async def list_group_sessions():
    """Browse all group sessions"""
    try:
        return await catalog_service.list_group_sessions()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get group sessions: {str(e)}"
        )

@router.post("", response_model=GroupSession, status_code=status.HTTP_201_CREATED)
async def create_group_session(
    session_data: GroupSessionCreate,
    current_user: MentorProfile = Depends(get_current_mentor_user)
):
    """Create a group session hosted by the current mentor"""
    try:
        return await catalog_service.create_group_session(current_user, session_data)
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create group session: {str(e)}"
        )

@router.get("/mine", response_model=List[GroupSession])
async def list_my_group_sessions(current_user: MentorProfile = Depends(get_current_mentor_user)):
    """Group sessions hosted by the current mentor"""
    return await catalog_service.list_group_sessions(host_id=current_user.id)

@router.get("/{session_id}", response_model=GroupSession)
async def get_group_session(session_id: str):
    """Get a group session"""
    try:
        return await catalog_service.get_group_session(session_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

@router.delete("/{session_id}", response_model=SuccessResponse)
async def delete_group_session(
    session_id: str,
    current_user: MentorProfile = Depends(get_current_mentor_user)
):
    """Delete a group session the current mentor hosts"""
    try:
        await catalog_service.delete_group_session(current_user, session_id)
        return SuccessResponse(message="Group session deleted successfully")
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
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete group session: {str(e)}"
        )

@router.post("/{session_id}/join", response_model=GroupSession)
async def join_group_session(
    session_id: str,
    current_user: MenteeProfile = Depends(get_current_mentee_user)
):
    """Take a participant spot in a group session"""
    try:
        return await catalog_service.join_group_session(current_user, session_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Mentee {current_user.id} failed to join {session_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to join group session: {str(e)}"
        )
