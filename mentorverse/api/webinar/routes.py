"""
Webinar API routes
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from mentorverse.core.errors import NotFoundError, PermissionDeniedError
from mentorverse.core.security.auth_dependencies import get_current_mentor_user
from mentorverse.models.models import (
    MentorProfile, ReminderRequest, ReminderResponse, SuccessResponse, Webinar, WebinarCreate
)
from mentorverse.services.catalog.catalog_service import catalog_service
from mentorverse.services.notification.reminder_service import reminder_service

router = APIRouter(prefix="/webinars", tags=["webinars"])

@router.get("", response_model=List[Webinar])
async def list_webinars():
    """Browse all webinars"""
    try:
        return await catalog_service.list_webinars()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get webinars: {str(e)}"
        )

@router.post("", response_model=Webinar, status_code=status.HTTP_201_CREATED)
async def create_webinar(
    webinar_data: WebinarCreate,
    current_user: MentorProfile = Depends(get_current_mentor_user)
):
    """Create a webinar hosted by the current mentor"""
    try:
        return await catalog_service.create_webinar(current_user, webinar_data)
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create webinar: {str(e)}"
        )

@router.get("/mine", response_model=List[Webinar])
async def list_my_webinars(current_user: MentorProfile = Depends(get_current_mentor_user)):
    """Webinars hosted by the current mentor"""
    return await catalog_service.list_webinars(host_id=current_user.id)

@router.get("/{webinar_id}", response_model=Webinar)
async def get_webinar(webinar_id: str):
    try:
        return await catalog_service.get_webinar(webinar_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

@router.delete("/{webinar_id}", response_model=SuccessResponse)
async def delete_webinar(
    webinar_id: str,
    current_user: MentorProfile = Depends(get_current_mentor_user)
):
    """Delete a webinar the current mentor hosts"""
    try:
        await catalog_service.delete_webinar(current_user, webinar_id)
        return SuccessResponse(message="Webinar deleted successfully")
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
            detail=f"Failed to delete webinar: {str(e)}"
        )

@router.post("/{webinar_id}/reminders", response_model=ReminderResponse)
async def request_webinar_reminder(webinar_id: str, reminder: ReminderRequest):
    """Ask for a reminder about a webinar by email or WhatsApp number"""
    try:
        await catalog_service.get_webinar(webinar_id)
        return await reminder_service.request_reminder(reminder)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to request reminder: {str(e)}"
        )
