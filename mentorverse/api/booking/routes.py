"""
Booking API routes: one-on-one sessions booked against mentor availability
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
import logging

from mentorverse.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from mentorverse.core.security.auth_dependencies import (
    get_current_mentee_user, get_current_user, get_token_data
)
from mentorverse.models.models import (
    Booking, BookingCreate, CalendarLinkResponse, MenteeProfile, TokenData, UserProfile,
    VersionResponse
)
from mentorverse.services.auth.session_service import session_service
from mentorverse.services.booking.booking_service import booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])
logger = logging.getLogger(__name__)

@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def confirm_booking(
    booking_data: BookingCreate,
    token_data: TokenData = Depends(get_token_data),
    current_user: MenteeProfile = Depends(get_current_mentee_user)
):
    """Book one of a mentor's open slots for the current mentee"""
    try:
        return await session_service.confirm_booking(
            token_data.session_id, current_user, booking_data.mentor_id, booking_data.slot_id
        )
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
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Booking {booking_data.mentor_id}/{booking_data.slot_id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to confirm booking: {str(e)}"
        )

@router.get("/schedule", response_model=List[Booking])
async def get_my_schedule(
    token_data: TokenData = Depends(get_token_data),
    current_user: UserProfile = Depends(get_current_user)
):
    """Booked sessions where the current user is the mentor or the mentee"""
    try:
        return await session_service.fetch_schedule(token_data.session_id, current_user)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get schedule: {str(e)}"
        )

@router.get("/version", response_model=VersionResponse)
async def get_booking_version():
    """Counter that moves whenever bookings or availability change"""
    return VersionResponse(version=booking_service.version)

@router.get("/{mentor_id}/{slot_id}/calendar-link", response_model=CalendarLinkResponse)
async def get_calendar_link(
    mentor_id: str,
    slot_id: str,
    current_user: UserProfile = Depends(get_current_user)
):
    """Google Calendar link for a booked session the current user takes part in"""
    try:
        booking = await booking_service.get_booking(mentor_id, slot_id)
        if current_user.id not in (booking.mentor_id, booking.mentee_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Not a participant of this session."
            )
        return CalendarLinkResponse(url=booking_service.calendar_link_for(booking))
    except HTTPException:
        raise
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build calendar link: {str(e)}"
        )
