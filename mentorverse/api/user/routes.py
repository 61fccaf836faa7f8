"""
User API routes
"""
from fastapi import APIRouter, HTTPException, Depends, status

from mentorverse.core.security.auth_dependencies import get_current_user, get_token_data
from mentorverse.models.models import ProfileDetails, TokenData, UserProfile
from mentorverse.services.auth.session_service import session_service

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserProfile)
async def get_current_user_profile(current_user: UserProfile = Depends(get_current_user)):
    """Get current user profile"""
    return current_user

@router.patch("/me", response_model=UserProfile)
async def update_current_user_profile(
    profile_data: ProfileDetails,
    token_data: TokenData = Depends(get_token_data),
    current_user: UserProfile = Depends(get_current_user)
):
    """Update fields of the current user's profile; the role cannot be changed here"""
    try:
        return await session_service.update_profile(token_data.session_id, current_user, profile_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update profile: {str(e)}"
        )
