"""
Authentication API routes (mock login: any email is accepted)
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import Optional
import logging

from mentorverse.core.security.auth_dependencies import (
    get_current_user, get_optional_token_data, get_token_data
)
from mentorverse.models.models import (
    CompleteProfileRequest, LoginRequest, SessionResponse, SuccessResponse,
    TokenData, TokenResponse, UserProfile
)
from mentorverse.services.auth.session_service import session_service

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)

@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """Log in (or sign up) with an email and an optional role"""
    try:
        user, token = await session_service.login(request.email, request.role)
        return TokenResponse(
            access_token=token,
            session_state=session_service.session_state(user),
            user=user
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Login failed for {request.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to log in: {str(e)}"
        )

@router.post("/complete-profile", response_model=SessionResponse)
async def complete_profile(
    request: CompleteProfileRequest,
    token_data: TokenData = Depends(get_token_data),
    current_user: UserProfile = Depends(get_current_user)
):
    """Choose a role and fill in the role's profile fields"""
    try:
        user = await session_service.complete_profile(
            token_data.session_id, current_user, request.profile, request.role
        )
        return SessionResponse(session_state=session_service.session_state(user), user=user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to complete profile: {str(e)}"
        )

@router.post("/logout", response_model=SuccessResponse)
async def logout(token_data: TokenData = Depends(get_token_data)):
    """End the current session; the profile itself is kept"""
    await session_service.logout(token_data.session_id)
    return SuccessResponse(message="Logged out successfully")

@router.get("/session", response_model=SessionResponse)
async def get_session(token_data: Optional[TokenData] = Depends(get_optional_token_data)):
    """Restore the session's cached profile, or report an anonymous session"""
    if token_data is None:
        return SessionResponse(session_state=session_service.session_state(None))

    user = await session_service.restore_session(token_data.session_id)
    return SessionResponse(session_state=session_service.session_state(user), user=user)
