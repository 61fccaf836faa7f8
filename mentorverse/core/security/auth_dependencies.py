from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from mentorverse.core.security.jwt_auth import verify_token
from mentorverse.models.models import TokenData, UserProfile, UserRole
from mentorverse.services.store.profile_store import profile_store
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def _token_data_from(token: str) -> Optional[TokenData]:
    payload = verify_token(token)
    if payload is None:
        return None

    user_id: str = payload.get("user_id")
    email: str = payload.get("email")
    session_id: str = payload.get("sid")

    if user_id is None or email is None or session_id is None:
        return None

    return TokenData(user_id=user_id, email=email, session_id=session_id)

async def get_token_data(credentials: HTTPAuthorizationCredentials = Depends(security)) -> TokenData:
    """Decode the bearer token into the user id and session id it carries"""
    token_data = _token_data_from(credentials.credentials)
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token_data

async def get_current_user(token_data: TokenData = Depends(get_token_data)) -> UserProfile:
    """Get the current user's live record from the profile store"""
    user = profile_store.get_by_id(token_data.user_id)
    if user is None:
        logger.error(f"Token refers to unknown user {token_data.user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

async def get_current_mentee_user(current_user: UserProfile = Depends(get_current_user)) -> UserProfile:
    """Get current user and verify they are a mentee"""
    if current_user.role != UserRole.MENTEE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Mentee role required."
        )
    return current_user

async def get_current_mentor_user(current_user: UserProfile = Depends(get_current_user)) -> UserProfile:
    """Get current user and verify they are a mentor"""
    if current_user.role != UserRole.MENTOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Mentor role required."
        )
    return current_user

async def get_optional_token_data(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security)
) -> Optional[TokenData]:
    """Token data if a valid token is provided, otherwise None"""
    if not credentials:
        return None
    return _token_data_from(credentials.credentials)
