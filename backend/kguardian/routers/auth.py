import logging
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import BaseModel
from kguardian.core.security import decode_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Tokens are issued by the hosted OAuth provider; this service only verifies them.
bearer_scheme = HTTPBearer(auto_error=False)

class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def first_name(self) -> str:
        return (self.full_name or "User").split(" ")[0]

class UserProfile(BaseModel):
    id: str
    email: str
    first_name: str

class SessionState(BaseModel):
    authenticated: bool
    user: Optional[UserProfile] = None

def user_from_claims(payload: dict) -> Optional[CurrentUser]:
    user_id = payload.get("sub")
    if not user_id:
        return None
    metadata = payload.get("user_metadata") or {}
    full_name = (
        metadata.get("full_name")
        or metadata.get("display_name")
        or metadata.get("name")
    )
    return CurrentUser(id=user_id, email=payload.get("email"), full_name=full_name)

def profile_of(user: CurrentUser) -> UserProfile:
    return UserProfile(id=user.id, email=user.email or "Unknown Email", first_name=user.first_name)

async def get_optional_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
) -> Optional[CurrentUser]:
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        return None
    user = user_from_claims(payload)
    if user is None:
        logger.info("Bearer token carries no 'sub' claim")
    return user

async def get_current_user(
    user: Annotated[Optional[CurrentUser], Depends(get_optional_user)]
) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

@router.get("/me", response_model=UserProfile)
async def get_current_user_info(
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get current user profile information"""
    return profile_of(current_user)

@router.get("/session", response_model=SessionState)
async def get_session(
    user: Optional[CurrentUser] = Depends(get_optional_user)
):
    """Session state for navigation chrome; never rejects the caller"""
    if user is None:
        return SessionState(authenticated=False)
    return SessionState(authenticated=True, user=profile_of(user))

@router.post("/logout")
async def logout():
    """Logout endpoint (client-side token removal)"""
    # Tokens belong to the hosted provider; the client drops its copy and
    # signs out there.
    return {"message": "Logged out successfully"}
