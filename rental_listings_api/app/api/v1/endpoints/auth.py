"""
Authentication endpoints for API v1.

Registration and login return a bearer token together with the user
record.  Clients keep both and send the token back in the
``Authorization`` header.  There is no logout endpoint: tokens are
self-contained, so logging out only discards the client's copy.
"""

from fastapi import APIRouter, Depends, status

from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.core.exceptions import NotFoundError
from rental_listings_api.app.schemas.user import LoginRequest, TokenResponse, UserCreate, UserRead, UserUpdate
from rental_listings_api.app.services.auth_service import AuthService
from rental_listings_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate) -> TokenResponse:
    """Create an account and log it in.

    ``mode`` may be ``guest`` or ``host``; admin accounts cannot be
    self-registered.
    """
    result = await AuthService.register(user)
    return TokenResponse(access_token=result.access_token, user=result.user)


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest) -> TokenResponse:
    """Exchange email and password for an access token."""
    result = await AuthService.login(credentials.email, credentials.password)
    return TokenResponse(access_token=result.access_token, user=result.user)


@router.get("/me", response_model=UserRead)
async def read_me(session: Session = Depends(get_current_session)) -> UserRead:
    user = await UserService.get_by_username(session.username)
    if user is None:
        raise NotFoundError(f"User {session.username} not found")
    return user


@router.put("/me", response_model=TokenResponse)
async def update_me(updates: UserUpdate, session: Session = Depends(get_current_session)) -> TokenResponse:
    """Update the caller's email, password or guest/host mode.

    A new token is issued because the email claim may have changed.
    """
    result = await AuthService.update_profile(session, updates)
    return TokenResponse(access_token=result.access_token, user=result.user)
