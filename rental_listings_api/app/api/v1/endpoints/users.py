"""
User administration endpoints for API v1.

All routes here require an admin session.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from rental_listings_api.app.core.exceptions import InvalidInputError
from rental_listings_api.app.core.security import require_admin
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.user import UserRead, UserRoleUpdate
from rental_listings_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/", response_model=List[UserRead])
async def list_users(session: Session = Depends(require_admin)) -> List[UserRead]:
    return await UserService.list_users()


@router.put("/{username}/role", response_model=UserRead)
async def change_role(
    username: str,
    payload: UserRoleUpdate,
    session: Session = Depends(require_admin),
) -> UserRead:
    """Set a user's mode (``guest``, ``host`` or ``admin``)."""
    user = await UserService.update(username, {"mode": payload.mode})
    logging.getLogger(__name__).info("Admin %s set mode of %s to %s", session.username, username, payload.mode)
    return user


@router.delete("/{username}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(username: str, session: Session = Depends(require_admin)) -> None:
    """Delete a user account.  Admins cannot delete themselves."""
    if username == session.username:
        raise InvalidInputError("You cannot delete your own account")
    await UserService.delete(username)
    logging.getLogger(__name__).info("Admin %s deleted user %s", session.username, username)
    return None
