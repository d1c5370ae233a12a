"""
Pydantic models for user data.

The ``username`` is the primary key of the backend ``user`` table.
Passwords only ever travel inbound (``UserCreate``, ``UserUpdate``,
``LoginRequest``); no response model carries one.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

UserMode = Literal["guest", "host", "admin"]
SelfServiceMode = Literal["guest", "host"]


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, examples=["alice"])
    email: str = Field(..., examples=["alice@example.com"])


class UserCreate(UserBase):
    """Schema for registering a user.

    Admin accounts cannot be self-registered; an existing admin grants
    the role through the user management endpoints.
    """

    password: str = Field(..., examples=["strongpassword"])
    mode: SelfServiceMode = Field("guest", examples=["host"])


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    mode: UserMode = "guest"

    model_config = {
        "from_attributes": True,
    }


class UserUpdate(BaseModel):
    """Profile changes a user may make to their own account."""

    email: Optional[str] = None
    password: Optional[str] = None
    mode: Optional[SelfServiceMode] = None


class UserRoleUpdate(BaseModel):
    """Role change performed by an administrator."""

    mode: UserMode


class LoginRequest(BaseModel):
    email: str = Field(..., examples=["alice@example.com"])
    password: str = Field(..., examples=["strongpassword"])


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
