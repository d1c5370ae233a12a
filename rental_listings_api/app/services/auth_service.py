"""
Registration, login and profile management.

``AuthService`` sits on top of :class:`UserService` and the helpers in
``core.security``.  Every successful register, login or profile update
returns an :class:`AuthResult` holding a freshly signed token together
with the user record; the client persists both.  Logging out needs no
server-side state because tokens are self-contained and are not
revoked.

Login failures raise :class:`AuthenticationError` whose ``reason``
tells an unknown email (``"not_found"``) apart from a wrong password
(``"invalid_password"``).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..core.backend import BackendError
from ..core.exceptions import AuthenticationError, InvalidInputError, NotFoundError
from ..core.security import create_session_token, hash_password, verify_password
from ..core.session import Session
from ..schemas.user import UserCreate, UserRead, UserUpdate
from .user_service import UserService

MIN_PASSWORD_LENGTH = 6


@dataclass
class AuthResult:
    access_token: str
    user: UserRead


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_email(email: str) -> None:
    if not email or email.count("@") != 1 or len(email) > 200:
        raise InvalidInputError("A valid email address is required")


def _validate_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


class AuthService:
    """Authentication and account operations."""

    @classmethod
    async def register(cls, data: UserCreate) -> AuthResult:
        logger = logging.getLogger(__name__)
        username = data.username.strip()
        email = _normalize_email(data.email)
        if not username:
            raise InvalidInputError("Username is required")
        _validate_email(email)
        _validate_password(data.password)
        if await UserService.get_by_email(email) is not None:
            raise InvalidInputError("User already exists with this email")
        if await UserService.get_by_username(username) is not None:
            raise InvalidInputError("Username is already taken")
        try:
            user = await UserService.create(username, email, hash_password(data.password), data.mode)
        except BackendError as exc:
            # Lost a race with a concurrent registration.
            if exc.is_unique_violation:
                raise InvalidInputError("User already exists") from exc
            logger.error("Registration of %s failed: %s", username, exc.message)
            raise
        logger.info("Registered user %s as %s", user.username, user.mode)
        return AuthResult(access_token=create_session_token(user.model_dump()), user=user)

    @classmethod
    async def login(cls, email: str, password: str) -> AuthResult:
        logger = logging.getLogger(__name__)
        email = _normalize_email(email)
        row = await UserService.get_credentials_by_email(email)
        if row is None:
            logger.info("Login failed: no user with email %s", email)
            raise AuthenticationError("User not found", reason="not_found")
        if not verify_password(password or "", row.get("password")):
            logger.info("Login failed: wrong password for %s", row["username"])
            raise AuthenticationError("Invalid credentials", reason="invalid_password")
        user = UserRead(**row)
        logger.info("User %s logged in", user.username)
        return AuthResult(access_token=create_session_token(row), user=user)

    @classmethod
    async def update_profile(cls, session: Session, data: UserUpdate) -> AuthResult:
        """Update the session user's email, password or guest/host mode.

        An admin keeps the admin mode; switching between guest and host
        is for regular users only.
        """
        logger = logging.getLogger(__name__)
        updates: Dict[str, Any] = {}
        if data.email is not None:
            email = _normalize_email(data.email)
            _validate_email(email)
            other = await UserService.get_by_email(email)
            if other is not None and other.username != session.username:
                raise InvalidInputError("User already exists with this email")
            updates["email"] = email
        if data.password is not None:
            _validate_password(data.password)
            updates["password"] = hash_password(data.password)
        if data.mode is not None and not session.is_admin:
            updates["mode"] = data.mode

        if updates:
            user = await UserService.update(session.username, updates)
            logger.info("User %s updated profile fields: %s", session.username, ", ".join(sorted(updates)))
        else:
            user = await UserService.get_by_username(session.username)
            if user is None:
                raise NotFoundError(f"User {session.username} not found")
        return AuthResult(access_token=create_session_token(user.model_dump()), user=user)

    @staticmethod
    def check_is_admin(session: Session) -> bool:
        """True only when the session user's mode is ``admin``."""
        return session is not None and session.is_admin
