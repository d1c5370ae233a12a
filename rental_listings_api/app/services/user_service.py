"""
Business logic for users.

Rows of the backend ``user`` table are keyed by ``username``.  The
stored password hash never leaves this module except through
:meth:`UserService.get_credentials_by_email`, which ``AuthService``
uses to verify a login.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.backend import get_backend
from ..core.exceptions import NotFoundError
from ..schemas.user import UserRead

TABLE = "user"
PUBLIC_COLUMNS = "username,email,mode"


class UserService:
    """Service for the ``user`` table."""

    @classmethod
    async def list_users(cls) -> List[UserRead]:
        rows = get_backend().select(TABLE, columns=PUBLIC_COLUMNS, order="username")
        return [UserRead(**row) for row in rows]

    @classmethod
    async def get_by_username(cls, username: str) -> Optional[UserRead]:
        rows = get_backend().select(TABLE, {"username": username}, columns=PUBLIC_COLUMNS)
        return UserRead(**rows[0]) if rows else None

    @classmethod
    async def _find_by_email(cls, email: str, columns: str = "*") -> Optional[Dict[str, Any]]:
        """Case-insensitive email lookup.

        Older rows may hold mixed-case addresses.  ``ilike`` treats
        ``_`` and ``%`` as wildcards, so candidates are narrowed to an
        exact case-folded match here.
        """
        rows = get_backend().select(TABLE, columns=columns, ilike={"email": email})
        wanted = email.lower()
        for row in rows:
            if (row.get("email") or "").lower() == wanted:
                return row
        return None

    @classmethod
    async def get_by_email(cls, email: str) -> Optional[UserRead]:
        row = await cls._find_by_email(email, PUBLIC_COLUMNS)
        return UserRead(**row) if row else None

    @classmethod
    async def get_credentials_by_email(cls, email: str) -> Optional[Dict[str, Any]]:
        """Return the full row, password hash included, or ``None``."""
        return await cls._find_by_email(email)

    @classmethod
    async def create(cls, username: str, email: str, password_hash: str, mode: str = "guest") -> UserRead:
        logger = logging.getLogger(__name__)
        rows = get_backend().insert(
            TABLE,
            {"username": username, "email": email, "password": password_hash, "mode": mode},
        )
        logger.info("Created user %s (%s)", username, mode)
        return UserRead(**rows[0])

    @classmethod
    async def update(cls, username: str, updates: Dict[str, Any]) -> UserRead:
        """Apply ``updates`` to a user row.

        ``updates`` may contain ``email``, ``mode`` and an already
        hashed ``password``.  Raises ``NotFoundError`` when no row
        matched.
        """
        rows = get_backend().update(TABLE, updates, {"username": username})
        if not rows:
            raise NotFoundError(f"User {username} not found")
        return UserRead(**rows[0])

    @classmethod
    async def delete(cls, username: str) -> None:
        logger = logging.getLogger(__name__)
        if await cls.get_by_username(username) is None:
            raise NotFoundError(f"User {username} not found")
        get_backend().delete(TABLE, {"username": username})
        logger.info("Deleted user %s", username)
