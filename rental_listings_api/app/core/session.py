"""
Request-scoped identity.

A :class:`Session` is built for each authenticated request by
``core.security.get_current_session`` and handed explicitly to every
service call that needs to know who is acting.  Nothing in the
application keeps a process-wide "current user".
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

ADMIN_MODE = "admin"
HOST_MODE = "host"
GUEST_MODE = "guest"
USER_MODES = (GUEST_MODE, HOST_MODE, ADMIN_MODE)


@dataclass(frozen=True)
class Session:
    """The authenticated user behind a request."""

    username: str
    email: str
    mode: str = GUEST_MODE
    token: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.mode == ADMIN_MODE

    def can_manage(self, host_username: Optional[str]) -> bool:
        """Return True if this user may modify a record owned by ``host_username``."""
        return self.is_admin or (host_username is not None and host_username == self.username)

    @classmethod
    def from_user_row(cls, row: Dict[str, Any], token: Optional[str] = None) -> "Session":
        return cls(
            username=row["username"],
            email=row.get("email") or "",
            mode=row.get("mode") or GUEST_MODE,
            token=token,
        )
