"""
Error taxonomy shared by services and the HTTP layer.

Services raise these exceptions; ``main.create_app`` maps each class
to an HTTP status code.  Failures reported by the hosted backend are
raised as :class:`~rental_listings_api.app.core.backend.BackendError`
and are not wrapped.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """The requested entity does not exist."""

    status_code = 404


class PermissionDeniedError(ServiceError):
    """The session user may not perform the operation."""

    status_code = 403


class InvalidInputError(ServiceError):
    """Input failed a business validation rule."""

    status_code = 400


class AuthenticationError(ServiceError):
    """Login failed or no authenticated identity is available.

    ``reason`` tells the failure kinds apart: ``"not_found"`` (no user
    with that email), ``"invalid_password"`` or ``"unauthenticated"``.
    """

    status_code = 401

    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason or "unauthenticated"
