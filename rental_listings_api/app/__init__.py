"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (listings, locations, photos, messages,
saved listings, bookings, etc.) has a service in ``services`` and a
router defined in ``api/v1/endpoints``.  Persistence lives in the
hosted backend reached through ``core.backend``.
"""

from .main import app  # noqa: F401
