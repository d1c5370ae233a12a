"""
Endpoint subpackage for API v1.

Each module defines an ``APIRouter`` for one domain (listings, users,
bookings, ...).  The routers are aggregated in ``router.py``.
Endpoints stay thin: they resolve the request's :class:`Session` and
hand it to the service layer, which performs every permission check.
"""
