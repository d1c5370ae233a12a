"""
Business logic for listing availability.

The ``availability`` table holds one row per ``(availability,
f_listing_id)`` pair, where ``availability`` is a date on which the
host offers the listing.
"""

import logging
from datetime import date
from typing import Iterable, List

from ..core.backend import get_backend
from ..core.exceptions import NotFoundError, PermissionDeniedError
from ..core.session import Session
from ..schemas.availability import AvailabilityRead
from .listing_service import ListingService

TABLE = "availability"


class AvailabilityService:
    """Service for the ``availability`` table."""

    @classmethod
    async def get_by_listing_id(cls, listing_id: int) -> List[AvailabilityRead]:
        rows = get_backend().select(TABLE, {"f_listing_id": listing_id}, order="availability")
        return [AvailabilityRead(**row) for row in rows]

    @classmethod
    async def check_availability_on_date(cls, listing_id: int, day: date) -> bool:
        rows = get_backend().select(TABLE, {"f_listing_id": listing_id, "availability": day.isoformat()})
        return len(rows) > 0

    @classmethod
    async def _ensure_can_manage(cls, session: Session, listing_id: int) -> None:
        listing = await ListingService.get_raw(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found")
        if not session.can_manage(listing.host_username):
            raise PermissionDeniedError("You don't have permission to manage this listing")

    @classmethod
    async def add_dates(cls, session: Session, listing_id: int, dates: Iterable[date]) -> List[AvailabilityRead]:
        """Publish ``dates`` for a listing; dates already published are skipped."""
        logger = logging.getLogger(__name__)
        await cls._ensure_can_manage(session, listing_id)
        existing = {a.availability for a in await cls.get_by_listing_id(listing_id)}
        new_dates = sorted(set(dates) - existing)
        if new_dates:
            get_backend().insert(
                TABLE,
                [{"f_listing_id": listing_id, "availability": d.isoformat()} for d in new_dates],
            )
            logger.info("Listing %s: %d availability date(s) added", listing_id, len(new_dates))
        return await cls.get_by_listing_id(listing_id)

    @classmethod
    async def delete(cls, session: Session, listing_id: int, day: date) -> None:
        await cls._ensure_can_manage(session, listing_id)
        get_backend().delete(TABLE, {"f_listing_id": listing_id, "availability": day.isoformat()})
