"""
Business logic for the ``listing`` table.

Besides plain row access this service builds the denormalized
listing view (:class:`~rental_listings_api.app.schemas.listing.ListingRead`).
The backend is not relied upon to embed related rows, so locations
and photos are fetched with one secondary lookup each (``location_id
in (…)`` and ``f_listing_id in (…)``) and merged here.

Permission checks are not performed in this module; callers that
mutate listings on behalf of a user go through
``ListingManagementService``.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..core.backend import get_backend
from ..core.exceptions import NotFoundError
from ..schemas.listing import ListingRead, ListingRecord
from .location_service import LocationService
from .photo_service import PhotoService

TABLE = "listing"


class ListingService:
    """Service for the ``listing`` table and the listing view."""

    @classmethod
    async def get_all(cls) -> List[ListingRecord]:
        rows = get_backend().select(TABLE, order="listing_id")
        return [ListingRecord(**row) for row in rows]

    @classmethod
    async def get_raw(cls, listing_id: int) -> Optional[ListingRecord]:
        rows = get_backend().select(TABLE, {"listing_id": listing_id})
        return ListingRecord(**rows[0]) if rows else None

    @classmethod
    async def get_by_host_username(cls, host_username: str) -> List[ListingRecord]:
        rows = get_backend().select(TABLE, {"host_username": host_username}, order="listing_id")
        return [ListingRecord(**row) for row in rows]

    @classmethod
    async def get_by_location_id(cls, location_id: int) -> List[ListingRecord]:
        rows = get_backend().select(TABLE, {"location_id": location_id}, order="listing_id")
        return [ListingRecord(**row) for row in rows]

    @classmethod
    async def get_by_ids(cls, listing_ids: Iterable[int]) -> List[ListingRecord]:
        ids = sorted(set(listing_ids))
        if not ids:
            return []
        rows = get_backend().select(TABLE, {"listing_id": ids}, order="listing_id")
        return [ListingRecord(**row) for row in rows]

    @classmethod
    async def create(cls, values: Dict[str, Any]) -> ListingRecord:
        logger = logging.getLogger(__name__)
        rows = get_backend().insert(TABLE, values)
        listing = ListingRecord(**rows[0])
        logger.info("Created listing %s for host %s", listing.listing_id, listing.host_username)
        return listing

    @classmethod
    async def update(cls, listing_id: int, updates: Dict[str, Any]) -> ListingRecord:
        rows = get_backend().update(TABLE, updates, {"listing_id": listing_id})
        if not rows:
            raise NotFoundError(f"Listing {listing_id} not found")
        return ListingRecord(**rows[0])

    @classmethod
    async def delete(cls, listing_id: int) -> None:
        get_backend().delete(TABLE, {"listing_id": listing_id})

    # ------------------------------------------------------------------
    # Denormalized view
    # ------------------------------------------------------------------
    @classmethod
    async def attach_related(cls, records: List[ListingRecord]) -> List[ListingRead]:
        """Merge each record with its location and photos.

        A ``location_id`` that does not resolve leaves ``location`` as
        ``None``; it is not an error.
        """
        if not records:
            return []
        locations = await LocationService.get_by_ids(r.location_id for r in records)
        photos = await PhotoService.get_by_listing_ids(r.listing_id for r in records)
        return [
            ListingRead(
                **record.model_dump(),
                location=locations.get(record.location_id),
                photos=photos.get(record.listing_id, []),
            )
            for record in records
        ]

    @classmethod
    async def get_all_with_location(cls) -> List[ListingRead]:
        return await cls.attach_related(await cls.get_all())

    @classmethod
    async def get_by_id(cls, listing_id: int) -> Optional[ListingRead]:
        record = await cls.get_raw(listing_id)
        if record is None:
            return None
        return (await cls.attach_related([record]))[0]

    @classmethod
    async def get_by_host_with_location(cls, host_username: str) -> List[ListingRead]:
        return await cls.attach_related(await cls.get_by_host_username(host_username))

    @classmethod
    async def search_by_location(cls, city: str, state: Optional[str] = None) -> List[ListingRead]:
        """Listings whose location matches ``city`` (and ``state`` when given)."""
        locations = await LocationService.search_by_city_and_state(city, state)
        location_ids = [location.location_id for location in locations]
        if not location_ids:
            return []
        rows = get_backend().select(TABLE, {"location_id": location_ids}, order="listing_id")
        return await cls.attach_related([ListingRecord(**row) for row in rows])
