"""
Business logic for locations.

Thin adapter over the backend ``locations`` table.  Ownership of a
location follows from the listing that references it, so permission
checks happen in ``ListingManagementService`` rather than here.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..core.backend import get_backend
from ..core.exceptions import NotFoundError
from ..schemas.location import LocationCreate, LocationRead

TABLE = "locations"


class LocationService:
    """Service for the ``locations`` table."""

    @classmethod
    async def get_all(cls) -> List[LocationRead]:
        rows = get_backend().select(TABLE, order="location_id")
        return [LocationRead(**row) for row in rows]

    @classmethod
    async def get_by_id(cls, location_id: int) -> Optional[LocationRead]:
        rows = get_backend().select(TABLE, {"location_id": location_id})
        return LocationRead(**rows[0]) if rows else None

    @classmethod
    async def get_by_ids(cls, location_ids: Iterable[int]) -> Dict[int, LocationRead]:
        """Return the given locations keyed by id, in one backend call."""
        ids = sorted({i for i in location_ids if i is not None})
        if not ids:
            return {}
        rows = get_backend().select(TABLE, {"location_id": ids})
        return {row["location_id"]: LocationRead(**row) for row in rows}

    @classmethod
    async def create(cls, data: LocationCreate) -> LocationRead:
        logger = logging.getLogger(__name__)
        rows = get_backend().insert(TABLE, data.model_dump())
        location = LocationRead(**rows[0])
        logger.info("Created location %s in %s", location.location_id, location.city)
        return location

    @classmethod
    async def update(cls, location_id: int, updates: Dict[str, Any]) -> LocationRead:
        rows = get_backend().update(TABLE, updates, {"location_id": location_id})
        if not rows:
            raise NotFoundError(f"Location {location_id} not found")
        return LocationRead(**rows[0])

    @classmethod
    async def delete(cls, location_id: int) -> None:
        get_backend().delete(TABLE, {"location_id": location_id})

    @classmethod
    async def search_by_city_and_state(cls, city: str, state: Optional[str] = None) -> List[LocationRead]:
        filters: Dict[str, Any] = {"city": city}
        if state:
            filters["state"] = state
        rows = get_backend().select(TABLE, filters)
        return [LocationRead(**row) for row in rows]

    @classmethod
    async def search_by_zip_code(cls, zip_code: str) -> List[LocationRead]:
        rows = get_backend().select(TABLE, {"zip_code": zip_code})
        return [LocationRead(**row) for row in rows]
