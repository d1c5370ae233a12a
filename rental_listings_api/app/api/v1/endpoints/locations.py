"""
Location endpoints for API v1.

Locations are created and changed together with their listing, so
this router is read-only.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from rental_listings_api.app.core.exceptions import NotFoundError
from rental_listings_api.app.schemas.location import LocationRead
from rental_listings_api.app.services.location_service import LocationService


router = APIRouter()


@router.get("/", response_model=List[LocationRead])
async def list_locations(
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    zip_code: Optional[str] = Query(None),
) -> List[LocationRead]:
    """List locations, optionally filtered by ``city`` (and ``state``) or ``zip_code``."""
    if city:
        return await LocationService.search_by_city_and_state(city, state)
    if zip_code:
        return await LocationService.search_by_zip_code(zip_code)
    return await LocationService.get_all()


@router.get("/{location_id}", response_model=LocationRead)
async def get_location(location_id: int) -> LocationRead:
    location = await LocationService.get_by_id(location_id)
    if location is None:
        raise NotFoundError(f"Location {location_id} not found")
    return location
