"""
Availability calendar endpoints for API v1.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status

from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.availability import AvailabilityDates, AvailabilityRead
from rental_listings_api.app.services.availability_service import AvailabilityService


router = APIRouter()


@router.get("/{listing_id}", response_model=List[AvailabilityRead])
async def list_dates(listing_id: int) -> List[AvailabilityRead]:
    return await AvailabilityService.get_by_listing_id(listing_id)


@router.get("/{listing_id}/{day}", response_model=bool)
async def is_available(listing_id: int, day: date) -> bool:
    return await AvailabilityService.check_availability_on_date(listing_id, day)


@router.post("/{listing_id}", response_model=List[AvailabilityRead], status_code=status.HTTP_201_CREATED)
async def add_dates(
    listing_id: int,
    payload: AvailabilityDates,
    session: Session = Depends(get_current_session),
) -> List[AvailabilityRead]:
    """Mark dates as available.  Dates already present are skipped."""
    return await AvailabilityService.add_dates(session, listing_id, payload.dates)


@router.delete("/{listing_id}/{day}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_date(listing_id: int, day: date, session: Session = Depends(get_current_session)) -> None:
    await AvailabilityService.delete(session, listing_id, day)
    return None
