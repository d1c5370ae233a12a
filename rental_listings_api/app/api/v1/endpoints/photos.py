"""
Photo endpoints for API v1.

Photos are added through ``/listings/{listing_id}/photos``; this router
only exposes single-photo operations.
"""

from fastapi import APIRouter, Depends, status

from rental_listings_api.app.core.exceptions import NotFoundError
from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.photo import PhotoRead
from rental_listings_api.app.services.listing_management_service import ListingManagementService
from rental_listings_api.app.services.photo_service import PhotoService


router = APIRouter()


@router.get("/{photo_id}", response_model=PhotoRead)
async def get_photo(photo_id: int) -> PhotoRead:
    photo = await PhotoService.get_by_id(photo_id)
    if photo is None:
        raise NotFoundError(f"Photo {photo_id} not found")
    return photo


@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(photo_id: int, session: Session = Depends(get_current_session)) -> None:
    """Delete a photo.  Only the listing's host or an admin may do this."""
    await ListingManagementService.delete_photo(session, photo_id)
    return None
