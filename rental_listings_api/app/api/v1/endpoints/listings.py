"""
Listing endpoints for API v1.

Reads are public.  Creating a listing requires a session; updating or
deleting it (and managing its photos) is limited to the listing's host
and admins, which ``ListingManagementService`` checks before writing.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.listing import ListingCreate, ListingRead, ListingUpdate, PhotoUrls
from rental_listings_api.app.schemas.photo import PhotoRead
from rental_listings_api.app.services.listing_management_service import ListingManagementService
from rental_listings_api.app.services.photo_service import PhotoService


router = APIRouter()


@router.get("/", response_model=List[ListingRead])
async def list_listings(
    host: Optional[str] = Query(None, description="Only listings of this host"),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
) -> List[ListingRead]:
    """List listings with their location and photos.

    - **host**: filter by host username.
    - **city**, **state**: filter by location; ``state`` is ignored
      without ``city``.
    """
    return await ListingManagementService.list_listings(host_username=host, city=city, state=state)


@router.post("/", response_model=ListingRead, status_code=status.HTTP_201_CREATED)
async def create_listing(
    listing: ListingCreate,
    session: Session = Depends(get_current_session),
) -> ListingRead:
    """Create a listing owned by the caller.

    Pass either ``location_id`` of an existing location or an inline
    ``location``.  Photos are optional.
    """
    return await ListingManagementService.create_listing(session, listing)


@router.get("/{listing_id}", response_model=ListingRead)
async def get_listing(listing_id: int) -> ListingRead:
    return await ListingManagementService.get_listing(listing_id)


@router.put("/{listing_id}", response_model=ListingRead)
async def update_listing(
    listing_id: int,
    updates: ListingUpdate,
    session: Session = Depends(get_current_session),
) -> ListingRead:
    """Partially update a listing and its location.  Unset fields are kept."""
    return await ListingManagementService.update_listing(session, listing_id, updates)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(listing_id: int, session: Session = Depends(get_current_session)) -> None:
    await ListingManagementService.delete_listing(session, listing_id)
    return None


@router.get("/{listing_id}/photos", response_model=List[PhotoRead])
async def list_photos(listing_id: int) -> List[PhotoRead]:
    await ListingManagementService.get_listing(listing_id)
    return await PhotoService.get_by_listing_id(listing_id)


@router.post("/{listing_id}/photos", response_model=List[PhotoRead], status_code=status.HTTP_201_CREATED)
async def add_photos(
    listing_id: int,
    payload: PhotoUrls,
    session: Session = Depends(get_current_session),
) -> List[PhotoRead]:
    return await ListingManagementService.add_photos(session, listing_id, [p.photo_url for p in payload.photos])
