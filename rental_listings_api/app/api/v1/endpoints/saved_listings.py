"""
Saved listing endpoints for API v1.

Every route works on the caller's own saved set.
"""

from typing import List, Union

from fastapi import APIRouter, Depends, Query, status

from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.saved_listing import SavedListingDetail, SavedListingRead, SavedStatus
from rental_listings_api.app.services.saved_listing_service import SavedListingService


router = APIRouter()


@router.get("/", response_model=List[Union[SavedListingDetail, SavedListingRead]])
async def list_saved(
    details: bool = Query(False, description="Include the full listing for each entry"),
    session: Session = Depends(get_current_session),
) -> List[Union[SavedListingDetail, SavedListingRead]]:
    return await SavedListingService.get_by_username(session.username, include_details=details)


@router.get("/{listing_id}", response_model=SavedStatus)
async def is_saved(listing_id: int, session: Session = Depends(get_current_session)) -> SavedStatus:
    saved = await SavedListingService.is_listing_saved(session.username, listing_id)
    return SavedStatus(listing_id=listing_id, saved=saved)


@router.post("/{listing_id}", response_model=SavedListingRead, status_code=status.HTTP_201_CREATED)
async def save_listing(listing_id: int, session: Session = Depends(get_current_session)) -> SavedListingRead:
    """Save a listing.  Saving the same listing twice is not an error."""
    return await SavedListingService.add(session.username, listing_id)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unsave_listing(listing_id: int, session: Session = Depends(get_current_session)) -> None:
    await SavedListingService.remove(session.username, listing_id)
    return None
