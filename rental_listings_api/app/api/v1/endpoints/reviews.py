"""
Host review endpoints for API v1.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.review import HostReviewCreate, HostReviewRead
from rental_listings_api.app.services.review_service import ReviewService


router = APIRouter()


@router.post("/", response_model=HostReviewRead, status_code=status.HTTP_201_CREATED)
async def create_review(review: HostReviewCreate, session: Session = Depends(get_current_session)) -> HostReviewRead:
    """Review the host of a listing.  Hosts cannot review their own listings."""
    return await ReviewService.create(session, review)


@router.get("/listing/{listing_id}", response_model=List[HostReviewRead])
async def listing_reviews(listing_id: int) -> List[HostReviewRead]:
    return await ReviewService.get_by_listing_id(listing_id)


@router.get("/host/{username}", response_model=List[HostReviewRead])
async def host_reviews(username: str) -> List[HostReviewRead]:
    return await ReviewService.get_by_host_username(username)


@router.get("/guest/{username}", response_model=List[HostReviewRead])
async def guest_reviews(username: str) -> List[HostReviewRead]:
    return await ReviewService.get_by_guest_username(username)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(review_id: int, session: Session = Depends(get_current_session)) -> None:
    await ReviewService.delete(session, review_id)
    return None
