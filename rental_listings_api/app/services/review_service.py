"""
Business logic for host reviews.

A row in ``host_review`` records that a guest reviewed the host of a
listing.  The guest is always the session user and the host is read
from the listing, so neither can be forged by the caller.
"""

import logging
from typing import List

from ..core.backend import get_backend
from ..core.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from ..core.session import Session
from ..schemas.review import HostReviewCreate, HostReviewRead
from .listing_service import ListingService

TABLE = "host_review"


class ReviewService:
    """Service for the ``host_review`` table."""

    @classmethod
    async def get_by_listing_id(cls, listing_id: int) -> List[HostReviewRead]:
        rows = get_backend().select(TABLE, {"f_listing_id": listing_id}, order="review_id")
        return [HostReviewRead(**row) for row in rows]

    @classmethod
    async def get_by_host_username(cls, host_username: str) -> List[HostReviewRead]:
        rows = get_backend().select(TABLE, {"f_host_username": host_username}, order="review_id")
        return [HostReviewRead(**row) for row in rows]

    @classmethod
    async def get_by_guest_username(cls, guest_username: str) -> List[HostReviewRead]:
        rows = get_backend().select(TABLE, {"f_guest_username": guest_username}, order="review_id")
        return [HostReviewRead(**row) for row in rows]

    @classmethod
    async def create(cls, session: Session, data: HostReviewCreate) -> HostReviewRead:
        logger = logging.getLogger(__name__)
        listing = await ListingService.get_raw(data.f_listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {data.f_listing_id} not found")
        if listing.host_username == session.username:
            raise InvalidInputError("Hosts cannot review their own listing")
        rows = get_backend().insert(
            TABLE,
            {
                "f_listing_id": listing.listing_id,
                "f_host_username": listing.host_username,
                "f_guest_username": session.username,
            },
        )
        review = HostReviewRead(**rows[0])
        logger.info("User %s reviewed host %s (listing %s)", session.username, listing.host_username, listing.listing_id)
        return review

    @classmethod
    async def delete(cls, session: Session, review_id: int) -> None:
        rows = get_backend().select(TABLE, {"review_id": review_id})
        if not rows:
            raise NotFoundError(f"Review {review_id} not found")
        if not (session.is_admin or rows[0]["f_guest_username"] == session.username):
            raise PermissionDeniedError("You don't have permission to delete this review")
        get_backend().delete(TABLE, {"review_id": review_id})
