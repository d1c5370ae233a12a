"""
Business logic for saved listings.

A saved listing is a ``(f_username, listings)`` pair in the
``saved_listings`` join table; the pair is unique.  Saving a listing
twice is not an error: the unique violation reported by the backend is
absorbed and the existing row is returned instead.
"""

import logging
from typing import List, Optional, Union

from ..core.backend import BackendError, get_backend
from ..core.exceptions import NotFoundError
from ..schemas.listing import ListingRecord
from ..schemas.saved_listing import SavedListingDetail, SavedListingRead
from .listing_service import ListingService

TABLE = "saved_listings"
DETAILS_RPC = "get_saved_listings_with_details_by_username"


class SavedListingService:
    """Service for the ``saved_listings`` table."""

    @classmethod
    async def add(cls, username: str, listing_id: int) -> SavedListingRead:
        """Save ``listing_id`` for ``username``.

        Returns the stored row.  If the pair already exists the existing
        row is returned and nothing is raised.
        """
        logger = logging.getLogger(__name__)
        if await ListingService.get_raw(listing_id) is None:
            raise NotFoundError(f"Listing {listing_id} not found")
        try:
            rows = get_backend().insert(TABLE, {"listings": listing_id, "f_username": username})
        except BackendError as exc:
            if not exc.is_unique_violation:
                logger.error("Failed to save listing %s for %s: %s", listing_id, username, exc.message)
                raise
            logger.info("Listing %s already saved by %s", listing_id, username)
            existing = await cls.get_saved_listing_entry(username, listing_id)
            if existing is None:
                raise
            return existing
        logger.info("User %s saved listing %s", username, listing_id)
        return SavedListingRead(**rows[0])

    @classmethod
    async def remove(cls, username: str, listing_id: int) -> None:
        get_backend().delete(TABLE, {"f_username": username, "listings": listing_id})

    @classmethod
    async def get_by_username(
        cls,
        username: str,
        include_details: bool = False,
    ) -> List[Union[SavedListingRead, SavedListingDetail]]:
        """List a user's saved listings.

        With ``include_details`` the listing rows come from the
        ``get_saved_listings_with_details_by_username`` procedure and
        are expanded into the full listing view (location and photos).
        """
        if not include_details:
            rows = get_backend().select(TABLE, {"f_username": username}, order="listings")
            return [SavedListingRead(**row) for row in rows]

        rows = get_backend().rpc(DETAILS_RPC, {"p_username": username}) or []
        records = [ListingRecord(**row) for row in rows]
        views = {view.listing_id: view for view in await ListingService.attach_related(records)}
        return [
            SavedListingDetail(f_username=username, listings=record.listing_id, listing_details=views[record.listing_id])
            for record in records
        ]

    @classmethod
    async def is_listing_saved(cls, username: str, listing_id: int) -> bool:
        return await cls.get_saved_listing_entry(username, listing_id) is not None

    @classmethod
    async def get_saved_listing_entry(cls, username: str, listing_id: int) -> Optional[SavedListingRead]:
        rows = get_backend().select(TABLE, {"f_username": username, "listings": listing_id})
        return SavedListingRead(**rows[0]) if rows else None
