"""Pydantic models for saved listings (a user's bookmarks)."""

from typing import Optional

from pydantic import BaseModel

from .listing import ListingRead


class SavedListingRead(BaseModel):
    f_username: str
    listings: int

    model_config = {
        "from_attributes": True,
    }


class SavedListingDetail(SavedListingRead):
    listing_details: Optional[ListingRead] = None


class SavedStatus(BaseModel):
    listing_id: int
    saved: bool
