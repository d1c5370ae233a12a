"""
Pydantic models for listings.

``ListingRead`` is the denormalized view handed to API consumers: the
listing row with its location and photos merged in.  ``ListingCreate``
accepts either an existing ``location_id`` or inline ``location``
fields, plus any number of photo URLs.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .location import LocationCreate, LocationRead, LocationUpdate
from .photo import PhotoIn, PhotoRead


class ListingBase(BaseModel):
    price: float = Field(..., ge=0, examples=[120])
    description: Optional[str] = Field("", examples=["A bright two-room flat near the park"])
    contact_info: Optional[str] = Field("", examples=["alice@example.com"])


class ListingCreate(ListingBase):
    """Schema for creating a listing."""

    location_id: Optional[int] = None
    location: Optional[LocationCreate] = None
    photos: List[PhotoIn] = Field(default_factory=list)


class ListingUpdate(BaseModel):
    """Schema for updating a listing.

    Scalar fields are optional; ``location`` updates the attached
    location, or creates one if the listing has none yet.
    """

    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    contact_info: Optional[str] = None
    location: Optional[LocationUpdate] = None


class ListingRecord(ListingBase):
    """A bare ``listing`` row."""

    listing_id: int
    host_username: str
    location_id: Optional[int] = None


class ListingRead(ListingRecord):
    """A listing with its location and photos attached."""

    location: Optional[LocationRead] = None
    photos: List[PhotoRead] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }


class PhotoUrls(BaseModel):
    photos: List[PhotoIn] = Field(..., min_length=1)
