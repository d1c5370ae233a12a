"""
Pydantic models for listing photos.

Photos are associated with listings through ``f_listing_id``.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PhotoIn(BaseModel):
    """A photo supplied together with a listing."""

    photo_url: str = Field(..., min_length=1, examples=["https://example.com/photo.jpg"])


class PhotoCreate(PhotoIn):
    f_listing_id: int


class PhotoRead(PhotoCreate):
    photo_id: int
    photo_time: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
