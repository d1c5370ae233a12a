"""
Pydantic models for locations.

A location is the address and room-count record that belongs to
exactly one listing.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LocationBase(BaseModel):
    street: Optional[str] = Field("", examples=["123 Main St"])
    city: str = Field(..., min_length=1, examples=["New York"])
    state: Optional[str] = Field("", examples=["NY"])
    zip_code: Optional[str] = Field("", examples=["10001"])
    number_of_rooms: Optional[int] = Field(1, ge=0, examples=[2])
    loc_type: Optional[str] = Field(None, examples=["apartment"])


class LocationCreate(LocationBase):
    """Schema for creating a location."""
    pass


class LocationRead(LocationBase):
    """Schema for reading a location from the API."""

    # Rows written before the city was validated may hold an empty or null city.
    city: Optional[str] = ""
    location_id: int

    model_config = {
        "from_attributes": True,
    }


class LocationUpdate(BaseModel):
    """All fields optional; only provided fields are updated."""

    street: Optional[str] = None
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = None
    zip_code: Optional[str] = None
    number_of_rooms: Optional[int] = Field(None, ge=0)
    loc_type: Optional[str] = None
