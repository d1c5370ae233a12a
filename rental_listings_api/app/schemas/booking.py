"""
Pydantic models for bookings.

A booking is keyed by ``(f_listing_id, check_in_date)``.  ``duration``
is the number of nights and is computed by the service.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

ReservationStatus = Literal["pending", "confirmed", "cancelled"]


class BookingCreate(BaseModel):
    f_listing_id: int
    check_in_date: date = Field(..., examples=["2025-09-01"])
    check_out_date: date = Field(..., examples=["2025-09-05"])


class BookingRead(BaseModel):
    f_listing_id: int
    check_in_date: date
    check_out_date: date
    reservation_status: str = "pending"
    reservation_confirmation: Optional[str] = None
    duration: int
    f_guest_username: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class BookingStatusUpdate(BaseModel):
    reservation_status: ReservationStatus
