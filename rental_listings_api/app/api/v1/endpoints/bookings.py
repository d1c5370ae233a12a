"""
Booking endpoints for API v1.

A booking is identified by its listing and check-in date.  Stays are
half-open: a booking ending on a date does not block one starting on
that date.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from rental_listings_api.app.core.security import get_current_session, require_admin
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate, ReservationStatus
from rental_listings_api.app.services.booking_service import BookingService


router = APIRouter()


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(booking: BookingCreate, session: Session = Depends(get_current_session)) -> BookingRead:
    return await BookingService.create(session, booking)


@router.get("/", response_model=List[BookingRead])
async def list_bookings(
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    session: Session = Depends(require_admin),
) -> List[BookingRead]:
    """All bookings, optionally filtered by status (admin only)."""
    if reservation_status:
        return await BookingService.get_by_status(reservation_status)
    return await BookingService.get_all()


@router.get("/mine", response_model=List[BookingRead])
async def my_bookings(session: Session = Depends(get_current_session)) -> List[BookingRead]:
    return await BookingService.get_by_guest(session.username)


@router.get("/listing/{listing_id}", response_model=List[BookingRead])
async def listing_bookings(listing_id: int) -> List[BookingRead]:
    return await BookingService.get_by_listing_id(listing_id)


@router.get("/listing/{listing_id}/available", response_model=bool)
async def check_availability(
    listing_id: int,
    check_in_date: date = Query(...),
    check_out_date: date = Query(...),
) -> bool:
    """True when no active booking overlaps ``[check_in_date, check_out_date)``."""
    return await BookingService.check_availability(listing_id, check_in_date, check_out_date)


@router.put("/listing/{listing_id}/{check_in_date}", response_model=BookingRead)
async def update_booking_status(
    listing_id: int,
    check_in_date: date,
    payload: BookingStatusUpdate,
    session: Session = Depends(get_current_session),
) -> BookingRead:
    """Confirm or cancel a booking.

    The host (or an admin) may set any status; the guest may only cancel.
    """
    return await BookingService.update_status(session, listing_id, check_in_date, payload.reservation_status)


@router.delete("/listing/{listing_id}/{check_in_date}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    listing_id: int,
    check_in_date: date,
    session: Session = Depends(get_current_session),
) -> None:
    await BookingService.delete(session, listing_id, check_in_date)
    return None
