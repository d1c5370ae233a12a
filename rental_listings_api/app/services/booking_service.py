"""
Business logic for bookings.

Bookings are stored in the ``booking`` table keyed by
``(f_listing_id, check_in_date)``.  Stays are half-open date ranges:
a guest checking out on the 5th does not collide with one checking in
on the 5th.  Cancelled bookings never block a date range.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from ..core.backend import BackendError, get_backend
from ..core.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from ..core.session import Session
from ..schemas.booking import BookingCreate, BookingRead
from .listing_service import ListingService

TABLE = "booking"
CANCELLED = "cancelled"


def _overlaps(start: date, end: date, other_start: date, other_end: date) -> bool:
    return start < other_end and other_start < end


class BookingService:
    """Service for the ``booking`` table."""

    @classmethod
    async def get_all(cls) -> List[BookingRead]:
        rows = get_backend().select(TABLE, order="check_in_date")
        return [BookingRead(**row) for row in rows]

    @classmethod
    async def get_by_listing_id(cls, listing_id: int) -> List[BookingRead]:
        rows = get_backend().select(TABLE, {"f_listing_id": listing_id}, order="check_in_date")
        return [BookingRead(**row) for row in rows]

    @classmethod
    async def get_by_status(cls, status: str) -> List[BookingRead]:
        rows = get_backend().select(TABLE, {"reservation_status": status}, order="check_in_date")
        return [BookingRead(**row) for row in rows]

    @classmethod
    async def get_by_guest(cls, username: str) -> List[BookingRead]:
        rows = get_backend().select(TABLE, {"f_guest_username": username}, order="check_in_date")
        return [BookingRead(**row) for row in rows]

    @classmethod
    async def get_one(cls, listing_id: int, check_in_date: date) -> Optional[BookingRead]:
        rows = get_backend().select(
            TABLE, {"f_listing_id": listing_id, "check_in_date": check_in_date.isoformat()}
        )
        return BookingRead(**rows[0]) if rows else None

    @classmethod
    async def check_availability(cls, listing_id: int, check_in_date: date, check_out_date: date) -> bool:
        """Return True if no active booking of the listing overlaps the range."""
        for booking in await cls.get_by_listing_id(listing_id):
            if booking.reservation_status == CANCELLED:
                continue
            if _overlaps(check_in_date, check_out_date, booking.check_in_date, booking.check_out_date):
                return False
        return True

    @classmethod
    async def create(cls, session: Session, data: BookingCreate) -> BookingRead:
        logger = logging.getLogger(__name__)
        duration = (data.check_out_date - data.check_in_date).days
        if duration < 1:
            raise InvalidInputError("Check-out date must be after check-in date")
        listing = await ListingService.get_raw(data.f_listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {data.f_listing_id} not found")
        if listing.host_username == session.username:
            raise InvalidInputError("Hosts cannot book their own listing")
        if not await cls.check_availability(data.f_listing_id, data.check_in_date, data.check_out_date):
            raise InvalidInputError("The listing is already booked for these dates")
        values = {
            "check_out_date": data.check_out_date.isoformat(),
            "reservation_status": "pending",
            "reservation_confirmation": uuid.uuid4().hex[:10].upper(),
            "duration": duration,
            "f_guest_username": session.username,
        }
        key = {"f_listing_id": data.f_listing_id, "check_in_date": data.check_in_date.isoformat()}
        try:
            if await cls.get_one(data.f_listing_id, data.check_in_date) is not None:
                # A cancelled booking still holds the row for this check-in date.
                rows = get_backend().update(TABLE, values, {**key, "reservation_status": CANCELLED})
                if not rows:
                    raise InvalidInputError("The listing is already booked for these dates")
            else:
                rows = get_backend().insert(TABLE, {**key, **values})
        except BackendError as exc:
            if exc.is_unique_violation:
                raise InvalidInputError("The listing is already booked for these dates") from exc
            raise
        booking = BookingRead(**rows[0])
        logger.info(
            "User %s booked listing %s from %s for %d night(s)",
            session.username, data.f_listing_id, data.check_in_date, duration,
        )
        return booking

    @classmethod
    async def _get_for_change(cls, session: Session, listing_id: int, check_in_date: date, allow_guest: bool):
        booking = await cls.get_one(listing_id, check_in_date)
        if booking is None:
            raise NotFoundError("Booking not found")
        listing = await ListingService.get_raw(listing_id)
        host_username = listing.host_username if listing else None
        is_guest = allow_guest and booking.f_guest_username == session.username
        if not (session.can_manage(host_username) or is_guest):
            raise PermissionDeniedError("You don't have permission to change this booking")
        return booking

    @classmethod
    async def update_status(cls, session: Session, listing_id: int, check_in_date: date, status: str) -> BookingRead:
        """Confirm or cancel a booking.

        The listing's host and admins may set any status; the guest who
        made the booking may only cancel it.
        """
        logger = logging.getLogger(__name__)
        booking = await cls._get_for_change(session, listing_id, check_in_date, allow_guest=status == CANCELLED)
        rows = get_backend().update(
            TABLE,
            {"reservation_status": status},
            {"f_listing_id": listing_id, "check_in_date": booking.check_in_date.isoformat()},
        )
        logger.info("Booking %s/%s set to %s by %s", listing_id, check_in_date, status, session.username)
        return BookingRead(**rows[0])

    @classmethod
    async def delete(cls, session: Session, listing_id: int, check_in_date: date) -> None:
        await cls._get_for_change(session, listing_id, check_in_date, allow_guest=False)
        get_backend().delete(TABLE, {"f_listing_id": listing_id, "check_in_date": check_in_date.isoformat()})
