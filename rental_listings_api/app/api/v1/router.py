"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When a new domain is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    users,
    listings,
    photos,
    locations,
    saved_listings,
    messages,
    bookings,
    availability,
    reviews,
    reports,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(listings.router, prefix="/listings", tags=["listings"])
router.include_router(photos.router, prefix="/photos", tags=["photos"])
router.include_router(locations.router, prefix="/locations", tags=["locations"])
router.include_router(saved_listings.router, prefix="/saved-listings", tags=["saved-listings"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(availability.router, prefix="/availability", tags=["availability"])
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
