"""
Listing operations performed on behalf of a user.

This service composes the listing, location and photo services into
the operations the API exposes and enforces the ownership rule: a
listing (and its location and photos) may only be changed by its
``host_username`` or by an admin.  The check always runs before the
first write is issued.

Creating a listing touches up to three tables (location, listing,
photos).  The backend offers no transaction across these calls, so
``create_listing`` and ``update_listing`` undo the writes they already
made when a later step fails and then re-raise the original error.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..core.exceptions import AuthenticationError, InvalidInputError, NotFoundError, PermissionDeniedError
from ..core.session import Session
from ..schemas.listing import ListingCreate, ListingRead, ListingRecord, ListingUpdate
from ..schemas.location import LocationCreate, LocationRead
from ..schemas.photo import PhotoRead
from .listing_service import ListingService
from .location_service import LocationService
from .photo_service import PhotoService


logger = logging.getLogger(__name__)


def _require_session(session: Optional[Session]) -> Session:
    if session is None:
        raise AuthenticationError("You must be logged in to manage listings")
    return session


class ListingManagementService:
    """Aggregated listing view plus owner-or-admin guarded mutations."""

    @classmethod
    async def get_listing(cls, listing_id: int) -> ListingRead:
        listing = await ListingService.get_by_id(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found")
        return listing

    @classmethod
    async def list_listings(
        cls,
        host_username: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[ListingRead]:
        if city:
            listings = await ListingService.search_by_location(city, state)
            if host_username:
                listings = [item for item in listings if item.host_username == host_username]
            return listings
        if host_username:
            return await ListingService.get_by_host_with_location(host_username)
        return await ListingService.get_all_with_location()

    @classmethod
    async def _get_owned(cls, session: Session, listing_id: int, action: str) -> ListingRecord:
        listing = await ListingService.get_raw(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found")
        if not session.can_manage(listing.host_username):
            logger.warning(
                "User %s denied %s on listing %s owned by %s",
                session.username, action, listing_id, listing.host_username,
            )
            raise PermissionDeniedError(f"You don't have permission to {action} this listing")
        return listing

    @classmethod
    async def create_listing(cls, session: Optional[Session], data: ListingCreate) -> ListingRead:
        """Create a listing together with its location and photos.

        When ``data.location_id`` is given it must reference an existing
        location; otherwise inline ``data.location`` fields create a new
        one first.  Photos are inserted in a single batch.  If any step
        fails, rows created by this call are deleted again (listing, then
        location) and the original exception propagates.
        """
        session = _require_session(session)
        undo: List[Callable[[], Awaitable[None]]] = []
        location: Optional[LocationRead] = None

        try:
            location_id = data.location_id
            if location_id is not None:
                location = await LocationService.get_by_id(location_id)
                if location is None:
                    raise NotFoundError(f"Location {location_id} not found")
                if await ListingService.get_by_location_id(location_id):
                    raise InvalidInputError(f"Location {location_id} already belongs to another listing")
            elif data.location is not None:
                location = await LocationService.create(data.location)
                location_id = location.location_id
                undo.append(lambda: LocationService.delete(location_id))

            record = await ListingService.create(
                {
                    "price": data.price,
                    "description": data.description,
                    "contact_info": data.contact_info,
                    "host_username": session.username,
                    "location_id": location_id,
                }
            )
            undo.append(lambda: ListingService.delete(record.listing_id))

            photos: List[PhotoRead] = await PhotoService.create_many(
                record.listing_id, [photo.photo_url for photo in data.photos]
            )
        except Exception as exc:
            logger.error("Failed to create listing for %s: %s", session.username, exc)
            await cls._rollback(undo, "creation")
            raise

        return ListingRead(**record.model_dump(), location=location, photos=photos)

    @staticmethod
    async def _rollback(undo: List[Callable[[], Awaitable[None]]], action: str) -> None:
        for step in reversed(undo):
            try:
                await step()
            except Exception:
                logger.exception("Cleanup after failed listing %s did not complete", action)

    @classmethod
    async def update_listing(cls, session: Optional[Session], listing_id: int, data: ListingUpdate) -> ListingRead:
        """Update a listing's location and scalar fields.

        The location is updated in place, or created and linked when
        the listing has none.  A location that other listings still
        reference is never edited; the listing gets its own copy with
        the changes applied.  Nothing is written unless the session
        user owns the listing or is an admin, and writes already made
        are undone when a later one fails.
        """
        session = _require_session(session)
        listing = await cls._get_owned(session, listing_id, "update")

        updates: Dict[str, Any] = {
            k: v for k, v in data.model_dump(exclude_unset=True, exclude={"location"}).items() if v is not None
        }
        location_fields: Dict[str, Any] = {}
        if data.location is not None:
            location_fields = {k: v for k, v in data.location.model_dump(exclude_unset=True).items() if v is not None}
            if "city" in location_fields:
                location_fields["city"] = location_fields["city"].strip()
                if not location_fields["city"]:
                    raise InvalidInputError("City must not be empty")

        undo: List[Callable[[], Awaitable[None]]] = []
        try:
            if data.location is not None:
                existing = (
                    await LocationService.get_by_id(listing.location_id)
                    if listing.location_id is not None else None
                )
                shared = existing is not None and any(
                    other.listing_id != listing_id
                    for other in await ListingService.get_by_location_id(existing.location_id)
                )
                if existing is not None and not shared:
                    if location_fields:
                        previous = existing.model_dump(include=set(location_fields))
                        await LocationService.update(existing.location_id, location_fields)
                        undo.append(lambda: LocationService.update(existing.location_id, previous))
                else:
                    merged = dict(location_fields)
                    if existing is not None:
                        merged = {**existing.model_dump(exclude={"location_id"}), **location_fields}
                    if not merged.get("city"):
                        raise InvalidInputError("City is required to add a location")
                    created = await LocationService.create(LocationCreate(**merged))
                    undo.append(lambda: LocationService.delete(created.location_id))
                    updates["location_id"] = created.location_id

            if updates:
                await ListingService.update(listing_id, updates)
        except Exception as exc:
            logger.error("Failed to update listing %s for %s: %s", listing_id, session.username, exc)
            await cls._rollback(undo, "update")
            raise

        logger.info("Listing %s updated by %s", listing_id, session.username)
        return await cls.get_listing(listing_id)

    @classmethod
    async def delete_listing(cls, session: Optional[Session], listing_id: int) -> None:
        """Delete a listing row.

        The location and photos are left in place.
        """
        session = _require_session(session)
        await cls._get_owned(session, listing_id, "delete")
        await ListingService.delete(listing_id)
        logger.info("Listing %s deleted by %s", listing_id, session.username)

    @classmethod
    async def add_photos(cls, session: Optional[Session], listing_id: int, urls: List[str]) -> List[PhotoRead]:
        session = _require_session(session)
        await cls._get_owned(session, listing_id, "update")
        return await PhotoService.create_many(listing_id, urls)

    @classmethod
    async def delete_photo(cls, session: Optional[Session], photo_id: int) -> None:
        """Delete one photo.

        Photos whose listing no longer exists can only be removed by an
        admin.
        """
        session = _require_session(session)
        photo = await PhotoService.get_by_id(photo_id)
        if photo is None:
            raise NotFoundError(f"Photo {photo_id} not found")
        listing = await ListingService.get_raw(photo.f_listing_id)
        host = listing.host_username if listing is not None else None
        if not session.can_manage(host):
            logger.warning(
                "User %s denied delete on photo %s of listing %s",
                session.username, photo_id, photo.f_listing_id,
            )
            raise PermissionDeniedError("You don't have permission to delete this photo")
        await PhotoService.delete(photo_id)
