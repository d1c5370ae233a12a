"""
Business logic for listing photos.

Photos reference their listing through ``f_listing_id``; that is the
only association key read or written anywhere in the application.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..core.backend import get_backend
from ..core.exceptions import NotFoundError
from ..schemas.photo import PhotoCreate, PhotoRead

TABLE = "photos"


class PhotoService:
    """Service for the ``photos`` table."""

    @classmethod
    async def get_all(cls) -> List[PhotoRead]:
        rows = get_backend().select(TABLE, order="photo_id")
        return [PhotoRead(**row) for row in rows]

    @classmethod
    async def get_by_id(cls, photo_id: int) -> Optional[PhotoRead]:
        rows = get_backend().select(TABLE, {"photo_id": photo_id})
        return PhotoRead(**rows[0]) if rows else None

    @classmethod
    async def get_by_listing_id(cls, listing_id: int) -> List[PhotoRead]:
        rows = get_backend().select(TABLE, {"f_listing_id": listing_id}, order="photo_id")
        return [PhotoRead(**row) for row in rows]

    @classmethod
    async def get_by_listing_ids(cls, listing_ids: Iterable[int]) -> Dict[int, List[PhotoRead]]:
        """Group the photos of several listings by listing id, in one backend call."""
        ids = sorted(set(listing_ids))
        grouped: Dict[int, List[PhotoRead]] = {i: [] for i in ids}
        if not ids:
            return grouped
        rows = get_backend().select(TABLE, {"f_listing_id": ids}, order="photo_id")
        for row in rows:
            grouped.setdefault(row["f_listing_id"], []).append(PhotoRead(**row))
        return grouped

    @classmethod
    async def create(cls, data: PhotoCreate) -> PhotoRead:
        rows = get_backend().insert(TABLE, data.model_dump())
        return PhotoRead(**rows[0])

    @classmethod
    async def create_many(cls, listing_id: int, urls: Iterable[str]) -> List[PhotoRead]:
        """Insert one photo row per URL for ``listing_id``."""
        logger = logging.getLogger(__name__)
        records = [{"photo_url": url, "f_listing_id": listing_id} for url in urls]
        if not records:
            return []
        rows = get_backend().insert(TABLE, records)
        logger.info("Added %d photo(s) to listing %s", len(rows), listing_id)
        return [PhotoRead(**row) for row in rows]

    @classmethod
    async def update(cls, photo_id: int, photo_url: str) -> PhotoRead:
        rows = get_backend().update(TABLE, {"photo_url": photo_url}, {"photo_id": photo_id})
        if not rows:
            raise NotFoundError(f"Photo {photo_id} not found")
        return PhotoRead(**rows[0])

    @classmethod
    async def delete(cls, photo_id: int) -> None:
        get_backend().delete(TABLE, {"photo_id": photo_id})

    @classmethod
    async def delete_many(cls, photo_ids: Iterable[int]) -> None:
        ids = sorted(set(photo_ids))
        if ids:
            get_backend().delete(TABLE, {"photo_id": ids})
