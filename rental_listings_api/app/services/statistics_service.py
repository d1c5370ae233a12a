"""
Service layer for statistics and reporting.

Every report is computed from the full listing set fetched fresh from
the backend on each call; nothing is cached.  Aggregation happens in
Python over the denormalized listing view, except for
:meth:`StatisticsService.average_listing_price`, which delegates to the
backend's ``average_listing_price`` procedure.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from ..core.backend import get_backend
from ..schemas.statistics import DistributionBucket, ListingStats
from .listing_service import ListingService

AVERAGE_PRICE_RPC = "average_listing_price"

# (label, exclusive upper bound); the last bucket has no bound.
PRICE_RANGES = [
    ("Under $50", 50),
    ("$50-$100", 100),
    ("$100-$200", 200),
    ("$200-$300", 300),
    ("Over $300", None),
]


class StatisticsService:
    """Aggregated listing metrics for the reporting pages."""

    @classmethod
    async def get_stats_data(cls) -> ListingStats:
        """Return listing count, host count, mean price and a per-city histogram.

        The mean price is 0 for an empty listing set.  Listings whose
        location cannot be resolved count towards ``total_listings``
        but are left out of ``city_distribution``.
        """
        listings = await ListingService.get_all_with_location()
        hosts = {listing.host_username for listing in listings}
        total_price = sum(listing.price for listing in listings)
        average_price = total_price / len(listings) if listings else 0.0

        city_distribution: Dict[str, int] = {}
        for listing in listings:
            if listing.location is None or not listing.location.city:
                continue
            city = listing.location.city
            city_distribution[city] = city_distribution.get(city, 0) + 1

        logging.getLogger(__name__).debug(
            "Stats computed over %d listing(s) from %d host(s)", len(listings), len(hosts)
        )
        return ListingStats(
            total_listings=len(listings),
            total_hosts=len(hosts),
            average_price=average_price,
            city_distribution=city_distribution,
        )

    @classmethod
    async def average_listing_price(cls) -> float:
        """Mean listing price as computed by the backend; 0.0 when there are no listings."""
        result = get_backend().rpc(AVERAGE_PRICE_RPC)
        if isinstance(result, list):
            result = result[0] if result else None
        if isinstance(result, dict):
            result = next(iter(result.values()), None)
        return float(result) if result is not None else 0.0

    @classmethod
    async def price_range_distribution(cls) -> List[DistributionBucket]:
        counts = {label: 0 for label, _ in PRICE_RANGES}
        for listing in await ListingService.get_all():
            for label, upper in PRICE_RANGES:
                if upper is None or listing.price < upper:
                    counts[label] += 1
                    break
        return [DistributionBucket(name=label, count=counts[label]) for label, _ in PRICE_RANGES]

    @classmethod
    async def rooms_distribution(cls) -> List[DistributionBucket]:
        """Listing count per number of rooms, ascending; listings without a location are skipped."""
        counts: Dict[int, int] = {}
        for listing in await ListingService.get_all_with_location():
            if listing.location is None or listing.location.number_of_rooms is None:
                continue
            rooms = listing.location.number_of_rooms
            counts[rooms] = counts.get(rooms, 0) + 1
        return [
            DistributionBucket(name=f"{rooms} {'room' if rooms == 1 else 'rooms'}", count=count)
            for rooms, count in sorted(counts.items())
        ]
