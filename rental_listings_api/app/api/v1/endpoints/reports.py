"""
Reporting endpoints for API v1.

Reports are computed from the current listing set on every request.
They are public, matching the public listing pages they summarize.
"""

from fastapi import APIRouter

from rental_listings_api.app.schemas.statistics import AveragePrice, Distribution, ListingStats
from rental_listings_api.app.services.statistics_service import StatisticsService


router = APIRouter()


@router.get("/stats", response_model=ListingStats)
async def stats() -> ListingStats:
    """Listing count, host count, mean price and listings per city."""
    return await StatisticsService.get_stats_data()


@router.get("/average-price", response_model=AveragePrice)
async def average_price() -> AveragePrice:
    return AveragePrice(average_price=await StatisticsService.average_listing_price())


@router.get("/price-ranges", response_model=Distribution)
async def price_ranges() -> Distribution:
    return Distribution(buckets=await StatisticsService.price_range_distribution())


@router.get("/rooms", response_model=Distribution)
async def rooms() -> Distribution:
    return Distribution(buckets=await StatisticsService.rooms_distribution())
