"""Pydantic models for reporting endpoints."""

from typing import Dict, List

from pydantic import BaseModel


class ListingStats(BaseModel):
    total_listings: int
    total_hosts: int
    average_price: float
    city_distribution: Dict[str, int]


class AveragePrice(BaseModel):
    average_price: float


class DistributionBucket(BaseModel):
    name: str
    count: int


class Distribution(BaseModel):
    buckets: List[DistributionBucket]
