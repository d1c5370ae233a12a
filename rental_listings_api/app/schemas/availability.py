"""Pydantic models for listing availability dates."""

from datetime import date
from typing import List

from pydantic import BaseModel, Field


class AvailabilityRead(BaseModel):
    f_listing_id: int
    availability: date

    model_config = {
        "from_attributes": True,
    }


class AvailabilityDates(BaseModel):
    dates: List[date] = Field(..., min_length=1, examples=[["2025-09-01", "2025-09-02"]])
