"""Pydantic models for host reviews."""

from pydantic import BaseModel


class HostReviewCreate(BaseModel):
    f_listing_id: int


class HostReviewRead(BaseModel):
    review_id: int
    f_listing_id: int
    f_host_username: str
    f_guest_username: str

    model_config = {
        "from_attributes": True,
    }
