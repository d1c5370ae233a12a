"""Pydantic models for messages between users."""

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    receiver_id: str = Field(..., min_length=1, examples=["bob"])
    text: str = Field(..., examples=["Is the flat still available?"])


class MessageRead(BaseModel):
    message_id: int
    text: str
    sender_id: str
    receiver_id: str

    model_config = {
        "from_attributes": True,
    }
