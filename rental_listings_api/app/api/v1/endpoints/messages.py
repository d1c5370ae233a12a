"""
Messaging endpoints for API v1.

Messages go from the caller to another user.  They cannot be edited.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from rental_listings_api.app.core.security import get_current_session
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.schemas.message import MessageCreate, MessageRead
from rental_listings_api.app.services.message_service import MessageService


router = APIRouter()


@router.post("/", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(message: MessageCreate, session: Session = Depends(get_current_session)) -> MessageRead:
    return await MessageService.send(session, message)


@router.get("/", response_model=List[MessageRead])
async def inbox(session: Session = Depends(get_current_session)) -> List[MessageRead]:
    """All messages the caller sent or received, oldest first."""
    return await MessageService.get_inbox(session.username)


@router.get("/sent", response_model=List[MessageRead])
async def sent_messages(session: Session = Depends(get_current_session)) -> List[MessageRead]:
    return await MessageService.get_by_sender_id(session.username)


@router.get("/received", response_model=List[MessageRead])
async def received_messages(session: Session = Depends(get_current_session)) -> List[MessageRead]:
    return await MessageService.get_by_receiver_id(session.username)


@router.get("/contacts", response_model=List[str])
async def contacts(session: Session = Depends(get_current_session)) -> List[str]:
    return await MessageService.get_contacts(session.username)


@router.get("/conversation/{username}", response_model=List[MessageRead])
async def conversation(username: str, session: Session = Depends(get_current_session)) -> List[MessageRead]:
    """Messages exchanged between the caller and ``username``, in order."""
    return await MessageService.get_conversation(session.username, username)
