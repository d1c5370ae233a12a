"""
Business logic for messages.

Messages live in the ``message`` table and are immutable once sent.
``sender_id`` and ``receiver_id`` hold usernames.  Conversations are
ordered by ``message_id``, which the backend assigns in send order.
"""

import logging
from typing import Dict, List

from ..core.backend import get_backend
from ..core.exceptions import InvalidInputError, NotFoundError
from ..core.session import Session
from ..schemas.message import MessageCreate, MessageRead
from .user_service import UserService

TABLE = "message"
MAX_MESSAGE_LENGTH = 5000


class MessageService:
    """Service for direct messages between users."""

    @classmethod
    async def get_by_sender_id(cls, sender_id: str) -> List[MessageRead]:
        rows = get_backend().select(TABLE, {"sender_id": sender_id}, order="message_id")
        return [MessageRead(**row) for row in rows]

    @classmethod
    async def get_by_receiver_id(cls, receiver_id: str) -> List[MessageRead]:
        rows = get_backend().select(TABLE, {"receiver_id": receiver_id}, order="message_id")
        return [MessageRead(**row) for row in rows]

    @classmethod
    async def get_inbox(cls, username: str) -> List[MessageRead]:
        """All messages sent or received by ``username``, oldest first."""
        merged: Dict[int, MessageRead] = {}
        for message in await cls.get_by_sender_id(username) + await cls.get_by_receiver_id(username):
            merged[message.message_id] = message
        return [merged[key] for key in sorted(merged)]

    @classmethod
    async def get_contacts(cls, username: str) -> List[str]:
        """Usernames ``username`` has exchanged messages with."""
        contacts = set()
        for message in await cls.get_inbox(username):
            contacts.add(message.receiver_id if message.sender_id == username else message.sender_id)
        contacts.discard(username)
        return sorted(contacts)

    @classmethod
    async def get_conversation(cls, user1: str, user2: str) -> List[MessageRead]:
        """Messages between two users in both directions, ordered by ``message_id``."""
        backend = get_backend()
        rows = backend.select(TABLE, {"sender_id": user1, "receiver_id": user2})
        if user1 != user2:
            rows = rows + backend.select(TABLE, {"sender_id": user2, "receiver_id": user1})
        return sorted((MessageRead(**row) for row in rows), key=lambda m: m.message_id)

    @classmethod
    async def send(cls, session: Session, data: MessageCreate) -> MessageRead:
        logger = logging.getLogger(__name__)
        text = data.text.strip()
        if not text:
            raise InvalidInputError("Message text must not be empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise InvalidInputError(f"Message text must be at most {MAX_MESSAGE_LENGTH} characters")
        if await UserService.get_by_username(data.receiver_id) is None:
            raise NotFoundError(f"User {data.receiver_id} not found")
        rows = get_backend().insert(
            TABLE,
            {"text": text, "sender_id": session.username, "receiver_id": data.receiver_id},
        )
        message = MessageRead(**rows[0])
        logger.info("Message %s sent from %s to %s", message.message_id, session.username, data.receiver_id)
        return message
