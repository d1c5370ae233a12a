import asyncio

import pytest

from rental_listings_api.app.core.exceptions import InvalidInputError, NotFoundError
from rental_listings_api.app.schemas.message import MessageCreate
from rental_listings_api.app.services.message_service import MessageService

from conftest import add_user, auth_headers


def send(session, receiver, text):
    return asyncio.run(MessageService.send(session, MessageCreate(receiver_id=receiver, text=text)))


def test_conversation_is_ordered_in_both_directions(backend, alice, bob):
    carol = add_user(backend, "carol", "carol@x.com")
    send(alice, "bob", "Hi Bob")
    send(bob, "alice", "Hi Alice")
    send(carol, "alice", "Unrelated")
    send(alice, "bob", "Still available?")

    conversation = asyncio.run(MessageService.get_conversation("bob", "alice"))
    assert [m.text for m in conversation] == ["Hi Bob", "Hi Alice", "Still available?"]
    assert [m.message_id for m in conversation] == sorted(m.message_id for m in conversation)


def test_sender_comes_from_session(backend, alice, bob):
    message = send(bob, "alice", "  Is it free in May?  ")
    assert message.sender_id == "bob"
    assert message.receiver_id == "alice"
    assert message.text == "Is it free in May?"


def test_send_validation(backend, alice):
    with pytest.raises(InvalidInputError):
        send(alice, "alice", "   ")
    with pytest.raises(NotFoundError):
        send(alice, "ghost", "hello")
    assert backend.tables["message"] == []


def test_inbox_and_contacts(backend, alice, bob):
    add_user(backend, "carol", "carol@x.com")
    send(alice, "bob", "1")
    send(bob, "alice", "2")
    send(alice, "carol", "3")

    assert [m.text for m in asyncio.run(MessageService.get_inbox("alice"))] == ["1", "2", "3"]
    assert asyncio.run(MessageService.get_contacts("alice")) == ["bob", "carol"]
    assert [m.text for m in asyncio.run(MessageService.get_by_sender_id("alice"))] == ["1", "3"]
    assert [m.text for m in asyncio.run(MessageService.get_by_receiver_id("alice"))] == ["2"]


def test_messages_over_http(client, alice, bob):
    sent = client.post("/api/v1/messages/", json={"receiver_id": "bob", "text": "hello"}, headers=auth_headers(alice))
    assert sent.status_code == 201
    assert sent.json()["sender_id"] == "alice"

    conversation = client.get("/api/v1/messages/conversation/alice", headers=auth_headers(bob)).json()
    assert [m["text"] for m in conversation] == ["hello"]
    assert client.get("/api/v1/messages/contacts", headers=auth_headers(bob)).json() == ["alice"]
    assert client.get("/api/v1/messages/").status_code == 401
