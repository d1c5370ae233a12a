import asyncio
import time

import pytest

from rental_listings_api.app.core.exceptions import AuthenticationError, InvalidInputError
from rental_listings_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from rental_listings_api.app.schemas.user import UserCreate, UserUpdate
from rental_listings_api.app.services.auth_service import AuthService

from conftest import add_user


def test_register_then_login(backend):
    result = asyncio.run(AuthService.register(UserCreate(username="alice", email="Alice@X.com", password="secret123", mode="host")))
    assert result.user.username == "alice"
    assert result.user.email == "alice@x.com"
    assert result.user.mode == "host"
    stored = backend.tables["user"][0]
    assert stored["password"] != "secret123"
    assert verify_password("secret123", stored["password"])

    login = asyncio.run(AuthService.login("alice@x.com", "secret123"))
    assert login.user.username == "alice"
    payload = decode_access_token(login.access_token)
    assert payload["id"] == "alice"
    assert payload["email"] == "alice@x.com"


def test_login_unknown_email(backend):
    with pytest.raises(AuthenticationError) as excinfo:
        asyncio.run(AuthService.login("nobody@x.com", "secret123"))
    assert excinfo.value.reason == "not_found"
    assert excinfo.value.message == "User not found"


def test_login_wrong_password(backend):
    add_user(backend, "alice", "alice@x.com", password="secret123")
    with pytest.raises(AuthenticationError) as excinfo:
        asyncio.run(AuthService.login("alice@x.com", "wrong-password"))
    assert excinfo.value.reason == "invalid_password"
    assert excinfo.value.message == "Invalid credentials"


def test_login_matches_mixed_case_email(backend):
    add_user(backend, "alice", "Alice@X.com", password="secret123")
    login = asyncio.run(AuthService.login("alice@x.com", "secret123"))
    assert login.user.username == "alice"

    with pytest.raises(InvalidInputError):
        asyncio.run(AuthService.register(UserCreate(username="alice2", email="ALICE@x.com", password="secret123")))


@pytest.mark.parametrize(
    "username,email,password",
    [
        ("  ", "a@x.com", "secret123"),
        ("alice", "not-an-email", "secret123"),
        ("alice", "a@x.com", "short"),
    ],
)
def test_register_rejects_invalid_input(backend, username, email, password):
    with pytest.raises(InvalidInputError):
        asyncio.run(AuthService.register(UserCreate(username=username, email=email, password=password)))
    assert backend.tables["user"] == []


def test_register_rejects_duplicates(backend):
    add_user(backend, "alice", "alice@x.com")
    with pytest.raises(InvalidInputError):
        asyncio.run(AuthService.register(UserCreate(username="other", email="alice@x.com", password="secret123")))
    with pytest.raises(InvalidInputError):
        asyncio.run(AuthService.register(UserCreate(username="alice", email="other@x.com", password="secret123")))


def test_update_profile_switches_mode_and_password(backend):
    session = add_user(backend, "bob", "bob@x.com")
    result = asyncio.run(AuthService.update_profile(session, UserUpdate(mode="host", password="newsecret")))
    assert result.user.mode == "host"
    assert verify_password("newsecret", backend.tables["user"][0]["password"])
    assert decode_access_token(result.access_token)["id"] == "bob"


def test_update_profile_rejects_taken_email(backend):
    add_user(backend, "alice", "alice@x.com")
    bob = add_user(backend, "bob", "bob@x.com")
    with pytest.raises(InvalidInputError):
        asyncio.run(AuthService.update_profile(bob, UserUpdate(email="alice@x.com")))


def test_admin_keeps_admin_mode(backend):
    root = add_user(backend, "root", "root@x.com", mode="admin")
    result = asyncio.run(AuthService.update_profile(root, UserUpdate(mode="guest")))
    assert result.user.mode == "admin"


def test_check_is_admin_uses_mode_only(backend):
    assert AuthService.check_is_admin(add_user(backend, "root", "root@x.com", mode="admin"))
    # A user merely named "admin" gets no privileges.
    assert not AuthService.check_is_admin(add_user(backend, "admin", "admin@x.com", mode="guest"))


def test_password_hash_is_salted():
    first, second = hash_password("secret123"), hash_password("secret123")
    assert first != second
    assert verify_password("secret123", first)
    assert not verify_password("secret123", "plaintext")
    assert not verify_password("secret123", None)


def test_token_tampering_and_expiry():
    token = create_access_token({"id": "alice", "email": "alice@x.com"})
    header, payload, signature = token.split(".")
    assert decode_access_token(f"{header}.{payload}x.{signature}") is None
    assert decode_access_token("garbage") is None

    expired = create_access_token({"id": "alice"}, expires_delta=-10)
    assert decode_access_token(expired) is None
    assert decode_access_token(token)["exp"] > time.time()


def test_register_and_me_over_http(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "carol", "email": "carol@x.com", "password": "secret123"},
    )
    assert response.status_code == 201
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json() == {"username": "carol", "email": "carol@x.com", "mode": "guest"}


def test_register_cannot_request_admin(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "eve", "email": "eve@x.com", "password": "secret123", "mode": "admin"},
    )
    assert response.status_code == 422


def test_login_failures_over_http(client, backend):
    add_user(backend, "alice", "alice@x.com")
    unknown = client.post("/api/v1/auth/login", json={"email": "x@x.com", "password": "secret123"})
    wrong = client.post("/api/v1/auth/login", json={"email": "alice@x.com", "password": "nope-nope"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["detail"] == "User not found"
    assert wrong.json()["detail"] == "Invalid credentials"


def test_me_requires_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401
