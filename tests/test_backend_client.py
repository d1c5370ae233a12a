import json

import pytest
import requests

from rental_listings_api.app.core.backend import (
    BackendClient,
    BackendError,
    build_filter_params,
    build_order_param,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")
        self.content = self.text.encode("utf-8")

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, **kwargs):
        self.requests.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(*responses, api_key="anon-key"):
    session = FakeSession(*responses)
    return BackendClient(base_url="https://project.supabase.co/", api_key=api_key, session=session), session


def test_filter_params():
    assert build_filter_params({"city": "NY", "state": None}) == [("city", "eq.NY"), ("state", "is.null")]
    assert build_filter_params({"listing_id": [3, 1, 2]}) == [("listing_id", "in.(3,1,2)")]
    assert build_filter_params({"saved": True}) == [("saved", "eq.true")]
    assert build_filter_params(None) == []


def test_order_param():
    assert build_order_param("message_id") == "message_id.asc"
    assert build_order_param("price.desc") == "price.desc"
    assert build_order_param(None) is None


def test_select_builds_postgrest_request():
    client, session = make_client(FakeResponse(body=[{"username": "alice"}]))
    rows = client.select("user", {"email": "alice@x.com"}, columns="username", order="username")

    assert rows == [{"username": "alice"}]
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "https://project.supabase.co/rest/v1/user"
    assert sent["params"] == [("select", "username"), ("email", "eq.alice@x.com"), ("order", "username.asc")]
    assert sent["headers"]["apikey"] == "anon-key"
    assert sent["headers"]["Authorization"] == "Bearer anon-key"
    assert sent["timeout"] is None


def test_select_with_ilike_filter():
    client, session = make_client(FakeResponse(body=[]))
    client.select("user", {"mode": "host"}, columns="username", ilike={"email": "Alice@X.com"})
    assert session.requests[0]["params"] == [
        ("select", "username"),
        ("mode", "eq.host"),
        ("email", "ilike.Alice@X.com"),
    ]


def test_select_single_requires_exactly_one_row():
    client, _ = make_client(FakeResponse(body=[]), FakeResponse(body=[{"a": 1}]))
    with pytest.raises(BackendError) as excinfo:
        client.select("listing", {"listing_id": 1}, single=True)
    assert excinfo.value.is_not_found
    assert client.select("listing", {"listing_id": 1}, single=True) == {"a": 1}


def test_writes_ask_for_representation():
    client, session = make_client(FakeResponse(status_code=201, body=[{"photo_id": 1}]), FakeResponse(body=[]))
    assert client.insert("photos", {"photo_url": "u", "f_listing_id": 1}) == [{"photo_id": 1}]
    assert session.requests[0]["json"] == [{"photo_url": "u", "f_listing_id": 1}]
    assert session.requests[0]["headers"]["Prefer"] == "return=representation"

    assert client.update("photos", {"photo_url": "v"}, {"photo_id": 9}) == []
    assert session.requests[1]["method"] == "PATCH"
    assert session.requests[1]["params"] == [("photo_id", "eq.9")]


def test_update_and_delete_refuse_unfiltered_calls():
    client, session = make_client()
    with pytest.raises(ValueError):
        client.update("listing", {"price": 1}, {})
    with pytest.raises(ValueError):
        client.delete("listing", {})
    assert session.requests == []


def test_delete_and_rpc():
    client, session = make_client(FakeResponse(status_code=204), FakeResponse(body=42.5))
    assert client.delete("listing", {"listing_id": 3}) is None
    assert client.rpc("average_listing_price") == 42.5
    assert session.requests[1]["url"].endswith("/rest/v1/rpc/average_listing_price")
    assert session.requests[1]["json"] == {}


def test_error_carries_backend_code():
    body = {"code": "23505", "message": "duplicate key value violates unique constraint", "details": "Key exists"}
    client, _ = make_client(FakeResponse(status_code=409, body=body))
    with pytest.raises(BackendError) as excinfo:
        client.insert("saved_listings", {"f_username": "bob", "listings": 1})
    error = excinfo.value
    assert error.code == "23505"
    assert error.status_code == 409
    assert error.message == "duplicate key value violates unique constraint"
    assert error.is_unique_violation


def test_non_json_error_and_network_failure():
    client, _ = make_client(
        FakeResponse(status_code=500, text="upstream exploded"),
        requests.ConnectionError("connection refused"),
    )
    with pytest.raises(BackendError) as excinfo:
        client.select("listing")
    assert excinfo.value.message == "upstream exploded"
    assert not excinfo.value.is_unique_violation

    with pytest.raises(BackendError) as excinfo:
        client.select("listing")
    assert "connection refused" in excinfo.value.message
    assert excinfo.value.status_code is None


def test_no_auth_headers_without_key():
    client, session = make_client(FakeResponse(body=[]), api_key="")
    client.select("listing")
    assert "apikey" not in session.requests[0]["headers"]
    assert "Authorization" not in session.requests[0]["headers"]
