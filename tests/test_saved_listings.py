import asyncio

import pytest

from rental_listings_api.app.core.backend import BackendError
from rental_listings_api.app.core.exceptions import NotFoundError
from rental_listings_api.app.schemas.listing import ListingCreate
from rental_listings_api.app.schemas.saved_listing import SavedListingDetail
from rental_listings_api.app.services.listing_management_service import ListingManagementService
from rental_listings_api.app.services.saved_listing_service import SavedListingService

from conftest import auth_headers


@pytest.fixture
def listing(backend, alice):
    data = ListingCreate(price=120, location={"city": "NY"}, photos=[{"photo_url": "https://img/1.jpg"}])
    return asyncio.run(ListingManagementService.create_listing(alice, data))


def test_add_twice_is_idempotent(backend, bob, listing):
    first = asyncio.run(SavedListingService.add("bob", listing.listing_id))
    second = asyncio.run(SavedListingService.add("bob", listing.listing_id))
    assert first == second
    assert len(backend.tables["saved_listings"]) == 1
    assert asyncio.run(SavedListingService.is_listing_saved("bob", listing.listing_id))


def test_add_reraises_other_backend_errors(backend, bob, listing):
    backend.fail_next("insert", "saved_listings", BackendError("permission denied for table", code="42501", status_code=403))
    with pytest.raises(BackendError):
        asyncio.run(SavedListingService.add("bob", listing.listing_id))


def test_add_unknown_listing(backend, bob):
    with pytest.raises(NotFoundError):
        asyncio.run(SavedListingService.add("bob", 404))


def test_remove(backend, bob, listing):
    asyncio.run(SavedListingService.add("bob", listing.listing_id))
    asyncio.run(SavedListingService.remove("bob", listing.listing_id))
    assert not asyncio.run(SavedListingService.is_listing_saved("bob", listing.listing_id))
    assert asyncio.run(SavedListingService.get_saved_listing_entry("bob", listing.listing_id)) is None


def test_get_by_username_with_details(backend, bob, listing):
    asyncio.run(SavedListingService.add("bob", listing.listing_id))

    plain = asyncio.run(SavedListingService.get_by_username("bob"))
    assert [(s.f_username, s.listings) for s in plain] == [("bob", listing.listing_id)]

    detailed = asyncio.run(SavedListingService.get_by_username("bob", include_details=True))
    assert len(detailed) == 1
    assert isinstance(detailed[0], SavedListingDetail)
    details = detailed[0].listing_details
    assert details.listing_id == listing.listing_id
    assert details.location.city == "NY"
    assert [p.photo_url for p in details.photos] == ["https://img/1.jpg"]
    assert ("rpc", "get_saved_listings_with_details_by_username") in backend.calls


def test_saved_listings_over_http(client, bob, listing):
    headers = auth_headers(bob)
    url = f"/api/v1/saved-listings/{listing.listing_id}"
    assert client.post(url, headers=headers).status_code == 201
    assert client.post(url, headers=headers).status_code == 201
    assert client.get(url, headers=headers).json() == {"listing_id": listing.listing_id, "saved": True}

    detailed = client.get("/api/v1/saved-listings/", params={"details": "true"}, headers=headers).json()
    assert detailed[0]["listing_details"]["price"] == 120

    assert client.delete(url, headers=headers).status_code == 204
    assert client.get(url, headers=headers).json()["saved"] is False
