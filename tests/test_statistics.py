import asyncio

from rental_listings_api.app.schemas.listing import ListingCreate
from rental_listings_api.app.schemas.user import UserCreate
from rental_listings_api.app.services.auth_service import AuthService
from rental_listings_api.app.services.listing_management_service import ListingManagementService
from rental_listings_api.app.services.statistics_service import StatisticsService
from rental_listings_api.app.core.session import Session

from conftest import add_user


def create(session, price, city=None, rooms=1):
    location = {"city": city, "number_of_rooms": rooms} if city else None
    return asyncio.run(ListingManagementService.create_listing(session, ListingCreate(price=price, location=location)))


def test_stats_on_empty_listing_set(backend):
    stats = asyncio.run(StatisticsService.get_stats_data())
    assert stats.total_listings == 0
    assert stats.total_hosts == 0
    assert stats.average_price == 0
    assert stats.city_distribution == {}


def test_stats_after_first_listing(backend):
    result = asyncio.run(AuthService.register(UserCreate(username="alice", email="alice@x.com", password="secret123", mode="host")))
    session = Session.from_user_row(result.user.model_dump(), token=result.access_token)
    create(session, 100, "NY")

    stats = asyncio.run(StatisticsService.get_stats_data())
    assert stats.total_listings == 1
    assert stats.total_hosts == 1
    assert stats.average_price == 100
    assert stats.city_distribution == {"NY": 1}


def test_stats_skip_unresolved_locations_in_histogram(backend):
    alice = add_user(backend, "alice", "alice@x.com", mode="host")
    bob = add_user(backend, "bob", "bob@x.com", mode="host")
    create(alice, 100, "NY")
    create(alice, 200, "NY")
    create(bob, 300)

    stats = asyncio.run(StatisticsService.get_stats_data())
    assert stats.total_listings == 3
    assert stats.total_hosts == 2
    assert stats.average_price == 200
    assert stats.city_distribution == {"NY": 2}


def test_stats_are_not_cached(backend):
    alice = add_user(backend, "alice", "alice@x.com", mode="host")
    assert asyncio.run(StatisticsService.get_stats_data()).total_listings == 0
    create(alice, 50, "LA")
    assert asyncio.run(StatisticsService.get_stats_data()).total_listings == 1


def test_average_listing_price_uses_rpc(backend):
    assert asyncio.run(StatisticsService.average_listing_price()) == 0.0
    alice = add_user(backend, "alice", "alice@x.com", mode="host")
    create(alice, 100, "NY")
    create(alice, 50, "NY")
    assert asyncio.run(StatisticsService.average_listing_price()) == 75.0
    assert ("rpc", "average_listing_price") in backend.calls


def test_price_range_distribution(backend):
    alice = add_user(backend, "alice", "alice@x.com", mode="host")
    for price in (10, 50, 99, 150, 250, 300, 1000):
        create(alice, price)
    buckets = asyncio.run(StatisticsService.price_range_distribution())
    assert [(b.name, b.count) for b in buckets] == [
        ("Under $50", 1),
        ("$50-$100", 2),
        ("$100-$200", 1),
        ("$200-$300", 1),
        ("Over $300", 2),
    ]


def test_rooms_distribution(backend):
    alice = add_user(backend, "alice", "alice@x.com", mode="host")
    create(alice, 100, "NY", rooms=3)
    create(alice, 100, "NY", rooms=1)
    create(alice, 100, "NY", rooms=3)
    create(alice, 100)
    buckets = asyncio.run(StatisticsService.rooms_distribution())
    assert [(b.name, b.count) for b in buckets] == [("1 room", 1), ("3 rooms", 2)]


def test_reports_over_http(client, backend):
    alice = add_user(backend, "alice", "alice@x.com", mode="host")
    create(alice, 100, "NY")
    assert client.get("/api/v1/reports/stats").json() == {
        "total_listings": 1,
        "total_hosts": 1,
        "average_price": 100.0,
        "city_distribution": {"NY": 1},
    }
    assert client.get("/api/v1/reports/average-price").json() == {"average_price": 100.0}
    assert len(client.get("/api/v1/reports/price-ranges").json()["buckets"]) == 5
    assert client.get("/api/v1/reports/rooms").json()["buckets"] == [{"name": "1 room", "count": 1}]
