"""Shared fixtures: an in-memory stand-in for the hosted backend."""

import copy
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from rental_listings_api.app.core.backend import BackendClient, BackendError, UNIQUE_VIOLATION, set_backend
from rental_listings_api.app.core.security import create_session_token, hash_password
from rental_listings_api.app.core.session import Session
from rental_listings_api.app.main import app


# table -> serial primary key column
SERIAL_KEYS = {
    "locations": "location_id",
    "listing": "listing_id",
    "photos": "photo_id",
    "message": "message_id",
    "host_review": "review_id",
}

# table -> column groups that must be unique
UNIQUE_KEYS = {
    "user": [("username",), ("email",)],
    "locations": [("location_id",)],
    "listing": [("listing_id",)],
    "photos": [("photo_id",)],
    "message": [("message_id",)],
    "host_review": [("review_id",)],
    "saved_listings": [("f_username", "listings")],
    "booking": [("f_listing_id", "check_in_date")],
    "availability": [("f_listing_id", "availability")],
}

WRITE_OPS = ("insert", "update", "delete")


def _matches(row: Dict[str, Any], filters) -> bool:
    for column, value in (filters or {}).items():
        if value is None:
            if row.get(column) is not None:
                return False
        elif isinstance(value, (list, tuple, set)):
            if row.get(column) not in value:
                return False
        elif row.get(column) != value:
            return False
    return True


def _matches_ilike(row: Dict[str, Any], patterns) -> bool:
    # Wildcards are not emulated.
    return all((row.get(column) or "").lower() == pattern.lower() for column, pattern in (patterns or {}).items())


class InMemoryBackend(BackendClient):
    """Implements the ``BackendClient`` interface on Python lists.

    Every call is recorded in ``calls`` as ``(operation, table)``.
    ``fail_next(operation, table)`` makes the next matching call raise.
    """

    def __init__(self) -> None:
        super().__init__(base_url="http://backend.invalid")
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.calls: List[Tuple[str, str]] = []
        self._serials: Dict[str, int] = defaultdict(int)
        self._failures: Dict[Tuple[str, str], BackendError] = {}

    # -- test helpers ---------------------------------------------------
    def fail_next(self, operation: str, table: str, error: Optional[BackendError] = None) -> None:
        self._failures[(operation, table)] = error or BackendError("injected failure", code="XX000", status_code=500)

    def writes(self) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[0] in WRITE_OPS]

    def _record(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        error = self._failures.pop((operation, table), None)
        if error is not None:
            raise error

    def _check_unique(self, table: str, row: Dict[str, Any], others: List[Dict[str, Any]]) -> None:
        for columns in UNIQUE_KEYS.get(table, []):
            key = tuple(row.get(c) for c in columns)
            if any(tuple(o.get(c) for c in columns) == key for o in others if o is not row):
                raise BackendError(
                    f'duplicate key value violates unique constraint "{table}_{"_".join(columns)}_key"',
                    code=UNIQUE_VIOLATION,
                    status_code=409,
                )

    # -- BackendClient interface ---------------------------------------
    def select(self, table, filters=None, *, columns="*", order=None, single=False, ilike=None):
        self._record("select", table)
        rows = [copy.deepcopy(r) for r in self.tables[table] if _matches(r, filters) and _matches_ilike(r, ilike)]
        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=direction == "desc")
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        if single:
            if len(rows) != 1:
                raise BackendError("JSON object requested, multiple (or no) rows returned", code="PGRST116", status_code=406)
            return rows[0]
        return rows

    def insert(self, table, rows):
        self._record("insert", table)
        payload = rows if isinstance(rows, list) else [rows]
        staged = []
        for values in payload:
            row = dict(values)
            serial = SERIAL_KEYS.get(table)
            if serial and row.get(serial) is None:
                self._serials[table] += 1
                row[serial] = self._serials[table]
            self._check_unique(table, row, self.tables[table] + staged)
            staged.append(row)
        self.tables[table].extend(staged)
        return copy.deepcopy(staged)

    def update(self, table, values, filters):
        self._record("update", table)
        if not filters:
            raise ValueError("update requires at least one filter")
        updated = []
        for row in self.tables[table]:
            if _matches(row, filters):
                candidate = {**row, **values}
                self._check_unique(table, candidate, [r for r in self.tables[table] if r is not row])
                row.update(values)
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table, filters):
        self._record("delete", table)
        if not filters:
            raise ValueError("delete requires at least one filter")
        self.tables[table] = [r for r in self.tables[table] if not _matches(r, filters)]

    def rpc(self, name, params=None):
        self._record("rpc", name)
        params = params or {}
        if name == "average_listing_price":
            prices = [r["price"] for r in self.tables["listing"]]
            return sum(prices) / len(prices) if prices else None
        if name == "get_saved_listings_with_details_by_username":
            saved = [r["listings"] for r in self.tables["saved_listings"] if r["f_username"] == params["p_username"]]
            return [copy.deepcopy(r) for r in self.tables["listing"] if r["listing_id"] in saved]
        raise BackendError(f"Could not find the function public.{name}", code="PGRST202", status_code=404)


@pytest.fixture
def backend():
    memory = InMemoryBackend()
    set_backend(memory)
    yield memory
    set_backend(None)


@pytest.fixture
def client(backend):
    return TestClient(app)


def add_user(backend: InMemoryBackend, username: str, email: str, password: str = "secret123", mode: str = "guest") -> Session:
    """Insert a user row directly and return a session for it."""
    backend.tables["user"].append(
        {"username": username, "email": email, "password": hash_password(password), "mode": mode}
    )
    row = {"username": username, "email": email, "mode": mode}
    return Session.from_user_row(row, token=create_session_token(row))


def auth_headers(session: Session) -> Dict[str, str]:
    return {"Authorization": f"Bearer {session.token}"}


@pytest.fixture
def alice(backend):
    return add_user(backend, "alice", "alice@x.com", mode="host")


@pytest.fixture
def bob(backend):
    return add_user(backend, "bob", "bob@x.com")


@pytest.fixture
def admin(backend):
    return add_user(backend, "root", "root@x.com", mode="admin")
