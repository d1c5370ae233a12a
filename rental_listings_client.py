"""Rental listings API client.

This module wraps the ``/api/v1`` HTTP interface of the rental listings
service for use by front ends (web pages, scripts, bots).  It also owns
the client side of the session: the access token and the user record
returned by login or registration are persisted with
:class:`SessionStore` so that a restarted front end stays logged in.

All public methods of :class:`RentalListingsClient` return a tuple
``(data, error)``.  On success ``error`` is ``None``; on failure
``data`` is ``None`` (or an empty list for collection calls) and
``error`` is a dictionary with the keys ``status_code`` and
``message``.  Nothing is raised for HTTP or network failures.

Typical use::

    store = SessionStore("~/.rent_ready_session.json")
    client = RentalListingsClient(base_url="http://localhost:8000/api/v1", store=store)
    user, error = client.login("alice@example.com", "secret123")
    listings, error = client.list_listings(city="New York")
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

TOKEN_KEY = "rent_ready_auth_token"
USER_KEY = "rent_ready_user_data"

Error = Dict[str, Any]


class SessionStore:
    """Persist the auth token and user record in a small JSON file.

    The file holds exactly two keys, ``rent_ready_auth_token`` and
    ``rent_ready_user_data``.  Saving overwrites both; clearing removes
    the file.
    """

    def __init__(self, path: str) -> None:
        self.path = os.path.expanduser(path)

    def load(self) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
        """Return ``(token, user)``; ``(None, None)`` if nothing usable is stored."""
        if not os.path.exists(self.path):
            return None, None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None, None
        if not isinstance(data, dict):
            return None, None
        token = data.get(TOKEN_KEY)
        user = data.get(USER_KEY)
        if not token or not isinstance(user, dict):
            return None, None
        return token, user

    def save(self, token: str, user: Dict[str, Any]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({TOKEN_KEY: token, USER_KEY: user}, f)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class RentalListingsClient:
    """Client for the rental listings API.

    The stored session (if any) is loaded at construction.  ``login``,
    ``register`` and ``update_profile`` replace it; ``logout`` only
    forgets it locally, since the server keeps no session state.
    """

    def __init__(
        self,
        *,
        base_url: str,
        store: Optional[SessionStore] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the version prefix, e.g.
                ``http://localhost:8000/api/v1``.
            store: Where the token and user record are kept between
                runs.  Without a store the session lives in memory only.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.store = store
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        if store is not None:
            self.token, self.user = store.load()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
        json_body: Any = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)`` as described in the module
            docstring.  Query parameters whose value is ``None`` are
            dropped.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params or None,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if response.status_code >= 400:
            message = ""
            try:
                err_json = response.json()
            except ValueError:
                err_json = None
            if isinstance(err_json, dict):
                detail = err_json.get("detail") or err_json.get("message")
                message = detail if isinstance(detail, str) else json.dumps(detail or err_json)
            if not message:
                message = response.text or f"HTTP {response.status_code}"
            logger.error("API request failed (%s): %s", response.status_code, message)
            return None, {"status_code": response.status_code, "message": message}

        if response.content:
            return response.json(), None
        return None, None

    def _not_logged_in(self) -> Error:
        return {"status_code": 401, "message": "Not logged in"}

    def _remember(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.token = data["access_token"]
        self.user = data["user"]
        if self.store is not None:
            self.store.save(self.token, self.user)
        return self.user

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Log in and persist the session.

        An unknown email and a wrong password both come back with status
        401; the message ("User not found" or "Invalid credentials")
        tells them apart.
        """
        data, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        return self._remember(data), None

    def register(
        self, username: str, email: str, password: str, mode: str = "guest"
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload = {"username": username, "email": email, "password": password, "mode": mode}
        data, error = self._request("POST", "/auth/register", json_body=payload)
        if error:
            return None, error
        return self._remember(data), None

    def logout(self) -> None:
        """Forget the session locally.  No request is made."""
        self.token = None
        self.user = None
        if self.store is not None:
            self.store.clear()

    def update_profile(self, **changes: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Change ``email``, ``password`` and/or ``mode`` of the logged-in user."""
        if not self.token:
            return None, self._not_logged_in()
        data, error = self._request("PUT", "/auth/me", json_body=changes)
        if error:
            return None, error
        return self._remember(data), None

    def current_user(self) -> Optional[Dict[str, Any]]:
        return self.user

    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)

    def check_is_admin(self) -> bool:
        """True when the stored user's mode is ``admin``.

        The server enforces admin rights on its own; this only decides
        what a front end shows.
        """
        return bool(self.user) and self.user.get("mode") == "admin"

    def refresh_user(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Re-read the user record from the server and store it."""
        if not self.token:
            return None, self._not_logged_in()
        data, error = self._request("GET", "/auth/me")
        if error:
            return None, error
        self.user = data
        if self.store is not None:
            self.store.save(self.token, self.user)
        return data, None

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------
    def list_listings(
        self, host: Optional[str] = None, city: Optional[str] = None, state: Optional[str] = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/listings/", params={"host": host, "city": city, "state": state})
        if error:
            return [], error
        return data or [], None

    def get_listing(self, listing_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/listings/{listing_id}")

    def create_listing(self, listing: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a listing.

        ``listing`` holds ``price``, ``description``, ``contact_info``,
        either ``location_id`` or a ``location`` mapping, and optionally
        ``photos`` as a list of ``{"photo_url": ...}``.
        """
        if not self.token:
            return None, self._not_logged_in()
        return self._request("POST", "/listings/", json_body=listing)

    def update_listing(self, listing_id: int, changes: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return None, self._not_logged_in()
        return self._request("PUT", f"/listings/{listing_id}", json_body=changes)

    def delete_listing(self, listing_id: int) -> Tuple[bool, Optional[Error]]:
        if not self.token:
            return False, self._not_logged_in()
        _, error = self._request("DELETE", f"/listings/{listing_id}")
        return error is None, error

    def add_photos(self, listing_id: int, urls: List[str]) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return [], self._not_logged_in()
        data, error = self._request(
            "POST", f"/listings/{listing_id}/photos", json_body={"photos": [{"photo_url": u} for u in urls]}
        )
        if error:
            return [], error
        return data or [], None

    def delete_photo(self, photo_id: int) -> Tuple[bool, Optional[Error]]:
        if not self.token:
            return False, self._not_logged_in()
        _, error = self._request("DELETE", f"/photos/{photo_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Saved listings
    # ------------------------------------------------------------------
    def saved_listings(self, details: bool = False) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return [], self._not_logged_in()
        data, error = self._request("GET", "/saved-listings/", params={"details": str(details).lower()})
        if error:
            return [], error
        return data or [], None

    def save_listing(self, listing_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return None, self._not_logged_in()
        return self._request("POST", f"/saved-listings/{listing_id}")

    def unsave_listing(self, listing_id: int) -> Tuple[bool, Optional[Error]]:
        if not self.token:
            return False, self._not_logged_in()
        _, error = self._request("DELETE", f"/saved-listings/{listing_id}")
        return error is None, error

    def is_listing_saved(self, listing_id: int) -> Tuple[bool, Optional[Error]]:
        if not self.token:
            return False, self._not_logged_in()
        data, error = self._request("GET", f"/saved-listings/{listing_id}")
        if error:
            return False, error
        return bool(data and data.get("saved")), None

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def send_message(self, receiver: str, text: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return None, self._not_logged_in()
        return self._request("POST", "/messages/", json_body={"receiver_id": receiver, "text": text})

    def inbox(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return [], self._not_logged_in()
        data, error = self._request("GET", "/messages/")
        if error:
            return [], error
        return data or [], None

    def conversation(self, other_username: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        if not self.token:
            return [], self._not_logged_in()
        data, error = self._request("GET", f"/messages/conversation/{other_username}")
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def get_stats(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/reports/stats")

    def average_price(self) -> Tuple[Optional[float], Optional[Error]]:
        data, error = self._request("GET", "/reports/average-price")
        if error:
            return None, error
        return data["average_price"], None

    def price_ranges(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/reports/price-ranges")
        if error:
            return [], error
        return data["buckets"], None

    def rooms_distribution(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/reports/rooms")
        if error:
            return [], error
        return data["buckets"], None
