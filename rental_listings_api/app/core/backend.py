"""
Client for the hosted relational backend.

All durable state (users, listings, locations, photos, messages,
saved listings, bookings, availability and host reviews) lives in an
external PostgREST-compatible service such as Supabase.  This module
is the only place that talks to it.  ``BackendClient`` exposes the
handful of table operations the services need:

* :meth:`BackendClient.select` – read rows filtered by column equality.
* :meth:`BackendClient.insert` – insert rows and return them.
* :meth:`BackendClient.update` – update rows matched by key and return them.
* :meth:`BackendClient.delete` – delete rows matched by key.
* :meth:`BackendClient.rpc` – call a stored procedure.

Every call is a single attempt.  There is no retry or backoff; a
failed request raises :class:`BackendError` carrying the backend's
own message and error code so callers can react to specific codes
(for example ``23505`` for a unique violation).

The process-wide client is obtained with :func:`get_backend`.  Tests
install a replacement with :func:`set_backend`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import requests

from .config import settings


logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Filters = Mapping[str, Any]

# PostgreSQL and PostgREST error codes the services care about.
UNIQUE_VIOLATION = "23505"
NO_ROWS_FOR_SINGLE = "PGRST116"


class BackendError(Exception):
    """An error reported by (or while reaching) the hosted backend."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION or self.status_code == 409

    @property
    def is_not_found(self) -> bool:
        return self.code == NO_ROWS_FOR_SINGLE

    def __repr__(self) -> str:
        return f"BackendError({self.message!r}, code={self.code!r}, status_code={self.status_code!r})"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_filter_params(filters: Optional[Filters]) -> List[Tuple[str, str]]:
    """Translate ``{"column": value}`` filters into PostgREST query params.

    A list, tuple or set value becomes an ``in.(…)`` filter; anything
    else is an ``eq.`` filter.  ``None`` becomes ``is.null``.
    """
    params: List[Tuple[str, str]] = []
    for column, value in (filters or {}).items():
        if value is None:
            params.append((column, "is.null"))
        elif isinstance(value, (list, tuple, set)):
            joined = ",".join(_format_value(v) for v in value)
            params.append((column, f"in.({joined})"))
        else:
            params.append((column, f"eq.{_format_value(value)}"))
    return params


def build_order_param(order: Optional[str]) -> Optional[str]:
    """``"message_id"`` → ``"message_id.asc"``; ``"price.desc"`` is kept as is."""
    if not order:
        return None
    if order.endswith(".asc") or order.endswith(".desc"):
        return order
    return f"{order}.asc"


class BackendClient:
    """Table-level CRUD and RPC over the PostgREST HTTP interface."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Project URL, e.g. ``https://xyz.supabase.co``.  The
                ``/rest/v1`` prefix is appended automatically.
            api_key: Key sent in the ``apikey`` and ``Authorization``
                headers.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for a response, ``None`` to wait
                indefinitely.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Iterable[Tuple[str, str]]] = None,
        json_body: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        url = f"{self.base_url}/rest/v1{path}"
        logger.debug("Backend %s %s", method, path)
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=list(params or []),
                json=json_body,
                headers=self._headers(prefer),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Backend request %s %s failed: %s", method, path, exc)
            raise BackendError(str(exc)) from exc

        if response.status_code >= 400:
            raise self._error_from_response(response)
        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from_response(response: requests.Response) -> BackendError:
        code = None
        details = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or str(body)
            code = body.get("code")
            details = body.get("details")
        else:
            message = response.text or f"HTTP {response.status_code}"
        logger.error("Backend responded %s (%s): %s", response.status_code, code, message)
        return BackendError(message, code=code, status_code=response.status_code, details=details)

    # ------------------------------------------------------------------
    # Table operations
    # ------------------------------------------------------------------
    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        *,
        columns: str = "*",
        order: Optional[str] = None,
        single: bool = False,
        ilike: Optional[Mapping[str, str]] = None,
    ) -> Union[List[Row], Row]:
        """Return rows of ``table`` matching ``filters``.

        ``ilike`` adds case-insensitive pattern filters; PostgREST treats
        ``*``, ``%`` and ``_`` in the pattern as wildcards.

        With ``single=True`` exactly one row must match; otherwise a
        ``BackendError`` with code ``PGRST116`` is raised, the same
        error PostgREST reports for object requests.
        """
        params = [("select", columns)] + build_filter_params(filters)
        params.extend((column, f"ilike.{pattern}") for column, pattern in (ilike or {}).items())
        order_param = build_order_param(order)
        if order_param:
            params.append(("order", order_param))
        rows = self._request("GET", f"/{table}", params=params) or []
        if single:
            if len(rows) != 1:
                raise BackendError(
                    "JSON object requested, multiple (or no) rows returned",
                    code=NO_ROWS_FOR_SINGLE,
                    status_code=406,
                    details=f"The result contains {len(rows)} rows",
                )
            return rows[0]
        return rows

    def insert(self, table: str, rows: Union[Row, List[Row]]) -> List[Row]:
        payload = rows if isinstance(rows, list) else [rows]
        return self._request("POST", f"/{table}", json_body=payload, prefer="return=representation") or []

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        if not filters:
            raise ValueError("update requires at least one filter")
        return self._request(
            "PATCH",
            f"/{table}",
            params=build_filter_params(filters),
            json_body=values,
            prefer="return=representation",
        ) or []

    def delete(self, table: str, filters: Filters) -> None:
        if not filters:
            raise ValueError("delete requires at least one filter")
        self._request("DELETE", f"/{table}", params=build_filter_params(filters))

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", f"/rpc/{name}", json_body=params or {})


_backend: Optional[BackendClient] = None


def init_backend() -> BackendClient:
    """Create the process-wide client from settings unless one is installed."""
    global _backend
    if _backend is None:
        _backend = BackendClient(
            base_url=settings.backend_url,
            api_key=settings.backend_api_key,
            timeout=settings.backend_timeout,
        )
        logger.info("Backend client configured for %s", settings.backend_url)
    return _backend


def get_backend() -> BackendClient:
    """Return the backend client, creating it on first use."""
    return _backend if _backend is not None else init_backend()


def set_backend(backend: Optional[BackendClient]) -> None:
    """Install ``backend`` as the process-wide client (``None`` resets it)."""
    global _backend
    _backend = backend
