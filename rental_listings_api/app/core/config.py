"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
application can be imported without any environment at all (tests
rely on this).  In a production deployment override at least
``SECRET_KEY``, ``BACKEND_URL`` and ``BACKEND_API_KEY``.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Rental Listings API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Seven days, the lifetime the web client has always used for its token.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Hosted relational backend (PostgREST compatible, e.g. Supabase).
    # ``backend_url`` is the project URL without the ``/rest/v1`` suffix.
    backend_url: str = os.getenv("BACKEND_URL", "http://localhost:54321")
    backend_api_key: str = os.getenv("BACKEND_API_KEY", "")
    # No timeout unless one is configured explicitly.
    backend_timeout: Optional[float] = _optional_float("BACKEND_TIMEOUT")

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()
