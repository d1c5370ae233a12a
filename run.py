"""Entry point for the Rental Listings API.

Serves ``rental_listings_api.app.main:app`` with Uvicorn.  Host and
port come from ``API_HOST`` and ``API_PORT`` (defaults ``0.0.0.0`` and
``8000``); the backend is configured through ``BACKEND_URL`` and
``BACKEND_API_KEY``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from rental_listings_api.app.core.config import settings
from rental_listings_api.app.main import app


async def main() -> None:
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
