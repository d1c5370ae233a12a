"""
Main entrypoint for the Rental Listings API.

This module assembles the FastAPI application: it sets up logging,
maps service and backend errors to HTTP responses and includes the
versioned routers.  ``create_app`` builds the app, which is then
instantiated at import time as ``app``::

    uvicorn rental_listings_api.app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.backend import BackendError, init_backend
from .core.config import settings
from .core.exceptions import ServiceError
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that the startup hook can already log.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
        logging.getLogger(__name__).error(
            "Backend error on %s %s: %s (code=%s)", request.method, request.url.path, exc.message, exc.code
        )
        return JSONResponse(status_code=502, content={"detail": exc.message, "code": exc.code})

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_backend()

    return app


app = create_app()
