"""FastAPI application factory for routers carrying hypermedia resources."""

import logging

from fastapi import APIRouter, FastAPI

from hyperrest.config import get_settings


def create_app(*routers: APIRouter, title: str = "Hyperrest API") -> FastAPI:
    """Create and configure a FastAPI application.

    Each router is included as-is; resources are attached to routers with
    ``hyperrest.api.resources.mount``. Interactive docs are served only in
    debug mode.
    """
    settings = get_settings()
    logging.getLogger("hyperrest").setLevel(settings.log_level)

    app = FastAPI(
        title=title,
        version="0.1.0",
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    for router in routers:
        app.include_router(router)

    return app
