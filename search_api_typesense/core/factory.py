"""
Application factory
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from search_api_typesense.core.config import settings
from search_api_typesense.core.logging import logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    from search_api_typesense.services.backend import get_typesense_backend

    backend = get_typesense_backend()
    if backend.connect():
        backend.sync_indexes_and_collections()
    else:
        logger.warning("Typesense not connected, starting in degraded mode")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application
    """
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        lifespan=lifespan,
    )

    from search_api_typesense.api.v1.router import api_router

    app.include_router(api_router)

    return app
