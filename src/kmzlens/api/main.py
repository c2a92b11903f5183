"""
FastAPI application serving archive parsing, analytics and GeoJSON export.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kmzlens import __version__
from kmzlens.api.archives import router as archives_router
from kmzlens.api.error_handlers import register_error_handlers
from kmzlens.api.middleware import LoggingContextMiddleware, RequestCorrelationMiddleware
from kmzlens.core.config import settings
from kmzlens.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

API_TITLE = "kmzlens API"
API_DESCRIPTION = "KMZ placemark extraction, location analytics and GeoJSON export"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging(
        log_file=settings.log_file,
        json_logs=settings.environment == "production",
    )
    logger.info(f"{API_TITLE} v{__version__} starting ({settings.environment})")
    yield
    logger.info(f"{API_TITLE} stopped")


def create_app() -> FastAPI:
    """
    Build the application with middleware, error handlers and routers.

    Middleware added last runs first, so request IDs are assigned before the
    logging context reads them.
    """
    application = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LoggingContextMiddleware)
    application.add_middleware(RequestCorrelationMiddleware)

    register_error_handlers(application)
    application.include_router(archives_router, prefix=settings.api_v1_prefix)

    @application.get("/")
    async def root() -> dict[str, str]:
        return {"name": API_TITLE, "version": __version__, "description": API_DESCRIPTION}

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return application


app = create_app()
