"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from channelarr import __version__
from channelarr.api.routes import ROUTERS
from channelarr.config import get_log_file, get_log_level
from channelarr.database import init_db
from channelarr.providers import reset_media_provider
from channelarr.services import reset_schedule_service
from channelarr.utilities.logging import setup_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Set up logging and the database; release the media client on shutdown."""
    setup_logging(get_log_level(), get_log_file())
    logger.info("[STARTUP] Channelarr %s starting", __version__)
    init_db()

    yield

    reset_schedule_service()
    reset_media_provider()
    logger.info("[SHUTDOWN] Channelarr stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Channelarr", version=__version__, lifespan=lifespan)
    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
