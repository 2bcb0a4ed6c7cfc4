import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from students_api.api.router import api_router
from students_api.core.config import Settings, load_settings
from students_api.core.handlers import register_exception_handlers
from students_api.storage.base import Storage
from students_api.storage.factory import create_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Storage handed to create_app() belongs to the caller
    owns_storage = app.state.storage is None
    if owns_storage:
        app.state.storage = create_storage(settings)

    logger.info(
        f"storage initialized, env={settings.env}, version={settings.app_version}"
    )
    try:
        yield
    finally:
        logger.info("shutting down the server")
        if owns_storage:
            app.state.storage.close()
            app.state.storage = None
        logger.info("server shutdown successfully")


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
) -> FastAPI:
    """
    Build the application.

    When storage is omitted it is created from settings on startup
    and closed on shutdown.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title=settings.project_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def root():
        """
        Health check endpoint
        """
        return {
            "message": "Welcome to Students API",
            "env": settings.env,
            "docs": "/docs",
            "version": settings.app_version,
        }

    return app
