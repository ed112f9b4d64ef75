"""
Development backend for the digital book.

Serves the /libros-digitales REST contract over an in-memory repository so
the wizard and the HTTP client can run without the production backend.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from digitalbook.api.error_handlers import register_error_handlers
from digitalbook.api.routers import books_router, health_router
from digitalbook.core.logging import configure_logging
from digitalbook.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        description="Digital book (Libro del Edificio) development backend",
        version=settings.app_version,
        debug=settings.debug,
    )
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(books_router)

    logger.info("%s backend ready (%s)", settings.app_name, settings.environment)
    return app
