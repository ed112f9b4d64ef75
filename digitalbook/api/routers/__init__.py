"""API routers."""

from digitalbook.api.routers.books import router as books_router
from digitalbook.api.routers.health import router as health_router

__all__ = ["books_router", "health_router"]
