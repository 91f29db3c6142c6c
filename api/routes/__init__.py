"""API route modules."""

from .categories import router as categories_router
from .health_routes import router as health_router

__all__ = [
    "categories_router",
    "health_router",
]
