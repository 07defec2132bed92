"""API routers package."""

from .applications import router as applications_router
from .plugins import router as plugins_router

__all__ = ["applications_router", "plugins_router"]
