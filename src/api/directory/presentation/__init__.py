"""Directory presentation layer: REST routes under /api/users."""

from directory.presentation.routes import router

__all__ = ["router"]
