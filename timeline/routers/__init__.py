"""
API routers package.
"""
from timeline.routers.auth import router as auth_router
from timeline.routers.photos import router as photos_router
from timeline.routers.uploads import router as uploads_router
from timeline.routers.health import router as health_router

__all__ = ["auth_router", "photos_router", "uploads_router", "health_router"]
