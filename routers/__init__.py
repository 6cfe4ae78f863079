# routers/__init__.py

from fastapi import APIRouter

from .access import router as access_router
from .navigation import router as navigation_router
from .progression import router as progression_router
from .health import router as health_router


api_router = APIRouter()

# Access control + navigation
api_router.include_router(access_router)
api_router.include_router(navigation_router)

# Streaks / XP
api_router.include_router(progression_router)

# Health
api_router.include_router(health_router)

__all__ = ["api_router"]
