# dependencies/services.py

"""
Composition root for the RBAC and progression services.

Each service is constructed explicitly from the ones it needs and handed to
routes through FastAPI's Depends, so tests swap any of them with
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import HTTPException

from core.access_guard import AccessGuard
from core.config import settings
from core.navigation import NavigationResolver
from core.permissions import PermissionTable
from core.progress_store import ProgressStore
from core.progression import ProgressionEngine
from core.screens import ScreenGate
from core.streaks import StreakEngine
from core.supabase_client import get_supabase_client


@lru_cache()
def get_permission_table() -> PermissionTable:
    return PermissionTable()


@lru_cache()
def get_screen_gate() -> ScreenGate:
    return ScreenGate(get_permission_table())


@lru_cache()
def get_access_guard() -> AccessGuard:
    return AccessGuard(get_permission_table(), get_screen_gate())


@lru_cache()
def get_navigation_resolver() -> NavigationResolver:
    return NavigationResolver(get_screen_gate())


@lru_cache()
def get_progression_engine() -> ProgressionEngine:
    return ProgressionEngine(StreakEngine(), timezone_name=settings.STREAK_TIMEZONE)


def get_progress_store() -> ProgressStore:
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return ProgressStore(client)
