# routers/health.py

from fastapi import APIRouter
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# Checks Supabase connection + progression tables
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Supabase / DB health check")
async def health_db():
    """
    Verifies Supabase connectivity.
    - Checks if URL + key are configured
    - Attempts to query the streak and progress tables
    - Returns row-count + error details per table
    """
    status = ping_supabase()
    return {
        "service": "Supabase",
        "status": status.get("status", "unknown"),
        "details": status,
    }


# -----------------------------------------------------
# GET /health/app
# Simple API health check
# -----------------------------------------------------
@router.get("/app", summary="App health check")
async def health_app():
    return {
        "service": "PEAR API",
        "status": "ok",
    }
