# core/errors.py

from datetime import date

from fastapi import HTTPException


# ============================================================
# Domain errors
# ============================================================
class ProgressionError(Exception):
    """Base class for streak / XP update failures."""


class BackdatedActivityError(ProgressionError):
    """
    Raised when an activity is dated before the record's last activity
    (device clock rolled back, replayed event). The record is left as is.
    """

    def __init__(self, last_activity_date: date, activity_date: date):
        self.last_activity_date = last_activity_date
        self.activity_date = activity_date
        super().__init__(
            f"Activity dated {activity_date.isoformat()} precedes last recorded "
            f"activity {last_activity_date.isoformat()}"
        )


class ConcurrentUpdateError(ProgressionError):
    """Another writer changed the stored record between our read and write."""


class InvalidXPAmountError(ProgressionError):
    """XP only ever increases."""


class UnregisteredScreenError(LookupError):
    """A screen name with no entry in the screen registry."""

    def __init__(self, screen_name: str):
        self.screen_name = screen_name
        super().__init__(f"Unknown screen: {screen_name}")


# ============================================================
# Supabase helpers
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1 — Supabase Auth / GoTrue errors
    if hasattr(error, "message"):
        try:
            return str(error.message)
        except Exception:
            pass

    # Case 2 — Supabase errors with args (common)
    if hasattr(error, "args") and error.args:
        try:
            return str(error.args[0])
        except Exception:
            pass

    # Case 3 — Plain string fallback
    try:
        return str(error)
    except Exception:
        return "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to save streak")
        status_code: HTTP status code (default 500)

    Returns:
        HTTPException with standardized error message
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=409, detail=f"{operation}: Record already exists")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")
