# core/progress_store.py

"""
Supabase persistence for streak records and XP totals.

The engines never touch storage; routers read a record here, run the pure
transition, then write it back. Writes are compare-and-swap on the value
that was read (last_activity_date for streaks, total_xp for XP), so two
devices recording on the same day cannot both increment.
"""

from datetime import date
from typing import Any, Dict, Optional

from supabase import Client

from models.progression import ProgressState, StreakRecord
from core.config import settings
from core.errors import ConcurrentUpdateError, extract_supabase_error
from core.logging_config import logger


def _first_row(result: Any) -> Optional[Dict[str, Any]]:
    rows = getattr(result, "data", None) or []
    return rows[0] if rows else None


def _streak_from_row(row: Dict[str, Any]) -> StreakRecord:
    last = row.get("last_activity_date")
    if isinstance(last, str):
        last = date.fromisoformat(last[:10])
    return StreakRecord(
        user_id=row["user_id"],
        current_streak=row.get("current_streak") or 0,
        longest_streak=row.get("longest_streak") or 0,
        last_activity_date=last,
        streak_rewards=list(row.get("streak_rewards") or []),
    )


def _streak_to_row(record: StreakRecord) -> Dict[str, Any]:
    return {
        "user_id": record.user_id,
        "current_streak": record.current_streak,
        "longest_streak": record.longest_streak,
        "last_activity_date": record.last_activity_date.isoformat(),
        "streak_rewards": list(record.streak_rewards),
    }


class ProgressStore:
    def __init__(
        self,
        client: Client,
        streak_table: Optional[str] = None,
        progress_table: Optional[str] = None,
    ):
        self.client = client
        self.streak_table = streak_table or settings.STREAK_TABLE
        self.progress_table = progress_table or settings.PROGRESS_TABLE

    # -----------------------------------------------------
    # Streaks
    # -----------------------------------------------------
    def get_streak(self, user_id: str) -> Optional[StreakRecord]:
        result = (
            self.client.table(self.streak_table)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        row = _first_row(result)
        return _streak_from_row(row) if row else None

    def save_streak(self, record: StreakRecord, previous: Optional[StreakRecord]) -> StreakRecord:
        """
        Persist `record`, which was computed from `previous`.

        Raises ConcurrentUpdateError if the stored row no longer matches
        `previous` (or already exists when `previous` is None).
        """
        row = _streak_to_row(record)

        if previous is None:
            try:
                result = self.client.table(self.streak_table).insert(row).execute()
            except Exception as e:
                if "duplicate" in extract_supabase_error(e).lower():
                    raise ConcurrentUpdateError(f"Streak for {record.user_id} was created concurrently") from e
                raise
        else:
            result = (
                self.client.table(self.streak_table)
                .update(row)
                .eq("user_id", record.user_id)
                .eq("last_activity_date", previous.last_activity_date.isoformat())
                .execute()
            )

        saved = _first_row(result)
        if saved is None:
            logger.warning(f"Streak write for {record.user_id} lost a concurrent update")
            raise ConcurrentUpdateError(f"Streak for {record.user_id} changed during update")

        return _streak_from_row(saved)

    # -----------------------------------------------------
    # XP / badges
    # -----------------------------------------------------
    def get_progress(self, user_id: str) -> ProgressState:
        result = (
            self.client.table(self.progress_table)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        row = _first_row(result)
        if row is None:
            return ProgressState(user_id=user_id)

        return ProgressState(
            user_id=row["user_id"],
            total_xp=row.get("total_xp") or 0,
            badge_count=row.get("badge_count") or 0,
        )

    def save_progress(self, state: ProgressState, previous_total_xp: int) -> ProgressState:
        row = {
            "user_id": state.user_id,
            "total_xp": state.total_xp,
            "badge_count": state.badge_count,
        }

        existing = (
            self.client.table(self.progress_table)
            .select("user_id")
            .eq("user_id", state.user_id)
            .limit(1)
            .execute()
        )

        if _first_row(existing) is None:
            result = self.client.table(self.progress_table).insert(row).execute()
        else:
            result = (
                self.client.table(self.progress_table)
                .update(row)
                .eq("user_id", state.user_id)
                .eq("total_xp", previous_total_xp)
                .execute()
            )

        saved = _first_row(result)
        if saved is None:
            raise ConcurrentUpdateError(f"Progress for {state.user_id} changed during update")

        return ProgressState(
            user_id=saved["user_id"],
            total_xp=saved.get("total_xp") or 0,
            badge_count=saved.get("badge_count") or 0,
        )
