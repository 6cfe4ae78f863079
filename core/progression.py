# core/progression.py

from datetime import date, datetime
from typing import Optional

import pytz

from models.progression import ProgressProfile, ProgressState, StreakRecord, StreakUpdate
from core.leveling import attribute_scores, level_progress
from core.streaks import StreakEngine


def today_in(timezone_name: str) -> date:
    """Calendar date "now" in the given zone. Streak days follow this date."""
    return datetime.now(pytz.timezone(timezone_name)).date()


class ProgressionEngine:
    """
    Streaks plus XP-derived display values for the dashboard / MyCard.

    Holds no user state; every call takes the records it works on.
    """

    def __init__(self, streak_engine: Optional[StreakEngine] = None, timezone_name: str = "UTC"):
        self.streaks = streak_engine or StreakEngine()
        self.timezone_name = timezone_name

    def today(self) -> date:
        return today_in(self.timezone_name)

    def record_activity(
        self,
        user_id: str,
        record: Optional[StreakRecord],
        today: Optional[date] = None,
    ) -> StreakUpdate:
        """Apply "user completed a qualifying action today" to a streak record."""
        day = today or self.today()
        if record is None:
            return self.streaks.start_streak(user_id, day)
        return self.streaks.record_activity(record, day)

    def profile(self, state: ProgressState, streak: Optional[StreakRecord]) -> ProgressProfile:
        current_streak = streak.current_streak if streak else 0
        return ProgressProfile(
            user_id=state.user_id,
            total_xp=state.total_xp,
            badge_count=state.badge_count,
            level=level_progress(state.total_xp),
            attributes=attribute_scores(state.total_xp, state.badge_count, current_streak),
            streak=self.streaks.summarize(streak),
        )
