# core/streaks.py

"""
Daily cleanup streaks.

`record_activity` is the only transition. It is keyed on whole calendar
days between the record's last activity and the activity being recorded:

    0 days   -> unchanged (second activity on the same day)
    1 day    -> current_streak + 1
    > 1 days -> current_streak = 1 (a missed day forfeits the streak)
    < 0 days -> BackdatedActivityError, record untouched

Milestone rewards are granted once per milestone value for the lifetime of
the account, even if the streak later resets and climbs past it again.
"""

from datetime import date
from typing import Iterable, Optional, Sequence, Tuple

from models.progression import StreakRecord, StreakSummary, StreakUpdate
from core.errors import BackdatedActivityError


STREAK_MILESTONES: Tuple[int, ...] = (3, 7, 14, 30, 100)

# (minimum streak, multiplier), highest threshold first
STREAK_BONUS_TIERS: Tuple[Tuple[int, float], ...] = (
    (30, 2.0),
    (14, 1.5),
    (7, 1.25),
    (3, 1.1),
)


class StreakEngine:
    def __init__(
        self,
        milestones: Iterable[int] = STREAK_MILESTONES,
        bonus_tiers: Sequence[Tuple[int, float]] = STREAK_BONUS_TIERS,
    ):
        self.milestones: Tuple[int, ...] = tuple(sorted(set(milestones)))
        self.bonus_tiers: Tuple[Tuple[int, float], ...] = tuple(
            sorted(bonus_tiers, key=lambda tier: tier[0], reverse=True)
        )

    # -----------------------------------------------------
    # Transitions
    # -----------------------------------------------------
    def start_streak(self, user_id: str, today: date) -> StreakUpdate:
        """First qualifying activity for an account."""
        record = StreakRecord(
            user_id=user_id,
            current_streak=1,
            longest_streak=1,
            last_activity_date=today,
            streak_rewards=[],
        )
        record, milestone = self._grant_milestone(record)
        return StreakUpdate(record=record, changed=True, milestone_reached=milestone)

    def record_activity(self, record: StreakRecord, today: date) -> StreakUpdate:
        days_since = (today - record.last_activity_date).days

        if days_since < 0:
            raise BackdatedActivityError(record.last_activity_date, today)

        if days_since == 0:
            return StreakUpdate(record=record, changed=False)

        broken = days_since > 1
        new_streak = 1 if broken else record.current_streak + 1

        updated = record.model_copy(
            update={
                "current_streak": new_streak,
                "longest_streak": max(record.longest_streak, new_streak),
                "last_activity_date": today,
                "streak_rewards": list(record.streak_rewards),
            }
        )
        updated, milestone = self._grant_milestone(updated)

        return StreakUpdate(
            record=updated,
            changed=True,
            streak_broken=broken,
            milestone_reached=milestone,
        )

    def _grant_milestone(self, record: StreakRecord) -> Tuple[StreakRecord, Optional[int]]:
        streak = record.current_streak
        if not self.is_milestone(streak) or streak in record.streak_rewards:
            return record, None
        return (
            record.model_copy(update={"streak_rewards": [*record.streak_rewards, streak]}),
            streak,
        )

    # -----------------------------------------------------
    # Derived values
    # -----------------------------------------------------
    def is_milestone(self, streak: int) -> bool:
        return streak in self.milestones

    def bonus_multiplier(self, current_streak: int) -> float:
        for minimum, multiplier in self.bonus_tiers:
            if current_streak >= minimum:
                return multiplier
        return 1.0

    def next_milestone(self, current_streak: int) -> Optional[int]:
        for milestone in self.milestones:
            if milestone > current_streak:
                return milestone
        return None

    def days_until_next_milestone(self, current_streak: int) -> Optional[int]:
        milestone = self.next_milestone(current_streak)
        if milestone is None:
            return None
        return milestone - current_streak

    def status_message(self, current_streak: int) -> str:
        if current_streak == 0:
            return "Start your cleanup streak today!"
        if current_streak == 1:
            return "Great start! Keep it going tomorrow!"
        if current_streak < 7:
            return f"{current_streak} days strong! Keep the streak alive!"
        if current_streak < 30:
            return f"Amazing {current_streak}-day streak! You're on fire!"
        return f"Incredible {current_streak}-day streak! You're a cleanup legend!"

    def summarize(self, record: Optional[StreakRecord]) -> StreakSummary:
        if record is None:
            return StreakSummary(
                next_milestone=self.next_milestone(0),
                days_until_next_milestone=self.days_until_next_milestone(0),
                status_message=self.status_message(0),
            )

        current = record.current_streak
        return StreakSummary(
            current_streak=current,
            longest_streak=record.longest_streak,
            last_activity_date=record.last_activity_date,
            streak_rewards=list(record.streak_rewards),
            bonus_multiplier=self.bonus_multiplier(current),
            next_milestone=self.next_milestone(current),
            days_until_next_milestone=self.days_until_next_milestone(current),
            status_message=self.status_message(current),
        )
