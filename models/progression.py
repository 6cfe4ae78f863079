# models/progression.py

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


# ===============================================================
# STREAKS
# ===============================================================

class StreakRecord(BaseModel):
    """
    Mirrors a row of the user_streaks table.

    longest_streak never drops below current_streak; streak_rewards holds
    each milestone value at most once, in the order it was earned.
    """
    user_id: str
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_activity_date: date
    streak_rewards: List[int] = []

    @model_validator(mode="after")
    def _longest_covers_current(self):
        if self.longest_streak < self.current_streak:
            raise ValueError("longest_streak must be >= current_streak")
        return self


class StreakUpdate(BaseModel):
    """Result of recording one day's activity."""
    record: StreakRecord
    changed: bool
    streak_broken: bool = False
    milestone_reached: Optional[int] = None


class StreakSummary(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: Optional[date] = None
    streak_rewards: List[int] = []
    bonus_multiplier: float = 1.0
    next_milestone: Optional[int] = None
    days_until_next_milestone: Optional[int] = None
    status_message: str


# ===============================================================
# LEVELS / XP
# ===============================================================

class Level(BaseModel):
    level: int
    xp: int
    title: str
    description: Optional[str] = None
    color: Optional[str] = None


class LevelProgress(BaseModel):
    current_level: Level
    next_level: Optional[Level] = None
    xp_to_next: int
    progress_percent: int
    is_max_level: bool


class ProgressState(BaseModel):
    """Mirrors a row of the user_progress table. Only totals are stored."""
    user_id: str
    total_xp: int = Field(0, ge=0)
    badge_count: int = Field(0, ge=0)


class AttributeScores(BaseModel):
    efficiency: int
    impact: int
    reliability: int
    speed: int


class XPAward(BaseModel):
    state: ProgressState
    amount: int
    previous_level: int
    new_level: int

    @computed_field
    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.previous_level


class ProgressProfile(BaseModel):
    user_id: str
    total_xp: int
    badge_count: int
    level: LevelProgress
    attributes: AttributeScores
    streak: StreakSummary
