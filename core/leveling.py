# core/leveling.py

"""
Levels and XP-derived display attributes.

Nothing here is stored: level, progress and attribute scores are always
recomputed from total XP, badge count and current streak.
"""

import math
from typing import List, Optional

from models.progression import AttributeScores, Level, LevelProgress, ProgressState, XPAward
from core.errors import InvalidXPAmountError


PEAR_LEVELS: List[Level] = [
    Level(level=1, xp=0, title="Sprouting Hero",
          description="Just getting started on your eco journey!", color="#4CAF50"),
    Level(level=2, xp=250, title="Rising Hero",
          description="Making your first impact on the environment!", color="#8BC34A"),
    Level(level=3, xp=500, title="Eco Beast",
          description="You're becoming a force for environmental change!", color="#FF9800"),
    Level(level=4, xp=1000, title="Urban Guardian",
          description="Protecting your city, one cleanup at a time!", color="#2196F3"),
    Level(level=5, xp=2000, title="Planet Champion",
          description="A true champion for Earth!", color="#9C27B0"),
    Level(level=6, xp=3500, title="Eco Legend",
          description="Your environmental impact is legendary!", color="#E91E63"),
    Level(level=7, xp=5500, title="Climate Warrior",
          description="Leading the fight against climate change!", color="#FF5722"),
    Level(level=8, xp=8000, title="Earth Protector",
          description="Guardian of our beautiful planet!", color="#795548"),
    Level(level=9, xp=12000, title="Nature's Champion",
          description="Nature itself recognizes your dedication!", color="#607D8B"),
    Level(level=10, xp=18000, title="PEAR Master",
          description="The ultimate environmental hero!", color="#FFD700"),
]

ATTRIBUTE_CAP = 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ============================================================
# Levels
# ============================================================
def level_for_xp(total_xp: int, levels: List[Level] = PEAR_LEVELS) -> Level:
    """Highest level whose threshold the XP total has reached."""
    current = levels[0]
    for level in levels:
        if total_xp >= level.xp:
            current = level
        else:
            break
    return current


def next_level(total_xp: int, levels: List[Level] = PEAR_LEVELS) -> Optional[Level]:
    current = level_for_xp(total_xp, levels)
    index = levels.index(current)
    if index < len(levels) - 1:
        return levels[index + 1]
    return None


def xp_to_next_level(total_xp: int, levels: List[Level] = PEAR_LEVELS) -> int:
    upcoming = next_level(total_xp, levels)
    if upcoming is None:
        return 0
    return upcoming.xp - total_xp


def progress_to_next_level(total_xp: int, levels: List[Level] = PEAR_LEVELS) -> int:
    """Whole-number percent through the current level; 100 at max level."""
    current = level_for_xp(total_xp, levels)
    upcoming = next_level(total_xp, levels)
    if upcoming is None:
        return 100

    span = upcoming.xp - current.xp
    return _round_half_up((total_xp - current.xp) / span * 100)


def level_progress(total_xp: int, levels: List[Level] = PEAR_LEVELS) -> LevelProgress:
    upcoming = next_level(total_xp, levels)
    return LevelProgress(
        current_level=level_for_xp(total_xp, levels),
        next_level=upcoming,
        xp_to_next=xp_to_next_level(total_xp, levels),
        progress_percent=progress_to_next_level(total_xp, levels),
        is_max_level=upcoming is None,
    )


def xp_for_level(target_level: int, levels: List[Level] = PEAR_LEVELS) -> Optional[int]:
    for level in levels:
        if level.level == target_level:
            return level.xp
    return None


def can_level_up_with(total_xp: int, amount: int, levels: List[Level] = PEAR_LEVELS) -> bool:
    return level_for_xp(total_xp + amount, levels).level > level_for_xp(total_xp, levels).level


def award_xp(state: ProgressState, amount: int, levels: List[Level] = PEAR_LEVELS) -> XPAward:
    """Add XP to a progress state. XP never decreases."""
    if amount < 0:
        raise InvalidXPAmountError(f"XP amount must be non-negative, got {amount}")

    updated = state.model_copy(update={"total_xp": state.total_xp + amount})
    return XPAward(
        state=updated,
        amount=amount,
        previous_level=level_for_xp(state.total_xp, levels).level,
        new_level=level_for_xp(updated.total_xp, levels).level,
    )


# ============================================================
# Attributes (MyCard)
# ============================================================
def attribute_scores(total_xp: int, badge_count: int, current_streak: int) -> AttributeScores:
    xp_steps = total_xp // 100
    # A streak of zero still scores as one day.
    streak = current_streak or 1

    return AttributeScores(
        efficiency=min(ATTRIBUTE_CAP, 65 + xp_steps * 2),
        impact=min(ATTRIBUTE_CAP, 78 + badge_count * 3),
        reliability=min(ATTRIBUTE_CAP, 92 + streak * 2),
        speed=min(ATTRIBUTE_CAP, 73 + xp_steps * 2),
    )
