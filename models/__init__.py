# -------------------------
# Enums
# -------------------------
from .enums import (
    BaseStrEnum,
    Capability,
    GuardOutcome,
    Role,
)

# -------------------------
# Progression Models
# -------------------------
from .progression import (
    AttributeScores,
    Level,
    LevelProgress,
    ProgressProfile,
    ProgressState,
    StreakRecord,
    StreakSummary,
    StreakUpdate,
    XPAward,
)
