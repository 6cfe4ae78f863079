# routers/progression.py

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from models.enums import Capability
from models.progression import ProgressProfile, StreakSummary, StreakUpdate, XPAward
from core.errors import (
    BackdatedActivityError,
    ConcurrentUpdateError,
    InvalidXPAmountError,
    handle_supabase_error,
)
from core.leveling import award_xp
from core.logging_config import logger
from core.progress_store import ProgressStore
from core.progression import ProgressionEngine
from core.screens import Screen
from dependencies.auth import CurrentUser, get_current_user, requires_permission, requires_screen
from dependencies.services import get_progress_store, get_progression_engine

router = APIRouter(
    prefix="/progression",
    tags=["Progression"],
)


# ============================================================
# Pydantic Models
# ============================================================
class ActivityRecorded(BaseModel):
    update: StreakUpdate
    summary: StreakSummary


class XPAwardCreate(BaseModel):
    user_id: str
    amount: int = Field(..., ge=0)
    source: str = "manual"


# ============================================================
# GET /progression/me
# ============================================================
@router.get(
    "/me",
    summary="Level, attributes and streak for the current user",
    response_model=ProgressProfile,
    dependencies=[Depends(requires_screen(Screen.MyCard))],
)
def get_my_progress(
    current_user: CurrentUser = Depends(get_current_user),
    store: ProgressStore = Depends(get_progress_store),
    engine: ProgressionEngine = Depends(get_progression_engine),
):
    try:
        state = store.get_progress(current_user.id)
        streak = store.get_streak(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load progress")

    return engine.profile(state, streak)


# ============================================================
# GET /progression/streak
# ============================================================
@router.get("/streak", summary="Current streak summary", response_model=StreakSummary)
def get_my_streak(
    current_user: CurrentUser = Depends(get_current_user),
    store: ProgressStore = Depends(get_progress_store),
    engine: ProgressionEngine = Depends(get_progression_engine),
):
    try:
        record = store.get_streak(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load streak")

    return engine.streaks.summarize(record)


# ============================================================
# POST /progression/streak/activity
# Called once the client has completed a qualifying action
# ============================================================
@router.post(
    "/streak/activity",
    summary="Record today's qualifying activity",
    response_model=ActivityRecorded,
)
def record_activity(
    current_user: CurrentUser = Depends(get_current_user),
    store: ProgressStore = Depends(get_progress_store),
    engine: ProgressionEngine = Depends(get_progression_engine),
):
    try:
        previous = store.get_streak(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load streak")

    try:
        update = engine.record_activity(current_user.id, previous)
    except BackdatedActivityError as e:
        logger.warning(f"Rejected backdated activity for {current_user.id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))

    if update.changed:
        try:
            saved = store.save_streak(update.record, previous)
        except ConcurrentUpdateError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except Exception as e:
            raise handle_supabase_error(e, "Failed to save streak")

        update = update.model_copy(update={"record": saved})

        if update.milestone_reached:
            logger.info(f"User {current_user.id} reached a {update.milestone_reached}-day streak milestone")

    return ActivityRecorded(update=update, summary=engine.streaks.summarize(update.record))


# ============================================================
# POST /progression/xp
# Reward screens (admin) grant XP
# ============================================================
@router.post(
    "/xp",
    summary="Grant XP to a user",
    response_model=XPAward,
    dependencies=[Depends(requires_permission(Capability.MANAGE_REWARDS))],
)
def grant_xp(
    payload: XPAwardCreate,
    store: ProgressStore = Depends(get_progress_store),
):
    try:
        state = store.get_progress(payload.user_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load progress")

    try:
        award = award_xp(state, payload.amount)
    except InvalidXPAmountError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        saved = store.save_progress(award.state, previous_total_xp=state.total_xp)
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise handle_supabase_error(e, "Failed to save progress")

    logger.info(f"Granted {payload.amount} XP to {payload.user_id} ({payload.source})")
    return award.model_copy(update={"state": saved})
