from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "PEAR Access & Progression API"
    ENV: str = "development"

    # -------------------------------------------------
    # Mobile / web client origins
    # -------------------------------------------------
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Auth + record storage)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Progression storage
    # -------------------------------------------------
    STREAK_TABLE: str = Field("user_streaks", description="Table holding one streak row per user")
    PROGRESS_TABLE: str = Field("user_progress", description="Table holding XP / badge totals per user")

    # Calendar days for streaks are counted in this zone
    STREAK_TIMEZONE: str = Field("UTC", description="pytz zone name used to decide what 'today' is")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = [origin.rstrip("/") for origin in settings.FRONTEND_ORIGINS]

# remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
