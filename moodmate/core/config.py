"""Application settings for the MoodMate backend."""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class MoodSource(str, Enum):
    """Which side of a turn drives mood detection and analytics."""

    USER = "user"
    REPLY = "reply"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass(frozen=True)
class Settings:
    app_name: str = "MoodMate API"
    allow_origins: tuple[str, ...] = ("*",)  # demo; lock down in production
    history_window: int = 10  # prior turns sent to the completion service
    session_ttl_seconds: int = 60 * 60
    eviction_interval_seconds: int = 60 * 60
    mood_source: MoodSource = MoodSource.USER
    top_keywords: int = 10
    memory_path: str = "ai_memory.json"
    event_log_limit: int = 500
    welcome_message: str = "Welcome to Dr. Doof's Mood Mate! How are you feeling today?"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("ALLOW_ORIGINS")
        return cls(
            allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) if origins else ("*",),
            history_window=_env_int("HISTORY_WINDOW", cls.history_window),
            session_ttl_seconds=_env_int("SESSION_TTL_SECONDS", cls.session_ttl_seconds),
            eviction_interval_seconds=_env_int("EVICTION_INTERVAL_SECONDS", cls.eviction_interval_seconds),
            mood_source=MoodSource(os.getenv("MOOD_SOURCE", MoodSource.USER.value).strip().lower()),
            top_keywords=_env_int("TOP_KEYWORDS", cls.top_keywords),
            memory_path=os.getenv("MEMORY_PATH", cls.memory_path),
            event_log_limit=_env_int("EVENT_LOG_LIMIT", cls.event_log_limit),
        )


settings = Settings.from_env()
