from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from moodmate.core.config import Settings, settings as default_settings
from moodmate.core.errors import MoodMateError
from moodmate.core.llm import LLMConfig, make_client
from moodmate.core.memory import UserMemory
from moodmate.core.session_store import EvictionSweeper, SessionStore
from moodmate.event_log import EventLog
from moodmate.inference.mood import NEUTRAL
from moodmate.services.analytics import AnalyticsAggregator
from moodmate.services.chat import ChatOrchestrator

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = (
    "Oh no, one of my -inators exploded in the lab! *cough* "
    "Give me a moment and try again. I'm still here for you."
)

_DEFAULT = object()


class ChatRequest(BaseModel):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


def _error(status: int, code: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": False, "error": code, "message": message, **extra})


def create_app(
    settings: Optional[Settings] = None,
    llm_cfg: Optional[LLMConfig] = None,
    completion: Any = _DEFAULT,
    store: Optional[SessionStore] = None,
    analytics: Optional[AnalyticsAggregator] = None,
    memory: Optional[UserMemory] = None,
    events: Optional[EventLog] = None,
) -> FastAPI:
    settings = settings or default_settings
    if completion is _DEFAULT:
        completion = make_client(llm_cfg or LLMConfig.from_env())
    store = store if store is not None else SessionStore()
    analytics = analytics if analytics is not None else AnalyticsAggregator()
    memory = memory if memory is not None else UserMemory(settings.memory_path)
    events = events if events is not None else EventLog(settings.event_log_limit)

    orchestrator = ChatOrchestrator(
        store=store,
        analytics=analytics,
        completion=completion,
        memory=memory,
        settings=settings,
        events=events,
    )
    sweeper = EvictionSweeper(
        store,
        ttl=timedelta(seconds=settings.session_ttl_seconds),
        interval=settings.eviction_interval_seconds,
        on_evict=lambda n: events.add("session.evicted", {"count": n}),
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        sweeper.start()
        try:
            yield
        finally:
            sweeper.stop()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.state.sweeper = sweeper

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MoodMateError)
    async def _mood_mate_error(_: Request, exc: MoodMateError) -> JSONResponse:
        return _error(exc.status_code, exc.code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "invalid_request", "Malformed request body")

    @app.exception_handler(Exception)
    async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        events.add("internal_error", {"path": request.url.path, "error": type(exc).__name__})
        return _error(
            500,
            "internal_error",
            INTERNAL_ERROR_MESSAGE,
            detectedMood=NEUTRAL,
            triage={"level": "none", "reasons": []},
        )

    @app.post("/api/session/start")
    def start_session() -> dict:
        sid = orchestrator.start_session()
        return {"success": True, "sessionId": sid, "message": settings.welcome_message}

    @app.post("/api/chat")
    def chat(payload: ChatRequest) -> dict:
        result = orchestrator.chat(payload.session_id, payload.message, user_id=payload.user_id)
        return result.to_dict()

    @app.get("/api/session/{session_id}/history")
    def session_history(session_id: str) -> dict:
        with store.locked(session_id) as sess:
            turns = store.get_all(session_id)
            return {
                "success": True,
                "session": {
                    "id": sess.id,
                    "startTime": sess.created_at.isoformat(),
                    "lastActivity": sess.last_activity.isoformat(),
                    "messageCount": sess.message_count,
                    "currentMood": sess.current_mood,
                },
                "chatHistory": [t.to_dict() for t in turns],
                "moodSummary": store.mood_summary(session_id),
            }

    @app.get("/api/analytics/mood")
    def analytics_mood(top: int = Query(settings.top_keywords, ge=1, le=100)) -> dict:
        snap = analytics.snapshot(top_n=top)
        return {
            "success": True,
            "totalMessages": snap["total_messages"],
            "moodDistribution": snap["mood_distribution"],
            "topKeywords": snap["top_keywords"],
            "generatedAt": snap["generated_at"],
        }

    @app.get("/api/analytics/trends")
    def analytics_trends(days: int = Query(7, ge=1, le=365)) -> dict:
        return {"success": True, "days": analytics.trends(days)}

    @app.get("/api/health")
    def health() -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "activeSessions": store.count(),
        }

    @app.get("/api/logs")
    def get_logs(limit: int = 100) -> dict:
        safe_limit = max(1, min(limit, settings.event_log_limit))
        logs = events.recent(safe_limit)
        return {"count": len(logs), "logs": logs}

    return app


app = create_app()
