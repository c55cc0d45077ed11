"""Request-level chat flow.

Every message is triaged before anything else happens. A crisis match
short-circuits with the fixed safety message and the completion service is
never called for that turn. Otherwise the bounded history is sent to the
completion client, the mood is classified per ``Settings.mood_source`` and
session plus analytics state are updated.

The whole call runs under the session's lock, so turns within a session are
strictly ordered by arrival.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from moodmate.core.config import MoodSource, Settings, settings as default_settings
from moodmate.core.errors import CompletionError, InvalidRequest
from moodmate.core.llm import (
    FALLBACK_MESSAGE,
    GREETING,
    CompletionClient,
    build_messages,
    is_greeting,
    offline_reply,
)
from moodmate.core.memory import UserMemory, extract_name
from moodmate.core.session_store import ASSISTANT, USER, MoodSample, Session, SessionStore, Turn
from moodmate.event_log import EventLog
from moodmate.inference.mood import NEUTRAL, detect_mood
from moodmate.inference.triage import NONE, TriageResult, classify_risk, crisis_response
from moodmate.services.analytics import AnalyticsAggregator
from moodmate.services.suggestions import exercise_for, suggestions_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStats:
    message_count: int
    current_mood: str
    session_duration_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messageCount": self.message_count,
            "currentMood": self.current_mood,
            "sessionDuration": self.session_duration_ms,
        }


@dataclass(frozen=True)
class ChatResult:
    message: str
    detected_mood: str
    suggestions: List[str]
    triage: TriageResult
    timestamp: datetime
    session_stats: SessionStats
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "detectedMood": self.detected_mood,
            "suggestions": list(self.suggestions),
            "triage": self.triage.to_dict(),
            "sessionStats": self.session_stats.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


class ChatOrchestrator:
    def __init__(
        self,
        store: SessionStore,
        analytics: AnalyticsAggregator,
        completion: Optional[CompletionClient] = None,
        memory: Optional[UserMemory] = None,
        settings: Settings = default_settings,
        events: Optional[EventLog] = None,
    ) -> None:
        self.store = store
        self.analytics = analytics
        self.completion = completion
        self.memory = memory if memory is not None else UserMemory(None)
        self.settings = settings
        self.events = events if events is not None else EventLog()

    def start_session(self) -> str:
        sid = self.store.create()
        self.events.add("session.start", {"sid": sid})
        return sid

    def chat(self, session_id: Optional[str], message: Optional[str], user_id: Optional[str] = None) -> ChatResult:
        sid = (session_id or "").strip() if isinstance(session_id, str) else ""
        text = message.strip() if isinstance(message, str) else ""
        if not sid or not text:
            raise InvalidRequest("Missing sessionId or message in body")

        triage = classify_risk(text)
        with self.store.locked(sid) as sess:
            history = self.store.get_last(sid, self.settings.history_window)
            self.store.append_turn(sid, Turn(role=USER, content=text, ts=self.store.now(), crisis=triage.is_crisis))
            if triage.is_crisis:
                return self._crisis(sess, triage)
            return self._respond(sess, text, history, triage, user_id or sid)

    def _crisis(self, sess: Session, triage: TriageResult) -> ChatResult:
        now = self.store.now()
        reply = crisis_response()
        self.store.append_turn(sess.id, Turn(role=ASSISTANT, content=reply, ts=now, crisis=True))
        # crisis text never reaches keyword tracking or the mood sample
        self.store.set_mood(sess.id, MoodSample(mood=NEUTRAL, text="", ts=now))
        self.analytics.record_crisis(now)
        self.events.add("chat.crisis", {"sid": sess.id, "reasons": list(triage.reasons)})
        logger.warning("Crisis triage for session %s: %s", sess.id, ", ".join(triage.reasons))
        return self._result(sess, reply, NEUTRAL, triage, now)

    def _respond(
        self,
        sess: Session,
        text: str,
        history: List[Turn],
        triage: TriageResult,
        user_id: str,
    ) -> ChatResult:
        user_memory = self.memory.load(user_id)
        name = extract_name(text)
        if name:
            self.memory.save(user_id, {"name": name})
            user_memory["name"] = name

        # offline persona answers a plain hello with its own greeting
        greeting = self.completion is None and triage.level == NONE and is_greeting(text)
        if greeting:
            reply, failed = offline_reply(GREETING, sess.message_count, user_memory.get("name")), False
        else:
            reply, failed = self._generate(sess, text, history, user_memory)

        if failed or greeting:
            mood, mood_text = NEUTRAL, text
        elif self.settings.mood_source is MoodSource.REPLY:
            mood, mood_text = detect_mood(reply), reply
        else:
            mood, mood_text = detect_mood(text), text

        now = self.store.now()
        self.store.append_turn(sess.id, Turn(role=ASSISTANT, content=reply, ts=now, mood=mood))
        sample = MoodSample(mood=mood, text=mood_text, ts=now)
        self.store.set_mood(sess.id, sample)
        self.analytics.record(sample, text)
        self.events.add(
            "chat.turn",
            {"sid": sess.id, "mood": mood, "triage": triage.level, "fallback": failed},
        )
        return self._result(
            sess, reply, mood, triage, now, fallback=failed, suggestion_key=GREETING if greeting else None
        )

    def _generate(self, sess: Session, text: str, history: List[Turn], user_memory: dict) -> tuple[str, bool]:
        if self.completion is None:
            mood = detect_mood(text)
            reply = offline_reply(mood, sess.message_count, user_memory.get("name"), exercise_for(mood))
            return reply, False

        messages = build_messages(text, history, user_memory)
        try:
            reply = self.completion(messages)
        except CompletionError as exc:
            logger.warning("Completion failed for session %s (%s): %s", sess.id, exc.code, exc)
            self.events.add("chat.completion_error", {"sid": sess.id, "code": exc.code, "error": str(exc)})
            return FALLBACK_MESSAGE, True
        except Exception as exc:
            logger.exception("Unexpected completion failure for session %s", sess.id)
            self.events.add("chat.completion_error", {"sid": sess.id, "code": "internal_error", "error": str(exc)})
            return FALLBACK_MESSAGE, True

        reply = (reply or "").strip() if isinstance(reply, str) else ""
        if not reply:
            self.events.add("chat.completion_error", {"sid": sess.id, "code": "empty_reply", "error": ""})
            return FALLBACK_MESSAGE, True
        return reply, False

    def _result(
        self,
        sess: Session,
        reply: str,
        mood: str,
        triage: TriageResult,
        now: datetime,
        fallback: bool = False,
        suggestion_key: Optional[str] = None,
    ) -> ChatResult:
        duration = sess.duration(now)
        stats = SessionStats(
            message_count=sess.message_count,
            current_mood=sess.current_mood,
            session_duration_ms=int(duration.total_seconds() * 1000),
        )
        return ChatResult(
            message=reply,
            detected_mood=mood,
            suggestions=suggestions_for(suggestion_key or mood),
            triage=triage,
            timestamp=now,
            session_stats=stats,
            fallback=fallback,
        )


__all__ = ["ChatOrchestrator", "ChatResult", "SessionStats"]
