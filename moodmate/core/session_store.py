"""In-memory session store.

A session groups conversation turns and mood samples under a session id.
Each session carries its own re-entrant lock so one chat call can hold it
for the whole request; the store-wide lock only guards the session table
and is held for short critical sections.
"""
from __future__ import annotations

import logging
import threading
import uuid
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterator, List, Optional

from moodmate.core.errors import SessionNotFound

logger = logging.getLogger(__name__)

USER = "user"
ASSISTANT = "assistant"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Turn:
    role: str
    content: str
    ts: datetime
    mood: Optional[str] = None
    crisis: bool = False  # crisis-flagged turns are kept out of prompts

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.ts.isoformat(),
            "mood": self.mood,
            "crisis": self.crisis,
        }


@dataclass(frozen=True)
class MoodSample:
    mood: str
    text: str
    ts: datetime


@dataclass
class Session:
    id: str
    created_at: datetime
    last_activity: datetime
    turns: List[Turn] = field(default_factory=list)
    mood_history: List[MoodSample] = field(default_factory=list)
    current_mood: str = "neutral"
    message_count: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def duration(self, now: datetime) -> timedelta:
        return now - self.created_at


class SessionStore:
    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def create(self) -> str:
        now = self._clock()
        sid = uuid.uuid4().hex
        with self._lock:
            self._sessions[sid] = Session(id=sid, created_at=now, last_activity=now)
        return sid

    def get(self, sid: str) -> Session:
        with self._lock:
            sess = self._sessions.get(sid)
        if sess is None:
            raise SessionNotFound(sid)
        return sess

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    @contextmanager
    def locked(self, sid: str) -> Iterator[Session]:
        """Hold the session's lock for a multi-step update."""
        sess = self.get(sid)
        with sess.lock:
            yield sess

    def append_turn(self, sid: str, turn: Turn) -> None:
        with self.locked(sid) as sess:
            sess.turns.append(turn)
            sess.last_activity = max(sess.last_activity, self._clock())
            if turn.role == USER:
                sess.message_count += 1

    def set_mood(self, sid: str, sample: MoodSample) -> None:
        with self.locked(sid) as sess:
            sess.mood_history.append(sample)
            sess.current_mood = sample.mood

    def get_last(self, sid: str, n: int) -> list[Turn]:
        with self.locked(sid) as sess:
            return list(sess.turns[-n:]) if n > 0 else []

    def get_all(self, sid: str) -> list[Turn]:
        with self.locked(sid) as sess:
            return list(sess.turns)

    def mood_summary(self, sid: str) -> Dict[str, int]:
        with self.locked(sid) as sess:
            return dict(Counter(s.mood for s in sess.mood_history))

    def evict_inactive(self, threshold: timedelta) -> int:
        """Drop sessions idle for longer than ``threshold``.

        Sessions whose lock is currently held are in use and are skipped.
        """
        cutoff = self._clock() - threshold
        evicted: list[str] = []
        with self._lock:
            for sid, sess in list(self._sessions.items()):
                if sess.last_activity >= cutoff:
                    continue
                if not sess.lock.acquire(blocking=False):
                    continue
                try:
                    if sess.last_activity < cutoff:
                        del self._sessions[sid]
                        evicted.append(sid)
                finally:
                    sess.lock.release()
        for sid in evicted:
            logger.info("Cleaned up inactive session %s", sid)
        return len(evicted)


class EvictionSweeper:
    """Background thread that periodically evicts idle sessions."""

    def __init__(
        self,
        store: SessionStore,
        ttl: timedelta,
        interval: float,
        on_evict: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._store = store
        self._ttl = ttl
        self._interval = interval
        self._on_evict = on_evict
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def sweep(self) -> int:
        count = self._store.evict_inactive(self._ttl)
        if count and self._on_evict is not None:
            self._on_evict(count)
        return count

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.sweep()
            except Exception:  # pragma: no cover - logged, next sweep retries
                logger.exception("Session eviction sweep failed")

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="session-sweeper", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
