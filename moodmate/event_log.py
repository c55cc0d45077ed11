from __future__ import annotations

import os
from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Deque, Dict, List

_HARD_LIMIT = int(os.getenv("EVENT_LOG_HARD_LIMIT", "500"))


class EventLog:
    """Bounded, newest-first ring buffer of operator events."""

    def __init__(self, maxlen: int = _HARD_LIMIT) -> None:
        self._maxlen = max(1, maxlen)
        self._log: Deque[Dict[str, Any]] = deque(maxlen=self._maxlen)
        self._lock = Lock()

    def add(self, kind: str, payload: Dict[str, Any]) -> None:
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "kind": kind,
            "payload": payload,
        }
        with self._lock:
            self._log.appendleft(entry)

    def recent(self, limit: int | None = None) -> List[Dict[str, Any]]:
        with self._lock:
            items = list(self._log)
        if limit is None:
            return items
        return items[: max(0, min(limit, self._maxlen))]

    def __len__(self) -> int:
        with self._lock:
            return len(self._log)
