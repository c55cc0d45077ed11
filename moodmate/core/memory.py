"""Best-effort per-user memory kept in a small JSON file.

This is auxiliary personalization only. A missing or unreadable file means
"no memory"; write failures are logged and otherwise ignored.
"""
from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"my name is\s+([A-Za-z][A-Za-z\-']*)", re.IGNORECASE)


def extract_name(text: str) -> Optional[str]:
    m = NAME_PATTERN.search(text or "")
    return m.group(1) if m else None


class UserMemory:
    def __init__(self, path: str | Path | None) -> None:
        self._path = Path(path) if path else None
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Dict[str, Any]]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable memory file %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, user_id: str) -> Dict[str, Any]:
        with self._lock:
            entry = self._read_all().get(user_id)
        return dict(entry) if isinstance(entry, dict) else {}

    def save(self, user_id: str, updates: Dict[str, Any]) -> None:
        if self._path is None:
            return
        with self._lock:
            data = self._read_all()
            current = data.get(user_id) if isinstance(data.get(user_id), dict) else {}
            data[user_id] = {**current, **updates}
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            except OSError as exc:
                logger.warning("Failed to write memory file %s: %s", self._path, exc)
