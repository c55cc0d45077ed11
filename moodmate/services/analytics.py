from __future__ import annotations

import logging
import string
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional

from moodmate.core.session_store import MoodSample

logger = logging.getLogger(__name__)

MIN_KEYWORD_LEN = 4


def day_key(ts: datetime) -> str:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date().isoformat()


def tokenize(text: str) -> List[str]:
    """Whitespace tokens, lowercased, edge punctuation stripped, longer than three characters."""
    tokens = (tok.strip(string.punctuation).lower() for tok in (text or "").split())
    return [tok for tok in tokens if len(tok) >= MIN_KEYWORD_LEN]


@dataclass
class DailyStat:
    date: str
    moods: Counter = field(default_factory=Counter)
    messages: int = 0
    crises: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "moods": dict(self.moods),
            "messages": self.messages,
            "crises": self.crises,
        }


class AnalyticsAggregator:
    """Rolling mood, per-day and keyword statistics across all sessions.

    Updates are plain in-memory counter bumps under one short lock, so they
    never hold up the chat path for longer than a map update.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._moods: Counter[str] = Counter()
        self._keywords: Counter[str] = Counter()
        self._daily: Dict[str, DailyStat] = {}
        self._total = 0

    def _day(self, ts: datetime) -> DailyStat:
        key = day_key(ts)
        stat = self._daily.get(key)
        if stat is None:
            stat = self._daily[key] = DailyStat(date=key)
        return stat

    def record(self, sample: MoodSample, raw_text: Optional[str] = None) -> None:
        tokens = tokenize(raw_text) if raw_text else []
        with self._lock:
            self._total += 1
            self._moods[sample.mood] += 1
            stat = self._day(sample.ts)
            stat.moods[sample.mood] += 1
            stat.messages += 1
            self._keywords.update(tokens)

    def record_crisis(self, ts: datetime) -> None:
        """Count a crisis turn in the day's totals without retaining any of its text."""
        with self._lock:
            stat = self._day(ts)
            stat.messages += 1
            stat.crises += 1

    def top_keywords(self, n: int) -> List[Dict[str, Any]]:
        with self._lock:
            items = list(self._keywords.items())
        # sort is stable, so equal counts keep first-seen order
        items.sort(key=lambda kv: kv[1], reverse=True)
        return [{"keyword": k, "count": c} for k, c in items[: max(0, n)]]

    def trends(self, days: Optional[int] = None) -> List[Dict[str, Any]]:
        with self._lock:
            stats = [s.to_dict() for _, s in sorted(self._daily.items())]
        if days is not None:
            stats = stats[-days:] if days > 0 else []
        return stats

    def snapshot(self, top_n: int = 10) -> Dict[str, Any]:
        with self._lock:
            moods = dict(self._moods)
            total = self._total
        return {
            "total_messages": total,
            "mood_distribution": moods,
            "top_keywords": self.top_keywords(top_n),
            "daily_stats": self.trends(),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }


__all__ = ["AnalyticsAggregator", "DailyStat", "tokenize", "day_key"]
