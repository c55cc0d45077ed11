"""Conservative keyword triage applied to every inbound message.

Crisis rules are evaluated first and take absolute precedence. Only the
identifiers of matched rules are reported, never the matched text, so the
result can be logged without echoing sensitive content.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Tuple

NONE = "none"
DISTRESS = "distress"
CRISIS = "crisis"

# Ordered: reasons are reported in this order.
CRISIS_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("suicidal_ideation", re.compile(
        r"kill(ing)? myself|suicid(e|al)|end(ing)? my life|(want|wanna|going) to die|take my (own )?life",
        re.IGNORECASE,
    )),
    ("self_harm", re.compile(
        r"self[-\s]?harm|cutting|(hurt|harm|cut)(ing)? myself",
        re.IGNORECASE,
    )),
    ("explicit_plan", re.compile(
        r"i have a plan|i bought (a rope|pills)|today is the day",
        re.IGNORECASE,
    )),
    ("abuse_disclosure", re.compile(
        r"abuse|assault|(he|she) hit me",
        re.IGNORECASE,
    )),
]

AMBER_PATTERN = re.compile(
    r"worthless|hopeless|can'?t cope|cannot cope|panic attack|overwhelmed|anxious",
    re.IGNORECASE,
)

CRISIS_MESSAGE = """I'm really glad you told me. I'm not a crisis service, but your safety matters.
If you feel in immediate danger, please contact local emergency services (112 in India) or reach a trusted person nearby.
You can also try:
• Kiran (India mental health helpline): 1800-599-0019
• iCall: 9152987821
Right now, try to ground yourself: breathe in for 4, hold for 4, out for 4, and name 3 things you can see.
Would you like a small step we can plan together while you reach out?"""


@dataclass(frozen=True)
class TriageResult:
    level: str = NONE
    reasons: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_crisis(self) -> bool:
        return self.level == CRISIS

    def to_dict(self) -> dict:
        return {"level": self.level, "reasons": list(self.reasons)}


def _normalize(text: str) -> str:
    t = text.replace("’", "'").replace("‘", "'")
    return re.sub(r"\s+", " ", t)


def classify_risk(text: str | None) -> TriageResult:
    """Map raw text to a risk level. Total: never raises."""
    if not text or not isinstance(text, str):
        return TriageResult()
    t = _normalize(text)
    reasons = tuple(name for name, pat in CRISIS_PATTERNS if pat.search(t))
    if reasons:
        return TriageResult(level=CRISIS, reasons=reasons)
    if AMBER_PATTERN.search(t):
        return TriageResult(level=DISTRESS)
    return TriageResult()


def crisis_response() -> str:
    return CRISIS_MESSAGE


__all__ = ["TriageResult", "classify_risk", "crisis_response", "NONE", "DISTRESS", "CRISIS"]
