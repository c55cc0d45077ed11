"""Keyword mood detection.

Each category owns a whole-word pattern; the category with the most matches
wins. Ties go to the earlier category in ``MOOD_PATTERNS``, which is ordered
by safety relevance.
"""
from __future__ import annotations

import re
from typing import Dict

NEUTRAL = "neutral"

MOOD_PATTERNS: dict[str, re.Pattern[str]] = {
    "sad": re.compile(
        r"\b(sad|down|depressed|upset|crying|hurt|disappointed|gloomy|miserable|heartbroken|lonely|empty|hopeless)\b",
        re.IGNORECASE,
    ),
    "happy": re.compile(
        r"\b(happy|great|awesome|excited|joy|amazing|fantastic|wonderful|thrilled|elated|cheerful|delighted|pleased)\b",
        re.IGNORECASE,
    ),
    "stressed": re.compile(
        r"\b(stressed|anxious|worried|nervous|overwhelmed|panic|tense|pressure|burden|frantic|exhausted)\b",
        re.IGNORECASE,
    ),
    "angry": re.compile(
        r"\b(angry|mad|furious|irritated|annoyed|rage|pissed|frustrated|livid|hate)\b",
        re.IGNORECASE,
    ),
    "confused": re.compile(
        r"\b(confused|lost|uncertain|unclear|puzzled|bewildered)\b",
        re.IGNORECASE,
    ),
}


def score_moods(text: str) -> Dict[str, int]:
    return {mood: len(pat.findall(text)) for mood, pat in MOOD_PATTERNS.items()}


def detect_mood(text: str | None) -> str:
    if not text or not isinstance(text, str):
        return NEUTRAL
    best, best_score = NEUTRAL, 0
    for mood, score in score_moods(text).items():
        if score > best_score:
            best, best_score = mood, score
    return best


__all__ = ["NEUTRAL", "detect_mood", "score_moods"]
