"""Keyword classifiers for risk triage and mood."""

from .mood import detect_mood
from .triage import TriageResult, classify_risk, crisis_response

__all__ = ["TriageResult", "classify_risk", "crisis_response", "detect_mood"]
