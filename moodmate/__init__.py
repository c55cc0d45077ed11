"""MoodMate: a mood-tracking chat backend with a safety triage gate."""

__version__ = "0.1.0"
