"""Service layer modules for MoodMate."""

from .analytics import AnalyticsAggregator
from .chat import ChatOrchestrator, ChatResult

__all__ = ["AnalyticsAggregator", "ChatOrchestrator", "ChatResult"]
