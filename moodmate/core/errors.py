"""Error taxonomy shared by the orchestrator and the HTTP layer.

Each error carries a stable ``code`` that the API returns verbatim, so
clients can branch on it without parsing messages.
"""
from __future__ import annotations


class MoodMateError(Exception):
    code = "internal_error"
    status_code = 500


class InvalidRequest(MoodMateError):
    """Missing or malformed input; the caller can fix it."""

    code = "invalid_request"
    status_code = 400


class SessionNotFound(MoodMateError):
    """Unknown or evicted session id; the client must start a new session."""

    code = "session_not_found"
    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class CompletionError(MoodMateError):
    """Any failure of the external completion service."""

    code = "service_unavailable"
    status_code = 503


class ServiceUnavailable(CompletionError):
    pass


class RateLimited(CompletionError):
    code = "rate_limited"
    status_code = 429


class CompletionTimeout(ServiceUnavailable):
    code = "timeout"
    status_code = 504


__all__ = [
    "MoodMateError",
    "InvalidRequest",
    "SessionNotFound",
    "CompletionError",
    "ServiceUnavailable",
    "RateLimited",
    "CompletionTimeout",
]
