from __future__ import annotations

import os
from typing import Any, Dict, List, Tuple

import pandas as pd
import requests
import streamlit as st


def _normalize_url(base_url: str) -> str:
    return base_url.rstrip("/")


def _get(base_url: str, path: str, **params: Any) -> Tuple[Dict[str, Any] | None, str | None]:
    url = f"{_normalize_url(base_url)}{path}"
    try:
        response = requests.get(url, params=params or None, timeout=6)
        response.raise_for_status()
        data = response.json()
        if isinstance(data, dict):
            return data, None
        return None, f"Unexpected response format from {path}."
    except requests.RequestException as exc:
        return None, f"Failed to reach {path}: {exc}"
    except ValueError as exc:
        return None, f"Invalid JSON returned by {path}: {exc}"


def start_session(base_url: str) -> Tuple[Dict[str, Any] | None, str | None]:
    url = f"{_normalize_url(base_url)}/api/session/start"
    try:
        response = requests.post(url, timeout=6)
        response.raise_for_status()
        return response.json(), None
    except requests.RequestException as exc:
        return None, f"Failed to start a session: {exc}"
    except ValueError as exc:
        return None, f"Invalid JSON returned by /api/session/start: {exc}"


def send_message(base_url: str, session_id: str, message: str) -> Tuple[Dict[str, Any] | None, str | None]:
    url = f"{_normalize_url(base_url)}/api/chat"
    try:
        response = requests.post(url, json={"sessionId": session_id, "message": message}, timeout=30)
        data = response.json()
    except requests.RequestException as exc:
        return None, f"Failed to reach /api/chat: {exc}"
    except ValueError as exc:
        return None, f"Invalid JSON returned by /api/chat: {exc}"
    if response.status_code == 404:
        return None, "Session expired. Start a new one from the sidebar."
    if not isinstance(data, dict):
        return None, "Unexpected response format from /api/chat."
    # 500 responses still carry a safe, user-facing message
    return data, None


def mood_frame(days: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = [{"date": d["date"], **d.get("moods", {})} for d in days]
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows).set_index("date").fillna(0).astype(int)


def main() -> None:
    st.set_page_config(page_title="Mood Mate Dashboard", page_icon="🧪", layout="wide")
    st.title("Mood Mate Dashboard")
    st.caption("Aggregate moods, keywords and operator events. No message text is shown here.")

    with st.sidebar:
        default_backend = os.getenv("BACKEND_URL", "http://localhost:3000")
        backend_url = st.text_input("Backend URL", value=default_backend)
        days = st.slider("Trend window (days)", min_value=1, max_value=30, value=7)
        st.button("Refresh", use_container_width=True)

    if not backend_url.strip():
        st.info("Configure a backend URL to begin.")
        return

    health, health_error = _get(backend_url, "/api/health")
    mood, mood_error = _get(backend_url, "/api/analytics/mood")

    top_row = st.columns(3)
    with top_row[0]:
        st.metric("Active sessions", health.get("activeSessions", "—") if health else "—")
    with top_row[1]:
        st.metric("Messages analysed", mood.get("totalMessages", 0) if mood else "—")
    with top_row[2]:
        dist = (mood or {}).get("moodDistribution") or {}
        st.metric("Most common mood", max(dist, key=dist.get) if dist else "—")
    if health_error:
        st.error(health_error)

    left, right = st.columns([2, 1])
    with left:
        st.subheader("Daily mood trends")
        trends, trends_error = _get(backend_url, "/api/analytics/trends", days=days)
        if trends_error:
            st.warning(trends_error)
        frame = mood_frame((trends or {}).get("days") or [])
        if frame.empty:
            st.info("No mood data yet.")
        else:
            st.bar_chart(frame)

    with right:
        st.subheader("Top keywords")
        if mood_error:
            st.warning(mood_error)
        keywords = (mood or {}).get("topKeywords") or []
        if keywords:
            st.dataframe(pd.DataFrame(keywords), use_container_width=True, hide_index=True)
        else:
            st.info("No keywords tracked yet.")

    st.divider()
    st.subheader("Operator events")
    logs, log_error = _get(backend_url, "/api/logs", limit=100)
    if log_error:
        st.warning(log_error)
    entries = (logs or {}).get("logs") or []
    if entries:
        st.dataframe(entries, use_container_width=True)
    elif not log_error:
        st.info("No log entries returned.")


if __name__ == "__main__":
    main()
