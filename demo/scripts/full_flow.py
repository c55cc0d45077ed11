#!/usr/bin/env python3

"""
Demonstrate the Mood Mate chat flow from the CLI.

Steps:
1. Starts a session.
2. Sends a few messages, including one that trips the crisis triage.
3. Prints the session history mood summary.
4. Displays the aggregated mood analytics and daily trends.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict

import requests


def post_json(url: str, payload: Dict[str, Any] | None = None) -> requests.Response:
    try:
        return requests.post(url, json=payload, timeout=30)
    except requests.RequestException as exc:
        raise SystemExit(f"Request to {url} failed: {exc}")


def get_json(url: str) -> Dict[str, Any]:
    try:
        response = requests.get(url, timeout=15)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as exc:
        raise SystemExit(f"Request to {url} failed: {exc}")


def main() -> None:
    base_url = os.getenv("MOODMATE_BASE_URL", "http://localhost:3000").rstrip("/")

    print("[1/4] Starting a session")
    start = post_json(f"{base_url}/api/session/start").json()
    sid = start["sessionId"]
    print(f"  ✓ {sid}: {start['message']}")

    messages = [
        "Hi! My name is Candace",
        "I'm so stressed about exams",
        "I want to die",
        "Actually today was amazing, I'm happy",
    ]
    print("[2/4] Chatting")
    for text in messages:
        resp = post_json(f"{base_url}/api/chat", {"sessionId": sid, "message": text})
        payload = resp.json()
        print(f"  > {text}")
        print(f"    [{resp.status_code}] mood={payload.get('detectedMood')} triage={payload.get('triage')}")
        print(f"    {payload.get('message', '')[:120]}")

    print("[3/4] Session history")
    history = get_json(f"{base_url}/api/session/{sid}/history")
    print(f"  turns: {len(history['chatHistory'])}  moods: {history['moodSummary']}")

    print("[4/4] Analytics")
    print(json.dumps(get_json(f"{base_url}/api/analytics/mood"), indent=2))
    print(json.dumps(get_json(f"{base_url}/api/analytics/trends"), indent=2))


if __name__ == "__main__":
    main()
