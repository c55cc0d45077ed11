# moodmate/core/llm.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import requests

from moodmate.core.errors import CompletionTimeout, RateLimited, ServiceUnavailable
from moodmate.core.session_store import Turn

Message = dict
CompletionClient = Callable[[List[Message]], str]


@dataclass
class LLMConfig:
    provider: str = "none"  # "none" | "ollama" | "cloud"
    model: str = "llama3.1:8b-instruct"
    api_key: Optional[str] = None
    endpoint: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 300
    timeout: float = 20.0

    @classmethod
    def from_env(cls) -> "LLMConfig":
        return cls(
            provider=os.getenv("LLM_PROVIDER", "none").strip().lower(),
            model=os.getenv("LLM_MODEL", cls.model),
            api_key=os.getenv("LLM_API_KEY"),
            endpoint=os.getenv("LLM_ENDPOINT"),
            temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
            max_tokens=int(os.getenv("LLM_MAX_TOKENS", "300")),
            timeout=float(os.getenv("LLM_TIMEOUT", "20")),
        )


SYSTEM_PROMPT = """You are Dr. Heinz Doofenshmirtz ("Dr. Doof"), a former evil scientist
who now builds conversations instead of -inators to help people with their mood.
Goals: (1) listen and reflect feelings, (2) lift the mood with warm, playful humour,
(3) offer one small, practical coping step. Never give medical advice or a diagnosis.
If the person seems unsafe, gently encourage them to reach a trusted person or a helpline.
Keep replies short: two to four sentences."""

FALLBACK_MESSAGE = (
    "Ah, my Conversation-inator seems to be malfunctioning! *nervous evil laugh* "
    "Let me try that again. How are you feeling today?"
)

GREETING = "greeting"
GREETING_PATTERN = re.compile(
    r"\b(hello|hi|hey|greetings|good morning|good afternoon|good evening)\b",
    re.IGNORECASE,
)

OFFLINE_REPLIES: dict[str, list[str]] = {
    GREETING: [
        "Ah, hello there! I am Dr. Heinz Doofenshmirtz, but you can call me Dr. Doof! "
        "I've traded my evil schemes for helping you with your mood. How are you feeling today?",
        "Welcome to my mood-improvement laboratory! Today we're going to make your day better "
        "than any of my inventions ever could. What's on your mind?",
        "Greetings! Dr. Doof here! I used to build -inators to take over the Tri-State Area, "
        "now I build conversations to take over... well, sadness! How can I help?",
    ],
    "sad": [
        "Ah, I sense sadness in your words! Even evil scientists get the blues. "
        "Every one of my failed inventions taught me something new, and your strength outlasts this feeling.",
        "Don't worry! My most diabolical plans failed spectacularly, but I never gave up. "
        "Every setback is a setup for a comeback!",
    ],
    "happy": [
        "Wunderbar! Your good mood is more powerful than any of my -inators ever were! Tell me what made you so happy!",
        "Excellent! Your happiness levels are off the charts! *does awkward evil scientist dance*",
    ],
    "stressed": [
        "Stress detected! Time for my Anti-Stress-inator 3000! Breathe with me: in for 4, hold for 4, out for 4.",
        "You know what's more stressful than Perry the Platypus foiling my plans? Nothing! And I survived that daily. "
        "Try the 5-4-3-2-1 technique with me.",
    ],
    "angry": [
        "Whoa there! I used to turn anger into giant robots. Now I bake cookies instead: "
        "much more satisfying and way less property damage!",
        "Anger is like my old Rage-inator: powerful but hard on the person using it. "
        "What would make this situation just 1% better?",
    ],
    "confused": [
        "Confusion is where every great invention starts! Let's break it down one piece at a time. "
        "What is the first thing that feels unclear?",
    ],
    "neutral": [
        "Ah, the calm before the emotional storm! Tell me, what's occupying that brilliant mind of yours today?",
        "Neutral mood detected! You know what's NOT neutral? My enthusiasm to help you have an amazing day!",
    ],
}


def is_greeting(text: str) -> bool:
    return bool(GREETING_PATTERN.search(text or ""))


def offline_reply(mood: str, turn_number: int, name: Optional[str] = None, exercise: Optional[str] = None) -> str:
    """Canned persona reply used when no completion provider is configured."""
    options = OFFLINE_REPLIES.get(mood) or OFFLINE_REPLIES["neutral"]
    reply = options[turn_number % len(options)]
    if name:
        reply = f"{name}! {reply}"
    if exercise:
        reply = f"{reply} {exercise}"
    return reply


def build_messages(
    user_text: str,
    history: Iterable[Turn],
    memory: Optional[dict] = None,
) -> List[Message]:
    """Compose the outbound chat payload: persona, bounded history, latest message."""
    system = SYSTEM_PROMPT
    name = (memory or {}).get("name")
    if name:
        system += f"\nThe person you are talking to is called {name}."
    messages: List[Message] = [{"role": "system", "content": system}]
    for turn in history:
        if turn.crisis:
            continue
        messages.append({"role": turn.role, "content": turn.content})
    messages.append({"role": "user", "content": user_text})
    return messages


def make_client(cfg: LLMConfig) -> Optional[CompletionClient]:
    """Return a completion callable for the configured provider, or None for offline mode."""
    if cfg.provider == "cloud":
        from moodmate.core.llm_cloud import generate_with_cloud

        return lambda messages: generate_with_cloud(cfg, messages)
    if cfg.provider == "ollama":
        from moodmate.core.llm_ollama import generate_with_ollama

        return lambda messages: generate_with_ollama(cfg, messages)
    return None


def post_completion(url: str, body: dict, timeout: float, headers: Optional[dict] = None) -> dict:
    """POST a completion request and map transport failures onto CompletionError."""
    try:
        r = requests.post(url, json=body, headers=headers, timeout=timeout)
    except requests.Timeout as exc:
        raise CompletionTimeout(f"completion request timed out after {timeout}s") from exc
    except requests.RequestException as exc:
        raise ServiceUnavailable(f"completion request failed: {exc}") from exc
    if r.status_code == 429:
        raise RateLimited("completion service rate limited the request")
    if r.status_code >= 400:
        raise ServiceUnavailable(f"completion service returned HTTP {r.status_code}")
    try:
        return r.json()
    except ValueError as exc:
        raise ServiceUnavailable("completion service returned invalid JSON") from exc
