# moodmate/core/llm_cloud.py
from __future__ import annotations

from typing import List

from moodmate.core.errors import ServiceUnavailable
from .llm import LLMConfig, Message, post_completion

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"


# Speaks the OpenAI-compatible chat completions wire format, which most hosted
# providers (OpenAI, Groq, OpenRouter, Together) accept.
def generate_with_cloud(cfg: LLMConfig, messages: List[Message]) -> str:
    if not cfg.api_key:
        raise ServiceUnavailable("cloud provider selected but LLM_API_KEY is not set")
    body = {
        "model": cfg.model,
        "messages": messages,
        "temperature": cfg.temperature,
        "max_tokens": cfg.max_tokens,
    }
    headers = {"Authorization": f"Bearer {cfg.api_key}"}
    data = post_completion(cfg.endpoint or DEFAULT_ENDPOINT, body, cfg.timeout, headers=headers)
    try:
        text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ServiceUnavailable("unexpected completion payload shape") from exc
    text = (text or "").strip()
    if not text:
        raise ServiceUnavailable("completion service returned an empty reply")
    return text
