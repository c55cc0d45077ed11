# moodmate/core/llm_ollama.py
import os
from typing import List

from moodmate.core.errors import ServiceUnavailable
from .llm import LLMConfig, Message, post_completion


def generate_with_ollama(cfg: LLMConfig, messages: List[Message]) -> str:
    body = {
        "model": cfg.model,
        "messages": messages,
        "options": {"temperature": cfg.temperature, "num_predict": cfg.max_tokens},
        "stream": False,
    }
    url = cfg.endpoint or os.getenv("OLLAMA_URL", "http://localhost:11434/api/chat")
    data = post_completion(url, body, cfg.timeout)
    text = ((data.get("message") or {}).get("content") or "").strip()
    if not text:
        raise ServiceUnavailable("ollama returned an empty reply")
    return text
