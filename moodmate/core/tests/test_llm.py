"""Tests for prompt composition and completion-provider error mapping."""
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests

from moodmate.core.errors import CompletionTimeout, RateLimited, ServiceUnavailable
from moodmate.core.llm import (
    FALLBACK_MESSAGE,
    GREETING,
    SYSTEM_PROMPT,
    LLMConfig,
    build_messages,
    is_greeting,
    make_client,
    offline_reply,
    post_completion,
)
from moodmate.core.llm_cloud import generate_with_cloud
from moodmate.core.llm_ollama import generate_with_ollama
from moodmate.core.session_store import ASSISTANT, USER, Turn

TS = datetime(2026, 10, 19, tzinfo=timezone.utc)


def _response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else {}
    return resp


class TestBuildMessages:
    def test_system_history_latest(self):
        history = [
            Turn(role=USER, content="hi", ts=TS),
            Turn(role=ASSISTANT, content="hello!", ts=TS),
        ]
        messages = build_messages("how are you?", history)

        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1:] == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello!"},
            {"role": "user", "content": "how are you?"},
        ]

    def test_crisis_turns_excluded(self):
        history = [
            Turn(role=USER, content="I want to die", ts=TS, crisis=True),
            Turn(role=ASSISTANT, content="helplines...", ts=TS, crisis=True),
        ]
        messages = build_messages("thanks", history)

        assert [m["content"] for m in messages[1:]] == ["thanks"]

    def test_remembered_name_in_system_prompt(self):
        messages = build_messages("hey", [], {"name": "Candace"})

        assert "Candace" in messages[0]["content"]


class TestPostCompletion:
    @patch("moodmate.core.llm.requests.post")
    def test_timeout(self, post):
        post.side_effect = requests.Timeout()
        with pytest.raises(CompletionTimeout):
            post_completion("http://llm", {}, timeout=1)

    @patch("moodmate.core.llm.requests.post")
    def test_connection_error(self, post):
        post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ServiceUnavailable):
            post_completion("http://llm", {}, timeout=1)

    @patch("moodmate.core.llm.requests.post")
    def test_rate_limited(self, post):
        post.return_value = _response(429)
        with pytest.raises(RateLimited):
            post_completion("http://llm", {}, timeout=1)

    @patch("moodmate.core.llm.requests.post")
    def test_server_error(self, post):
        post.return_value = _response(502)
        with pytest.raises(ServiceUnavailable):
            post_completion("http://llm", {}, timeout=1)

    @patch("moodmate.core.llm.requests.post")
    def test_passes_timeout(self, post):
        post.return_value = _response(200, {"ok": True})

        assert post_completion("http://llm", {"a": 1}, timeout=7) == {"ok": True}
        assert post.call_args.kwargs["timeout"] == 7


class TestProviders:
    def test_cloud_requires_key(self):
        with pytest.raises(ServiceUnavailable):
            generate_with_cloud(LLMConfig(provider="cloud"), [])

    @patch("moodmate.core.llm.requests.post")
    def test_cloud_parses_choice(self, post):
        post.return_value = _response(200, {"choices": [{"message": {"content": "  Wunderbar!  "}}]})
        cfg = LLMConfig(provider="cloud", api_key="k", model="gpt-test")

        assert generate_with_cloud(cfg, [{"role": "user", "content": "hi"}]) == "Wunderbar!"
        body = post.call_args.kwargs["json"]
        assert body["model"] == "gpt-test"
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer k"

    @patch("moodmate.core.llm.requests.post")
    def test_cloud_bad_shape(self, post):
        post.return_value = _response(200, {"unexpected": True})
        with pytest.raises(ServiceUnavailable):
            generate_with_cloud(LLMConfig(provider="cloud", api_key="k"), [])

    @patch("moodmate.core.llm.requests.post")
    def test_ollama_parses_message(self, post):
        post.return_value = _response(200, {"message": {"role": "assistant", "content": "Hallo!"}})

        assert generate_with_ollama(LLMConfig(provider="ollama"), []) == "Hallo!"

    @patch("moodmate.core.llm.requests.post")
    def test_ollama_empty_reply(self, post):
        post.return_value = _response(200, {"message": {"content": ""}})
        with pytest.raises(ServiceUnavailable):
            generate_with_ollama(LLMConfig(provider="ollama"), [])

    def test_make_client(self):
        assert make_client(LLMConfig(provider="none")) is None
        assert callable(make_client(LLMConfig(provider="cloud", api_key="k")))
        assert callable(make_client(LLMConfig(provider="ollama")))


class TestOfflineReply:
    def test_rotates_and_personalises(self):
        first = offline_reply("happy", 0)
        second = offline_reply("happy", 1)

        assert first != second
        assert offline_reply("happy", 2) == first
        assert offline_reply("sad", 0, name="Candace").startswith("Candace!")

    def test_unknown_mood_uses_neutral(self):
        assert offline_reply("bewildered", 0) == offline_reply("neutral", 0)

    @pytest.mark.parametrize("text", ["hello", "Hi Doof", "hey!", "Good evening, doctor"])
    def test_greeting_detected(self, text):
        assert is_greeting(text)

    @pytest.mark.parametrize("text", ["this is hard", "whichever", "I'm stressed"])
    def test_non_greeting(self, text):
        assert not is_greeting(text)

    def test_greeting_replies_personalised(self):
        assert offline_reply(GREETING, 0, name="Candace").startswith("Candace!")

    def test_fallback_is_in_character(self):
        assert "inator" in FALLBACK_MESSAGE
