"""Tests for the triage gate - every crisis phrasing here must be caught."""
import pytest

from moodmate.inference.triage import (
    CRISIS,
    CRISIS_PATTERNS,
    DISTRESS,
    NONE,
    TriageResult,
    classify_risk,
    crisis_response,
)


class TestCrisisLevel:
    """Messages that must short-circuit to the crisis response."""

    @pytest.mark.parametrize(
        "text",
        [
            "I want to die",
            "i want to die",
            "I WANT TO DIE!!!",
            "honestly...   i want\tto die, tbh",
            "sometimes I think about suicide",
            "I've been thinking of ending my life",
            "I keep cutting again",
            "I’ve started self-harming",
            "I have a plan and today is the day",
            "I bought pills this morning",
            "he hit me last night",
            "I was assaulted",
        ],
    )
    def test_crisis_phrases_detected(self, text):
        result = classify_risk(text)

        assert result.level == CRISIS
        assert result.is_crisis
        assert len(result.reasons) >= 1

    def test_reasons_follow_table_order(self):
        result = classify_risk("She hit me and now I want to kill myself")

        assert result.reasons == ("suicidal_ideation", "abuse_disclosure")

    def test_reasons_are_identifiers_not_matched_text(self):
        result = classify_risk("I want to die")

        known = {name for name, _ in CRISIS_PATTERNS}
        assert set(result.reasons) <= known
        assert all("die" not in r for r in result.reasons)

    def test_crisis_takes_precedence_over_amber(self):
        result = classify_risk("I feel hopeless and overwhelmed and I want to end my life")

        assert result.level == CRISIS


class TestDistressLevel:
    """Amber language without any crisis pattern."""

    @pytest.mark.parametrize(
        "text",
        [
            "I feel so hopeless",
            "I'm worthless at everything",
            "I can’t cope with this week",
            "I had a panic attack in class",
            "Feeling OVERWHELMED",
        ],
    )
    def test_amber_phrases_return_distress(self, text):
        result = classify_risk(text)

        assert result.level == DISTRESS
        assert result.reasons == ()


class TestNoneLevel:
    @pytest.mark.parametrize(
        "text",
        [
            "I had a good day at school today",
            "I'm so stressed about exams",
            "What should I cook tonight?",
        ],
    )
    def test_ordinary_messages(self, text):
        assert classify_risk(text) == TriageResult(level=NONE)

    @pytest.mark.parametrize("text", ["", None, "   "])
    def test_empty_input_is_none(self, text):
        assert classify_risk(text).level == NONE

    def test_deterministic(self):
        assert classify_risk("I want to die") == classify_risk("I want to die")


class TestCrisisResponse:
    def test_contains_helplines(self):
        message = crisis_response()

        assert "1800-599-0019" in message
        assert "9152987821" in message
        assert "112" in message

    def test_static(self):
        assert crisis_response() == crisis_response()

    def test_to_dict(self):
        result = classify_risk("I want to die")

        assert result.to_dict() == {"level": "crisis", "reasons": ["suicidal_ideation"]}
