"""Tests for keyword mood detection."""
import pytest

from moodmate.inference.mood import MOOD_PATTERNS, NEUTRAL, detect_mood, score_moods


class TestDetectMood:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("I'm so stressed about exams", "stressed"),
            ("Today was AMAZING", "happy"),
            ("I feel lonely and empty", "sad"),
            ("I'm furious with my landlord", "angry"),
            ("I'm confused about what to do", "confused"),
            ("I had pasta for lunch", NEUTRAL),
        ],
    )
    def test_single_category(self, text, expected):
        assert detect_mood(text) == expected

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_is_neutral(self, text):
        assert detect_mood(text) == NEUTRAL

    def test_whole_word_only(self):
        """'mad' must not match inside 'made'."""
        assert detect_mood("I made dinner and downloaded a game") == NEUTRAL

    def test_highest_score_wins(self):
        assert detect_mood("happy happy joy, but a bit sad") == "happy"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("sad but also happy", "sad"),
            ("happy but stressed", "happy"),
            ("stressed and angry", "stressed"),
            ("angry and confused", "angry"),
        ],
    )
    def test_ties_follow_priority(self, text, expected):
        assert detect_mood(text) == expected

    def test_idempotent(self):
        text = "I'm worried and tense about the pressure at work"
        assert detect_mood(text) == detect_mood(text) == "stressed"


class TestScoreMoods:
    def test_counts_every_match(self):
        scores = score_moods("sad, so sad, and angry")

        assert scores["sad"] == 2
        assert scores["angry"] == 1
        assert scores["happy"] == 0

    def test_category_order(self):
        assert list(MOOD_PATTERNS) == ["sad", "happy", "stressed", "angry", "confused"]
