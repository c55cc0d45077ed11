"""Follow-up prompts and small coping exercises keyed by mood."""
from __future__ import annotations

from typing import List

SUGGESTIONS: dict[str, list[str]] = {
    "sad": ["Tell me a joke", "I need motivation", "Help me feel better", "Share something positive"],
    "happy": ["Tell me more good things", "Share the joy", "Keep the energy up", "Celebrate with me"],
    "stressed": ["Help me relax", "Breathing exercises", "Distract me", "Calm my mind"],
    "angry": ["Help me cool down", "Count to ten", "Tell me about cookies", "Channel this energy"],
    "confused": ["Help me understand", "Break it down for me", "What should I do?", "Make it simple"],
    "neutral": ["How are you feeling?", "Tell me about your day", "Surprise me", "Ask me anything"],
    "greeting": ["How are you feeling?", "Tell me about your day", "I need help with something", "Make me laugh"],
}

EXERCISES: dict[str, str] = {
    "box_breathing": "Box breathing: inhale 4s, hold 4s, exhale 4s, hold 4s. Repeat 4 times.",
    "five_senses": "Grounding: 5 things you see, 4 you touch, 3 you hear, 2 you smell, 1 you taste.",
    "thought_log": (
        "Journaling: What happened? What did I feel? What did I think? "
        "What is a realistic alternative thought?"
    ),
    "sleep": "Wind-down: screens off 30 min before bed, dim lights, light stretch, slow breathing.",
    "study_stress": "Pomodoro: 25 min focus + 5 min break, four times, then a longer break.",
}

# Which exercise the offline persona offers for a mood.
MOOD_EXERCISE: dict[str, str] = {
    "sad": "thought_log",
    "stressed": "box_breathing",
    "angry": "box_breathing",
    "confused": "five_senses",
}


def suggestions_for(mood: str) -> List[str]:
    return list(SUGGESTIONS.get(mood, SUGGESTIONS["neutral"]))


def exercise_for(mood: str) -> str | None:
    key = MOOD_EXERCISE.get(mood)
    return EXERCISES[key] if key else None
