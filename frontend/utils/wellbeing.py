"""
Mood logging content: a suggestion per mood and a pool of affirmations to
draw from.
"""

import random
from datetime import date
from typing import Optional

from models.records import MoodLog

MOODS = ("Happy", "Neutral", "Sad", "Stressed")

MOOD_EMOJI = {
    "Happy": "😊",
    "Neutral": "😐",
    "Sad": "😢",
    "Stressed": "😣",
}

MOOD_SUGGESTIONS = {
    "Happy": "Keep going! Celebrate your progress today.",
    "Neutral": "Take a small break and do something you enjoy.",
    "Sad": "Reach out to a friend or write down your feelings.",
    "Stressed": "Pause for a few deep breaths and stretch your body.",
}

AFFIRMATIONS = {
    "Happy": [
        "My small wins matter.",
        "I allow myself to enjoy today.",
        "I choose to notice the good.",
        "Today, I celebrate myself.",
        "I share my happiness with others.",
    ],
    "Neutral": [
        "I am allowed to rest.",
        "Even small steps move me forward.",
        "I honour my own pace.",
        "I am steady and grounded.",
        "I am enough, exactly as I am.",
    ],
    "Sad": [
        "My feelings are valid and important.",
        "It's okay to ask for help.",
        "This moment will not last forever.",
        "I deserve kindness, especially from myself.",
        "Every breath is a fresh start.",
    ],
    "Stressed": [
        "I can handle one thing at a time.",
        "I release what I cannot control.",
        "I choose to pause and breathe.",
        "I will focus on what I can do today.",
        "I am safe, here and now.",
    ],
}

# Numeric scale for the mood chart
MOOD_SCORE = {"Stressed": 1, "Sad": 2, "Neutral": 3, "Happy": 4}


def build_mood_log(mood: str, today: Optional[date] = None, rng: Optional[random.Random] = None) -> MoodLog:
    rng = rng or random
    pool = AFFIRMATIONS.get(mood) or []
    return MoodLog(
        date=(today or date.today()).isoformat(),
        mood=mood,
        suggestion=MOOD_SUGGESTIONS.get(mood, ""),
        affirmation=rng.choice(pool) if pool else "",
    )
