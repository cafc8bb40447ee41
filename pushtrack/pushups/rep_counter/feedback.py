"""
Per-rep coaching lines for the pushup counter
Quality label + motivational cue + running count + milestone cue
"""

import itertools
import random
from typing import Optional, Protocol, Sequence

MOTIVATIONAL_CUES = ["Great!", "Go lower!", "Nice form!", "Keep it up!", "You're doing great!"]

LABEL_EXCELLENT = "Excellent form"
LABEL_GOOD = "Good posture"
LABEL_NEEDS_CORRECTION = "Keep your back straight"

MILESTONE_EVERY = 5
HALFWAY_REP = 10


class PhraseProvider(Protocol):
    """Chooses one phrase from a pool."""

    def choose(self, phrases: Sequence[str]) -> str:
        ...


class RandomPhraseProvider:
    """Random choice, seedable for reproducible sessions."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def choose(self, phrases: Sequence[str]) -> str:
        return self._random.choice(list(phrases))


class CyclingPhraseProvider:
    """Walks the pool in order. Used by replays and tests."""

    def __init__(self):
        self._counter = itertools.count()

    def choose(self, phrases: Sequence[str]) -> str:
        return phrases[next(self._counter) % len(phrases)]


def quality_label(is_good: bool, is_excellent: bool) -> str:
    if is_excellent:
        return LABEL_EXCELLENT
    if is_good:
        return LABEL_GOOD
    return LABEL_NEEDS_CORRECTION


def milestone_cue(rep_count: int) -> str:
    if rep_count <= 0 or rep_count % MILESTONE_EVERY != 0:
        return ""
    return "Halfway there!" if rep_count == HALFWAY_REP else "Keep going!"


def compose_feedback(rep_count: int, is_good: bool, is_excellent: bool, phrase_provider: PhraseProvider) -> str:
    """Builds the spoken line for a counted rep, e.g. 'Good posture. Nice form!. 5 pushups. Keep going!'."""
    label = quality_label(is_good, is_excellent)
    cue = phrase_provider.choose(MOTIVATIONAL_CUES)
    return f"{label}. {cue}. {rep_count} pushups. {milestone_cue(rep_count)}".strip()
