"""Tests for per-rep coaching lines."""

import pytest

from pushtrack.pushups.rep_counter.feedback import (
    MOTIVATIONAL_CUES,
    CyclingPhraseProvider,
    RandomPhraseProvider,
    compose_feedback,
    milestone_cue,
    quality_label,
)


class FixedPhrase:
    def __init__(self, phrase):
        self.phrase = phrase

    def choose(self, phrases):
        return self.phrase


class TestQualityLabel:

    def test_excellent_wins(self):
        assert quality_label(True, True) == "Excellent form"

    def test_good(self):
        assert quality_label(True, False) == "Good posture"

    def test_needs_correction(self):
        assert quality_label(False, False) == "Keep your back straight"


class TestMilestones:

    @pytest.mark.parametrize("count,cue", [
        (1, ""), (4, ""), (5, "Keep going!"), (10, "Halfway there!"), (15, "Keep going!"), (20, "Keep going!"), (0, ""),
    ])
    def test_milestone_cue(self, count, cue):
        assert milestone_cue(count) == cue


class TestComposeFeedback:

    def test_full_line(self):
        line = compose_feedback(10, True, True, FixedPhrase("Great!"))
        assert line == "Excellent form. Great!. 10 pushups. Halfway there!"

    def test_no_milestone(self):
        line = compose_feedback(3, True, False, FixedPhrase("Nice form!"))
        assert line == "Good posture. Nice form!. 3 pushups."

    def test_cycling_provider_walks_pool(self):
        provider = CyclingPhraseProvider()
        chosen = [provider.choose(MOTIVATIONAL_CUES) for _ in range(len(MOTIVATIONAL_CUES) + 1)]
        assert chosen[:-1] == MOTIVATIONAL_CUES
        assert chosen[-1] == MOTIVATIONAL_CUES[0]

    def test_seeded_random_provider_is_reproducible(self):
        a = RandomPhraseProvider(seed=7)
        b = RandomPhraseProvider(seed=7)
        picks = [a.choose(MOTIVATIONAL_CUES) for _ in range(5)]
        assert picks == [b.choose(MOTIVATIONAL_CUES) for _ in range(5)]
        assert set(picks) <= set(MOTIVATIONAL_CUES)
