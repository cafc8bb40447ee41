"""Tests for voice coaching text."""

import pytest

from pushtrack.shared.coaching.voice_coach import (
    build_voice_lines,
    categorize_feedback,
    generate_motivational_message,
    generate_voice_correction,
    generate_workout_summary,
    strip_markers,
)


class TestCategorizeFeedback:

    @pytest.mark.parametrize("line,category", [
        ("✅ Knees aligned", "correct"),
        ("⚠️ Lift your chest", "improve"),
        ("❌ Back is rounded", "improve"),
        ("Hold steady", "neutral"),
        ("", "neutral"),
    ])
    def test_categories(self, line, category):
        assert categorize_feedback(line) == category


def test_strip_markers():
    assert strip_markers("✅  Knees aligned 90°!") == "Knees aligned 90°!"


class TestVoiceCorrection:

    def test_severity_wording(self):
        assert generate_voice_correction("tree", "lift your chest", "low").startswith("Nice work on your tree!")
        assert "Please lift your chest" in generate_voice_correction("tree", "lift your chest.", "medium")
        assert generate_voice_correction("tree", "lift your chest", "high").startswith("Important:")

    def test_unknown_severity(self):
        with pytest.raises(ValueError):
            generate_voice_correction("tree", "lift your chest", "extreme")


def test_motivational_message_mentions_latest_achievement():
    message = generate_motivational_message("warrior", 3, ["First hold", "Ten pushups"])
    assert "Ten pushups" in message


class TestWorkoutSummary:

    def test_single_exercise(self):
        summary = generate_workout_summary(["Pushups"], 2, 0)
        assert summary == "Great workout! You practiced 1 exercise for 2 minutes. Keep up the excellent progress!"

    def test_corrections_pluralized(self):
        assert "3 form corrections" in generate_workout_summary(["Pushups"], 1, 3)
        assert "1 form correction." in generate_workout_summary(["Pushups"], 1, 1)


def test_build_voice_lines_skips_blank():
    lines = build_voice_lines(["✅ Good", "  ", "❌ Bad"])
    assert [line["category"] for line in lines] == ["correct", "improve"]
    assert lines[0]["spoken"] == "Good"
