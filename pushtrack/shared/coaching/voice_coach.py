"""
Voice coaching text
Turns scored feedback and session results into short lines for speech playback
"""

from typing import Dict, List, Sequence

CATEGORY_CORRECT = "correct"
CATEGORY_IMPROVE = "improve"
CATEGORY_NEUTRAL = "neutral"

SEVERITIES = ("low", "medium", "high")

# Leading markers used by the scoring API
_CORRECT_MARKERS = ("✅",)
_IMPROVE_MARKERS = ("⚠", "❌")


def categorize_feedback(line: str) -> str:
    """correct / improve / neutral, based on the line's leading marker."""
    text = (line or "").strip()
    if text.startswith(_CORRECT_MARKERS):
        return CATEGORY_CORRECT
    if text.startswith(_IMPROVE_MARKERS):
        return CATEGORY_IMPROVE
    return CATEGORY_NEUTRAL


def strip_markers(line: str) -> str:
    """Drops emoji and other symbols so the line reads well aloud."""
    kept = [ch for ch in (line or "") if ch.isalnum() or ch.isspace() or ch in ".,!?'-°%"]
    return " ".join("".join(kept).split())


def generate_voice_correction(pose: str, correction: str, severity: str = "medium") -> str:
    """Short spoken correction; wording gets firmer with severity."""
    if severity not in SEVERITIES:
        raise ValueError(f"Invalid severity: {severity}. Must be one of {', '.join(SEVERITIES)}")
    correction = correction.strip().rstrip(".")
    if severity == "low":
        return f"Nice work on your {pose}! Try to {correction} for better alignment."
    if severity == "medium":
        return f"Good effort! Please {correction} to improve your form."
    return f"Important: {correction} for safety and better results."


def generate_motivational_message(pose: str, session_minutes: int, achievements: Sequence[str] = ()) -> str:
    if achievements:
        return f"You're doing amazing with {pose}! {achievements[-1]} already. Keep it going!"
    if session_minutes >= 1:
        return f"{session_minutes} minutes of {pose} so far. Keep up the fantastic work!"
    return f"You're doing amazing with {pose}! Keep up the fantastic work!"


def generate_workout_summary(exercises: Sequence[str], duration_minutes: int, corrections: int) -> str:
    summary = (
        f"Great workout! You practiced {len(exercises)} "
        f"{'exercise' if len(exercises) == 1 else 'exercises'} for {duration_minutes} minutes."
    )
    if corrections:
        summary += f" You worked through {corrections} form {'correction' if corrections == 1 else 'corrections'}."
    return summary + " Keep up the excellent progress!"


def build_voice_lines(feedback: List[str]) -> List[Dict[str, str]]:
    """Pairs each feedback line with its category and a speakable version."""
    return [
        {"text": line, "category": categorize_feedback(line), "spoken": strip_markers(line)}
        for line in feedback
        if line and line.strip()
    ]
