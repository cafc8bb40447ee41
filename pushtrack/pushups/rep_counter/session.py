"""
Workout session aggregate
Owns the rep state, counters, elapsed time and last announced feedback for one session
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pushtrack.pushups.rep_counter.feedback import PhraseProvider, RandomPhraseProvider, compose_feedback
from pushtrack.pushups.rep_counter.geometry import PoseFrame
from pushtrack.pushups.rep_counter.state_machine import RepState, Telemetry, process_frame
from pushtrack.pushups.rep_counter.thresholds import Thresholds

PRO_REPS = 25
INTERMEDIATE_REPS = 10


def classify_level(reps: int) -> str:
    """Level label shown on summaries and the leaderboard."""
    if reps > PRO_REPS:
        return "Pro"
    if reps > INTERMEDIATE_REPS:
        return "Intermediate"
    return "Beginner"


@dataclass(frozen=True)
class RepEvent:
    rep_number: int
    is_good: bool
    is_excellent: bool
    feedback_text: str
    # False when the line repeats the previous announcement
    announce: bool = True

    def to_dict(self) -> dict:
        return {
            "rep_number": self.rep_number,
            "is_good": self.is_good,
            "is_excellent": self.is_excellent,
            "feedback_text": self.feedback_text,
            "announce": self.announce,
        }


@dataclass(frozen=True)
class TickResult:
    telemetry: Optional[Telemetry] = None
    rep_event: Optional[RepEvent] = None
    rejected: bool = False


@dataclass(frozen=True)
class SessionSummary:
    """Frozen aggregate handed to persistence when a session stops."""
    reps: int
    good_reps: int
    excellent_reps: int
    pro_type: str
    start_time: datetime
    duration_seconds: int
    recorded_at: datetime

    def to_record(self) -> dict:
        return {
            "reps": self.reps,
            "goodReps": self.good_reps,
            "excellentReps": self.excellent_reps,
            "proType": self.pro_type,
            "startTime": self.start_time.isoformat(),
            "durationSeconds": self.duration_seconds,
            "recordedAt": self.recorded_at.isoformat(),
        }


class WorkoutSession:
    """One bounded workout interval.

    start() resets everything, tick() feeds one frame, stop() freezes the
    aggregate. Ticks on an inactive session are ignored.
    """

    def __init__(self, thresholds: Thresholds = None, phrase_provider: PhraseProvider = None):
        self.thresholds = thresholds or Thresholds()
        self.phrase_provider = phrase_provider or RandomPhraseProvider()
        self.active = False
        self.summary: Optional[SessionSummary] = None
        self._reset(None)

    def _reset(self, start_time: Optional[datetime]) -> None:
        self.rep_state = RepState()
        self.total_reps = 0
        self.good_reps = 0
        self.excellent_reps = 0
        self.start_time = start_time
        self.elapsed_seconds = 0
        self.last_feedback = ""
        self.last_telemetry: Optional[Telemetry] = None

    def start(self, now: datetime = None) -> None:
        now = now or datetime.utcnow()
        self._reset(now)
        self.summary = None
        self.active = True
        logging.info(f"Pushup session started at {now.isoformat()}")

    def _update_elapsed(self, now: datetime) -> None:
        if self.start_time is None:
            return
        self.elapsed_seconds = max(0, int(math.floor((now - self.start_time).total_seconds())))

    def tick(self, frame: Optional[PoseFrame], now: datetime = None) -> TickResult:
        """Runs one tick. A missing frame only advances the clock."""
        if not self.active:
            return TickResult()
        self._update_elapsed(now or datetime.utcnow())

        if frame is None:
            return TickResult(rejected=True)

        outcome = process_frame(frame, self.rep_state, self.thresholds)
        self.rep_state = outcome.state
        if outcome.rejected:
            return TickResult(rejected=True)

        self.last_telemetry = outcome.telemetry
        rep_event = None
        if outcome.rep is not None:
            rep_event = self._count_rep(outcome.rep.is_good, outcome.rep.is_excellent)
        return TickResult(telemetry=outcome.telemetry, rep_event=rep_event)

    def _count_rep(self, is_good: bool, is_excellent: bool) -> RepEvent:
        self.total_reps += 1
        if is_good:
            self.good_reps += 1
        if is_excellent:
            self.excellent_reps += 1

        text = compose_feedback(self.total_reps, is_good, is_excellent, self.phrase_provider)
        announce = text != self.last_feedback
        if announce:
            self.last_feedback = text
        logging.info(
            f"Rep {self.total_reps} counted (good={is_good}, excellent={is_excellent})"
        )
        return RepEvent(
            rep_number=self.total_reps,
            is_good=is_good,
            is_excellent=is_excellent,
            feedback_text=text,
            announce=announce,
        )

    def stop(self, now: datetime = None) -> SessionSummary:
        """Freezes the aggregate. Stopping twice returns the same summary."""
        if not self.active and self.summary is not None:
            return self.summary
        now = now or datetime.utcnow()
        self._update_elapsed(now)
        self.active = False
        self.summary = SessionSummary(
            reps=self.total_reps,
            good_reps=self.good_reps,
            excellent_reps=self.excellent_reps,
            pro_type=classify_level(self.total_reps),
            start_time=self.start_time or now,
            duration_seconds=self.elapsed_seconds,
            recorded_at=now,
        )
        logging.info(
            f"Pushup session stopped: {self.total_reps} reps, {self.good_reps} good, "
            f"{self.excellent_reps} excellent in {self.elapsed_seconds}s"
        )
        return self.summary

    def totals(self) -> dict:
        return {
            "total_reps": self.total_reps,
            "good_reps": self.good_reps,
            "excellent_reps": self.excellent_reps,
            "elapsed_seconds": self.elapsed_seconds,
            "phase": self.rep_state.phase.value,
            "active": self.active,
        }
