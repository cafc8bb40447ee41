"""
Pushup repetition state machine
Pure reducer over (state, frame) -> (state, telemetry, optional completed rep)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from pushtrack.pushups.rep_counter.errors import LowConfidenceFrame
from pushtrack.pushups.rep_counter.geometry import (
    PoseFrame,
    REQUIRED_KEYPOINTS,
    SHOULDER,
    ELBOW,
    WRIST,
    HIP,
    KNEE,
    calculate_angle,
    clamp,
)
from pushtrack.pushups.rep_counter.thresholds import Thresholds

POSITION_UP = "Up"
POSITION_DOWN = "Down"


class Phase(str, Enum):
    """Half-cycle of a repetition."""
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class RepState:
    """State carried across frames."""
    phase: Phase = Phase.UP
    position: str = POSITION_UP


@dataclass(frozen=True)
class PostureClassification:
    is_back_straight: bool
    is_excellent: bool
    is_down_pose: bool
    is_up_pose: bool


@dataclass(frozen=True)
class Telemetry:
    """Live display values for an accepted frame."""
    elbow_angle: float
    back_angle: float
    bar_level: float
    position: str

    def to_dict(self) -> dict:
        return {
            "elbow_angle": self.elbow_angle,
            "back_angle": self.back_angle,
            "bar_level": self.bar_level,
            "position": self.position,
        }


@dataclass(frozen=True)
class CompletedRep:
    is_good: bool
    is_excellent: bool
    elbow_angle: float
    back_angle: float


@dataclass(frozen=True)
class FrameOutcome:
    state: RepState
    telemetry: Optional[Telemetry] = None
    rep: Optional[CompletedRep] = None
    rejected: bool = False


def classify_posture(elbow_angle: float, back_angle: float, thresholds: Thresholds) -> PostureClassification:
    """Classifies one frame from its elbow and back angles."""
    is_back_straight = back_angle > thresholds.back_straight_deg
    return PostureClassification(
        is_back_straight=is_back_straight,
        is_excellent=back_angle > thresholds.excellent_back_deg and elbow_angle < thresholds.excellent_elbow_deg,
        is_down_pose=elbow_angle < thresholds.down_elbow_deg and is_back_straight,
        is_up_pose=elbow_angle > thresholds.up_elbow_deg and is_back_straight,
    )


def calculate_bar_level(elbow_angle: float) -> float:
    """Normalized effort bar: 0 with straight arms, 1 at 90 degrees or deeper."""
    return clamp((180.0 - elbow_angle) / 90.0, 0.0, 1.0)


def _require_keypoints(frame: PoseFrame, thresholds: Thresholds) -> None:
    if frame is None:
        raise LowConfidenceFrame(-1)
    for index in REQUIRED_KEYPOINTS:
        kp = frame.get(index)
        if kp is None:
            raise LowConfidenceFrame(index)
        if kp.score < thresholds.min_confidence:
            raise LowConfidenceFrame(index, kp.score)


def extract_angles(frame: PoseFrame, thresholds: Thresholds) -> tuple:
    """Returns (elbow_angle, back_angle). Raises LowConfidenceFrame for unusable frames."""
    _require_keypoints(frame, thresholds)
    shoulder = frame.get(SHOULDER)
    elbow_angle = calculate_angle(shoulder, frame.get(ELBOW), frame.get(WRIST))
    back_angle = calculate_angle(shoulder, frame.get(HIP), frame.get(KNEE))
    if elbow_angle is None:
        raise LowConfidenceFrame(ELBOW)
    if back_angle is None:
        raise LowConfidenceFrame(HIP)
    return elbow_angle, back_angle


def process_frame(frame: Optional[PoseFrame], state: RepState, thresholds: Thresholds) -> FrameOutcome:
    """Advances the phase machine by one frame.

    UP + down pose -> DOWN. DOWN + up pose -> UP and one completed rep.
    Any other combination leaves the phase alone and only refreshes telemetry.
    Rejected frames return the input state untouched and no telemetry.
    """
    try:
        elbow_angle, back_angle = extract_angles(frame, thresholds)
    except LowConfidenceFrame as e:
        logging.debug(f"Frame rejected: {str(e)}")
        return FrameOutcome(state=state, rejected=True)

    posture = classify_posture(elbow_angle, back_angle, thresholds)

    position = state.position
    if posture.is_down_pose:
        position = POSITION_DOWN
    elif posture.is_up_pose:
        position = POSITION_UP

    rep = None
    if state.phase == Phase.UP and posture.is_down_pose:
        new_state = RepState(phase=Phase.DOWN, position=position)
    elif state.phase == Phase.DOWN and posture.is_up_pose:
        rep = CompletedRep(
            is_good=posture.is_back_straight,
            is_excellent=posture.is_excellent,
            elbow_angle=elbow_angle,
            back_angle=back_angle,
        )
        new_state = RepState(phase=Phase.UP, position=position)
    else:
        new_state = replace(state, position=position)

    telemetry = Telemetry(
        elbow_angle=elbow_angle,
        back_angle=back_angle,
        bar_level=calculate_bar_level(elbow_angle),
        position=position,
    )
    return FrameOutcome(state=new_state, telemetry=telemetry, rep=rep)
