"""
Keypoint geometry for the pushup counter
Keypoint/PoseFrame types and joint angle calculation
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

# COCO-17 layout produced by the pose estimator
KEYPOINT_NAMES = [
    "nose", "left_eye", "right_eye", "left_ear", "right_ear",
    "left_shoulder", "right_shoulder", "left_elbow", "right_elbow",
    "left_wrist", "right_wrist", "left_hip", "right_hip",
    "left_knee", "right_knee", "left_ankle", "right_ankle",
]

# Right-side chain read by the counter
SHOULDER = 6
ELBOW = 8
WRIST = 10
HIP = 12
KNEE = 14
REQUIRED_KEYPOINTS = [SHOULDER, ELBOW, WRIST, HIP, KNEE]


@dataclass(frozen=True)
class Keypoint:
    """Single detected landmark in image pixel space."""
    name: str
    x: float
    y: float
    score: float


def _as_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_keypoint(index: int, kp) -> Optional[Keypoint]:
    if not isinstance(kp, dict):
        return None
    x = _as_number(kp.get("x"))
    y = _as_number(kp.get("y"))
    score = _as_number(kp.get("score"))
    if x is None or y is None or score is None:
        return None
    name = kp.get("name") or (KEYPOINT_NAMES[index] if index < len(KEYPOINT_NAMES) else str(index))
    return Keypoint(name=str(name), x=x, y=y, score=score)


@dataclass(frozen=True)
class PoseFrame:
    """Keypoints for one instant, indexed by skeletal layout position."""
    keypoints: tuple

    @classmethod
    def from_keypoints(cls, keypoints: List[dict]) -> "PoseFrame":
        """Builds a frame from the estimator's [{name, x, y, score}, ...] array.

        Entries that are not objects or lack a numeric x, y or score become None,
        so the confidence gate rejects the frame instead of raising.
        """
        return cls(keypoints=tuple(_parse_keypoint(i, kp) for i, kp in enumerate(keypoints)))

    def get(self, index: int) -> Optional[Keypoint]:
        if index < 0 or index >= len(self.keypoints):
            return None
        return self.keypoints[index]

    def to_dicts(self) -> List[Dict]:
        return [
            {"name": kp.name, "x": kp.x, "y": kp.y, "score": kp.score} if kp else None
            for kp in self.keypoints
        ]


def calculate_angle(a: Keypoint, b: Keypoint, c: Keypoint) -> Optional[float]:
    """Angle at b formed by a-b-c, in whole degrees (0-180). None when a segment has zero length."""
    ab = (a.x - b.x, a.y - b.y)
    cb = (c.x - b.x, c.y - b.y)
    mag_ab = math.hypot(*ab)
    mag_cb = math.hypot(*cb)
    if mag_ab == 0 or mag_cb == 0:
        return None
    cos_angle = (ab[0] * cb[0] + ab[1] * cb[1]) / (mag_ab * mag_cb)
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return float(round(math.degrees(math.acos(cos_angle))))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
