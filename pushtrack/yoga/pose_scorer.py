"""
Client for the external yoga pose scoring API
The API grades a still image or a webcam frame against a named pose
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Protocol

import requests

from pushtrack.shared.errors import PoseScorerError

POSE_SCORER_URL = os.environ.get("POSE_SCORER_URL", "http://127.0.0.1:8000")
POSE_SCORER_TIMEOUT = float(os.environ.get("POSE_SCORER_TIMEOUT", "10"))


@dataclass
class PoseScore:
    score: float
    feedback: List[str] = field(default_factory=list)
    pose_image: str = ""  # base64 JPEG with the skeleton drawn on


class PoseScorer(Protocol):
    def score_image(self, pose_name: str, image_bytes: bytes, filename: str = "frame.jpg") -> PoseScore:
        ...

    def score_frame(self, pose_name: str, frame_data: str) -> PoseScore:
        ...


def parse_score_response(data: dict) -> PoseScore:
    """Validates the scoring API body: {score, feedback, pose_image}."""
    if not isinstance(data, dict) or "score" not in data:
        raise PoseScorerError("Scoring API response is missing a score")
    try:
        score = float(data["score"])
    except (TypeError, ValueError):
        raise PoseScorerError(f"Scoring API returned a non-numeric score: {data['score']!r}")
    feedback = data.get("feedback") or []
    if isinstance(feedback, str):
        feedback = [feedback]
    return PoseScore(
        score=max(0.0, min(100.0, score)),
        feedback=[str(line) for line in feedback],
        pose_image=data.get("pose_image") or "",
    )


class HttpPoseScorer:
    """Talks to the scoring API over HTTP (/analyze-pose/ and /analyze-live-frame/)."""

    def __init__(self, base_url: str = None, timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or POSE_SCORER_URL).rstrip("/")
        self.timeout = timeout or POSE_SCORER_TIMEOUT
        self.session = session or requests.Session()

    def _post(self, path: str, **kwargs) -> PoseScore:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logging.error(f"Pose scoring request to {url} failed: {str(e)}")
            raise PoseScorerError("Pose scoring service is unavailable") from e

        if response.status_code != 200:
            logging.warning(f"Pose scoring API returned {response.status_code}: {response.text[:200]}")
            raise PoseScorerError(
                f"Pose scoring service returned {response.status_code}",
                status_code=response.status_code
            )
        try:
            data = response.json()
        except ValueError as e:
            raise PoseScorerError("Pose scoring service returned invalid JSON") from e
        return parse_score_response(data)

    def score_image(self, pose_name: str, image_bytes: bytes, filename: str = "frame.jpg") -> PoseScore:
        return self._post(
            "/analyze-pose/",
            files={"file": (filename, image_bytes)},
            data={"pose_name": pose_name},
        )

    def score_frame(self, pose_name: str, frame_data: str) -> PoseScore:
        return self._post(
            "/analyze-live-frame/",
            json={"frame": frame_data, "pose_name": pose_name},
        )


def get_pose_scorer() -> PoseScorer:
    """FastAPI dependency; tests override it with a fake scorer."""
    return HttpPoseScorer()
