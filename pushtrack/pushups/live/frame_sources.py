"""
Frame sources for the session ticker
Replay of recorded keypoint fixtures and live camera capture
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from pushtrack.pushups.rep_counter.geometry import PoseFrame
from pushtrack.shared.errors import FrameSourceError


class FrameSource(Protocol):
    """Provides the most recently estimated frame, or None if there is nothing new."""

    def latest_frame(self) -> Optional[PoseFrame]:
        ...


class KeypointReplaySource:
    """Replays a fixed list of frames, one per call. Returns None once exhausted."""

    def __init__(self, frames: List[Optional[PoseFrame]]):
        self._frames = list(frames)
        self._position = 0

    @classmethod
    def from_keypoint_lists(cls, keypoint_lists: List[Optional[list]]) -> "KeypointReplaySource":
        """Entries that are not keypoint lists replay as dropped frames."""
        return cls([PoseFrame.from_keypoints(kps) if isinstance(kps, list) else None for kps in keypoint_lists])

    @classmethod
    def from_file(cls, path) -> "KeypointReplaySource":
        """Loads a fixture: a JSON list of frames, each a list of {name, x, y, score} (or null)."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FrameSourceError(f"Could not read keypoint fixture {path}: {str(e)}")
        if isinstance(data, dict):
            data = data.get("frames", [])
        if not isinstance(data, list):
            raise FrameSourceError(f"Keypoint fixture {path} must contain a list of frames")
        return cls.from_keypoint_lists(data)

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def latest_frame(self) -> Optional[PoseFrame]:
        if self.exhausted:
            return None
        frame = self._frames[self._position]
        self._position += 1
        return frame


class VideoFrameSource:
    """Decodes a recorded video and yields one estimated frame per call. Returns None once the video ends."""

    def __init__(self, video_path: str, estimator=None, frame_skip: int = 1):
        from pushtrack.shared.pose_estimation.pose_estimation import stream_pose_frames
        self.video_path = video_path
        self._frames = stream_pose_frames(video_path, estimator=estimator, frame_skip=frame_skip)
        self.exhausted = False

    def latest_frame(self) -> Optional[PoseFrame]:
        if self.exhausted:
            return None
        try:
            return next(self._frames)
        except StopIteration:
            self.exhausted = True
            return None

    def close(self) -> None:
        self._frames.close()
        self.exhausted = True


class CameraFrameSource:
    """Reads the camera with OpenCV and runs pose estimation on each grabbed frame."""

    def __init__(self, camera_index: int = 0, estimator=None):
        import cv2
        from pushtrack.shared.pose_estimation.pose_estimation import MediaPipePoseEstimator
        self._cap = cv2.VideoCapture(camera_index)
        if not self._cap.isOpened():
            raise FrameSourceError(f"Could not open camera {camera_index}")
        self._estimator = estimator or MediaPipePoseEstimator()
        self._owns_estimator = estimator is None

    def latest_frame(self) -> Optional[PoseFrame]:
        ret, image = self._cap.read()
        if not ret:
            raise FrameSourceError("Camera returned no frame")
        return self._estimator.estimate(image)

    def close(self) -> None:
        self._cap.release()
        if self._owns_estimator:
            self._estimator.close()
        logging.info("Camera frame source closed")
