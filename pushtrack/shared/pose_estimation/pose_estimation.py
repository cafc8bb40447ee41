"""
Pose estimation component - shared by the pushup counter and frame sources
Detects body keypoints from camera/video frames and maps them to the COCO-17 layout
"""

import logging
from typing import Iterator, Optional, Protocol

from pushtrack.pushups.rep_counter.geometry import KEYPOINT_NAMES, PoseFrame
from pushtrack.shared.errors import FrameSourceError

# MediaPipe Pose landmark index for each COCO-17 keypoint
MEDIAPIPE_TO_COCO = [0, 2, 5, 7, 8, 11, 12, 13, 14, 15, 16, 23, 24, 25, 26, 27, 28]


class PoseEstimator(Protocol):
    """Returns the keypoints found in one image, or None when no person is detected."""

    def estimate(self, image) -> Optional[PoseFrame]:
        ...


def landmarks_to_pose_frame(landmarks, width: int, height: int) -> Optional[PoseFrame]:
    """Converts normalized MediaPipe landmarks to a pixel-space COCO-17 PoseFrame. Visibility becomes the score."""
    if not landmarks:
        return None
    points = landmarks.landmark if hasattr(landmarks, "landmark") else landmarks
    if len(points) <= max(MEDIAPIPE_TO_COCO):
        return None
    keypoints = []
    for name, mp_index in zip(KEYPOINT_NAMES, MEDIAPIPE_TO_COCO):
        lm = points[mp_index]
        keypoints.append({
            "name": name,
            "x": lm.x * width,
            "y": lm.y * height,
            "score": float(getattr(lm, "visibility", 0.0) or 0.0),
        })
    return PoseFrame.from_keypoints(keypoints)


class MediaPipePoseEstimator:
    """MediaPipe Pose wrapper. Expects BGR frames as produced by OpenCV."""

    def __init__(self, min_detection_confidence: float = 0.5, min_tracking_confidence: float = 0.5):
        import mediapipe as mp
        self._pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            enable_segmentation=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def estimate(self, image) -> Optional[PoseFrame]:
        import cv2
        height, width = image.shape[:2]
        rgb_frame = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        result = self._pose.process(rgb_frame)
        return landmarks_to_pose_frame(result.pose_landmarks, width, height)

    def close(self) -> None:
        self._pose.close()


def stream_pose_frames(video_path: str, estimator: PoseEstimator = None, frame_skip: int = 1) -> Iterator[Optional[PoseFrame]]:
    """
    Streaming version: yields one PoseFrame (or None) per processed video frame.
    Never keeps decoded frames in memory - each is processed and discarded immediately.
    """
    import cv2
    owns_estimator = estimator is None
    estimator = estimator or MediaPipePoseEstimator()

    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        if owns_estimator:
            estimator.close()
        raise FrameSourceError(f"Could not open video: {video_path}")

    frame_index = 0
    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break
            # Only process every Nth frame if downsampling
            if frame_index % frame_skip == 0:
                yield estimator.estimate(frame)
            frame_index += 1
    finally:
        cap.release()
        if owns_estimator:
            estimator.close()
    logging.info(f"Processed {frame_index} frames from {video_path}")
