"""Tests for mapping MediaPipe landmarks onto the COCO-17 keypoint layout."""

from types import SimpleNamespace

import pytest

from pushtrack.shared.pose_estimation.pose_estimation import MEDIAPIPE_TO_COCO, landmarks_to_pose_frame
from pushtrack.pushups.rep_counter.geometry import KEYPOINT_NAMES


def fake_landmarks(count=33):
    # x encodes the MediaPipe index so the mapping can be checked
    return [SimpleNamespace(x=i / 100.0, y=0.5, z=0.0, visibility=0.8) for i in range(count)]


class TestLandmarksToPoseFrame:

    def test_maps_to_coco_order(self):
        frame = landmarks_to_pose_frame(fake_landmarks(), width=640, height=480)
        assert len(frame.keypoints) == 17
        assert [kp.name for kp in frame.keypoints] == KEYPOINT_NAMES
        right_elbow = frame.get(8)
        assert right_elbow.x == pytest.approx(MEDIAPIPE_TO_COCO[8] / 100.0 * 640)
        assert right_elbow.y == pytest.approx(240)

    def test_visibility_becomes_score(self):
        frame = landmarks_to_pose_frame(fake_landmarks(), width=100, height=100)
        assert all(kp.score == pytest.approx(0.8) for kp in frame.keypoints)

    def test_accepts_landmark_list_wrapper(self):
        wrapper = SimpleNamespace(landmark=fake_landmarks())
        assert landmarks_to_pose_frame(wrapper, 10, 10) is not None

    def test_no_person(self):
        assert landmarks_to_pose_frame(None, 640, 480) is None

    def test_too_few_landmarks(self):
        assert landmarks_to_pose_frame(fake_landmarks(20), 640, 480) is None

    def test_right_side_indices(self):
        # right shoulder, elbow, wrist, hip, knee in MediaPipe numbering
        assert [MEDIAPIPE_TO_COCO[i] for i in (6, 8, 10, 12, 14)] == [12, 14, 16, 24, 26]
