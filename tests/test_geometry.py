"""Tests for keypoint types and joint angle calculation."""

import pytest

from pushtrack.pushups.rep_counter.geometry import (
    Keypoint,
    PoseFrame,
    KEYPOINT_NAMES,
    calculate_angle,
    clamp,
)


def _kp(x, y, score=1.0):
    return Keypoint(name="p", x=x, y=y, score=score)


class TestCalculateAngle:

    def test_straight_line_is_180(self):
        assert calculate_angle(_kp(0, 0), _kp(1, 0), _kp(2, 0)) == 180.0

    def test_right_angle(self):
        assert calculate_angle(_kp(0, 0), _kp(0, 1), _kp(1, 1)) == 90.0

    def test_folded_back_is_zero(self):
        assert calculate_angle(_kp(2, 0), _kp(0, 0), _kp(1, 0)) == 0.0

    def test_rounded_to_whole_degrees(self):
        # atan(1/2) ~ 26.57 degrees
        angle = calculate_angle(_kp(2, 0), _kp(0, 0), _kp(2, 1))
        assert angle == 27.0
        assert angle == int(angle)

    def test_symmetric_in_outer_points(self):
        a, b, c = _kp(3, 1), _kp(0, 0), _kp(-1, 4)
        assert calculate_angle(a, b, c) == calculate_angle(c, b, a)

    def test_zero_length_segment_returns_none(self):
        assert calculate_angle(_kp(1, 1), _kp(1, 1), _kp(2, 2)) is None


class TestPoseFrame:

    def test_names_default_to_coco_layout(self):
        frame = PoseFrame.from_keypoints([{"x": 1, "y": 2, "score": 0.7}] * 17)
        assert [kp.name for kp in frame.keypoints] == KEYPOINT_NAMES

    def test_missing_points_stay_missing(self):
        frame = PoseFrame.from_keypoints([None, {"name": "left_eye", "x": 1, "y": 1, "score": 0.9}])
        assert frame.get(0) is None
        assert frame.get(1).name == "left_eye"

    def test_out_of_range_index(self):
        frame = PoseFrame.from_keypoints([])
        assert frame.get(6) is None
        assert frame.get(-1) is None

    @pytest.mark.parametrize("kp", [
        {"x": None, "y": 1, "score": 0.9},
        {"x": 1, "y": None, "score": 0.9},
        {"x": 1, "y": 1, "score": None},
        {"x": "left", "y": 1, "score": 0.9},
        {"y": 1, "score": 0.9},
        {"x": float("nan"), "y": 1, "score": 0.9},
        "right_shoulder",
    ])
    def test_malformed_point_reads_as_missing(self, kp):
        frame = PoseFrame.from_keypoints([kp])
        assert frame.get(0) is None

    def test_numeric_strings_accepted(self):
        kp = PoseFrame.from_keypoints([{"x": "3", "y": "4.5", "score": "0.8"}]).get(0)
        assert (kp.x, kp.y, kp.score) == (3.0, 4.5, 0.8)

    def test_to_dicts_keeps_gaps(self):
        frame = PoseFrame.from_keypoints([None, {"x": 3, "y": 4, "score": 0.5}])
        assert frame.to_dicts() == [None, {"name": "left_eye", "x": 3.0, "y": 4.0, "score": 0.5}]


@pytest.mark.parametrize("value,expected", [(-0.5, 0.0), (0.25, 0.25), (1.7, 1.0)])
def test_clamp(value, expected):
    assert clamp(value, 0.0, 1.0) == expected
