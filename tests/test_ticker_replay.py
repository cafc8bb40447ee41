"""Tests for keypoint replay sources and the fixed-cadence session ticker."""

import json
from datetime import datetime
from pathlib import Path

import pytest

from pushtrack.pushups.live.frame_sources import KeypointReplaySource, VideoFrameSource
from pushtrack.pushups.live.ticker import SessionTicker, simulated_clock
from pushtrack.pushups.rep_counter.feedback import CyclingPhraseProvider
from pushtrack.pushups.rep_counter.session import WorkoutSession
from pushtrack.shared.errors import FrameSourceError

FIXTURE = Path(__file__).parent / "fixtures" / "two_pushups.json"
T0 = datetime(2024, 5, 1, 8, 0, 0)


class TestKeypointReplaySource:

    def test_loads_fixture(self):
        source = KeypointReplaySource.from_file(FIXTURE)
        assert len(source) == 13
        first = source.latest_frame()
        assert first.get(6).name == "right_shoulder"

    def test_returns_none_when_exhausted(self, make_frame):
        source = KeypointReplaySource([make_frame(160, 150)])
        assert source.latest_frame() is not None
        assert source.exhausted
        assert source.latest_frame() is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FrameSourceError):
            KeypointReplaySource.from_file(tmp_path / "nope.json")

    def test_malformed_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(FrameSourceError):
            KeypointReplaySource.from_file(bad)

    def test_wrong_shape(self, tmp_path):
        bad = tmp_path / "shape.json"
        bad.write_text('{"frames": 3}')
        with pytest.raises(FrameSourceError):
            KeypointReplaySource.from_file(bad)


class TestSessionTicker:

    def _ticker(self, source):
        session = WorkoutSession(phrase_provider=CyclingPhraseProvider())
        sleeps = []
        ticker = SessionTicker(
            session,
            source,
            interval_seconds=0.1,
            sleep=sleeps.append,
            clock=simulated_clock(T0, 0.1),
        )
        return ticker, session, sleeps

    def test_replays_fixture_to_completion(self):
        ticker, session, sleeps = self._ticker(KeypointReplaySource.from_file(FIXTURE))
        results = []
        ticker.subscribe(results.append)

        ticks = ticker.run()

        assert ticks == 13
        assert len(results) == 13
        assert sleeps == [0.1] * 13
        events = [r.rep_event for r in results if r.rep_event]
        assert [e.rep_number for e in events] == [1, 2]
        assert all(e.is_good and not e.is_excellent for e in events)
        assert [i for i, r in enumerate(results) if r.rejected] == [7, 8]
        assert (session.total_reps, session.good_reps, session.excellent_reps) == (2, 2, 0)
        assert session.elapsed_seconds == 1

    def test_malformed_keypoints_are_rejected_not_raised(self, tmp_path):
        data = json.loads(FIXTURE.read_text())
        data["frames"][2][6]["x"] = None
        data["frames"][4] = "garbage"
        patched = tmp_path / "patched.json"
        patched.write_text(json.dumps(data))

        ticker, session, _ = self._ticker(KeypointReplaySource.from_file(patched))
        results = []
        ticker.subscribe(results.append)

        assert ticker.run() == 13
        assert [i for i, r in enumerate(results) if r.rejected] == [2, 4, 7, 8]
        assert session.total_reps == 2

    def test_sagging_frame_only_updates_telemetry(self):
        ticker, _, _ = self._ticker(KeypointReplaySource.from_file(FIXTURE))
        results = []
        ticker.subscribe(results.append)
        ticker.run()
        # Frame 12 has a sagging back: telemetry updates, label stays "Up" from the previous frame
        assert results[11].telemetry.back_angle == 120
        assert results[11].telemetry.position == "Up"

    def test_max_ticks(self, make_frame):
        ticker, _, _ = self._ticker(KeypointReplaySource([make_frame(160, 150)] * 10))
        assert ticker.run(max_ticks=4) == 4
        assert ticker.tick_count == 4

    def test_stops_when_session_stopped(self, make_frame):
        ticker, session, _ = self._ticker(KeypointReplaySource([make_frame(160, 150)] * 10))
        ticker.subscribe(lambda result: session.stop() if ticker.tick_count == 3 else None)
        assert ticker.run() == 3
        assert not session.active

    def test_frame_source_errors_propagate(self):
        class BrokenCamera:
            def latest_frame(self):
                raise FrameSourceError("camera unplugged")

        ticker, _, _ = self._ticker(BrokenCamera())
        with pytest.raises(FrameSourceError):
            ticker.run(max_ticks=1)


def test_simulated_clock_advances_per_call():
    clock = simulated_clock(T0, 0.5)
    assert clock() == T0
    assert (clock() - T0).total_seconds() == 0.5


class TestVideoFrameSource:

    def test_unreadable_video_raises(self, tmp_path):
        class NoPersonEstimator:
            def estimate(self, image):
                return None

        source = VideoFrameSource(str(tmp_path / "missing.mp4"), estimator=NoPersonEstimator())
        with pytest.raises(FrameSourceError):
            source.latest_frame()
