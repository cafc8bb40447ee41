"""Tests for the live pushup session API, history, progress and sharing."""

import pytest
from fastapi.testclient import TestClient

from pushtrack.pushups import routes as pushup_routes
from pushtrack.pushups.rep_counter.errors import InvalidConfiguration
from pushtrack.pushups.routes import get_default_thresholds
from pushtrack.pushups.rep_counter.thresholds import Thresholds
from pushtrack.shared.errors import PersistenceError
from pushtrack.app import app


def start(client, headers, **body):
    response = client.post("/api/pushups/sessions", headers=headers, json=body or None)
    assert response.status_code == 201, response.text
    return response.json()["session_id"]


def post_frame(client, headers, session_id, payload):
    return client.post(f"/api/pushups/sessions/{session_id}/frames", headers=headers, json=payload)


def do_reps(client, headers, session_id, frame_payload, count, top_back=150):
    for _ in range(count):
        post_frame(client, headers, session_id, frame_payload(90, 150))
        post_frame(client, headers, session_id, frame_payload(160, top_back))


class TestStartSession:

    def test_requires_auth(self, client):
        assert client.post("/api/pushups/sessions").status_code == 401

    def test_default_thresholds(self, client, athlete):
        response = client.post("/api/pushups/sessions", headers=athlete["headers"])
        assert response.status_code == 201
        body = response.json()
        assert body["session_id"]
        assert body["thresholds"]["downElbowDeg"] == 110
        assert body["thresholds"]["upElbowDeg"] == 140

    def test_threshold_override(self, client, athlete):
        response = client.post("/api/pushups/sessions", headers=athlete["headers"], json={
            "thresholds": {"upElbowDeg": 150},
        })
        assert response.status_code == 201
        assert response.json()["thresholds"]["upElbowDeg"] == 150
        assert response.json()["thresholds"]["downElbowDeg"] == 110

    @pytest.mark.parametrize("thresholds", [
        {"downElbowDeg": 150},
        {"hipDeg": 120},
        {"backStraightDeg": 170},
    ])
    def test_invalid_thresholds(self, client, athlete, thresholds):
        response = client.post("/api/pushups/sessions", headers=athlete["headers"], json={"thresholds": thresholds})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_thresholds"

    def test_server_default_thresholds_can_be_swapped(self, client, athlete, frame_payload):
        app.dependency_overrides[get_default_thresholds] = lambda: Thresholds(down_elbow_deg=80, up_elbow_deg=150)
        session_id = start(client, athlete["headers"])
        body = post_frame(client, athlete["headers"], session_id, frame_payload(90, 150)).json()
        assert body["totals"]["phase"] == "up"


class TestFrames:

    def test_down_then_up_counts_rep(self, client, athlete, frame_payload):
        session_id = start(client, athlete["headers"])

        down = post_frame(client, athlete["headers"], session_id, frame_payload(90, 150)).json()
        assert down["accepted"]
        assert down["rep_event"] is None
        assert down["telemetry"]["position"] == "Down"
        assert down["telemetry"]["bar_level"] == 1.0
        assert down["totals"]["phase"] == "down"

        up = post_frame(client, athlete["headers"], session_id, frame_payload(160, 170)).json()
        event = up["rep_event"]
        assert event["rep_number"] == 1
        assert event["is_good"] and not event["is_excellent"]
        assert event["feedback_text"].startswith("Good posture.")
        assert event["announce"]
        assert up["totals"]["total_reps"] == 1
        assert up["totals"]["excellent_reps"] == 0

    def test_excellent_rep_with_lenient_thresholds(self, client, athlete, frame_payload):
        session_id = start(client, athlete["headers"], thresholds={"excellentElbowDeg": 170})
        post_frame(client, athlete["headers"], session_id, frame_payload(90, 150))
        up = post_frame(client, athlete["headers"], session_id, frame_payload(160, 170)).json()
        assert up["rep_event"]["is_excellent"]
        assert up["rep_event"]["feedback_text"].startswith("Excellent form.")
        assert up["totals"]["excellent_reps"] == 1

    def test_low_confidence_frame_not_accepted(self, client, athlete, frame_payload):
        session_id = start(client, athlete["headers"])
        body = post_frame(client, athlete["headers"], session_id, frame_payload(90, 150, score=0.3)).json()
        assert body["accepted"] is False
        assert body["telemetry"] is None
        assert body["totals"]["phase"] == "up"

    def test_score_out_of_range_is_validation_error(self, client, athlete, frame_payload):
        session_id = start(client, athlete["headers"])
        payload = frame_payload(90, 150)
        payload["keypoints"][6]["score"] = 1.5
        assert post_frame(client, athlete["headers"], session_id, payload).status_code == 422

    def test_unknown_session(self, client, athlete, frame_payload):
        response = post_frame(client, athlete["headers"], "missing", frame_payload(90, 150))
        assert response.status_code == 404

    def test_other_users_session_is_hidden(self, client, athlete, signup, frame_payload):
        session_id = start(client, athlete["headers"])
        rival = signup(client, "rival@pushtrack.app", "Rival")
        assert post_frame(client, rival["headers"], session_id, frame_payload(90, 150)).status_code == 404
        assert client.get(f"/api/pushups/sessions/{session_id}", headers=rival["headers"]).status_code == 404

    def test_live_status(self, client, athlete, frame_payload):
        session_id = start(client, athlete["headers"])
        do_reps(client, athlete["headers"], session_id, frame_payload, 2)
        body = client.get(f"/api/pushups/sessions/{session_id}", headers=athlete["headers"]).json()
        assert body["totals"]["total_reps"] == 2
        assert body["telemetry"]["position"] == "Up"
        assert body["last_feedback"].endswith("2 pushups.")


class TestStopSession:

    def test_stop_persists_and_removes_live_session(self, client, athlete, frame_payload):
        headers = athlete["headers"]
        session_id = start(client, headers)
        do_reps(client, headers, session_id, frame_payload, 3)

        response = client.post(f"/api/pushups/sessions/{session_id}/stop", headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["record"]["reps"] == 3
        assert body["record"]["good_reps"] == 3
        assert body["record"]["pro_type"] == "Beginner"
        assert body["summary_text"].startswith("Great workout!")

        assert client.get(f"/api/pushups/sessions/{session_id}", headers=headers).status_code == 404
        history = client.get("/api/pushups/history", headers=headers).json()
        assert history["total"] == 1
        assert history["sessions"][0]["id"] == body["record"]["id"]

    def test_storage_failure_keeps_session(self, client, athlete, frame_payload, monkeypatch):
        def failing_save(db, user, summary):
            raise PersistenceError("Failed to save workout session")

        monkeypatch.setattr(pushup_routes, "save_session", failing_save)
        headers = athlete["headers"]
        session_id = start(client, headers)

        response = client.post(f"/api/pushups/sessions/{session_id}/stop", headers=headers)
        assert response.status_code == 503
        assert response.json()["error"] == "storage_unavailable"

        # Still registered so the stop can be retried, but no longer counting
        assert client.get(f"/api/pushups/sessions/{session_id}", headers=headers).status_code == 200
        assert post_frame(client, headers, session_id, frame_payload(90, 150)).status_code == 409


class TestHistoryAndProgress:

    def test_history_newest_first(self, client, athlete, frame_payload):
        headers = athlete["headers"]
        for reps in (2, 5):
            session_id = start(client, headers)
            do_reps(client, headers, session_id, frame_payload, reps)
            client.post(f"/api/pushups/sessions/{session_id}/stop", headers=headers)

        sessions = client.get("/api/pushups/history", headers=headers).json()["sessions"]
        assert [s["reps"] for s in sessions] == [5, 2]

    def test_progress(self, client, athlete, frame_payload):
        headers = athlete["headers"]
        for reps in (4, 8):
            session_id = start(client, headers)
            do_reps(client, headers, session_id, frame_payload, reps, top_back=170)
            client.post(f"/api/pushups/sessions/{session_id}/stop", headers=headers)

        body = client.get("/api/pushups/progress", headers=headers).json()
        assert body["total_sessions"] == 2
        assert body["total_reps"] == 12
        assert body["good_reps"] == 12
        assert body["excellent_reps"] == 0
        assert body["best_session_reps"] == 8
        assert body["level"] == "Intermediate"
        assert sum(day["reps"] for day in body["reps_trend"]) == 12

    def test_progress_without_sessions(self, client, athlete):
        body = client.get("/api/pushups/progress", headers=athlete["headers"]).json()
        assert body["total_sessions"] == 0
        assert body["best_session_reps"] is None
        assert body["level"] == "Beginner"
        assert body["reps_trend"] == []


class TestSharing:

    def _saved_record(self, client, headers, frame_payload):
        session_id = start(client, headers)
        do_reps(client, headers, session_id, frame_payload, 5)
        return client.post(f"/api/pushups/sessions/{session_id}/stop", headers=headers).json()["record"]["id"]

    def test_share_links(self, client, athlete, frame_payload):
        record_id = self._saved_record(client, athlete["headers"], frame_payload)
        body = client.get(f"/api/pushups/records/{record_id}/share", headers=athlete["headers"]).json()
        assert "Athlete did 5 push-ups!" in body["text"]
        assert body["whatsapp_url"].startswith("https://wa.me/?text=")
        assert body["image_url"] == f"/api/pushups/records/{record_id}/summary.png"

    def test_summary_png(self, client, athlete, frame_payload):
        record_id = self._saved_record(client, athlete["headers"], frame_payload)
        response = client.get(f"/api/pushups/records/{record_id}/summary.png", headers=athlete["headers"])
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_other_users_record_not_found(self, client, athlete, signup, frame_payload):
        record_id = self._saved_record(client, athlete["headers"], frame_payload)
        rival = signup(client, "rival@pushtrack.app", "Rival")
        assert client.get(f"/api/pushups/records/{record_id}/share", headers=rival["headers"]).status_code == 404


class TestStartupThresholds:

    @pytest.fixture(autouse=True)
    def restore_defaults(self, monkeypatch):
        monkeypatch.setattr(pushup_routes, "_default_thresholds", None)

    def test_invalid_environment_aborts_startup(self, monkeypatch):
        monkeypatch.setenv("PUSHUP_DOWN_ELBOW_DEG", "150")
        with pytest.raises(InvalidConfiguration):
            with TestClient(app):
                pass

    def test_environment_read_once_at_startup(self, monkeypatch, signup):
        monkeypatch.setenv("PUSHUP_UP_ELBOW_DEG", "150")
        with TestClient(app) as client:
            user = signup(client, "env@pushtrack.app", "Env")
            monkeypatch.delenv("PUSHUP_UP_ELBOW_DEG")
            body = client.post("/api/pushups/sessions", headers=user["headers"]).json()
        assert body["thresholds"]["upElbowDeg"] == 150
