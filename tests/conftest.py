"""Shared fixtures: SQLite test database, API client, authenticated users and keypoint frames."""

import math
import os
import tempfile

# Must be set before any pushtrack module reads them at import time
_TEST_DB_DIR = tempfile.mkdtemp(prefix="pushtrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pushtrack")
os.environ["DISABLE_RATE_LIMIT"] = "1"

import pytest
from fastapi.testclient import TestClient

from pushtrack.app import app
from pushtrack.shared.auth.database import Base, engine, init_db
from pushtrack.pushups.live import session_manager
from pushtrack.pushups.rep_counter.geometry import PoseFrame
from pushtrack.shared.auth.rate_limit_utils import reset_rate_limits


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh tables, live sessions and rate limits for every test."""
    init_db()
    session_manager.clear_sessions()
    reset_rate_limits()
    yield
    session_manager.clear_sessions()
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


def _signup(client, email, display_name, password="correct-horse-42"):
    response = client.post("/api/auth/signup", json={
        "email": email,
        "password": password,
        "display_name": display_name,
    })
    assert response.status_code == 201, response.text
    client.cookies.clear()
    body = response.json()
    return {"user_id": body["user_id"], "headers": {"Authorization": f"Bearer {body['access_token']}"}}


@pytest.fixture
def signup():
    """Factory: signup(client, email, display_name) -> {user_id, headers}."""
    return _signup


@pytest.fixture
def athlete(client):
    return _signup(client, "athlete@pushtrack.app", "Athlete")


def build_frame(elbow_deg: float, back_deg: float, score: float = 0.9) -> PoseFrame:
    """Right-side keypoints arranged so the elbow and back angles come out as given."""
    shoulder = (100.0, 100.0)
    elbow = (100.0, 200.0)
    # Shoulder sits straight above the elbow; rotate the forearm away by elbow_deg
    forearm = math.radians(-90.0 + elbow_deg)
    wrist = (elbow[0] + 100.0 * math.cos(forearm), elbow[1] + 100.0 * math.sin(forearm))
    hip = (300.0, 100.0)
    thigh = math.radians(180.0 - back_deg)
    knee = (hip[0] + 200.0 * math.cos(thigh), hip[1] + 200.0 * math.sin(thigh))

    keypoints = [None] * 17
    for index, (x, y) in ((6, shoulder), (8, elbow), (10, wrist), (12, hip), (14, knee)):
        keypoints[index] = {"x": x, "y": y, "score": score}
    return PoseFrame.from_keypoints(keypoints)


@pytest.fixture
def make_frame():
    """Factory: make_frame(elbow_deg, back_deg, score=0.9) -> PoseFrame."""
    return build_frame


@pytest.fixture
def frame_payload():
    """Factory producing the JSON body for POST /frames."""
    def _payload(elbow_deg: float, back_deg: float, score: float = 0.9) -> dict:
        return {"keypoints": build_frame(elbow_deg, back_deg, score).to_dicts()}
    return _payload
