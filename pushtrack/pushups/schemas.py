"""Pydantic schemas for the pushup session API."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime


class KeypointIn(BaseModel):
    """One estimator keypoint, in image pixel space."""
    name: Optional[str] = None
    x: float
    y: float
    score: float = Field(..., ge=0.0, le=1.0)


class StartSessionRequest(BaseModel):
    """Optional threshold overrides, keyed by option name (backStraightDeg, upElbowDeg, ...)."""
    thresholds: Optional[Dict[str, float]] = None


class StartSessionResponse(BaseModel):
    session_id: str
    started_at: datetime
    thresholds: Dict[str, float]


class FrameRequest(BaseModel):
    """Keypoints for one frame, indexed by the COCO-17 layout. Nulls mark undetected points."""
    keypoints: List[Optional[KeypointIn]]


class TelemetryResponse(BaseModel):
    elbow_angle: float
    back_angle: float
    bar_level: float
    position: str


class RepEventResponse(BaseModel):
    rep_number: int
    is_good: bool
    is_excellent: bool
    feedback_text: str
    announce: bool


class SessionTotals(BaseModel):
    total_reps: int
    good_reps: int
    excellent_reps: int
    elapsed_seconds: int
    phase: str
    active: bool


class FrameResponse(BaseModel):
    accepted: bool
    telemetry: Optional[TelemetryResponse] = None
    rep_event: Optional[RepEventResponse] = None
    totals: SessionTotals


class LiveSessionResponse(BaseModel):
    session_id: str
    totals: SessionTotals
    telemetry: Optional[TelemetryResponse] = None
    last_feedback: Optional[str] = None


class SessionRecordResponse(BaseModel):
    id: str
    reps: int
    good_reps: int
    excellent_reps: int
    pro_type: str
    start_time: datetime
    duration_seconds: int
    recorded_at: datetime

    class Config:
        from_attributes = True


class StopSessionResponse(BaseModel):
    record: SessionRecordResponse
    summary_text: str


class HistoryResponse(BaseModel):
    sessions: List[SessionRecordResponse]
    total: int


class DailyReps(BaseModel):
    date: str
    reps: int
    good_reps: int
    excellent_reps: int


class ProgressResponse(BaseModel):
    total_sessions: int
    total_reps: int
    good_reps: int
    excellent_reps: int
    best_session_reps: Optional[int] = None
    total_duration_seconds: int
    level: str
    reps_trend: List[DailyReps]


class ShareResponse(BaseModel):
    text: str
    whatsapp_url: str
    image_url: str
