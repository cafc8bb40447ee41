"""Pydantic schemas for the yoga pose API."""

from pydantic import BaseModel, Field
from typing import List


class YogaPoseResponse(BaseModel):
    id: str
    name: str
    full_name: str
    description: str
    difficulty: str
    duration: str
    image: str
    instructions: List[str]


class YogaPoseListResponse(BaseModel):
    poses: List[YogaPoseResponse]
    total: int


class LiveFrameRequest(BaseModel):
    """Webcam frame as a data URL or bare base64 JPEG."""
    frame: str = Field(..., min_length=1)
    # How long the user has been practicing this pose, for encouragement lines
    session_seconds: int = Field(0, ge=0)


class VoiceLine(BaseModel):
    text: str
    category: str  # correct, improve, neutral
    spoken: str


class PoseAnalysisResponse(BaseModel):
    pose_id: str
    score: float
    band: str  # excellent, good, needs_work
    feedback: List[str]
    pose_image: str
    voice_lines: List[VoiceLine]
    corrections: List[str]
    encouragement: str
