"""Yoga routes - pose catalog and scoring through the external pose scoring API."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File

from pushtrack.shared.auth.database import User
from pushtrack.shared.auth.dependencies import get_current_user
from pushtrack.shared.coaching.voice_coach import (
    CATEGORY_IMPROVE,
    build_voice_lines,
    generate_motivational_message,
    generate_voice_correction,
)
from pushtrack.yoga.image_utils import validate_image_file, validate_frame_data
from pushtrack.yoga.pose_scorer import PoseScore, PoseScorer, get_pose_scorer
from pushtrack.yoga.poses import correction_severity, get_pose, list_poses, score_band
from pushtrack.yoga.schemas import (
    YogaPoseResponse,
    YogaPoseListResponse,
    LiveFrameRequest,
    PoseAnalysisResponse,
)

router = APIRouter(prefix="/api/yoga", tags=["yoga"])


def _get_pose_or_404(pose_id: str) -> dict:
    pose = get_pose(pose_id)
    if pose is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown yoga pose: {pose_id}"
        )
    return pose


def _as_instruction(spoken: str) -> str:
    return spoken[:1].lower() + spoken[1:]


def _build_analysis(pose: dict, result: PoseScore, session_seconds: int = 0) -> PoseAnalysisResponse:
    band = score_band(result.score)
    voice_lines = build_voice_lines(result.feedback)
    severity = correction_severity(result.score)
    corrections = [
        generate_voice_correction(pose["name"], _as_instruction(line["spoken"]), severity)
        for line in voice_lines
        if line["category"] == CATEGORY_IMPROVE and line["spoken"]
    ]
    achievements = [f"A score of {result.score:.0f}"] if band == "excellent" else []
    return PoseAnalysisResponse(
        pose_id=pose["id"],
        score=result.score,
        band=band,
        feedback=result.feedback,
        pose_image=result.pose_image,
        voice_lines=voice_lines,
        corrections=corrections,
        encouragement=generate_motivational_message(pose["name"], session_seconds // 60, achievements),
    )


@router.get("/poses", response_model=YogaPoseListResponse)
async def get_poses():
    poses = list_poses()
    return YogaPoseListResponse(poses=poses, total=len(poses))


@router.get("/poses/{pose_id}", response_model=YogaPoseResponse)
async def get_pose_detail(pose_id: str):
    return _get_pose_or_404(pose_id)


@router.post("/poses/{pose_id}/analyze", response_model=PoseAnalysisResponse)
def analyze_pose_image(
    pose_id: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    scorer: PoseScorer = Depends(get_pose_scorer),
):
    """Score an uploaded photo against the pose."""
    pose = _get_pose_or_404(pose_id)
    validate_image_file(file)
    image_bytes = file.file.read()

    # PoseScorerError is mapped to 502 by the app-level handler
    result = scorer.score_image(pose["name"], image_bytes, filename=file.filename or "pose.jpg")
    logging.info(f"Yoga pose {pose['id']} scored {result.score:.0f} for user {current_user.id}")
    return _build_analysis(pose, result)


@router.post("/poses/{pose_id}/analyze-frame", response_model=PoseAnalysisResponse)
def analyze_pose_frame(
    pose_id: str,
    frame_request: LiveFrameRequest,
    current_user: User = Depends(get_current_user),
    scorer: PoseScorer = Depends(get_pose_scorer),
):
    """Score a webcam frame against the pose."""
    pose = _get_pose_or_404(pose_id)
    frame_data = validate_frame_data(frame_request.frame)

    result = scorer.score_frame(pose["name"], frame_data)
    logging.debug(f"Yoga live frame for {pose['id']} scored {result.score:.0f}")
    return _build_analysis(pose, result, session_seconds=frame_request.session_seconds)
