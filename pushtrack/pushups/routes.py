"""Pushup routes: live session lifecycle, history, progress and sharing.

Live sessions run the rep counter server-side. The client streams one
keypoint frame per tick (about 10 per second) to /frames and stops the
session to persist it.
"""

import logging
import math
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from pushtrack.shared.auth.database import get_db, User
from pushtrack.shared.auth.dependencies import get_current_user
from pushtrack.shared.coaching.voice_coach import generate_workout_summary
from pushtrack.shared.sharing.summary_card import build_share_text, build_whatsapp_url, render_summary_card
from pushtrack.pushups.database import save_session, query_sessions, get_session_record
from pushtrack.pushups.live import session_manager
from pushtrack.pushups.rep_counter.errors import InvalidConfiguration
from pushtrack.pushups.rep_counter.geometry import PoseFrame
from pushtrack.pushups.rep_counter.session import classify_level
from pushtrack.pushups.rep_counter.thresholds import Thresholds, load_thresholds_from_env
from pushtrack.pushups.schemas import (
    StartSessionRequest,
    StartSessionResponse,
    FrameRequest,
    FrameResponse,
    LiveSessionResponse,
    SessionRecordResponse,
    StopSessionResponse,
    HistoryResponse,
    ProgressResponse,
    DailyReps,
    ShareResponse,
)

router = APIRouter(prefix="/api/pushups", tags=["pushups"])


# Loaded once from PUSHUP_* at startup
_default_thresholds = None


def load_default_thresholds() -> Thresholds:
    """Reads the server-wide thresholds. Raises InvalidConfiguration on a bad environment."""
    global _default_thresholds
    _default_thresholds = load_thresholds_from_env()
    logging.info(f"Pushup thresholds loaded: {_default_thresholds.to_options()}")
    return _default_thresholds


def get_default_thresholds() -> Thresholds:
    """Dependency so deployments (and tests) can swap the default thresholds."""
    if _default_thresholds is None:
        return load_default_thresholds()
    return _default_thresholds


def _get_live_session_or_404(session_id: str, user: User) -> session_manager.LiveSession:
    live = session_manager.get_session(session_id, user_id=user.id)
    if live is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
    return live


def _build_live_response(live: session_manager.LiveSession) -> LiveSessionResponse:
    workout = live.workout
    return LiveSessionResponse(
        session_id=live.session_id,
        totals=workout.totals(),
        telemetry=workout.last_telemetry.to_dict() if workout.last_telemetry else None,
        last_feedback=workout.last_feedback or None,
    )


@router.post("/sessions", response_model=StartSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    request: StartSessionRequest = None,
    current_user: User = Depends(get_current_user),
    default_thresholds: Thresholds = Depends(get_default_thresholds),
):
    """Start a live pushup session. Counters start at zero and the phase at UP."""
    thresholds = default_thresholds
    if request is not None and request.thresholds:
        try:
            options = {**default_thresholds.to_options(), **request.thresholds}
            thresholds = Thresholds.from_options(options)
        except InvalidConfiguration as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "invalid_thresholds", "message": str(e)}
            )

    live = session_manager.create_session(current_user.id, thresholds)
    return StartSessionResponse(
        session_id=live.session_id,
        started_at=live.workout.start_time,
        thresholds=thresholds.to_options(),
    )


@router.post("/sessions/{session_id}/frames", response_model=FrameResponse)
async def submit_frame(
    session_id: str,
    frame_request: FrameRequest,
    current_user: User = Depends(get_current_user),
):
    """Run one tick of the rep counter on a keypoint frame."""
    live = _get_live_session_or_404(session_id, current_user)
    if not live.workout.active:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Session has been stopped"
        )

    frame = PoseFrame.from_keypoints([
        kp.model_dump() if kp is not None else None
        for kp in frame_request.keypoints
    ])
    with live.lock:
        result = live.workout.tick(frame)
        totals = live.workout.totals()

    return FrameResponse(
        accepted=not result.rejected,
        telemetry=result.telemetry.to_dict() if result.telemetry else None,
        rep_event=result.rep_event.to_dict() if result.rep_event else None,
        totals=totals,
    )


@router.get("/sessions/{session_id}", response_model=LiveSessionResponse)
async def get_live_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
):
    """Live totals and latest telemetry."""
    live = _get_live_session_or_404(session_id, current_user)
    return _build_live_response(live)


@router.post("/sessions/{session_id}/stop", response_model=StopSessionResponse)
async def stop_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Stop the session, persist it and release the live state."""
    live = _get_live_session_or_404(session_id, current_user)
    with live.lock:
        summary = live.workout.stop()

    # PersistenceError propagates to the app-level handler; the live session is kept so the client can retry
    record = save_session(db, current_user, summary)
    session_manager.cleanup_session(session_id)

    summary_text = generate_workout_summary(
        exercises=["Pushups"],
        duration_minutes=int(math.ceil(summary.duration_seconds / 60)) if summary.duration_seconds else 0,
        corrections=summary.reps - summary.good_reps,
    )
    return StopSessionResponse(
        record=SessionRecordResponse.model_validate(record),
        summary_text=summary_text,
    )


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Saved sessions for the current user, newest first."""
    records = query_sessions(db, user_id=current_user.id)
    return HistoryResponse(
        sessions=[SessionRecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Totals, best session and a per-day reps trend for the current user."""
    records = query_sessions(db, user_id=current_user.id)
    total_reps = sum(r.reps for r in records)

    daily = defaultdict(lambda: {"reps": 0, "good_reps": 0, "excellent_reps": 0})
    for record in records:
        day = daily[record.start_time.date().isoformat()]
        day["reps"] += record.reps
        day["good_reps"] += record.good_reps
        day["excellent_reps"] += record.excellent_reps

    return ProgressResponse(
        total_sessions=len(records),
        total_reps=total_reps,
        good_reps=sum(r.good_reps for r in records),
        excellent_reps=sum(r.excellent_reps for r in records),
        best_session_reps=max((r.reps for r in records), default=None),
        total_duration_seconds=sum(r.duration_seconds for r in records),
        level=classify_level(total_reps),
        reps_trend=[DailyReps(date=date, **values) for date, values in sorted(daily.items())],
    )


def _get_record_or_404(db: Session, record_id: str, user: User):
    record = get_session_record(db, record_id, user.id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session record not found"
        )
    return record


@router.get("/records/{record_id}/share", response_model=ShareResponse)
async def share_record(
    record_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Share text and WhatsApp link for a saved session."""
    record = _get_record_or_404(db, record_id, current_user)
    text = build_share_text(current_user.display_name, record.reps, record.good_reps, record.excellent_reps)
    logging.info(f"Share link generated for session {record.id}")
    return ShareResponse(
        text=text,
        whatsapp_url=build_whatsapp_url(text),
        image_url=f"/api/pushups/records/{record.id}/summary.png",
    )


@router.get("/records/{record_id}/summary.png")
async def summary_card(
    record_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """PNG summary card for a saved session."""
    record = _get_record_or_404(db, record_id, current_user)
    png = render_summary_card(
        current_user.display_name,
        record.reps,
        record.good_reps,
        record.excellent_reps,
        record.pro_type,
    )
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": 'inline; filename="pushup-summary.png"'},
    )
