"""Database model and queries for saved pushup sessions."""

import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Index
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

# Same declarative base as the users table
from pushtrack.shared.auth.database import Base, User
from pushtrack.pushups.rep_counter.session import SessionSummary
from pushtrack.shared.errors import PersistenceError

PERIOD_ALL = "all"
PERIOD_WEEK = "week"
PERIOD_TODAY = "today"
PERIODS = (PERIOD_ALL, PERIOD_WEEK, PERIOD_TODAY)


class WorkoutSessionRecord(Base):
    """Finished pushup session."""
    __tablename__ = "workout_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Snapshot of the profile at save time, shown on the leaderboard
    display_name = Column(String, nullable=False, default="Anonymous")
    photo_url = Column(String, nullable=True)
    reps = Column(Integer, nullable=False, default=0)
    good_reps = Column(Integer, nullable=False, default=0)
    excellent_reps = Column(Integer, nullable=False, default=0)
    pro_type = Column(String, nullable=False)  # Beginner, Intermediate, Pro
    start_time = Column(DateTime, nullable=False)
    duration_seconds = Column(Integer, nullable=False, default=0)
    recorded_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    __table_args__ = (
        Index('idx_workout_sessions_user_recorded', 'user_id', 'recorded_at'),
    )


def save_session(db: Session, user: User, summary: SessionSummary) -> WorkoutSessionRecord:
    """Persists a stopped session. Raises PersistenceError on database failure."""
    record = WorkoutSessionRecord(
        user_id=user.id,
        display_name=user.display_name or "Anonymous",
        photo_url=user.photo_url,
        reps=summary.reps,
        good_reps=summary.good_reps,
        excellent_reps=summary.excellent_reps,
        pro_type=summary.pro_type,
        start_time=summary.start_time,
        duration_seconds=summary.duration_seconds,
        recorded_at=summary.recorded_at,
    )
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save workout session for user {user.id}: {str(e)}")
        raise PersistenceError("Failed to save workout session") from e
    logging.info(f"Saved workout session {record.id} for user {user.id} ({record.reps} reps)")
    return record


def period_start(period: str, now: datetime = None) -> Optional[datetime]:
    """Earliest recorded_at included by a leaderboard period, None for all time."""
    now = now or datetime.utcnow()
    if period == PERIOD_TODAY:
        return datetime(now.year, now.month, now.day)
    if period == PERIOD_WEEK:
        return now - timedelta(days=7)
    return None


def query_sessions(db: Session, user_id: str = None, period: str = PERIOD_ALL, now: datetime = None) -> List[WorkoutSessionRecord]:
    """Saved sessions, newest first, optionally for one user and/or within a period."""
    if period not in PERIODS:
        raise ValueError(f"Invalid period: {period}. Must be one of {', '.join(PERIODS)}")
    try:
        query = db.query(WorkoutSessionRecord)
        if user_id is not None:
            query = query.filter(WorkoutSessionRecord.user_id == user_id)
        since = period_start(period, now)
        if since is not None:
            query = query.filter(WorkoutSessionRecord.recorded_at >= since)
        return query.order_by(WorkoutSessionRecord.recorded_at.desc()).all()
    except SQLAlchemyError as e:
        logging.error(f"Failed to query workout sessions: {str(e)}")
        raise PersistenceError("Failed to load workout sessions") from e


def get_session_record(db: Session, record_id: str, user_id: str) -> Optional[WorkoutSessionRecord]:
    return db.query(WorkoutSessionRecord).filter(
        WorkoutSessionRecord.id == record_id,
        WorkoutSessionRecord.user_id == user_id
    ).first()
