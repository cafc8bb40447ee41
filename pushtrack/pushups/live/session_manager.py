"""
Manages live pushup sessions and their state
One in-memory registry per process, keyed by session id
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Dict, List, Optional

from pushtrack.pushups.rep_counter.feedback import PhraseProvider
from pushtrack.pushups.rep_counter.session import WorkoutSession
from pushtrack.pushups.rep_counter.thresholds import Thresholds


@dataclass
class LiveSession:
    session_id: str
    user_id: str
    workout: WorkoutSession
    created_at: datetime = field(default_factory=datetime.utcnow)
    # Guards the workout against concurrent frame posts for the same session
    lock: Lock = field(default_factory=Lock, repr=False)


_sessions: Dict[str, LiveSession] = {}
_sessions_lock = Lock()


def create_session(user_id: str, thresholds: Thresholds, phrase_provider: PhraseProvider = None) -> LiveSession:
    """Creates and starts a new live session for a user."""
    workout = WorkoutSession(thresholds=thresholds, phrase_provider=phrase_provider)
    workout.start()
    live = LiveSession(session_id=str(uuid.uuid4()), user_id=user_id, workout=workout)
    with _sessions_lock:
        _sessions[live.session_id] = live
    logging.info(f"Live session {live.session_id} created for user {user_id}")
    return live


def get_session(session_id: str, user_id: str = None) -> Optional[LiveSession]:
    """Retrieves a live session. Sessions owned by another user are reported as missing."""
    with _sessions_lock:
        live = _sessions.get(session_id)
    if live is None:
        return None
    if user_id is not None and live.user_id != user_id:
        return None
    return live


def cleanup_session(session_id: str) -> bool:
    """Removes a live session. Returns True if it existed."""
    with _sessions_lock:
        removed = _sessions.pop(session_id, None)
    if removed is not None:
        logging.info(f"Live session {session_id} removed")
    return removed is not None


def get_active_sessions(user_id: str = None) -> List[str]:
    with _sessions_lock:
        return [
            sid for sid, live in _sessions.items()
            if user_id is None or live.user_id == user_id
        ]


def clear_sessions() -> None:
    with _sessions_lock:
        _sessions.clear()
