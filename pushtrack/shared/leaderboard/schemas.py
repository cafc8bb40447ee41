"""Pydantic schemas for the leaderboard API."""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class LeaderboardEntry(BaseModel):
    """One user's aggregated standing."""
    rank: int
    user_id: str
    display_name: str
    photo_url: Optional[str] = None
    total_reps: int
    good_reps: int
    excellent_reps: int
    sessions: int
    level: str  # Beginner, Intermediate, Pro
    last_recorded_at: datetime


class LeaderboardResponse(BaseModel):
    period: str
    search: Optional[str] = None
    entries: List[LeaderboardEntry]
    total: int  # Ranked users before search filtering
    my_entry: Optional[LeaderboardEntry] = None
    my_rank: int = 0  # 0 when the caller has no sessions in the period
