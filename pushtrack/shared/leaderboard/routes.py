"""Leaderboard routes - ranks users by total pushups in a period."""

import logging
from typing import Iterable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from pushtrack.shared.auth.database import get_db, User
from pushtrack.shared.auth.dependencies import get_current_user
from pushtrack.shared.auth.input_validation import validate_search_query
from pushtrack.pushups.database import WorkoutSessionRecord, query_sessions, PERIODS, PERIOD_ALL
from pushtrack.pushups.rep_counter.session import classify_level
from pushtrack.shared.leaderboard.schemas import LeaderboardEntry, LeaderboardResponse

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


def aggregate_leaderboard(records: Iterable[WorkoutSessionRecord]) -> List[LeaderboardEntry]:
    """
    Sums sessions per user and ranks by total reps, highest first.
    Ties keep the order of the most recent session.
    """
    by_user = {}
    for record in records:
        entry = by_user.get(record.user_id)
        if entry is None:
            entry = {
                "user_id": record.user_id,
                "display_name": record.display_name or "Anonymous",
                "photo_url": record.photo_url,
                "total_reps": 0,
                "good_reps": 0,
                "excellent_reps": 0,
                "sessions": 0,
                "last_recorded_at": record.recorded_at,
            }
            by_user[record.user_id] = entry
        entry["total_reps"] += record.reps
        entry["good_reps"] += record.good_reps
        entry["excellent_reps"] += record.excellent_reps
        entry["sessions"] += 1
        # Name and photo follow the latest session
        if record.recorded_at >= entry["last_recorded_at"]:
            entry["last_recorded_at"] = record.recorded_at
            entry["display_name"] = record.display_name or "Anonymous"
            entry["photo_url"] = record.photo_url

    ranked = sorted(
        by_user.values(),
        key=lambda e: (-e["total_reps"], -e["last_recorded_at"].timestamp())
    )
    return [
        LeaderboardEntry(rank=i + 1, level=classify_level(e["total_reps"]), **e)
        for i, e in enumerate(ranked)
    ]


def filter_by_name(entries: List[LeaderboardEntry], search: Optional[str]) -> List[LeaderboardEntry]:
    """Case-insensitive display-name filter. Ranks are left untouched."""
    if not search:
        return entries
    needle = search.lower()
    return [e for e in entries if needle in e.display_name.lower()]


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    period: str = Query(PERIOD_ALL),
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Leaderboard for all time, the last 7 days, or today."""
    if period not in PERIODS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid period. Must be one of: {', '.join(PERIODS)}"
        )
    if search:
        search = validate_search_query(search)

    records = query_sessions(db, period=period)
    ranked = aggregate_leaderboard(records)
    my_entry = next((e for e in ranked if e.user_id == current_user.id), None)
    entries = filter_by_name(ranked, search)[:limit]

    logging.info(f"Leaderboard ({period}) served to user {current_user.id}: {len(ranked)} ranked users")
    return LeaderboardResponse(
        period=period,
        search=search or None,
        entries=entries,
        total=len(ranked),
        my_entry=my_entry,
        my_rank=my_entry.rank if my_entry else 0,
    )
