"""
Productivity API endpoints.

Exposes today's aggregate, the short history used by the dashboard
chart, and an explicit recalculation trigger.
"""

from typing import List

from fastapi import APIRouter, Depends

from backend.dependencies import get_config, get_current_user_id, get_tracker
from backend.schemas import DailyStatsResponse, ProductivityPoint, RecalculateResponse
from tempo.core.config import Config
from tempo.core.models import DailyStats
from tempo.productivity import ProductivityTracker

router = APIRouter(prefix="/productivity", tags=["productivity"])


def _stats_to_response(stats: DailyStats) -> DailyStatsResponse:
    return DailyStatsResponse(
        day=stats.day.isoformat() if stats.day else "",
        tasks_completed=stats.tasks_completed,
        tasks_created=stats.tasks_created,
        streak_days=stats.streak_days,
        productivity_score=stats.productivity_score,
    )


@router.post("/recalculate", response_model=RecalculateResponse)
async def recalculate_productivity(
    user_id: str = Depends(get_current_user_id),
    tracker: ProductivityTracker = Depends(get_tracker),
):
    """
    Recompute today's streak and productivity score.

    Safe to call at any time; the result depends only on stored counters.
    """
    stats = tracker.recompute_derived(user_id)
    return RecalculateResponse(
        message="productivity score recalculated successfully",
        stats=_stats_to_response(stats),
    )


@router.get("/today", response_model=DailyStatsResponse)
async def get_today(
    user_id: str = Depends(get_current_user_id),
    tracker: ProductivityTracker = Depends(get_tracker),
):
    """Today's stored aggregate (all zeros if nothing happened yet)."""
    return _stats_to_response(tracker.current(user_id))


@router.get("/history", response_model=List[ProductivityPoint])
async def get_history(
    user_id: str = Depends(get_current_user_id),
    tracker: ProductivityTracker = Depends(get_tracker),
    config: Config = Depends(get_config),
):
    """Chart data for the last week (configurable via 'history_days')."""
    days = config.get("history_days", "preferences", 7)
    return [
        ProductivityPoint(
            date=stats.day.strftime("%a"),
            day=stats.day.isoformat(),
            completed=stats.tasks_completed,
            created=stats.tasks_created,
            score=stats.productivity_score,
        )
        for stats in tracker.history(user_id, days)
    ]
