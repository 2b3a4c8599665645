"""
Dashboard summary API endpoint.

Returns the user's tasks, categories and headline counts in one call,
built by the DashboardAggregator.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from backend.dependencies import get_current_user_id, get_dashboard_aggregator, get_now
from backend.routers.tasks import _task_to_response
from backend.schemas import CategoryResponse, DashboardResponse, DashboardStatsResponse
from tempo.dashboard import DashboardAggregator

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    now: datetime = Depends(get_now),
):
    """
    Get the dashboard summary.

    Includes:
    - All tasks, highest priority and soonest due first
    - The user's categories
    - Counts by status, plus tasks completed since midnight
    - Streak and score from the most recent aggregate row
    """
    data = aggregator.aggregate(user_id, now)

    return DashboardResponse(
        generated_at=data.generated_at.isoformat(),
        tasks=[_task_to_response(t) for t in data.tasks],
        categories=[
            CategoryResponse(id=c.id, name=c.name, color=c.color)
            for c in data.categories
        ],
        stats=DashboardStatsResponse.model_validate(data.stats),
    )
