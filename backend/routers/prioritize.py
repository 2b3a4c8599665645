"""
Task prioritization API endpoint.

Runs the configured prioritization strategy over the user's open tasks
and reports the priorities it changed.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from backend.dependencies import get_current_user_id, get_now, get_prioritization_strategy
from backend.schemas import PriorityChange, PrioritizeResponse
from tempo.productivity import PrioritizationStrategy

router = APIRouter(prefix="/prioritize", tags=["prioritize"])


@router.post("", response_model=PrioritizeResponse)
async def prioritize_tasks(
    user_id: str = Depends(get_current_user_id),
    strategy: PrioritizationStrategy = Depends(get_prioritization_strategy),
    now: datetime = Depends(get_now),
):
    """
    Re-prioritize open tasks.

    Overdue tasks become urgent, tasks due soon are raised, and
    work-category tasks are raised during work hours. Tasks whose
    priority is already right are left alone and not reported.
    """
    updates = strategy.prioritize(user_id, now)
    return PrioritizeResponse(
        message=f"Updated {len(updates)} task priorities",
        tasks=[PriorityChange(**u.to_dict()) for u in updates],
    )
