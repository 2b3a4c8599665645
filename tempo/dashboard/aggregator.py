"""
Data aggregation for the Tempo Planner dashboard.

Combines a user's tasks, categories and latest daily aggregate into one
DashboardData structure. Streak and score are read from the cached
aggregate row, never recomputed here.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List

from tempo.core.models import Category, Task
from tempo.core.repositories import CategoryRepository, DailyStatsRepository, TaskRepository


@dataclass
class DashboardStats:
    """Headline numbers for the dashboard."""
    total_tasks: int = 0
    completed: int = 0
    in_progress: int = 0
    todo: int = 0
    today_completed: int = 0
    streak_days: int = 0
    productivity_score: int = 0


@dataclass
class DashboardData:
    """Complete dashboard data structure."""
    generated_at: datetime
    day: date
    stats: DashboardStats
    tasks: List[Task] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)


def start_of_day(now: datetime) -> datetime:
    """Midnight of now's calendar day, in now's timezone."""
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


def completed_since(task: Task, since: datetime) -> bool:
    """True if the task was completed at or after `since`."""
    completed_at = task.completed_at
    if completed_at is None:
        return False
    if completed_at.tzinfo is None and since.tzinfo is not None:
        completed_at = completed_at.replace(tzinfo=since.tzinfo)
    elif completed_at.tzinfo is not None and since.tzinfo is None:
        since = since.replace(tzinfo=completed_at.tzinfo)
    return completed_at >= since


class DashboardAggregator:
    """
    Central data aggregation for the dashboard.

    Reads through the repositories only; nothing is written.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        categories: CategoryRepository,
        stats: DailyStatsRepository
    ):
        self.tasks = tasks
        self.categories = categories
        self.stats = stats

    def get_stats(self, user_id: str, tasks: List[Task], now: datetime) -> DashboardStats:
        """
        Count tasks by status and pick up streak/score from the latest row.

        Args:
            user_id: Owner of the tasks
            tasks: All of the user's tasks
            now: Current time; completions since its midnight count as today's
        """
        today_start = start_of_day(now)
        latest = self.stats.latest(user_id)

        return DashboardStats(
            total_tasks=len(tasks),
            completed=sum(1 for t in tasks if t.status == 'completed'),
            in_progress=sum(1 for t in tasks if t.status == 'in_progress'),
            todo=sum(1 for t in tasks if t.status == 'todo'),
            today_completed=sum(1 for t in tasks if completed_since(t, today_start)),
            streak_days=latest.streak_days if latest else 0,
            productivity_score=latest.productivity_score if latest else 0,
        )

    def aggregate(self, user_id: str, now: datetime) -> DashboardData:
        tasks = self.tasks.list_for_user(user_id)
        return DashboardData(
            generated_at=now,
            day=now.date(),
            stats=self.get_stats(user_id, tasks, now),
            tasks=tasks,
            categories=self.categories.list_for_user(user_id),
        )
