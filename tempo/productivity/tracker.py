"""
Daily aggregate maintenance.

ProductivityTracker keeps each user's row for the current day up to date:
counters are bumped when tasks are created or completed, and the derived
streak and score are recomputed from the stored counters on demand.
"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, List

from tempo.core.models import DailyStats
from tempo.core.repositories import DailyStatsRepository
from tempo.productivity.scoring import calculate_productivity_score
from tempo.productivity.streak import STREAK_LOOKBACK_DAYS, calculate_streak_days

logger = logging.getLogger(__name__)


class ProductivityTracker:
    """
    Maintains daily aggregates and their derived fields.

    The current day comes from `today_provider`, so timezone policy stays
    with whoever constructs the tracker. Persistence errors are never
    caught here; they propagate as PersistenceError.
    """

    def __init__(
        self,
        stats: DailyStatsRepository,
        today_provider: Callable[[], date]
    ):
        """
        Initialize tracker.

        Args:
            stats: Daily aggregate repository
            today_provider: Returns the current calendar day
        """
        self.stats = stats
        self.today_provider = today_provider

    def record_task_created(self, user_id: str) -> None:
        """Count a newly created task on today's row."""
        today = self.today_provider()
        self.stats.increment(user_id, today, 'tasks_created')
        logger.debug("Recorded task creation for %s on %s", user_id, today)

    def record_task_completed(self, user_id: str) -> None:
        """
        Count a completed task on today's row.

        Callers should follow up with recompute_derived() so the cached
        score reflects the new count.
        """
        today = self.today_provider()
        self.stats.increment(user_id, today, 'tasks_completed')
        logger.debug("Recorded task completion for %s on %s", user_id, today)

    def recompute_derived(self, user_id: str) -> DailyStats:
        """
        Recompute streak and productivity score for today's row.

        Creates today's row with zero counters if it does not exist yet.
        Derives everything from stored counters, so repeated calls without
        counter changes write identical values.

        Args:
            user_id: User whose aggregate to refresh

        Returns:
            Today's row with the freshly computed derived fields
        """
        today = self.today_provider()
        self.stats.ensure(user_id, today)

        todays = self.stats.get(user_id, today) or DailyStats(user_id=user_id, day=today)
        history = self.stats.recent(user_id, STREAK_LOOKBACK_DAYS)

        streak_days = calculate_streak_days(history, today)
        score = calculate_productivity_score(
            tasks_completed=todays.tasks_completed,
            tasks_created=todays.tasks_created,
            streak_days=streak_days,
            today_completed=todays.tasks_completed,
        )

        self.stats.set_derived(user_id, today, streak_days, score)
        logger.info(
            "Productivity for %s on %s: score=%d streak=%d",
            user_id, today, score, streak_days
        )

        return replace(todays, streak_days=streak_days, productivity_score=score)

    def current(self, user_id: str) -> DailyStats:
        """Today's row as stored, or an all-zero row if none exists yet."""
        today = self.today_provider()
        return self.stats.get(user_id, today) or DailyStats(user_id=user_id, day=today)

    def history(self, user_id: str, days: int = 7) -> List[DailyStats]:
        """
        Aggregate rows for the last `days` days including today, oldest first.

        Days without a row are simply absent.
        """
        start = self.today_provider() - timedelta(days=max(days, 1) - 1)
        return self.stats.since(user_id, start)
