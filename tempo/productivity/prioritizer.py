"""
Task re-prioritization.

The heuristic strategy raises task priorities from due-date urgency and
work-hours/category signals:
    - Overdue: 4 (always)
    - Due within 1 day: at least 3
    - Due within 3 days: at least 2
    - Work-related category during work hours: at least 2

Only tasks whose priority actually changes are written back and reported.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple, Type

from tempo.core.config import Config
from tempo.core.errors import PersistenceError
from tempo.core.models import MAX_PRIORITY, MIN_PRIORITY, PriorityUpdate, Task
from tempo.core.repositories import TaskRepository

logger = logging.getLogger(__name__)

URGENT_PRIORITY = 4
HIGH_PRIORITY = 3
MEDIUM_PRIORITY = 2

DEFAULT_WORK_HOURS = (9, 17)
DEFAULT_WORK_KEYWORDS = ("work", "professional", "business", "project")

ONE_DAY = timedelta(days=1)


def days_until_due(due_date: datetime, now: datetime) -> float:
    """
    Fractional days from now until due_date (negative when overdue).

    A naive datetime is taken to be in the other operand's timezone.
    """
    if due_date.tzinfo is None and now.tzinfo is not None:
        due_date = due_date.replace(tzinfo=now.tzinfo)
    elif due_date.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=due_date.tzinfo)
    return (due_date - now) / ONE_DAY


def is_work_category(category_name: str, keywords: Sequence[str]) -> bool:
    name = (category_name or "").lower()
    return any(keyword in name for keyword in keywords)


def compute_priority(
    task: Task,
    now: datetime,
    work_hours: Tuple[int, int] = DEFAULT_WORK_HOURS,
    work_keywords: Sequence[str] = DEFAULT_WORK_KEYWORDS
) -> int:
    """
    Compute the priority a task should have at `now`.

    Args:
        task: Task to evaluate (priority, due_date, category_name are read)
        now: Current time; its hour decides the work-hours rule
        work_hours: Inclusive (start_hour, end_hour)
        work_keywords: Lower-case category name fragments for work tasks

    Returns:
        New priority between 1 and 4
    """
    new_priority = task.priority

    if task.due_date is not None:
        days = days_until_due(task.due_date, now)

        if days < 0:
            # Overdue always wins, even over a manually lowered priority
            new_priority = URGENT_PRIORITY
        elif days <= 1:
            new_priority = max(new_priority, HIGH_PRIORITY)
        elif days <= 3:
            new_priority = max(new_priority, MEDIUM_PRIORITY)

    start_hour, end_hour = work_hours
    if start_hour <= now.hour <= end_hour and is_work_category(task.category_name, work_keywords):
        new_priority = max(new_priority, MEDIUM_PRIORITY)

    assert MIN_PRIORITY <= new_priority <= MAX_PRIORITY, (
        f"priority {new_priority} out of range for task {task.id}"
    )
    return new_priority


class PrioritizationStrategy(ABC):
    """
    A way of re-ranking a user's open tasks.

    Implementations persist the priorities they change and return one
    PriorityUpdate per persisted change.
    """

    name: str = ""

    @abstractmethod
    def prioritize(self, user_id: str, now: datetime) -> List[PriorityUpdate]:
        pass


class HeuristicPrioritizer(PrioritizationStrategy):
    """
    Deterministic rule-based prioritizer.

    Same tasks and same `now` always give the same result; no external
    services are involved.
    """

    name = "heuristic"

    def __init__(self, tasks: TaskRepository, config: Optional[Config] = None):
        """
        Initialize prioritizer.

        Args:
            tasks: Task repository used to read open tasks and write priorities
            config: Supplies work hours and work keywords (defaults otherwise)
        """
        self.tasks = tasks
        if config is not None:
            self.work_hours = config.get_work_hours()
            self.work_keywords = tuple(config.get_work_keywords())
        else:
            self.work_hours = DEFAULT_WORK_HOURS
            self.work_keywords = DEFAULT_WORK_KEYWORDS

    def plan(self, tasks: Sequence[Task], now: datetime) -> List[PriorityUpdate]:
        """Compute the changes for `tasks` without writing anything."""
        updates = []
        for task in tasks:
            new_priority = compute_priority(task, now, self.work_hours, self.work_keywords)
            if new_priority != task.priority:
                updates.append(PriorityUpdate(
                    task_id=task.id,
                    title=task.title,
                    old_priority=task.priority,
                    new_priority=new_priority,
                ))
        return updates

    def prioritize(self, user_id: str, now: datetime) -> List[PriorityUpdate]:
        """
        Re-prioritize every open task of the user.

        Each change is written on its own. A failed write is logged and
        left out of the result; the remaining tasks are still attempted.

        Args:
            user_id: Owner of the tasks
            now: Current time in the user's timezone

        Returns:
            The priority changes that were persisted
        """
        open_tasks = self.tasks.list_open(user_id)
        if not open_tasks:
            return []

        applied = []
        for update in self.plan(open_tasks, now):
            try:
                self.tasks.set_priority(update.task_id, update.new_priority)
            except PersistenceError as e:
                logger.error("Failed to update priority of task %s: %s", update.task_id, e)
                continue
            applied.append(update)

        logger.info("Updated %d of %d task priorities for %s", len(applied), len(open_tasks), user_id)
        return applied


PRIORITIZERS: Dict[str, Type[PrioritizationStrategy]] = {
    HeuristicPrioritizer.name: HeuristicPrioritizer,
}


def get_prioritizer(
    name: str,
    tasks: TaskRepository,
    config: Optional[Config] = None
) -> PrioritizationStrategy:
    """
    Build the registered prioritization strategy called `name`.

    Raises:
        ValueError: If no strategy is registered under that name
    """
    try:
        strategy_cls = PRIORITIZERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown prioritizer '{name}'. Available: {', '.join(sorted(PRIORITIZERS))}"
        ) from None
    return strategy_cls(tasks, config)
