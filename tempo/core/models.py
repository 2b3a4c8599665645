"""
Data models for Tempo Planner
Defines core data structures for tasks, categories and daily aggregates
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Dict, Any, Union

TASK_STATUSES = ('todo', 'in_progress', 'completed')
MIN_PRIORITY = 1
MAX_PRIORITY = 4


def _parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse datetime value from database (SQLite gives str, PostgreSQL datetime)"""
    if isinstance(value, datetime):
        return value
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            return None
    return None


def _parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse calendar day from database"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value:
        try:
            return date.fromisoformat(str(value)[:10])
        except (ValueError, TypeError):
            return None
    return None


@dataclass
class Category:
    """User-owned task category"""
    id: Optional[int] = None
    user_id: str = ""
    name: str = ""
    color: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        """Create Category from database row dictionary"""
        return cls(
            id=data.get('id'),
            user_id=data.get('user_id', ''),
            name=data.get('name', ''),
            color=data.get('color'),
            created_at=_parse_datetime(data.get('created_at')),
        )


@dataclass
class Task:
    """Task data model"""
    id: Optional[int] = None
    user_id: str = ""
    title: str = ""
    description: Optional[str] = None
    status: str = "todo"  # 'todo', 'in_progress', 'completed'
    priority: int = 1  # 1-4, where 4 is urgent
    category_id: Optional[int] = None
    category_name: str = ""
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    time_spent: int = 0  # seconds
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        """Create Task from database row dictionary (category name joined in)"""
        return cls(
            id=data.get('id'),
            user_id=data.get('user_id', ''),
            title=data.get('title', ''),
            description=data.get('description'),
            status=data.get('status', 'todo'),
            priority=data.get('priority', 1),
            category_id=data.get('category_id'),
            category_name=data.get('category_name') or '',
            due_date=_parse_datetime(data.get('due_date')),
            completed_at=_parse_datetime(data.get('completed_at')),
            time_spent=data.get('time_spent') or 0,
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )

    def is_completed(self) -> bool:
        return self.status == 'completed'


@dataclass
class DailyStats:
    """
    Per-user, per-day aggregate row.

    The two counters only ever grow by one at a time; streak_days and
    productivity_score are recomputed wholesale from the counters.
    """
    user_id: str = ""
    day: Optional[date] = None
    tasks_completed: int = 0
    tasks_created: int = 0
    streak_days: int = 0
    productivity_score: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyStats':
        """Create DailyStats from database row dictionary"""
        return cls(
            user_id=data.get('user_id', ''),
            day=_parse_date(data.get('day')),
            tasks_completed=data.get('tasks_completed') or 0,
            tasks_created=data.get('tasks_created') or 0,
            streak_days=data.get('streak_days') or 0,
            productivity_score=data.get('productivity_score') or 0,
        )

    def is_qualifying(self) -> bool:
        """A qualifying day has at least one completed task."""
        return self.tasks_completed > 0


@dataclass(frozen=True)
class PriorityUpdate:
    """A priority change that was persisted onto a task."""
    task_id: int
    title: str
    old_priority: int
    new_priority: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.task_id,
            "title": self.title,
            "old_priority": self.old_priority,
            "new_priority": self.new_priority,
        }
