"""
Repositories over the database layer.

Each repository owns the SQL for one table and hands back model objects.
Every statement runs on its own connection, so there are no long-lived
references to rows; concurrent writers are serialised by the database
itself (counter updates are single upsert statements).
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from .database import Database
from .models import Category, DailyStats, Task


def _to_db_value(value: Any) -> Any:
    """
    Dates and datetimes are stored as ISO-8601 text.

    Aware datetimes are converted to UTC first, so text order is time
    order whatever offset the client sent.
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).isoformat()
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class CategoryRepository:
    """Read/write access to the categories table."""

    def __init__(self, db: Database):
        self.db = db

    def list_for_user(self, user_id: str) -> List[Category]:
        rows = self.db.execute(
            "SELECT * FROM categories WHERE user_id = ? ORDER BY name ASC",
            (user_id,)
        )
        return [Category.from_dict(r) for r in rows]

    def get(self, user_id: str, category_id: int) -> Optional[Category]:
        row = self.db.execute_one(
            "SELECT * FROM categories WHERE id = ? AND user_id = ?",
            (category_id, user_id)
        )
        return Category.from_dict(row) if row else None

    def create(self, user_id: str, name: str, color: Optional[str] = None) -> Category:
        category_id = self.db.execute_write(
            "INSERT INTO categories (user_id, name, color) VALUES (?, ?, ?)",
            (user_id, name, color)
        )
        return self.get(user_id, category_id)


class TaskRepository:
    """Read/write access to the tasks table."""

    # Columns an update may touch
    UPDATABLE_COLUMNS = (
        'title', 'description', 'status', 'priority', 'category_id',
        'due_date', 'completed_at', 'time_spent',
    )

    _SELECT = """
        SELECT t.*, c.name AS category_name
        FROM tasks t
        JOIN categories c ON c.id = t.category_id
    """

    def __init__(self, db: Database):
        self.db = db

    def list_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        category_id: Optional[int] = None
    ) -> List[Task]:
        """
        List a user's tasks, most urgent first.

        Ordered by priority (desc), due date (asc, undated last), then
        creation time (newest first).
        """
        query = self._SELECT + " WHERE t.user_id = ?"
        params: List[Any] = [user_id]

        if status:
            query += " AND t.status = ?"
            params.append(status)
        if category_id is not None:
            query += " AND t.category_id = ?"
            params.append(category_id)

        query += " ORDER BY t.priority DESC, t.due_date IS NULL, t.due_date ASC, t.created_at DESC"

        rows = self.db.execute(query, tuple(params))
        return [Task.from_dict(r) for r in rows]

    def list_open(self, user_id: str) -> List[Task]:
        """All tasks of the user that are not completed, newest first."""
        rows = self.db.execute(
            self._SELECT + """
            WHERE t.user_id = ? AND t.status != 'completed'
            ORDER BY t.created_at DESC, t.id DESC
            """,
            (user_id,)
        )
        return [Task.from_dict(r) for r in rows]

    def get(self, user_id: str, task_id: int) -> Optional[Task]:
        row = self.db.execute_one(
            self._SELECT + " WHERE t.id = ? AND t.user_id = ?",
            (task_id, user_id)
        )
        return Task.from_dict(row) if row else None

    def create(
        self,
        user_id: str,
        title: str,
        category_id: int,
        description: Optional[str] = None,
        priority: int = 1,
        due_date: Optional[datetime] = None
    ) -> int:
        """Insert a new 'todo' task and return its id."""
        return self.db.execute_write(
            """
            INSERT INTO tasks (user_id, title, description, status, priority, category_id, due_date)
            VALUES (?, ?, ?, 'todo', ?, ?, ?)
            """,
            (user_id, title, description, priority, category_id, _to_db_value(due_date))
        )

    def update(self, task_id: int, fields: Dict[str, Any]) -> int:
        """
        Update the given columns of a task.

        Args:
            task_id: Task to update
            fields: Column -> value; unknown columns raise ValueError

        Returns:
            Number of rows changed
        """
        unknown = set(fields) - set(self.UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update task columns: {sorted(unknown)}")
        if not fields:
            return 0

        columns = sorted(fields)
        assignments = ", ".join(f"{col} = ?" for col in columns)
        params = tuple(_to_db_value(fields[col]) for col in columns) + (task_id,)

        return self.db.execute_write(
            f"UPDATE tasks SET {assignments} WHERE id = ?",
            params
        )

    def set_priority(self, task_id: int, priority: int) -> None:
        self.db.execute_write(
            "UPDATE tasks SET priority = ? WHERE id = ?",
            (priority, task_id)
        )

    def add_time_spent(self, user_id: str, task_id: int, seconds: int) -> bool:
        """
        Atomically add `seconds` to a task's time_spent.

        Returns:
            False if the user has no such task
        """
        changed = self.db.execute_write(
            "UPDATE tasks SET time_spent = time_spent + ? WHERE id = ? AND user_id = ?",
            (seconds, task_id, user_id)
        )
        return changed > 0

    def delete(self, user_id: str, task_id: int) -> bool:
        deleted = self.db.execute_write(
            "DELETE FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id)
        )
        return deleted > 0

    def list_user_ids(self) -> List[str]:
        """Every user that owns at least one task."""
        rows = self.db.execute("SELECT DISTINCT user_id FROM tasks ORDER BY user_id")
        return [r['user_id'] for r in rows]


class DailyStatsRepository:
    """
    Read/write access to the daily_stats aggregate table.

    Days are passed in already truncated; this class never looks at a clock.
    """

    COUNTERS = ('tasks_created', 'tasks_completed')

    def __init__(self, db: Database):
        self.db = db

    def get(self, user_id: str, day: date) -> Optional[DailyStats]:
        row = self.db.execute_one(
            "SELECT * FROM daily_stats WHERE user_id = ? AND day = ?",
            (user_id, day.isoformat())
        )
        return DailyStats.from_dict(row) if row else None

    def latest(self, user_id: str) -> Optional[DailyStats]:
        """The user's most recent row, whatever day it is for."""
        rows = self.recent(user_id, 1)
        return rows[0] if rows else None

    def recent(self, user_id: str, limit: int) -> List[DailyStats]:
        """The newest `limit` rows for the user, newest first."""
        rows = self.db.execute(
            """
            SELECT * FROM daily_stats
            WHERE user_id = ?
            ORDER BY day DESC
            LIMIT ?
            """,
            (user_id, limit)
        )
        return [DailyStats.from_dict(r) for r in rows]

    def since(self, user_id: str, start_day: date) -> List[DailyStats]:
        """Rows on or after start_day, oldest first."""
        rows = self.db.execute(
            """
            SELECT * FROM daily_stats
            WHERE user_id = ? AND day >= ?
            ORDER BY day ASC
            """,
            (user_id, start_day.isoformat())
        )
        return [DailyStats.from_dict(r) for r in rows]

    def ensure(self, user_id: str, day: date) -> None:
        """Create the row for (user_id, day) with zero counters if absent."""
        self.db.execute_write(
            """
            INSERT INTO daily_stats (user_id, day)
            VALUES (?, ?)
            ON CONFLICT (user_id, day) DO NOTHING
            """,
            (user_id, day.isoformat())
        )

    def increment(self, user_id: str, day: date, counter: str) -> None:
        """
        Atomically add one to a counter, creating the row if needed.

        A single upsert statement, so concurrent increments for the same
        user and day cannot lose updates.
        """
        if counter not in self.COUNTERS:
            raise ValueError(f"Unknown daily counter: {counter}")

        self.db.execute_write(
            f"""
            INSERT INTO daily_stats (user_id, day, {counter})
            VALUES (?, ?, 1)
            ON CONFLICT (user_id, day) DO UPDATE
            SET {counter} = daily_stats.{counter} + 1,
                updated_at = CURRENT_TIMESTAMP
            """,
            (user_id, day.isoformat())
        )

    def set_derived(
        self,
        user_id: str,
        day: date,
        streak_days: int,
        productivity_score: int
    ) -> int:
        return self.db.execute_write(
            """
            UPDATE daily_stats
            SET streak_days = ?, productivity_score = ?, updated_at = CURRENT_TIMESTAMP
            WHERE user_id = ? AND day = ?
            """,
            (streak_days, productivity_score, user_id, day.isoformat())
        )
