"""
Unit tests for the repositories module.
Tests category, task and daily aggregate persistence against the real
SQLite schema.
"""

import pytest
from datetime import date, datetime, timedelta, timezone

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from tempo.core.database import SQLiteDatabase
from tempo.core.errors import PersistenceError
from tempo.core.repositories import CategoryRepository, DailyStatsRepository, TaskRepository
from tempo.core.schema import create_sqlite_schema

USER = "user-1"
OTHER = "user-2"
DAY = date(2026, 3, 15)


@pytest.fixture
def db(tmp_path):
    db_file = tmp_path / "tempo.db"
    create_sqlite_schema(db_file)
    return SQLiteDatabase(db_file)


@pytest.fixture
def categories(db):
    return CategoryRepository(db)


@pytest.fixture
def tasks(db):
    return TaskRepository(db)


@pytest.fixture
def stats(db):
    return DailyStatsRepository(db)


@pytest.fixture
def category_id(categories):
    return categories.create(USER, "Work", "#3366ff").id


class TestCategoryRepository:
    """Tests for CategoryRepository."""

    def test_create_and_list(self, categories):
        categories.create(USER, "Personal")
        categories.create(USER, "Errands")
        categories.create(OTHER, "Hobby")

        names = [c.name for c in categories.list_for_user(USER)]
        assert names == ["Errands", "Personal"]

    def test_get_is_scoped_to_owner(self, categories, category_id):
        """Another user's category is invisible."""
        assert categories.get(USER, category_id).color == "#3366ff"
        assert categories.get(OTHER, category_id) is None

    def test_duplicate_name_violates_constraint(self, categories, category_id):
        with pytest.raises(PersistenceError):
            categories.create(USER, "Work")


class TestTaskRepository:
    """Tests for TaskRepository."""

    def test_create_defaults(self, tasks, category_id):
        """New tasks start as 'todo' with the category name joined in."""
        task_id = tasks.create(USER, "Write report", category_id)

        task = tasks.get(USER, task_id)
        assert task.status == "todo"
        assert task.priority == 1
        assert task.category_name == "Work"
        assert task.completed_at is None
        assert task.created_at is not None

    def test_due_date_round_trips(self, tasks, category_id):
        due = datetime(2026, 3, 20, 17, 0)
        task_id = tasks.create(USER, "Ship it", category_id, due_date=due)

        assert tasks.get(USER, task_id).due_date == due

    def test_list_order(self, tasks, category_id):
        """Priority desc, then due date asc with undated tasks last."""
        low = tasks.create(USER, "low", category_id, priority=1)
        undated = tasks.create(USER, "undated", category_id, priority=3)
        later = tasks.create(USER, "later", category_id, priority=3,
                             due_date=datetime(2026, 3, 20))
        sooner = tasks.create(USER, "sooner", category_id, priority=3,
                              due_date=datetime(2026, 3, 16))

        ids = [t.id for t in tasks.list_for_user(USER)]
        assert ids == [sooner, later, undated, low]

    def test_list_filters(self, tasks, categories, category_id):
        other_category = categories.create(USER, "Home").id
        work = tasks.create(USER, "work", category_id)
        home = tasks.create(USER, "home", other_category)
        tasks.update(home, {"status": "in_progress"})

        assert [t.id for t in tasks.list_for_user(USER, category_id=category_id)] == [work]
        assert [t.id for t in tasks.list_for_user(USER, status="in_progress")] == [home]

    def test_list_open_excludes_completed(self, tasks, category_id):
        open_id = tasks.create(USER, "open", category_id)
        done_id = tasks.create(USER, "done", category_id)
        tasks.update(done_id, {"status": "completed"})

        assert [t.id for t in tasks.list_open(USER)] == [open_id]

    def test_update_unknown_column_raises(self, tasks, category_id):
        task_id = tasks.create(USER, "task", category_id)

        with pytest.raises(ValueError, match="user_id"):
            tasks.update(task_id, {"user_id": OTHER})

    def test_priority_out_of_range_rejected(self, tasks, category_id):
        task_id = tasks.create(USER, "task", category_id)

        with pytest.raises(PersistenceError):
            tasks.set_priority(task_id, 5)

    def test_unknown_category_rejected(self, tasks):
        """Foreign keys are enforced."""
        with pytest.raises(PersistenceError):
            tasks.create(USER, "orphan", 999)

    def test_aware_due_dates_sort_by_instant(self, tasks, db, category_id):
        """10:00+02:00 is 08:00 UTC, so it sorts before 09:00 UTC."""
        plus_two = timezone(timedelta(hours=2))
        utc_nine = tasks.create(USER, "utc", category_id, priority=2,
                                due_date=datetime(2026, 3, 20, 9, 0, tzinfo=timezone.utc))
        berlin_ten = tasks.create(USER, "plus two", category_id, priority=2,
                                  due_date=datetime(2026, 3, 20, 10, 0, tzinfo=plus_two))

        assert [t.id for t in tasks.list_for_user(USER)] == [berlin_ten, utc_nine]

        row = db.execute_one("SELECT due_date FROM tasks WHERE id = ?", (berlin_ten,))
        assert row["due_date"].endswith("+00:00")
        assert tasks.get(USER, berlin_ten).due_date == datetime(2026, 3, 20, 8, 0, tzinfo=timezone.utc)

    def test_add_time_spent_accumulates(self, tasks, category_id):
        task_id = tasks.create(USER, "focus", category_id)

        assert tasks.add_time_spent(USER, task_id, 1500) is True
        assert tasks.add_time_spent(USER, task_id, 300) is True
        assert tasks.get(USER, task_id).time_spent == 1800

    def test_add_time_spent_is_scoped_to_owner(self, tasks, category_id):
        task_id = tasks.create(USER, "focus", category_id)

        assert tasks.add_time_spent(OTHER, task_id, 600) is False
        assert tasks.get(USER, task_id).time_spent == 0

    def test_delete_is_scoped_to_owner(self, tasks, category_id):
        task_id = tasks.create(USER, "task", category_id)

        assert tasks.delete(OTHER, task_id) is False
        assert tasks.delete(USER, task_id) is True
        assert tasks.get(USER, task_id) is None

    def test_list_user_ids(self, tasks, categories, category_id):
        tasks.create(USER, "a", category_id)
        tasks.create(USER, "b", category_id)
        tasks.create(OTHER, "c", categories.create(OTHER, "Misc").id)

        assert tasks.list_user_ids() == [USER, OTHER]


class TestDailyStatsRepository:
    """Tests for DailyStatsRepository."""

    def test_increment_creates_then_adds(self, stats):
        stats.increment(USER, DAY, "tasks_created")
        stats.increment(USER, DAY, "tasks_created")
        stats.increment(USER, DAY, "tasks_completed")

        row = stats.get(USER, DAY)
        assert (row.tasks_created, row.tasks_completed) == (2, 1)
        assert row.day == DAY

    def test_unknown_counter_raises(self, stats):
        with pytest.raises(ValueError):
            stats.increment(USER, DAY, "streak_days")

    def test_ensure_keeps_existing_counters(self, stats):
        stats.increment(USER, DAY, "tasks_completed")
        stats.ensure(USER, DAY)

        assert stats.get(USER, DAY).tasks_completed == 1

    def test_one_row_per_user_and_day(self, stats):
        stats.ensure(USER, DAY)
        stats.ensure(USER, DAY)
        stats.increment(USER, DAY, "tasks_created")

        assert len(stats.recent(USER, 10)) == 1

    def test_recent_is_newest_first_and_limited(self, stats):
        for offset in range(5):
            stats.ensure(USER, DAY - timedelta(days=offset))

        days = [row.day for row in stats.recent(USER, 3)]
        assert days == [DAY, DAY - timedelta(days=1), DAY - timedelta(days=2)]

    def test_latest_is_newest_row(self, stats):
        assert stats.latest(USER) is None

        stats.ensure(USER, DAY - timedelta(days=3))
        stats.ensure(USER, DAY - timedelta(days=1))
        stats.ensure(OTHER, DAY)

        assert stats.latest(USER).day == DAY - timedelta(days=1)

    def test_since_is_oldest_first(self, stats):
        for offset in range(5):
            stats.ensure(USER, DAY - timedelta(days=offset))

        days = [row.day for row in stats.since(USER, DAY - timedelta(days=1))]
        assert days == [DAY - timedelta(days=1), DAY]

    def test_set_derived(self, stats):
        stats.ensure(USER, DAY)

        assert stats.set_derived(USER, DAY, streak_days=4, productivity_score=57) == 1
        row = stats.get(USER, DAY)
        assert (row.streak_days, row.productivity_score) == (4, 57)

    def test_score_range_is_enforced(self, stats):
        stats.ensure(USER, DAY)

        with pytest.raises(PersistenceError):
            stats.set_derived(USER, DAY, streak_days=0, productivity_score=101)
