"""
Unit tests for the planner command line interface.
Runs the typer app against a temporary SQLite database.
"""

import pytest
from typer.testing import CliRunner

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from planner import app
from tempo.core.config import Config
from tempo.core.database import SQLiteDatabase
from tempo.core.repositories import DailyStatsRepository, TaskRepository
from tempo.core.schema import create_sqlite_schema

runner = CliRunner()


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Config directory pointing at a fresh database."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("TEMPO_USER", raising=False)

    db_file = tmp_path / "tempo.db"
    create_sqlite_schema(db_file)

    config_dir = tmp_path / "config"
    config = Config(config_dir)
    config.set("database_path", str(db_file))
    return config, SQLiteDatabase(db_file)


def invoke(env, *args):
    config, _ = env
    return runner.invoke(app, ["--config-dir", str(config.config_dir), "--user", "alice", *args])


class TestAddAndList:
    """Tests for the add and tasks commands."""

    def test_add_creates_category_and_task(self, env):
        result = invoke(env, "add", "Write report", "--category", "Work", "-p", "3")

        assert result.exit_code == 0, result.output
        assert "Added task #1" in result.output

        _, db = env
        task = TaskRepository(db).get("alice", 1)
        assert task.category_name == "Work"
        assert task.priority == 3

    def test_add_reuses_existing_category(self, env):
        invoke(env, "add", "One", "--category", "Work")
        invoke(env, "add", "Two", "--category", "work")

        _, db = env
        assert len(db.execute("SELECT * FROM categories")) == 1

    def test_add_counts_creation(self, env):
        config, db = env
        invoke(env, "add", "One", "--category", "Work")

        row = DailyStatsRepository(db).get("alice", config.today())
        assert row.tasks_created == 1

    def test_add_parses_due_date(self, env):
        result = invoke(env, "add", "Pay rent", "-c", "Home", "--due", "2026-04-01T09:00")

        assert result.exit_code == 0, result.output
        _, db = env
        assert TaskRepository(db).get("alice", 1).due_date.isoformat() == "2026-04-01T09:00:00"

    def test_blank_title_fails(self, env):
        result = invoke(env, "add", "   ", "--category", "Work")
        assert result.exit_code == 1

    def test_list_shows_tasks(self, env):
        invoke(env, "add", "Write report", "--category", "Work")

        result = invoke(env, "tasks")
        assert result.exit_code == 0
        assert "Write report" in result.output

    def test_list_empty(self, env):
        result = invoke(env, "tasks")
        assert "No tasks found" in result.output


class TestDone:
    """Tests for the done command."""

    def test_done_completes_and_scores(self, env):
        config, db = env
        invoke(env, "add", "Write report", "--category", "Home")

        result = invoke(env, "done", "1")

        assert result.exit_code == 0, result.output
        assert "Score 39, streak 1" in result.output
        task = TaskRepository(db).get("alice", 1)
        assert task.status == "completed"
        assert task.completed_at is not None

    def test_done_twice_counts_once(self, env):
        config, db = env
        invoke(env, "add", "Write report", "--category", "Home")
        invoke(env, "done", "1")

        result = invoke(env, "done", "1")

        assert "already completed" in result.output
        assert DailyStatsRepository(db).get("alice", config.today()).tasks_completed == 1

    def test_done_unknown_task(self, env):
        result = invoke(env, "done", "42")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestStatsAndHistory:
    """Tests for the stats and history commands."""

    def test_stats_on_quiet_day(self, env):
        result = invoke(env, "stats")

        assert result.exit_code == 0
        assert "0 / 100" in result.output

    def test_history_lists_today(self, env):
        config, _ = env
        invoke(env, "add", "Write report", "--category", "Home")

        result = invoke(env, "history", "--days", "3")
        assert config.today().isoformat() in result.output

    def test_history_without_activity(self, env):
        result = invoke(env, "history")
        assert "No activity recorded yet" in result.output


class TestDashboard:
    """Tests for the dashboard command."""

    def test_dashboard_counts(self, env):
        invoke(env, "add", "Write report", "--category", "Work")
        invoke(env, "add", "Pay rent", "--category", "Home")
        invoke(env, "done", "1")

        result = invoke(env, "dashboard")

        assert result.exit_code == 0, result.output
        assert "Tasks:           2" in result.output
        assert "Completed today: 1" in result.output
        assert "Streak:          1 day" in result.output

    def test_dashboard_on_empty_database(self, env):
        result = invoke(env, "dashboard")

        assert result.exit_code == 0, result.output
        assert "0 / 100" in result.output


class TestLog:
    """Tests for the log command."""

    def test_work_minutes_accumulate(self, env):
        _, db = env
        invoke(env, "add", "Write report", "--category", "Work")
        invoke(env, "log", "1", "25")

        result = invoke(env, "log", "1", "20")

        assert result.exit_code == 0, result.output
        assert "Total: 45 min" in result.output
        assert TaskRepository(db).get("alice", 1).time_spent == 45 * 60

    def test_break_is_not_counted(self, env):
        _, db = env
        invoke(env, "add", "Write report", "--category", "Work")

        result = invoke(env, "log", "1", "10", "--type", "break")

        assert result.exit_code == 0, result.output
        assert TaskRepository(db).get("alice", 1).time_spent == 0

    def test_unknown_session_type_fails(self, env):
        invoke(env, "add", "Write report", "--category", "Work")

        result = invoke(env, "log", "1", "10", "--type", "nap")
        assert result.exit_code == 1

    def test_unknown_task(self, env):
        result = invoke(env, "log", "42", "10")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestPrioritize:
    """Tests for the prioritize command."""

    def test_overdue_task_is_raised(self, env):
        _, db = env
        invoke(env, "add", "Late", "--category", "Home", "--due", "2020-01-01")

        result = invoke(env, "prioritize")

        assert result.exit_code == 0, result.output
        assert "Updated 1 task priorities" in result.output
        assert TaskRepository(db).get("alice", 1).priority == 4

    def test_unknown_strategy_fails(self, env):
        config, _ = env
        config.set("prioritizer", "oracle", section="preferences")

        result = invoke(env, "prioritize")
        assert result.exit_code == 1


class TestMissingDatabase:

    def test_missing_database_fails(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = Config(tmp_path / "config")
        config.set("database_path", str(tmp_path / "missing.db"))

        result = runner.invoke(app, ["--config-dir", str(config.config_dir), "tasks"])

        assert result.exit_code == 1
        assert "Database not found" in result.output
