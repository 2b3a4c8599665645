"""
SQLite schema for Tempo Planner.

Shared by scripts/init_db.py and the test suite so both build the exact
same tables. The PostgreSQL equivalent lives in scripts/init_db_postgres.py.
"""

import sqlite3
from pathlib import Path
from typing import List

SQLITE_SCHEMA: List[str] = [
    # ====================================================================
    # Categories
    # ====================================================================
    """
    CREATE TABLE IF NOT EXISTS categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        color TEXT,
        created_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')),
        updated_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')),
        UNIQUE(user_id, name)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_categories_user ON categories(user_id)",
    # ====================================================================
    # Tasks
    # ====================================================================
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL DEFAULT 'todo' CHECK(status IN ('todo', 'in_progress', 'completed')),
        priority INTEGER NOT NULL DEFAULT 1 CHECK(priority BETWEEN 1 AND 4),
        category_id INTEGER NOT NULL,
        due_date DATETIME,
        completed_at DATETIME,
        time_spent INTEGER NOT NULL DEFAULT 0 CHECK(time_spent >= 0),
        created_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')),
        updated_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')),
        FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_status ON tasks(user_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
    """
    CREATE TRIGGER IF NOT EXISTS tasks_updated_at AFTER UPDATE ON tasks
    BEGIN
        UPDATE tasks SET updated_at = strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')
        WHERE id = NEW.id;
    END
    """,
    # ====================================================================
    # Daily aggregates (one row per user per calendar day)
    # ====================================================================
    """
    CREATE TABLE IF NOT EXISTS daily_stats (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        day DATE NOT NULL,
        tasks_completed INTEGER NOT NULL DEFAULT 0 CHECK(tasks_completed >= 0),
        tasks_created INTEGER NOT NULL DEFAULT 0 CHECK(tasks_created >= 0),
        streak_days INTEGER NOT NULL DEFAULT 0 CHECK(streak_days >= 0),
        productivity_score INTEGER NOT NULL DEFAULT 0 CHECK(productivity_score BETWEEN 0 AND 100),
        created_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')),
        updated_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc')),
        UNIQUE(user_id, day)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_daily_stats_user_day ON daily_stats(user_id, day DESC)",
]


def create_sqlite_schema(db_path: Path) -> None:
    """
    Create all tables in the SQLite database at db_path.

    The file is created if it does not exist; existing tables are left alone.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        for statement in SQLITE_SCHEMA:
            conn.execute(statement)
        conn.commit()
    finally:
        conn.close()
