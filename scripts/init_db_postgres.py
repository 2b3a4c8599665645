#!/usr/bin/env python3
"""
PostgreSQL database initialization script for Tempo Planner
Creates the same schema as scripts/init_db.py for a PostgreSQL server
"""

import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

try:
    import psycopg2
except ImportError:
    print("Error: psycopg2 not installed. Run: pip install psycopg2-binary")
    sys.exit(1)


POSTGRES_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS categories (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        color TEXT,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(user_id, name)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_categories_user ON categories(user_id);",
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL DEFAULT 'todo' CHECK(status IN ('todo', 'in_progress', 'completed')),
        priority INTEGER NOT NULL DEFAULT 1 CHECK(priority BETWEEN 1 AND 4),
        category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
        due_date TIMESTAMPTZ,
        completed_at TIMESTAMPTZ,
        time_spent INTEGER NOT NULL DEFAULT 0 CHECK(time_spent >= 0),
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_status ON tasks(user_id, status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date);",
    """
    CREATE TABLE IF NOT EXISTS daily_stats (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        day DATE NOT NULL,
        tasks_completed INTEGER NOT NULL DEFAULT 0 CHECK(tasks_completed >= 0),
        tasks_created INTEGER NOT NULL DEFAULT 0 CHECK(tasks_created >= 0),
        streak_days INTEGER NOT NULL DEFAULT 0 CHECK(streak_days >= 0),
        productivity_score INTEGER NOT NULL DEFAULT 0 CHECK(productivity_score BETWEEN 0 AND 100),
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(user_id, day)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_daily_stats_user_day ON daily_stats(user_id, day DESC);",
    """
    CREATE OR REPLACE FUNCTION update_updated_at_column()
    RETURNS TRIGGER AS $$
    BEGIN
        NEW.updated_at = CURRENT_TIMESTAMP;
        RETURN NEW;
    END;
    $$ language 'plpgsql';
    """,
    """
    DROP TRIGGER IF EXISTS update_tasks_updated_at ON tasks;
    CREATE TRIGGER update_tasks_updated_at
        BEFORE UPDATE ON tasks
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """,
]


def get_database_url():
    """Get database URL from environment variable"""
    url = os.environ.get('DATABASE_URL')
    if not url:
        print("Error: DATABASE_URL environment variable not set")
        sys.exit(1)
    return url


def init_database():
    """Initialize the PostgreSQL database with core schemas"""

    database_url = get_database_url()
    print("Connecting to PostgreSQL...")

    conn = psycopg2.connect(database_url)
    conn.autocommit = False
    cursor = conn.cursor()

    try:
        for statement in POSTGRES_SCHEMA:
            cursor.execute(statement)

        conn.commit()
        print("✓ PostgreSQL database schema created successfully!")

        cursor.execute("""
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = 'public' ORDER BY table_name;
        """)
        tables = cursor.fetchall()
        print(f"✓ Tables: {', '.join(t[0] for t in tables)}")

        return True

    except psycopg2.Error as e:
        print(f"✗ Database error: {e}")
        conn.rollback()
        return False

    finally:
        cursor.close()
        conn.close()


if __name__ == "__main__":
    print("=" * 60)
    print("Tempo Planner - PostgreSQL Database Initialization")
    print("=" * 60)
    print()

    success = init_database()

    if success:
        print("\n" + "=" * 60)
        print("Database initialization complete!")
        print("=" * 60)
        sys.exit(0)
    else:
        print("\n" + "=" * 60)
        print("Database initialization failed!")
        print("=" * 60)
        sys.exit(1)
