#!/usr/bin/env python3
"""
Database initialization script for Tempo Planner
Creates the SQLite database with categories, tasks and daily_stats tables
"""

import sqlite3
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tempo.core.config import Config
from tempo.core.schema import create_sqlite_schema


def init_database(db_path: Path) -> bool:
    """Initialize the database with core schemas"""

    # Check if database already exists
    if db_path.exists():
        response = input(f"Database already exists at {db_path}. Overwrite? (yes/no): ")
        if response.lower() != 'yes':
            print("Aborting database initialization.")
            return False
        db_path.unlink()

    print(f"Creating database at {db_path}...")

    try:
        create_sqlite_schema(db_path)
    except sqlite3.Error as e:
        print(f"✗ Database error: {e}")
        return False

    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;")
        tables = [t[0] for t in cursor.fetchall() if not t[0].startswith('sqlite_')]
    finally:
        conn.close()

    print("✓ Database schema created successfully!")
    print(f"✓ Tables created: {', '.join(tables)}")
    return True


if __name__ == "__main__":
    print("=" * 60)
    print("Tempo Planner - Database Initialization")
    print("=" * 60)
    print()

    success = init_database(Config().get_database_path())

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
