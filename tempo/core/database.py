"""
Database utilities and connection management
Supports both SQLite (local development) and PostgreSQL (production)

Usage:
    # SQLite (default for local dev, uses USE_SQLITE=1 env var)
    db = get_database()

    # PostgreSQL (production, uses DATABASE_URL env var)
    db = get_database()  # Automatically uses PostgreSQL if DATABASE_URL is set

Driver errors are re-raised as PersistenceError so callers only ever have
to handle one failure type.
"""

import os
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple, Union
from contextlib import contextmanager

from .errors import PersistenceError

# Try to import psycopg2 for PostgreSQL support
try:
    import psycopg2
    import psycopg2.extras
    POSTGRES_AVAILABLE = True
except ImportError:
    POSTGRES_AVAILABLE = False


class DatabaseBase(ABC):
    """Abstract base class for database operations"""

    @abstractmethod
    def get_connection(self):
        """Get a database connection"""
        pass

    @abstractmethod
    def execute(self, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        """Execute a SELECT query and return results as list of dicts"""
        pass

    @abstractmethod
    def execute_one(self, query: str, params: Tuple = ()) -> Optional[Dict[str, Any]]:
        """Execute a SELECT query and return single result"""
        pass

    @abstractmethod
    def execute_write(self, query: str, params: Tuple = ()) -> int:
        """Execute an INSERT, UPDATE, or DELETE query"""
        pass


class SQLiteDatabase(DatabaseBase):
    """SQLite database implementation for local development"""

    def __init__(self, db_path: Optional[Path] = None):
        if db_path is None:
            db_path = Path(__file__).parent.parent.parent / "data" / "database" / "tempo.db"

        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise FileNotFoundError(
                f"Database not found at {self.db_path}. "
                "Run 'python scripts/init_db.py' to create it."
            )

    @contextmanager
    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        try:
            yield conn
        finally:
            conn.close()

    def execute(self, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                rows = cursor.fetchall()
                return [dict(row) for row in rows]
        except sqlite3.Error as e:
            raise PersistenceError(str(e), operation="query") from e

    def execute_one(self, query: str, params: Tuple = ()) -> Optional[Dict[str, Any]]:
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                row = cursor.fetchone()
                return dict(row) if row else None
        except sqlite3.Error as e:
            raise PersistenceError(str(e), operation="query") from e

    def execute_write(self, query: str, params: Tuple = ()) -> int:
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                conn.commit()
                if query.strip().upper().startswith('INSERT'):
                    return cursor.lastrowid or 0
                return cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(str(e), operation="write") from e

    def table_exists(self, table_name: str) -> bool:
        query = "SELECT name FROM sqlite_master WHERE type='table' AND name=?;"
        result = self.execute_one(query, (table_name,))
        return result is not None


class PostgreSQLDatabase(DatabaseBase):
    """PostgreSQL database implementation for production"""

    def __init__(self, database_url: str):
        if not POSTGRES_AVAILABLE:
            raise ImportError(
                "psycopg2 not installed. Run: pip install psycopg2-binary"
            )
        self.database_url = database_url
        self.db_path = database_url  # Reported by /health and startup logs

    @contextmanager
    def get_connection(self):
        conn = psycopg2.connect(self.database_url)
        try:
            yield conn
        finally:
            conn.close()

    def _convert_query(self, query: str) -> str:
        """Convert SQLite-style ? placeholders to PostgreSQL %s"""
        return query.replace('?', '%s')

    def execute(self, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        query = self._convert_query(query)

        try:
            with self.get_connection() as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                    cursor.execute(query, params)
                    rows = cursor.fetchall()
                    return [dict(row) for row in rows]
        except psycopg2.Error as e:
            raise PersistenceError(str(e), operation="query") from e

    def execute_one(self, query: str, params: Tuple = ()) -> Optional[Dict[str, Any]]:
        query = self._convert_query(query)

        try:
            with self.get_connection() as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                    cursor.execute(query, params)
                    row = cursor.fetchone()
                    return dict(row) if row else None
        except psycopg2.Error as e:
            raise PersistenceError(str(e), operation="query") from e

    def execute_write(self, query: str, params: Tuple = ()) -> int:
        query = self._convert_query(query)

        # Add RETURNING id for INSERT statements to get the inserted ID
        is_insert = query.strip().upper().startswith('INSERT')
        if is_insert and 'RETURNING' not in query.upper():
            query = query.strip().rstrip(';') + ' RETURNING id'

        try:
            with self.get_connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, params)
                    conn.commit()
                    if is_insert:
                        # ON CONFLICT DO NOTHING returns no row
                        result = cursor.fetchone()
                        return result[0] if result else 0
                    return cursor.rowcount
        except psycopg2.Error as e:
            raise PersistenceError(str(e), operation="write") from e

    def table_exists(self, table_name: str) -> bool:
        query = """
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = 'public' AND table_name = ?
        """
        result = self.execute_one(query, (table_name,))
        return result is not None


Database = Union[SQLiteDatabase, PostgreSQLDatabase]


def get_database(db_path: Optional[Path] = None) -> Database:
    """
    Factory function to get the appropriate database instance.

    Uses PostgreSQL if DATABASE_URL is set, otherwise falls back to SQLite.
    Set USE_SQLITE=1 to force SQLite even if DATABASE_URL is set.
    """
    use_sqlite = os.environ.get('USE_SQLITE', '').lower() in ('1', 'true', 'yes')
    database_url = os.environ.get('DATABASE_URL')

    if database_url and not use_sqlite:
        return PostgreSQLDatabase(database_url)
    else:
        return SQLiteDatabase(db_path)
