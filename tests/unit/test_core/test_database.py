"""
Unit tests for the database module.
Tests SQLiteDatabase connection management, query operations, error
wrapping and the get_database factory.
"""

import pytest
import sqlite3
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from tempo.core import database as database_module
from tempo.core.database import PostgreSQLDatabase, SQLiteDatabase, get_database
from tempo.core.errors import PersistenceError


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary database with a test table."""
    db_file = tmp_path / "test.db"
    conn = sqlite3.connect(db_file)
    conn.execute("""
        CREATE TABLE test_table (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            value INTEGER
        )
    """)
    conn.commit()
    conn.close()
    return SQLiteDatabase(db_file)


class TestDatabaseInit:
    """Tests for SQLiteDatabase initialization."""

    def test_init_with_valid_path(self, tmp_path):
        """Database initializes with a valid path to existing db file."""
        db_file = tmp_path / "test.db"
        sqlite3.connect(db_file).close()

        db = SQLiteDatabase(db_file)
        assert db.db_path == db_file

    def test_init_raises_if_file_not_found(self, tmp_path):
        """Database raises FileNotFoundError if db file doesn't exist."""
        db_file = tmp_path / "nonexistent.db"

        with pytest.raises(FileNotFoundError) as exc_info:
            SQLiteDatabase(db_file)

        assert "Database not found" in str(exc_info.value)
        assert "init_db.py" in str(exc_info.value)


class TestConnectionManagement:
    """Tests for database connection context manager."""

    def test_get_connection_enables_row_factory(self, temp_db):
        """get_connection() enables column access by name."""
        with temp_db.get_connection() as conn:
            assert conn.row_factory == sqlite3.Row

    def test_get_connection_enables_foreign_keys(self, temp_db):
        """Foreign key enforcement is switched on per connection."""
        with temp_db.get_connection() as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


class TestQueries:
    """Tests for execute / execute_one / execute_write."""

    def test_insert_returns_lastrowid(self, temp_db):
        """INSERT statements return the new row id."""
        first = temp_db.execute_write("INSERT INTO test_table (name, value) VALUES (?, ?)", ("a", 1))
        second = temp_db.execute_write("INSERT INTO test_table (name, value) VALUES (?, ?)", ("b", 2))
        assert (first, second) == (1, 2)

    def test_update_returns_rowcount(self, temp_db):
        """UPDATE statements return the number of changed rows."""
        temp_db.execute_write("INSERT INTO test_table (name, value) VALUES ('a', 1)")
        temp_db.execute_write("INSERT INTO test_table (name, value) VALUES ('b', 1)")

        changed = temp_db.execute_write("UPDATE test_table SET value = 5 WHERE value = ?", (1,))
        assert changed == 2

    def test_execute_returns_dicts(self, temp_db):
        """execute() gives plain dicts keyed by column."""
        temp_db.execute_write("INSERT INTO test_table (name, value) VALUES ('a', 1)")

        rows = temp_db.execute("SELECT name, value FROM test_table")
        assert rows == [{"name": "a", "value": 1}]

    def test_execute_one_missing_row(self, temp_db):
        """execute_one() returns None when nothing matches."""
        assert temp_db.execute_one("SELECT * FROM test_table WHERE id = ?", (99,)) is None

    def test_table_exists(self, temp_db):
        assert temp_db.table_exists("test_table")
        assert not temp_db.table_exists("missing_table")


class TestErrorWrapping:
    """Driver errors surface as PersistenceError."""

    def test_bad_query_raises_persistence_error(self, temp_db):
        """A failing SELECT is wrapped, with the driver error as cause."""
        with pytest.raises(PersistenceError) as exc_info:
            temp_db.execute("SELECT * FROM no_such_table")

        assert exc_info.value.operation == "query"
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)
        assert str(exc_info.value).startswith("query: ")

    def test_constraint_violation_raises_persistence_error(self, temp_db):
        """A NOT NULL violation on write is wrapped as a write failure."""
        with pytest.raises(PersistenceError) as exc_info:
            temp_db.execute_write("INSERT INTO test_table (name) VALUES (NULL)")

        assert exc_info.value.operation == "write"
        assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)


class TestGetDatabase:
    """Tests for the backend selection factory."""

    def test_defaults_to_sqlite(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        db_file = tmp_path / "test.db"
        sqlite3.connect(db_file).close()

        assert isinstance(get_database(db_file), SQLiteDatabase)

    def test_use_sqlite_overrides_database_url(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/tempo")
        monkeypatch.setenv("USE_SQLITE", "1")
        db_file = tmp_path / "test.db"
        sqlite3.connect(db_file).close()

        assert isinstance(get_database(db_file), SQLiteDatabase)

    def test_database_url_selects_postgres(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/tempo")
        monkeypatch.delenv("USE_SQLITE", raising=False)

        with patch.object(database_module, "POSTGRES_AVAILABLE", True):
            db = get_database()

        assert isinstance(db, PostgreSQLDatabase)
        assert db.database_url == "postgresql://localhost/tempo"

    def test_postgres_without_driver_raises(self):
        with patch.object(database_module, "POSTGRES_AVAILABLE", False):
            with pytest.raises(ImportError, match="psycopg2"):
                PostgreSQLDatabase("postgresql://localhost/tempo")


class TestPostgresQueryConversion:
    """Tests for SQLite-to-PostgreSQL placeholder conversion."""

    def test_placeholders_are_converted(self):
        with patch.object(database_module, "POSTGRES_AVAILABLE", True):
            db = PostgreSQLDatabase("postgresql://localhost/tempo")

        converted = db._convert_query("SELECT * FROM tasks WHERE id = ? AND user_id = ?")
        assert converted == "SELECT * FROM tasks WHERE id = %s AND user_id = %s"
