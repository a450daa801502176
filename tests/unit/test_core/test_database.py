"""
Unit tests for the database module.
Exercises SQLiteDatabase through the users table created by init_db.
"""

import pytest
import sqlite3
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from coursedash.core.database import SQLiteDatabase
from scripts.init_db import add_user, create_schema

USER_QUERY = "SELECT id, email, username, role FROM users WHERE lower(email) = lower(?)"


@pytest.fixture
def users_db(tmp_path):
    """Users database with a student and a lecturer."""
    db_file = tmp_path / "coursedash.db"
    conn = sqlite3.connect(db_file)
    create_schema(conn)
    add_user(conn, "u1", "ada@example.edu", "student", "ada")
    add_user(conn, "u2", "alan@example.edu", "lecturer")
    conn.close()
    return SQLiteDatabase(db_file)


class TestOpen:
    """Tests for opening the database file."""

    def test_missing_file_points_at_init_script(self, tmp_path):
        with pytest.raises(FileNotFoundError) as exc_info:
            SQLiteDatabase(tmp_path / "nonexistent.db")

        assert "Database not found" in str(exc_info.value)
        assert "init_db.py" in str(exc_info.value)

    def test_accepts_string_path(self, users_db):
        assert SQLiteDatabase(str(users_db.db_path)).db_path == users_db.db_path


class TestUserLookup:
    """Tests for single-row lookups as the user directory issues them."""

    def test_row_comes_back_as_dict(self, users_db):
        row = users_db.execute_one(USER_QUERY, ("ada@example.edu",))

        assert row == {"id": "u1", "email": "ada@example.edu", "username": "ada", "role": "1300"}

    def test_lookup_ignores_case(self, users_db):
        assert users_db.execute_one(USER_QUERY, ("ALAN@example.edu",))["id"] == "u2"

    def test_no_match_is_none(self, users_db):
        assert users_db.execute_one(USER_QUERY, ("ghost@example.edu",)) is None

    def test_connection_closed_after_error(self, users_db):
        """A failing query does not leave the file locked for the next lookup."""
        with pytest.raises(sqlite3.OperationalError):
            users_db.execute_one("SELECT * FROM no_such_table")

        assert users_db.execute_one(USER_QUERY, ("ada@example.edu",))["role"] == "1300"

    def test_connection_rows_addressable_by_name(self, users_db):
        with users_db.get_connection() as conn:
            row = conn.execute("SELECT role FROM users WHERE id = 'u2'").fetchone()

        assert row["role"] == "1200"
