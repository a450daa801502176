#!/usr/bin/env python3
"""
Database initialization script for the course dashboard
Creates the SQLite user directory that maps an email to a user id and role
"""

import argparse
import sqlite3
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from coursedash.core.config import Config
from coursedash.core.models import Role

SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE COLLATE NOCASE,
        username TEXT,
        role TEXT NOT NULL CHECK(role IN ('1100', '1200', '1300')),
        created_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc'))
    );
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the users table and its indexes on an open connection"""
    cursor = conn.cursor()
    cursor.execute(SCHEMA)
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);")
    conn.commit()


def add_user(conn: sqlite3.Connection, user_id: str, email: str, role: str, username: str = None) -> None:
    """Insert or replace one user; role may be a code ("1300") or a name ("student")"""
    parsed = Role.parse(role)
    if parsed is None:
        raise ValueError(f"Unknown role: {role}")

    conn.execute(
        "INSERT OR REPLACE INTO users (id, email, username, role) VALUES (?, ?, ?, ?)",
        (user_id, email.strip(), username, parsed.code)
    )
    conn.commit()


def init_database(db_path: Path, force: bool = False) -> bool:
    """Initialize the database with the user directory schema"""

    # Ensure database directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    # Check if database already exists
    if db_path.exists():
        if not force:
            response = input(f"Database already exists at {db_path}. Overwrite? (yes/no): ")
            if response.lower() != 'yes':
                print("Aborting database initialization.")
                return False
        db_path.unlink()

    print(f"Creating database at {db_path}...")
    conn = sqlite3.connect(db_path)

    try:
        create_schema(conn)
        print("✓ Created users table")
        return True
    except sqlite3.Error as e:
        print(f"ERROR: {e}")
        return False
    finally:
        conn.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Initialize the course dashboard user directory")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing database")
    parser.add_argument(
        "--add-user", nargs=3, metavar=("ID", "EMAIL", "ROLE"),
        help="Add a user to an existing database instead of initializing"
    )
    args = parser.parse_args()

    db_path = Config().get_database_path()

    if args.add_user:
        user_id, email, role = args.add_user
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
        try:
            create_schema(conn)
            add_user(conn, user_id, email, role)
        except (ValueError, sqlite3.Error) as e:
            print(f"ERROR: {e}")
            return 1
        finally:
            conn.close()
        print(f"✓ Added {email} as {Role.parse(role).name.lower()}")
        return 0

    print("=" * 60)
    print("Course Dashboard - Database Initialization")
    print("=" * 60)
    print()

    if init_database(db_path, force=args.force):
        print("\n" + "=" * 60)
        print("Database initialization complete!")
        print("=" * 60)
        return 0

    print("\n" + "=" * 60)
    print("Database initialization failed!")
    print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(main())
