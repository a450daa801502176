"""
User directory backed by the users table.

Maps the email an extension client sends to the user id and role the
dashboard pipeline works with.
"""

import logging
from pathlib import Path
from typing import Optional

from coursedash.core.database import SQLiteDatabase
from coursedash.core.errors import NotFound, ValidationError
from coursedash.core.models import UserRecord

logger = logging.getLogger(__name__)


class UserDirectory:
    """
    Resolves users by email.

    The database file is opened on first lookup, so a directory can be
    created before the file exists; a missing file surfaces as
    FileNotFoundError from that lookup, after the email has been validated.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._db: Optional[SQLiteDatabase] = None

    @property
    def db(self) -> SQLiteDatabase:
        if self._db is None:
            self._db = SQLiteDatabase(self.db_path)
        return self._db

    def resolve(self, email: str) -> UserRecord:
        """
        Look up a user by email (case-insensitive, surrounding whitespace ignored).

        Raises:
            ValidationError: If email is missing or blank
            NotFound: If no user has this email
            FileNotFoundError: If the users database does not exist
        """
        if email is None or not email.strip():
            raise ValidationError("email", "Email parameter is required")

        email = email.strip()
        row = self.db.execute_one(
            "SELECT id, email, username, role FROM users WHERE lower(email) = lower(?)",
            (email,)
        )
        if row is None:
            raise NotFound("User", email)

        user = UserRecord.from_dict(row)
        logger.debug(f"Resolved {email} to user {user.user_id} ({user.role})")
        return user
