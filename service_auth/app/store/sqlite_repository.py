"""
SQLite persistence for user identities.
"""

import os
from typing import Optional

import aiosqlite

from shared.errors import AccessLayerException, DuplicateUserError
from shared.logging import get_logger
from .repository import UserIdentity, UserRepository


class SQLiteUserRepository(UserRepository):
    """SQLite-backed repository.

    Uniqueness is enforced by the ``UNIQUE`` constraint on
    ``normalized_username``, so concurrent inserts from any number of tasks or
    processes resolve to a single row.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.logger = get_logger("auth.store.sqlite")

    async def initialize(self) -> None:
        """Create the users table if it does not exist."""
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(
                    """
                    CREATE TABLE IF NOT EXISTS users (
                        id TEXT PRIMARY KEY,
                        username TEXT NOT NULL,
                        normalized_username TEXT NOT NULL UNIQUE,
                        password_hash TEXT NOT NULL
                    )
                    """
                )
                await db.commit()
        except aiosqlite.Error as e:
            self.logger.error("Failed to initialize user store", db_path=self.db_path, error=str(e))
            raise AccessLayerException("USER_STORE_START_FAILED", str(e))

        self.logger.info("User store initialized", db_path=self.db_path)

    async def find_by_normalized_username(self, normalized_username: str) -> Optional[UserIdentity]:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT id, username, normalized_username, password_hash "
                "FROM users WHERE normalized_username = ?",
                (normalized_username,),
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return None
        return UserIdentity(
            id=row["id"],
            username=row["username"],
            normalized_username=row["normalized_username"],
            password_hash=row["password_hash"],
        )

    async def insert(self, identity: UserIdentity) -> None:
        async with aiosqlite.connect(self.db_path, timeout=30) as db:
            try:
                await db.execute(
                    "INSERT INTO users (id, username, normalized_username, password_hash) "
                    "VALUES (?, ?, ?, ?)",
                    (identity.id, identity.username, identity.normalized_username, identity.password_hash),
                )
                await db.commit()
            except aiosqlite.IntegrityError:
                raise DuplicateUserError(identity.username)

        self.logger.debug("User inserted", user_id=identity.id)
