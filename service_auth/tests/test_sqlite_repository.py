"""
Tests for the SQLite user repository.
"""

import asyncio

import pytest
import pytest_asyncio

from service_auth.app.store import CredentialStore, SQLiteUserRepository, UserIdentity
from shared.errors import DuplicateUserError
from shared.test_helpers import fast_password_hasher


class TestSQLiteUserRepository:
    """Test cases for SQLiteUserRepository."""

    @pytest_asyncio.fixture
    async def repository(self, tmp_path):
        repository = SQLiteUserRepository(str(tmp_path / "data" / "auth.db"))
        await repository.initialize()
        return repository

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, repository):
        """Creating tables twice is harmless."""
        await repository.initialize()

        assert await repository.find_by_normalized_username("alice") is None

    @pytest.mark.asyncio
    async def test_insert_and_find(self, repository):
        """Inserted identities are found by normalized username."""
        identity = UserIdentity.create("Alice", "$argon2id$fake")

        await repository.insert(identity)
        found = await repository.find_by_normalized_username("alice")

        assert found == identity

    @pytest.mark.asyncio
    async def test_insert_duplicate_normalized_username(self, repository):
        """The unique index rejects a second row for the same normalized name."""
        await repository.insert(UserIdentity.create("alice", "$argon2id$one"))

        with pytest.raises(DuplicateUserError):
            await repository.insert(UserIdentity.create("ALICE", "$argon2id$two"))

    @pytest.mark.asyncio
    async def test_concurrent_registration_single_winner(self, repository):
        """Concurrent registrations against SQLite yield exactly one row."""
        store = CredentialStore(repository, hasher=fast_password_hasher())
        attempts = 8

        results = await asyncio.gather(
            *(store.register("dave", "Secret123!") for _ in range(attempts)),
            return_exceptions=True,
        )

        successes = [r for r in results if isinstance(r, UserIdentity)]
        duplicates = [r for r in results if isinstance(r, DuplicateUserError)]
        assert len(successes) == 1
        assert len(duplicates) == attempts - 1
        assert (await repository.find_by_normalized_username("dave")).id == successes[0].id
