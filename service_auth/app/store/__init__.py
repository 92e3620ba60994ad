"""
User store package.

- credential_store: registration and password verification (argon2)
- password_policy: username and password rules
- repository: UserIdentity plus the in-memory repository
- sqlite_repository: aiosqlite-backed repository with a unique username index
"""

from .credential_store import CredentialStore
from .password_policy import PasswordPolicy
from .repository import InMemoryUserRepository, UserIdentity, UserRepository, normalize_username
from .sqlite_repository import SQLiteUserRepository

__all__ = [
    "CredentialStore",
    "InMemoryUserRepository",
    "PasswordPolicy",
    "SQLiteUserRepository",
    "UserIdentity",
    "UserRepository",
    "normalize_username",
]
