"""
User identity records and the repositories that persist them.
"""

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from shared.errors import DuplicateUserError
from shared.logging import get_logger


def normalize_username(username: str) -> str:
    """Case-insensitive form used for uniqueness and lookups."""
    return username.strip().casefold()


@dataclass(frozen=True)
class UserIdentity:
    """A registered user. The password hash is never exposed over HTTP."""

    id: str
    username: str
    normalized_username: str
    password_hash: str = field(repr=False)

    @classmethod
    def create(cls, username: str, password_hash: str) -> "UserIdentity":
        username = username.strip()
        return cls(
            id=str(uuid.uuid4()),
            username=username,
            normalized_username=normalize_username(username),
            password_hash=password_hash,
        )


class UserRepository(ABC):
    """Persistence capability the credential store needs: lookup and atomic insert."""

    async def initialize(self) -> None:
        """Create backing structures. Must be idempotent."""

    async def close(self) -> None:
        """Release backing resources."""

    @abstractmethod
    async def find_by_normalized_username(self, normalized_username: str) -> Optional[UserIdentity]:
        ...

    @abstractmethod
    async def insert(self, identity: UserIdentity) -> None:
        """Insert a new identity.

        Raises:
            DuplicateUserError: If the normalized username is already taken.
                Exactly one of several concurrent inserts for the same name
                succeeds.
        """


class InMemoryUserRepository(UserRepository):
    """Dictionary-backed repository for tests and single-process deployments."""

    def __init__(self):
        self._users: Dict[str, UserIdentity] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("auth.store.memory")

    async def find_by_normalized_username(self, normalized_username: str) -> Optional[UserIdentity]:
        with self._lock:
            return self._users.get(normalized_username)

    async def insert(self, identity: UserIdentity) -> None:
        with self._lock:
            if identity.normalized_username in self._users:
                raise DuplicateUserError(identity.username)
            self._users[identity.normalized_username] = identity

        self.logger.debug("User inserted", user_id=identity.id)

    def __len__(self) -> int:
        return len(self._users)
