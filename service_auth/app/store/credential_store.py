"""
Credential store: user registration and password verification.
"""

import asyncio
import secrets
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from shared.errors import AuthenticationError, DuplicateUserError, ValidationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .password_policy import PasswordPolicy
from .repository import UserIdentity, UserRepository, normalize_username


class CredentialStore:
    """Owns user identities and the one-way password hashes that protect them.

    Argon2 is deliberately slow, so hashing and verification run in worker
    threads and never block the event loop.
    """

    def __init__(
        self,
        repository: UserRepository,
        hasher: Optional[PasswordHasher] = None,
        policy: Optional[PasswordPolicy] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.repository = repository
        self.hasher = hasher or PasswordHasher()
        self.policy = policy or PasswordPolicy()
        self.metrics = metrics
        self.logger = get_logger("auth.credential_store")

        # Verified against when the username is unknown so both failure paths
        # cost one argon2 verification. Built off the event loop on first use.
        self._dummy_hash: Optional[str] = None

    async def register(self, username: str, password: str) -> UserIdentity:
        """
        Register a new user.

        Args:
            username: Requested username; case is preserved for display
            password: Plaintext password, hashed before it leaves this method

        Returns:
            The created identity

        Raises:
            ValidationError: If the username or password is empty or breaks policy
            DuplicateUserError: If the case-folded username is already registered
        """
        username = (username or "").strip()
        password = password or ""

        errors = self.policy.check_username(username) + self.policy.check_password(password)
        if errors:
            self.logger.info("Registration rejected", username=username,
                             reasons=[error.code for error in errors])
            raise ValidationError("Registration failed", errors=errors)

        # Cheap early exit; the repository insert is still the authority.
        if await self.repository.find_by_normalized_username(normalize_username(username)):
            self.logger.info("Registration rejected", username=username, reasons=["DuplicateUserName"])
            raise DuplicateUserError(username)

        password_hash = await self._run_hasher("hash", self.hasher.hash, password)
        identity = UserIdentity.create(username, password_hash)

        try:
            await self.repository.insert(identity)
        except DuplicateUserError:
            self.logger.info("Registration lost race", username=username)
            raise

        self.logger.info("User registered", user_id=identity.id, username=identity.username)
        return identity

    async def verify(self, username: str, password: str) -> UserIdentity:
        """
        Check a username/password pair.

        Unknown users and wrong passwords fail identically.

        Raises:
            AuthenticationError: If the credentials do not match a user
        """
        normalized = normalize_username(username or "")
        if not normalized or not password:
            raise AuthenticationError()

        dummy_hash = await self.warm_up()
        identity = await self.repository.find_by_normalized_username(normalized)
        stored_hash = identity.password_hash if identity else dummy_hash
        matched = await self._run_hasher("verify", self._check_password, stored_hash, password)

        if identity is None or not matched:
            self.logger.warning("Login rejected", username=username)
            raise AuthenticationError()

        self.logger.info("Login accepted", user_id=identity.id)
        return identity

    async def bootstrap(self, username: str, password: str) -> Optional[UserIdentity]:
        """Idempotently seed a user before the service accepts traffic."""
        try:
            identity = await self.register(username, password)
        except DuplicateUserError:
            self.logger.info("Seed user already present", username=username)
            return None

        self.logger.info("Seed user created", username=identity.username)
        return identity

    async def warm_up(self) -> str:
        """Build the dummy hash used for unknown users, once."""
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(self.hasher.hash, secrets.token_urlsafe(16))
        return self._dummy_hash

    def _check_password(self, stored_hash: str, password: str) -> bool:
        try:
            return self.hasher.verify(stored_hash, password)
        except VerifyMismatchError:
            return False
        except InvalidHashError:
            self.logger.error("Stored password hash is unreadable")
            return False

    async def _run_hasher(self, operation: str, func, *args):
        if self.metrics is None:
            return await asyncio.to_thread(func, *args)
        with self.metrics.time_operation("password_hash_duration_seconds", operation=operation):
            return await asyncio.to_thread(func, *args)
