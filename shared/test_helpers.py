"""
Test helper functions and factory methods for the Recipe Access Layer.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from argon2 import PasswordHasher

from shared.signing import SigningSecret

# 64+ bytes, shared by both services in tests.
TEST_SIGNING_KEY = "test-signing-key-" + "0123456789abcdef" * 4
OTHER_SIGNING_KEY = "other-signing-key-" + "fedcba9876543210" * 4


@dataclass
class SampleUser:
    """Sample user credentials that satisfy the default password policy."""
    username: str = "alice"
    password: str = "Secret123!"


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_secret(key: str = TEST_SIGNING_KEY) -> SigningSecret:
    return SigningSecret.from_config(key)


def fast_password_hasher() -> PasswordHasher:
    """Argon2 with minimal cost so test suites stay fast."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


def service_overrides(**extra: Any) -> Dict[str, Any]:
    """Configuration overrides for building a service in tests."""
    overrides = {
        "env": "test",
        "log_level": "warning",
        "jwt_signing_key": TEST_SIGNING_KEY,
        "user_store": "memory",
    }
    overrides.update(extra)
    return overrides
