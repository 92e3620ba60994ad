"""
Shared signing secret for credentials.

Both services load the same secret once at startup and pass it explicitly to
the token issuer (auth service) or verifier (resource service). The secret is
symmetric: anyone holding it can mint credentials, so it must never reach a
log line or a response body.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from pydantic import SecretStr

from .errors import ConfigurationError

# HS512 produces a 64-byte MAC; shorter keys weaken it.
MIN_SECRET_BYTES = 64


@dataclass(frozen=True)
class SigningSecret:
    """Immutable HMAC key shared by issuer and verifier."""

    value: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.value, bytes):
            raise ConfigurationError("Signing secret must be bytes")
        if len(self.value) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                "Signing secret is too short",
                details={"min_bytes": MIN_SECRET_BYTES, "actual_bytes": len(self.value)},
            )

    @classmethod
    def from_config(cls, configured: Optional[Union[SecretStr, str, bytes]]) -> "SigningSecret":
        """Build the secret from configuration, refusing absent or weak keys."""
        if isinstance(configured, SecretStr):
            configured = configured.get_secret_value()
        if configured is None or (isinstance(configured, str) and not configured.strip()):
            raise ConfigurationError("ACCESS_JWT_SIGNING_KEY is not set")
        if isinstance(configured, str):
            configured = configured.encode("utf-8")
        return cls(configured)

    def __len__(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return f"SigningSecret(<{len(self.value)} bytes>)"

    __repr__ = __str__
