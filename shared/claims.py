"""
Claim set carried inside a credential, plus the wire constants both services
agree on.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from .errors import TokenMalformed

ALGORITHM = "HS512"
TOKEN_TTL = timedelta(hours=24)

# Payload claim names
SUBJECT_ID = "sub"
SUBJECT_NAME = "name"
ISSUED_AT = "iat"
EXPIRES_AT = "exp"

REQUIRED_CLAIMS = (SUBJECT_ID, SUBJECT_NAME, ISSUED_AT, EXPIRES_AT)


@dataclass(frozen=True)
class ClaimSet:
    """Facts about the authenticated subject."""

    subject_id: str
    subject_name: str
    issued_at: datetime
    expires_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        return {
            SUBJECT_ID: self.subject_id,
            SUBJECT_NAME: self.subject_name,
            ISSUED_AT: int(self.issued_at.timestamp()),
            EXPIRES_AT: int(self.expires_at.timestamp()),
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ClaimSet":
        """Rebuild a claim set from a verified payload.

        Raises:
            TokenMalformed: If a required claim is missing or mistyped
        """
        missing = [name for name in REQUIRED_CLAIMS if name not in payload]
        if missing:
            raise TokenMalformed(f"Token is missing claims: {', '.join(missing)}")

        subject_id = payload[SUBJECT_ID]
        subject_name = payload[SUBJECT_NAME]
        if not isinstance(subject_id, str) or not subject_id:
            raise TokenMalformed("Token subject id must be a non-empty string")
        if not isinstance(subject_name, str) or not subject_name:
            raise TokenMalformed("Token subject name must be a non-empty string")

        timestamps = {}
        for name in (ISSUED_AT, EXPIRES_AT):
            value = payload[name]
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise TokenMalformed(f"Token claim '{name}' must be an integer timestamp")
            try:
                timestamps[name] = datetime.fromtimestamp(value, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                raise TokenMalformed(f"Token claim '{name}' is out of range")

        return cls(
            subject_id=subject_id,
            subject_name=subject_name,
            issued_at=timestamps[ISSUED_AT],
            expires_at=timestamps[EXPIRES_AT],
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
