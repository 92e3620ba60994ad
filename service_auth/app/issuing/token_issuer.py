"""
Credential issuance for authenticated users.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from shared.claims import ALGORITHM, TOKEN_TTL, ClaimSet
from shared.logging import get_logger
from shared.signing import SigningSecret
from ..store.repository import UserIdentity


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Mints HS512-signed bearer credentials.

    The output is ``base64url(header).base64url(payload).base64url(hmac)``
    with no padding, readable by any standard JWT library holding the same
    secret.
    """

    def __init__(
        self,
        secret: SigningSecret,
        ttl: timedelta = TOKEN_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._secret = secret
        self.ttl = ttl
        self._clock = clock or utc_now
        self.logger = get_logger("auth.token_issuer")

    def claims_for(self, identity: UserIdentity) -> ClaimSet:
        """Build the claim set for an identity as of now."""
        issued_at = self._clock().replace(microsecond=0)
        return ClaimSet(
            subject_id=identity.id,
            subject_name=identity.username,
            issued_at=issued_at,
            expires_at=issued_at + self.ttl,
        )

    def issue(self, identity: UserIdentity) -> str:
        """
        Issue a signed credential for an authenticated identity.

        Args:
            identity: The user the credential vouches for

        Returns:
            Compact credential string with exactly two "." separators
        """
        claims = self.claims_for(identity)
        token = jwt.encode(
            claims.to_payload(),
            self._secret.value,
            algorithm=ALGORITHM,
            headers={"typ": "JWT"},
        )

        self.logger.info(
            "Token issued",
            user_id=claims.subject_id,
            expires_at=claims.expires_at.isoformat(),
        )
        return token
