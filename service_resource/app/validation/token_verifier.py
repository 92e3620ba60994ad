"""
Token verification for the Resource service.
"""

import binascii
from datetime import datetime, timezone
from typing import Callable, Optional

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_decode

from shared.claims import ALGORITHM, REQUIRED_CLAIMS, ClaimSet
from shared.errors import TokenExpired, TokenMalformed, TokenSignatureInvalid
from shared.logging import get_logger
from shared.signing import SigningSecret


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenVerifier:
    """Checks integrity and freshness of credentials signed with the shared secret.

    The HMAC is checked against the raw segment text before the header or
    payload is parsed, so a forged payload is never read. Instances hold only
    immutable state and are safe to share across concurrent requests.
    """

    def __init__(self, secret: SigningSecret, clock: Optional[Callable[[], datetime]] = None):
        self._secret = secret
        self._hmac = HMACAlgorithm(HMACAlgorithm.SHA512)
        self._key = self._hmac.prepare_key(secret.value)
        self._clock = clock or utc_now
        self.logger = get_logger("resource.token_verifier")

    def verify(self, token: str) -> ClaimSet:
        """
        Verify a compact credential.

        Args:
            token: ``header.payload.signature`` without the Bearer prefix

        Returns:
            The verified claim set

        Raises:
            TokenMalformed: Wrong segment count, undecodable segment or bad claims
            TokenSignatureInvalid: HMAC does not match
            TokenExpired: Current time is at or past the expiry
        """
        signing_input, signature = self._split(token)

        if not self._hmac.verify(signing_input, self._key, signature):
            raise TokenSignatureInvalid()

        try:
            payload = jwt.decode(
                token,
                self._secret.value,
                algorithms=[ALGORITHM],
                options={
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except jwt.InvalidTokenError as e:
            raise TokenMalformed(f"Token could not be decoded: {e}")

        claims = ClaimSet.from_payload(payload)
        if claims.is_expired(self._clock()):
            raise TokenExpired()

        return claims

    def _split(self, token: str):
        if not isinstance(token, str):
            raise TokenMalformed("Token must be a string")

        segments = token.split(".")
        if len(segments) != 3:
            raise TokenMalformed("Token must have exactly three segments")

        try:
            signing_input = f"{segments[0]}.{segments[1]}".encode("ascii")
            for segment in segments[:2]:
                base64url_decode(segment)
            signature = base64url_decode(segments[2])
        except (binascii.Error, ValueError):
            raise TokenMalformed("Token segment is not valid base64url")

        return signing_input, signature
