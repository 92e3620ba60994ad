"""
Authorization gate for protected Resource service routes.
"""

from typing import Optional

from fastapi import Request

from shared.claims import ClaimSet
from shared.errors import TokenError, Unauthenticated, Unauthorized
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from ..validation.token_verifier import TokenVerifier

BEARER_SCHEME = "bearer"


class AuthorizationGate:
    """Admits a request only if it carries a valid bearer credential.

    Handlers compose with the gate explicitly, e.g.
    ``claims: ClaimSet = Depends(gate)``; the handler body runs only after the
    gate has accepted the request.
    """

    def __init__(self, verifier: TokenVerifier, metrics: Optional[MetricsCollector] = None):
        self.verifier = verifier
        self.metrics = metrics
        self.logger = get_logger("resource.authorization_gate")

    async def __call__(self, request: Request) -> ClaimSet:
        return self.authenticate_request(request)

    def authenticate_request(self, request: Request) -> ClaimSet:
        """
        Verify the request's bearer credential and attach its claims.

        Raises:
            Unauthenticated: No ``Authorization: Bearer <token>`` header
            Unauthorized: A credential was presented but rejected
        """
        token = self.extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            self._record("missing")
            self.logger.info("Request rejected", reason="missing_token", path=request.url.path)
            raise Unauthenticated()

        try:
            claims = self.verifier.verify(token)
        except TokenError as e:
            # The specific failure stays in the logs; callers get a generic 401.
            self._record(e.code.lower())
            self.logger.warning("Request rejected", reason=e.code, path=request.url.path)
            raise Unauthorized()

        request.state.claims = claims
        set_user_context(claims.subject_id)
        self._record("accepted")
        self.logger.info("Request authenticated", user_id=claims.subject_id, path=request.url.path)
        return claims

    @staticmethod
    def extract_bearer_token(header: Optional[str]) -> Optional[str]:
        """Return the token from an ``Authorization`` header value, if any."""
        if not header:
            return None
        # Auth schemes are case-insensitive (RFC 7235).
        scheme, _, token = header.strip().partition(" ")
        if scheme.lower() != BEARER_SCHEME:
            return None
        return token.strip() or None

    def _record(self, outcome: str):
        if self.metrics is not None:
            self.metrics.increment_counter("token_verifications_total", outcome=outcome)
