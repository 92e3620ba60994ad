"""
Unit tests for AuthorizationGate.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import Request

from service_resource.app.domain import AuthorizationGate
from shared.claims import ClaimSet
from shared.errors import (
    TokenExpired,
    TokenMalformed,
    TokenSignatureInvalid,
    Unauthenticated,
    Unauthorized,
)
from shared.test_helpers import FixedClock


class TestAuthorizationGate:
    """Test cases for AuthorizationGate."""

    @pytest.fixture
    def claims(self):
        now = FixedClock().now
        return ClaimSet(subject_id="user-1", subject_name="alice", issued_at=now, expires_at=now)

    @pytest.fixture
    def verifier(self, claims):
        verifier = MagicMock()
        verifier.verify = MagicMock(return_value=claims)
        return verifier

    @pytest.fixture
    def gate(self, verifier):
        return AuthorizationGate(verifier)

    @pytest.fixture
    def mock_request(self):
        """Create mock request."""
        request = MagicMock(spec=Request)
        request.headers = {}
        request.state = SimpleNamespace()
        request.url = SimpleNamespace(path="/api/recipes")
        return request

    @pytest.mark.asyncio
    async def test_valid_token_attaches_claims(self, gate, verifier, mock_request, claims):
        """A verified token admits the request and stores the claims."""
        mock_request.headers = {"Authorization": "Bearer valid_token"}

        result = await gate(mock_request)

        assert result == claims
        assert mock_request.state.claims == claims
        verifier.verify.assert_called_once_with("valid_token")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scheme", ["bearer", "BEARER", "bEaReR"])
    async def test_scheme_is_case_insensitive(self, gate, verifier, mock_request, claims, scheme):
        """The Bearer scheme name matches regardless of case."""
        mock_request.headers = {"Authorization": f"{scheme} valid_token"}

        assert await gate(mock_request) == claims
        verifier.verify.assert_called_once_with("valid_token")

    @pytest.mark.asyncio
    async def test_missing_header(self, gate, verifier, mock_request):
        """No header fails before the verifier is consulted."""
        with pytest.raises(Unauthenticated):
            await gate(mock_request)

        verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer    ", "Bearertoken", "token"])
    async def test_malformed_header(self, gate, verifier, mock_request, header):
        """Headers not of the form 'Bearer <token>' count as no token."""
        mock_request.headers = {"Authorization": header}

        with pytest.raises(Unauthenticated):
            await gate(mock_request)

        verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [TokenMalformed(), TokenSignatureInvalid(), TokenExpired()])
    async def test_token_errors_are_uniform(self, gate, verifier, mock_request, error):
        """Every verification failure surfaces as the same Unauthorized."""
        mock_request.headers = {"Authorization": "Bearer bad_token"}
        verifier.verify.side_effect = error

        with pytest.raises(Unauthorized) as exc_info:
            await gate(mock_request)

        assert type(exc_info.value) is Unauthorized
        assert exc_info.value.code == "UNAUTHORIZED"
        assert exc_info.value.message == "Unauthorized"
        assert not hasattr(mock_request.state, "claims")

    def test_extract_bearer_token(self):
        """Bearer prefix is stripped and surrounding whitespace ignored."""
        assert AuthorizationGate.extract_bearer_token("Bearer abc.def.ghi ") == "abc.def.ghi"
        assert AuthorizationGate.extract_bearer_token(None) is None
        assert AuthorizationGate.extract_bearer_token("") is None
