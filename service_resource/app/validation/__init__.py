"""
Token validation package.

Verifies credentials issued by the Auth service with the shared HMAC
secret: signature over the raw segments first, then claims and expiry.
"""

from .token_verifier import TokenVerifier

__all__ = ["TokenVerifier"]
