"""
Token issuing package.

Signs claim sets for authenticated users with the shared HMAC secret.
"""

from .token_issuer import TokenIssuer

__all__ = ["TokenIssuer"]
