"""
Resource Service package for the Recipe Access Layer.

This package exposes the FastAPI application that serves the recipe
catalog to callers holding a valid credential:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.validation: Token verifier (signature first, then claims and expiry).
- app.domain: Authorization gate composed into every protected route.
- app.catalog: Recipe records and their public DTOs.

Design notes:
- Verification is local: the shared secret is the whole trust
  relationship with the Auth service, there is no network hop.
- Callers only ever learn "401 Unauthorized"; which check failed is
  logged, never returned.
"""
