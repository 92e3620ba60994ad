"""
Auth Service package for the Recipe Access Layer.

This package exposes the FastAPI application that registers users and
issues signed credentials. It is intentionally small and focused:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.store: Credential store, password policy and user repositories.
- app.issuing: Token issuer signing claim sets with the shared secret.

Design notes:
- Keep the package import side-effects minimal; module import must not
  touch the database. All IO happens in route handlers or the startup hook.
- Use the shared/ utilities for logging, metrics, signing and errors.
- Credentials are stateless; nothing about an issued token is stored.
"""
