"""
Auth service for the Recipe Access Layer.

This is the identity authority: it registers users, checks passwords and
issues signed bearer credentials that the resource service verifies on its
own with the shared secret.
"""

from typing import Any, Optional

from argon2 import PasswordHasher

from shared.base_service import BaseService
from shared.errors import AuthenticationError, ConfigurationError, ValidationError
from .issuing.token_issuer import TokenIssuer
from .models import AuthRequest, LoginResponse, RegisterResponse
from .store import (
    CredentialStore,
    InMemoryUserRepository,
    PasswordPolicy,
    SQLiteUserRepository,
    UserRepository,
)


class AuthService(BaseService):
    """Auth service implementation."""

    def __init__(
        self,
        repository: Optional[UserRepository] = None,
        hasher: Optional[PasswordHasher] = None,
        **config_overrides: Any,
    ):
        super().__init__("auth", 8010, **config_overrides)

        self.repository = repository if repository is not None else self._create_repository()
        self.credential_store = CredentialStore(
            self.repository,
            hasher=hasher,
            policy=PasswordPolicy.from_config(self.config),
            metrics=self.metrics,
        )
        self.token_issuer = TokenIssuer(self.signing_secret)

        self._setup_auth_routes()

    def _create_repository(self) -> UserRepository:
        if self.config.user_store == "memory":
            return InMemoryUserRepository()
        if self.config.user_store == "sqlite":
            return SQLiteUserRepository(self.config.database_path)
        raise ConfigurationError(f"Unknown user store '{self.config.user_store}'")

    async def startup(self):
        """Prepare the user store and seed the bootstrap user."""
        await self.repository.initialize()
        await self.credential_store.warm_up()

        if self.config.seed_username and self.config.seed_password:
            await self.credential_store.bootstrap(
                self.config.seed_username,
                self.config.seed_password.get_secret_value(),
            )

    async def shutdown(self):
        await self.repository.close()

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "auth",
                "message": "Recipe Access Layer - Auth Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/auth/register", response_model=RegisterResponse)
        async def register(request: AuthRequest):
            """Create a user account."""
            try:
                identity = await self.credential_store.register(request.username, request.password)
            except ValidationError as e:
                self.metrics.increment_counter("registrations_total", outcome=e.code.lower())
                raise

            self.metrics.increment_counter("registrations_total", outcome="success")
            self.metrics.record_business_event("user_registered")
            return RegisterResponse(id=identity.id, username=identity.username)

        @self.app.post("/api/auth/login", response_model=LoginResponse)
        async def login(request: AuthRequest):
            """Exchange a username and password for a signed credential."""
            try:
                identity = await self.credential_store.verify(request.username, request.password)
            except AuthenticationError:
                self.metrics.increment_counter("logins_total", outcome="rejected")
                raise

            token = self.token_issuer.issue(identity)
            self.metrics.increment_counter("logins_total", outcome="success")
            self.metrics.increment_counter("tokens_issued_total")
            self.metrics.record_business_event("token_issued")
            return LoginResponse(token=token)

    async def _check_dependencies(self):
        """Check auth dependencies."""
        # Any store failure propagates and the health route answers 503.
        await self.repository.find_by_normalized_username("")
        return {"user_store": "ok"}


def create_app(**kwargs: Any):
    """Create FastAPI application."""
    service = AuthService(**kwargs)
    return service.app


def main():
    """Console entry point."""
    AuthService().run()


if __name__ == "__main__":
    main()
