"""
Resource service for the Recipe Access Layer.

Guards the recipe catalog. Credentials are verified locally with the shared
signing secret; this service never calls the Auth service.
"""

from typing import Any, Optional

from fastapi import Depends

from shared.base_service import BaseService
from shared.claims import ClaimSet
from .catalog import CreateRecipeRequest, RecipeCatalog, RecipeDto, RecipeListResponse
from .domain.authorization_gate import AuthorizationGate
from .validation.token_verifier import TokenVerifier


class ResourceService(BaseService):
    """Resource service implementation."""

    def __init__(self, catalog: Optional[RecipeCatalog] = None, **config_overrides: Any):
        super().__init__("resource", 8020, **config_overrides)

        self.token_verifier = TokenVerifier(self.signing_secret)
        self.gate = AuthorizationGate(self.token_verifier, metrics=self.metrics)
        self.catalog = catalog or RecipeCatalog()

        self._setup_resource_routes()

    def _setup_resource_routes(self):
        """Set up protected recipe routes."""
        gate = self.gate

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "resource",
                "message": "Recipe Access Layer - Resource Service",
                "version": "1.0.0"
            }

        @self.app.get("/api/me")
        async def whoami(claims: ClaimSet = Depends(gate)):
            """Echo the verified claims of the caller."""
            return {
                "id": claims.subject_id,
                "username": claims.subject_name,
                "issued_at": claims.issued_at.isoformat(),
                "expires_at": claims.expires_at.isoformat(),
            }

        @self.app.get("/api/recipes", response_model=RecipeListResponse)
        async def list_recipes(claims: ClaimSet = Depends(gate)):
            """List all recipes."""
            recipes = [RecipeDto.from_record(r) for r in self.catalog.list_recipes()]
            return RecipeListResponse(recipes=recipes, count=len(recipes))

        @self.app.get("/api/recipes/{recipe_id}", response_model=RecipeDto)
        async def get_recipe(recipe_id: int, claims: ClaimSet = Depends(gate)):
            """Get a single recipe."""
            return RecipeDto.from_record(self.catalog.get_recipe(recipe_id))

        @self.app.post("/api/recipes", response_model=RecipeDto, status_code=201)
        async def create_recipe(request: CreateRecipeRequest, claims: ClaimSet = Depends(gate)):
            """Add a recipe to the catalog."""
            recipe = self.catalog.add_recipe(request)
            self.metrics.record_business_event("recipe_created")
            self.logger.info("Recipe created", recipe_id=recipe.id, user_id=claims.subject_id)
            return RecipeDto.from_record(recipe)


def create_app(**kwargs: Any):
    """Create FastAPI application."""
    service = ResourceService(**kwargs)
    return service.app


def main():
    """Console entry point."""
    ResourceService().run()


if __name__ == "__main__":
    main()
