from .catalog import RecipeCatalog
from .models import CreateRecipeRequest, RecipeDto, RecipeListResponse

__all__ = ["CreateRecipeRequest", "RecipeCatalog", "RecipeDto", "RecipeListResponse"]
