"""
In-memory recipe catalog served behind the authorization gate.
"""

import threading
from typing import Dict, List

from shared.errors import NotFoundError
from shared.logging import get_logger
from .models import CreateRecipeRequest, IngredientRecord, RecipeRecord

SEED_RECIPES = [
    RecipeRecord(
        id=1,
        title="Chicken Adobo",
        instructions=(
            "Combine all ingredients in a pot. Marinate for 30 mins. "
            "Simmer for 40 mins until tender. Fry slightly if desired."
        ),
        ingredients=[
            IngredientRecord(item="Chicken", quantity="1", uom="kg"),
            IngredientRecord(item="Soy Sauce", quantity="0.5", uom="cup"),
            IngredientRecord(item="Vinegar", quantity="0.5", uom="cup"),
            IngredientRecord(item="Garlic", quantity="1", uom="head"),
            IngredientRecord(item="Bay Leaves", quantity="3", uom="pcs"),
            IngredientRecord(item="Peppercorns", quantity="1", uom="tbsp"),
            IngredientRecord(item="Salt", quantity="1", uom="tbsp"),
        ],
        internal_comments="Grandma's secret",
    ),
]


class RecipeCatalog:
    """Thread-safe recipe collection keyed by id."""

    def __init__(self, seed: bool = True):
        self._recipes: Dict[int, RecipeRecord] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("resource.catalog")
        if seed:
            for recipe in SEED_RECIPES:
                self._recipes[recipe.id] = recipe

    def list_recipes(self) -> List[RecipeRecord]:
        with self._lock:
            return sorted(self._recipes.values(), key=lambda r: r.id)

    def get_recipe(self, recipe_id: int) -> RecipeRecord:
        with self._lock:
            recipe = self._recipes.get(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found", details={"recipe_id": recipe_id})
        return recipe

    def add_recipe(self, request: CreateRecipeRequest) -> RecipeRecord:
        ingredients = [
            IngredientRecord(item=i.item, quantity=i.quantity, uom=i.uom)
            for i in request.ingredients
        ]
        with self._lock:
            recipe_id = max(self._recipes, default=0) + 1
            recipe = RecipeRecord(
                id=recipe_id,
                title=request.title,
                instructions=request.instructions,
                ingredients=ingredients,
            )
            self._recipes[recipe_id] = recipe

        self.logger.info("Recipe added", recipe_id=recipe_id, title=recipe.title)
        return recipe
