"""
Recipe models.

``RecipeRecord`` is the stored shape and keeps internal comments that must
never leave the service; the DTOs are what callers see.
"""

from dataclasses import dataclass, field
from typing import List

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class IngredientRecord:
    item: str
    quantity: str
    uom: str


@dataclass(frozen=True)
class RecipeRecord:
    id: int
    title: str
    instructions: str
    ingredients: List[IngredientRecord] = field(default_factory=list)
    internal_comments: str = ""


class IngredientDto(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    item: str = Field(min_length=1)
    quantity: str
    uom: str = ""


class RecipeDto(BaseModel):
    id: int
    title: str
    instructions: str
    ingredients: List[IngredientDto]

    @classmethod
    def from_record(cls, record: RecipeRecord) -> "RecipeDto":
        return cls(
            id=record.id,
            title=record.title,
            instructions=record.instructions,
            ingredients=[
                IngredientDto(item=i.item, quantity=i.quantity, uom=i.uom)
                for i in record.ingredients
            ],
        )


class RecipeListResponse(BaseModel):
    recipes: List[RecipeDto]
    count: int


class CreateRecipeRequest(BaseModel):
    # Stripped before the length check, so whitespace-only text is rejected.
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    instructions: str = Field(min_length=1)
    ingredients: List[IngredientDto] = Field(default_factory=list)
