"""Data models and schemas for the recipe discovery service.

Defines Pydantic models for request validation and the domain objects shared
by the generator, the fallback tables, the cache and the HTTP layer.
All models use Pydantic v2. Python attributes are snake_case; the wire form
uses camelCase aliases (suggestedIngredients, videoId, ...) and both are
accepted on input.
"""

from datetime import datetime, timezone
from typing import List, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# Staples offered when no recipe can be produced for the given ingredients
DEFAULT_SUGGESTED_INGREDIENTS: tuple[str, ...] = (
    "طماطم",
    "بصل",
    "ثوم",
    "بطاطس",
    "جزر",
    "دجاج",
    "لحم",
    "بيض",
    "أرز",
    "معكرونة",
)


def cache_key(ingredients: List[str]) -> str:
    """Canonical signature of an ingredient list.

    Trimmed, lowercased, sorted and comma-joined, so any permutation of
    case-insensitively equal ingredients yields the same key.
    """
    return ",".join(sorted(ingredient.strip().lower() for ingredient in ingredients))


class WasfaModel(BaseModel):
    """Base model: strips strings and speaks camelCase on the wire."""

    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Recipe(WasfaModel):
    """A single recipe. List order of ingredients and instructions is meaningful."""

    title: Annotated[str, Field(min_length=1, max_length=200, description="Recipe name (1-200 chars)")]
    description: Annotated[str, Field("", max_length=2000, description="Short description of the dish")]
    ingredients: Annotated[
        List[str], Field(default_factory=list, description="Ingredients with quantities, in recipe order")
    ]
    instructions: Annotated[List[str], Field(default_factory=list, description="Ordered cooking steps")]
    video_id: Annotated[
        Optional[str], Field(None, max_length=64, description="YouTube video id, set by the video enricher")
    ]


class RecipeResult(WasfaModel):
    """Recipe bundle returned for an ingredient list.

    When no recipe could be produced the bundle still carries suggestions:
    an empty recipes list always comes with a non-empty suggested_ingredients.
    """

    recipes: Annotated[List[Recipe], Field(default_factory=list, description="Recipes, best match first")]
    suggested_ingredients: Annotated[
        List[str], Field(default_factory=list, description="Ingredients worth adding to the list")
    ]

    @field_validator("suggested_ingredients", mode="before")
    @classmethod
    def drop_blank_suggestions(cls, v: Optional[List[str]]) -> List[str]:
        """Treat a missing list as empty and drop blank or non-string entries."""
        if not v:
            return []
        return [item for item in v if isinstance(item, str) and item.strip()]

    @model_validator(mode="after")
    def ensure_suggestions(self) -> "RecipeResult":
        """Fill the default staples when there is nothing else to show."""
        if not self.recipes and not self.suggested_ingredients:
            self.suggested_ingredients = list(DEFAULT_SUGGESTED_INGREDIENTS)
        return self

    @classmethod
    def empty(cls) -> "RecipeResult":
        """Bundle with no recipes and the default suggestions."""
        return cls(recipes=[], suggested_ingredients=list(DEFAULT_SUGGESTED_INGREDIENTS))


class CacheEntry(WasfaModel):
    """Stored recipe bundle. Written once, never updated or expired."""

    key: Annotated[str, Field(description="Canonical ingredient signature (see cache_key)")]
    result: RecipeResult
    created_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(timezone.utc))]


class Substitute(WasfaModel):
    """Replacement for an ingredient. ratio is free text ("1:1", "1 كوب لكل 1 كوب")."""

    name: Annotated[str, Field(min_length=1)]
    ratio: Annotated[str, Field(min_length=1)]
    notes: Optional[str] = None


class SubstitutionResult(WasfaModel):
    """Substitutes found for one ingredient."""

    original_ingredient: str
    substitutes: Annotated[List[Substitute], Field(min_length=1)]


class IngredientPairing(WasfaModel):
    """An ingredient that goes well with the queried one."""

    name: Annotated[str, Field(min_length=1)]
    affinity: Annotated[int, Field(ge=1, le=10, description="Pairing strength (1-10)")]
    description: Annotated[str, Field("", description="Why the two work together")]
    use_cases: Annotated[Optional[List[str]], Field(None, description="Dishes where the pairing shows up")]


class CuisineAffinity(WasfaModel):
    cuisine: Annotated[str, Field(min_length=1)]
    affinity: Annotated[int, Field(ge=1, le=10)]


class PairingResult(WasfaModel):
    """Pairing suggestions for one ingredient."""

    ingredient: str
    pairings: Annotated[List[IngredientPairing], Field(default_factory=list)]
    cuisine_affinities: Annotated[List[CuisineAffinity], Field(default_factory=list)]


class RecipeRequest(WasfaModel):
    """Input schema for recipe discovery.

    At least one ingredient, at most 50; each one must be non-blank after
    trimming.
    """

    ingredients: Annotated[
        List[str], Field(min_length=1, max_length=50, description="Ingredients on hand (1-50 items)")
    ]

    @field_validator("ingredients")
    @classmethod
    def validate_ingredients(cls, v: List[str]) -> List[str]:
        """Reject blank and overlong ingredient names."""
        cleaned = [ingredient.strip() for ingredient in v]
        for ingredient in cleaned:
            if not ingredient:
                raise ValueError("Ingredient names must not be blank")
            if len(ingredient) > 100:
                raise ValueError(f"Ingredient name too long (max 100 chars): {ingredient[:30]}...")
        return cleaned


class RecipeSearchRequest(WasfaModel):
    """Input schema for a search by dish name (e.g. "كبسة")."""

    query: Annotated[str, Field(min_length=2, max_length=100, description="Dish name, at least 2 chars")]


class SubstitutionRequest(WasfaModel):
    """Input schema for a substitution lookup."""

    ingredient: Annotated[str, Field(min_length=1, max_length=100, description="Ingredient to replace")]


class PairingRequest(WasfaModel):
    """Input schema for a pairing lookup."""

    ingredient: Annotated[str, Field(min_length=1, max_length=100, description="Ingredient to pair")]
