"""Data models for recipe import."""

from dataclasses import dataclass, field
from enum import Enum

NO_INGREDIENTS = "No ingredients found"
NO_STEPS = "No steps found"
DEFAULT_RECIPE_NAME = "Generated Recipe"
DEFAULT_DURATION = "Not specified"
ERROR_RECIPE_NAME = "Error"


class ExtractionMethod(str, Enum):
    """Strategy that produced a recipe."""

    IMAGE = "image"
    IMAGE_URL = "image_url"
    JSON_LD = "json_ld"
    PAGE_TEXT = "page_text"
    TEXT = "text"
    FAILED = "failed"


@dataclass(frozen=True)
class Recipe:
    """Normalized recipe. Ingredients and steps are never empty."""

    name: str
    ingredients: list[str] = field(default_factory=lambda: [NO_INGREDIENTS])
    steps: list[str] = field(default_factory=lambda: [NO_STEPS])
    duration: str = DEFAULT_DURATION

    @classmethod
    def build(
        cls,
        name: str | None,
        ingredients: list[str] | None,
        steps: list[str] | None,
        duration: str | None,
    ) -> "Recipe":
        """Create a recipe, substituting sentinels for missing fields."""
        return cls(
            name=(name or "").strip() or DEFAULT_RECIPE_NAME,
            ingredients=list(ingredients) if ingredients else [NO_INGREDIENTS],
            steps=list(steps) if steps else [NO_STEPS],
            duration=(duration or "").strip() or DEFAULT_DURATION,
        )

    @classmethod
    def error(cls) -> "Recipe":
        """Sentinel returned when no extraction strategy succeeded."""
        return cls(name=ERROR_RECIPE_NAME)

    @property
    def is_error(self) -> bool:
        return self.name == ERROR_RECIPE_NAME

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ingredients": list(self.ingredients),
            "steps": list(self.steps),
            "duration": self.duration,
        }


@dataclass
class ExtractionResult:
    """Result of a recipe extraction attempt."""

    recipe: Recipe
    method: ExtractionMethod
    source_url: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.method != ExtractionMethod.FAILED
