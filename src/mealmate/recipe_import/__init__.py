"""Recipe import: turn text, images, and URLs into structured recipes."""

from .models import ExtractionMethod, ExtractionResult, Recipe
from .resolver import RecipeSourceResolver
from .text_parser import parse_recipe_text

__all__ = [
    "ExtractionMethod",
    "ExtractionResult",
    "Recipe",
    "RecipeSourceResolver",
    "parse_recipe_text",
]
