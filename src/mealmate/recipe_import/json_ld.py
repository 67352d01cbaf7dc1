"""Schema.org Recipe discovery in structured page markup."""

import logging
from typing import Any

import extruct

from .models import Recipe
from .normalizer import extract_instructions_text, normalize_ingredients, recipe_duration

logger = logging.getLogger(__name__)

UNKNOWN_RECIPE_NAME = "Unknown Recipe"


def extract_recipe_from_html(html: str, base_url: str | None = None) -> Recipe | None:
    """
    Find embedded Recipe markup in a page and map it to a Recipe.

    Looks at JSON-LD first, then microdata. Returns None when the page has
    no Recipe node.
    """
    items = extract_structured_data(html, base_url)
    node = find_recipe_node(items)
    if node is None:
        return None
    return recipe_from_node(node)


def extract_structured_data(html: str, base_url: str | None = None) -> list[Any]:
    """Parse JSON-LD and microdata items, microdata in JSON-LD shape."""
    try:
        data = extruct.extract(
            html,
            base_url=base_url,
            syntaxes=["json-ld", "microdata"],
            uniform=True,
            errors="log",
        )
    except Exception as e:
        # Malformed markup should not stop the text fallback
        logger.debug(f"Structured data extraction failed for {base_url}: {e}")
        return []

    return list(data.get("json-ld", [])) + list(data.get("microdata", []))


def find_recipe_node(data: Any) -> dict | None:
    """
    Depth-first search for the first node typed Recipe.

    Walks lists and every dict value, so Recipes nested in @graph,
    mainEntity, or arrays are found. The input is a freshly parsed tree.
    """
    if isinstance(data, list):
        for item in data:
            found = find_recipe_node(item)
            if found is not None:
                return found
        return None

    if isinstance(data, dict):
        if _is_recipe_type(data.get("@type")):
            return data
        for value in data.values():
            found = find_recipe_node(value)
            if found is not None:
                return found

    return None


def recipe_from_node(node: dict) -> Recipe:
    """Map a schema.org Recipe node to a Recipe."""
    name = node.get("name")
    if isinstance(name, list):
        name = name[0] if name else None

    return Recipe.build(
        name=str(name).strip() if name else UNKNOWN_RECIPE_NAME,
        ingredients=normalize_ingredients(node.get("recipeIngredient") or node.get("ingredients")),
        steps=extract_instructions_text(node.get("recipeInstructions")),
        duration=recipe_duration(node),
    )


def _is_recipe_type(node_type: Any) -> bool:
    if isinstance(node_type, str):
        return _local_name(node_type) == "recipe"
    if isinstance(node_type, list):
        return any(isinstance(t, str) and _local_name(t) == "recipe" for t in node_type)
    return False


def _local_name(type_name: str) -> str:
    # "http://schema.org/Recipe" and "schema:Recipe" both count
    return type_name.rsplit("/", 1)[-1].rsplit(":", 1)[-1].strip().lower()
