"""Normalization utilities for schema.org recipe data."""

import re
from typing import Any

ISO_DURATION = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:\d+(?:\.\d+)?S)?)?$", re.IGNORECASE)


def parse_duration(duration: Any) -> int | None:
    """
    Parse ISO 8601 duration to minutes.

    Examples:
        PT30M -> 30
        PT1H -> 60
        PT1H30M -> 90
        P1DT2H -> 1560
    """
    if not duration:
        return None

    if isinstance(duration, int):
        return duration

    match = ISO_DURATION.match(str(duration).strip())
    if not match:
        try:
            return int(str(duration).strip())
        except ValueError:
            return None

    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    total = days * 1440 + hours * 60 + minutes
    return total or None


def format_minutes(minutes: int) -> str:
    """
    Render minutes as a human duration.

    Examples:
        30 -> "30 minutes"
        60 -> "1 hour"
        135 -> "2 hours 15 minutes"
    """
    hours, mins = divmod(minutes, 60)
    parts = []
    if hours:
        parts.append(f"{hours} hour" + ("s" if hours != 1 else ""))
    if mins:
        parts.append(f"{mins} minute" + ("s" if mins != 1 else ""))
    return " ".join(parts)


def recipe_duration(recipe_data: dict) -> str | None:
    """
    Pick a display duration for a schema.org Recipe node.

    Uses totalTime, else prepTime + cookTime. Unparseable values are kept
    verbatim.
    """
    total = recipe_data.get("totalTime")
    if total:
        minutes = parse_duration(total)
        return format_minutes(minutes) if minutes else str(total).strip()

    prep = parse_duration(recipe_data.get("prepTime")) or 0
    cook = parse_duration(recipe_data.get("cookTime")) or 0
    if prep or cook:
        return format_minutes(prep + cook)
    return None


def extract_instructions_text(instructions: Any) -> list[str]:
    """
    Extract instruction text from various formats.

    Handles:
        - Plain strings (split by newlines)
        - List of strings
        - List of HowToStep dicts with 'text' (or 'name') field
        - HowToSection dicts nesting steps under 'itemListElement'
    """
    if not instructions:
        return []

    if isinstance(instructions, str):
        return [line.strip() for line in instructions.split("\n") if line.strip()]

    if isinstance(instructions, dict):
        nested = instructions.get("itemListElement")
        if nested:
            return extract_instructions_text(nested)
        text = instructions.get("text") or instructions.get("name") or ""
        return [text.strip()] if isinstance(text, str) and text.strip() else []

    if isinstance(instructions, list):
        result = []
        for item in instructions:
            result.extend(extract_instructions_text(item))
        return result

    return []


def normalize_ingredients(ingredients: Any) -> list[str]:
    """
    Normalize ingredients to list of strings.

    Handles:
        - A single string
        - List of strings
        - List of dicts with 'text' or 'name' field
    """
    if not ingredients:
        return []

    if isinstance(ingredients, str):
        ingredients = [ingredients]

    result = []
    for item in ingredients:
        if isinstance(item, dict):
            item = item.get("text") or item.get("name") or ""
        text = str(item).strip()
        if text:
            result.append(text)

    return result
