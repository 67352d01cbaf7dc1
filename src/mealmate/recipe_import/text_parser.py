"""
Structured-text recipe parser.

Turns raw model output into a Recipe. The model is asked for JSON but is not
guaranteed to produce it, so parsing is two-tier:

1. Locate a JSON object (fenced ```json block first, then the widest {...}
   span) and map it when it has the expected shape.
2. Otherwise read the labeled-section prose format (RECIPE NAME:, DURATION:,
   INGREDIENTS:, STEPS:) that the image prompt asks for.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from .models import Recipe

logger = logging.getLogger(__name__)

RECIPE_KEYS = ("recipe_name", "ingredients", "steps", "duration")

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")

# Tried in order; the first non-label candidate wins.
NAME_PATTERNS = [
    re.compile(r"RECIPE NAME\**\s*:\**\s*(.+)", re.IGNORECASE),
    re.compile(r"^(.+?)(?:\n|$)"),
    re.compile(r"#\s*(.+)"),
]
DURATION_PATTERNS = [
    re.compile(r"DURATION\**\s*:\**\s*(.+)", re.IGNORECASE),
    re.compile(r"TOTAL TIME\**\s*:\**\s*(.+)", re.IGNORECASE),
    re.compile(r"COOKING TIME\**\s*:\**\s*(.+)", re.IGNORECASE),
]
LABEL_KEYWORDS = re.compile(
    r"^[#*\s]*(RECIPE NAME|DURATION|INGREDIENTS|STEPS)\b", re.IGNORECASE
)

# Next-section header, e.g. "STEPS:" or "**NUTRITION NOTES:**"
_SECTION_HEADER = re.compile(r"^[#*\s]*[A-Z][A-Z ]*[A-Z]\**\s*:")
_LIST_MARKER = re.compile(r"^(?:[-*•]+\s*|\d+[.)]\s+)")
_KNOWN_HEADER = re.compile(
    r"^[#*\s]*(RECIPE NAME|DURATION|INGREDIENTS|STEPS)[*\s]*:", re.IGNORECASE
)


@dataclass(frozen=True)
class JsonPayload:
    """A JSON object with the recipe shape."""

    data: dict[str, Any]


@dataclass(frozen=True)
class NotJson:
    """Signal that the text must be read as labeled prose."""

    reason: str


def parse_recipe_text(raw_text: str) -> Recipe:
    """
    Parse model output into a Recipe.

    Pure function: the same text always yields an equal Recipe.
    """
    cleaned = (raw_text or "").strip()

    located = locate_json(cleaned)
    if isinstance(located, JsonPayload):
        return recipe_from_payload(located.data)

    logger.debug(f"Falling back to labeled-section parsing: {located.reason}")
    return parse_labeled_sections(cleaned)


def locate_json(text: str) -> JsonPayload | NotJson:
    """Find and decode the recipe JSON object in text."""
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidate = fenced.group(1).strip()
    else:
        span = _BRACE_SPAN.search(text)
        if not span:
            return NotJson("no JSON object found")
        candidate = span.group(0)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        return NotJson(f"invalid JSON: {e.msg}")

    if not isinstance(data, dict):
        return NotJson("JSON is not an object")
    if not any(key in data for key in RECIPE_KEYS):
        return NotJson("JSON object has no recipe fields")
    for key in ("ingredients", "steps"):
        if key in data and data[key] is not None and not isinstance(data[key], list):
            return NotJson(f"'{key}' is not a list")

    return JsonPayload(data)


def recipe_from_payload(data: dict[str, Any]) -> Recipe:
    """Map a decoded JSON payload to a Recipe, trimming every string."""
    return Recipe.build(
        name=_as_text(data.get("recipe_name")),
        ingredients=_clean_items(data.get("ingredients")),
        steps=_clean_items(data.get("steps")),
        duration=_as_text(data.get("duration")),
    )


def parse_labeled_sections(text: str) -> Recipe:
    """Read the RECIPE NAME / DURATION / INGREDIENTS / STEPS prose format."""
    return Recipe.build(
        name=extract_single(text, NAME_PATTERNS),
        ingredients=extract_list_section(text, "INGREDIENTS"),
        steps=extract_list_section(text, "STEPS"),
        duration=extract_single(text, DURATION_PATTERNS),
    )


def extract_single(text: str, patterns: list[re.Pattern]) -> str | None:
    """Return the first non-empty match that is not itself a label."""
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        candidate = _strip_emphasis(match.group(1))
        if candidate and not LABEL_KEYWORDS.match(candidate):
            return candidate
    return None


def extract_list_section(text: str, title: str) -> list[str]:
    """
    Collect the items listed under a section header.

    Every non-empty line after the header belongs to the section until the
    next ALL-CAPS header or the end of the text.
    """
    header = re.compile(rf"^[#*\s]*{title}[*\s]*(?::[*\s]*(.*))?$", re.IGNORECASE)
    lines = text.splitlines()

    items: list[str] = []
    in_section = False
    for line in lines:
        if not in_section:
            match = header.match(line)
            if match:
                in_section = True
                inline = _clean_list_line(match.group(1) or "")
                if inline:
                    items.append(inline)
            continue

        if _SECTION_HEADER.match(line) or _KNOWN_HEADER.match(line):
            break
        item = _clean_list_line(line)
        if item:
            items.append(item)

    return items


def _clean_list_line(line: str) -> str:
    line = line.strip()
    if not line:
        return ""
    line = _LIST_MARKER.sub("", line, count=1)
    return _strip_emphasis(line)


def _strip_emphasis(text: str) -> str:
    return text.strip().strip("*#").strip()


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip()


def _clean_items(items: Any) -> list[str]:
    if not items:
        return []
    result = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            result.append(text)
    return result
