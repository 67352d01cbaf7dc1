"""Tests for the structured-text recipe parser."""

from mealmate.recipe_import.models import (
    DEFAULT_DURATION,
    DEFAULT_RECIPE_NAME,
    NO_INGREDIENTS,
    NO_STEPS,
    Recipe,
)
from mealmate.recipe_import.text_parser import (
    JsonPayload,
    NotJson,
    extract_list_section,
    locate_json,
    parse_recipe_text,
)

from conftest import SAMPLE_RECIPE_JSON, SAMPLE_RECIPE_PROSE


class TestLocateJson:
    """Tests for finding the JSON object in model output."""

    def test_plain_object(self):
        located = locate_json(SAMPLE_RECIPE_JSON)
        assert isinstance(located, JsonPayload)
        assert located.data["recipe_name"] == "Classic Pancakes"

    def test_prefers_fenced_block(self):
        text = (
            'Sure! {"note": "ignore me"}\n'
            '```json\n{"recipe_name": "Toast", "ingredients": ["bread"], "steps": ["toast"], "duration": "5 min"}\n```'
        )
        located = locate_json(text)
        assert isinstance(located, JsonPayload)
        assert located.data["recipe_name"] == "Toast"

    def test_widest_brace_span_with_surrounding_prose(self):
        text = 'Here you go: {"recipe_name": "Soup", "steps": ["Boil {water}"]} Enjoy!'
        located = locate_json(text)
        assert isinstance(located, JsonPayload)
        assert located.data["steps"] == ["Boil {water}"]

    def test_no_braces(self):
        assert isinstance(locate_json("RECIPE NAME: Soup"), NotJson)

    def test_invalid_json(self):
        located = locate_json('{"recipe_name": "Soup",}')
        assert isinstance(located, NotJson)
        assert "invalid JSON" in located.reason

    def test_object_without_recipe_fields(self):
        assert isinstance(locate_json('{"hello": "world"}'), NotJson)

    def test_ingredients_not_a_list(self):
        assert isinstance(locate_json('{"recipe_name": "Soup", "ingredients": "water"}'), NotJson)


class TestParseJson:
    """Tests for the JSON tier."""

    def test_all_fields(self):
        recipe = parse_recipe_text(SAMPLE_RECIPE_JSON)
        assert recipe == Recipe(
            name="Classic Pancakes",
            ingredients=["2 cups flour", "1.5 cups milk", "2 eggs"],
            steps=["Mix dry ingredients", "Whisk in milk and eggs", "Cook on a hot griddle"],
            duration="25 minutes",
        )

    def test_trims_and_drops_blank_items(self):
        text = '{"recipe_name": "  Salad ", "ingredients": [" lettuce ", "", "   ", null], "steps": ["  toss  "], "duration": " 5 minutes "}'
        recipe = parse_recipe_text(text)
        assert recipe.name == "Salad"
        assert recipe.ingredients == ["lettuce"]
        assert recipe.steps == ["toss"]
        assert recipe.duration == "5 minutes"

    def test_empty_lists_get_sentinels(self):
        recipe = parse_recipe_text('{"recipe_name": "Air", "ingredients": [], "steps": [], "duration": ""}')
        assert recipe.ingredients == [NO_INGREDIENTS]
        assert recipe.steps == [NO_STEPS]
        assert recipe.duration == DEFAULT_DURATION

    def test_missing_name_uses_default(self):
        recipe = parse_recipe_text('{"ingredients": ["rice"], "steps": ["cook"]}')
        assert recipe.name == DEFAULT_RECIPE_NAME

    def test_parsing_is_deterministic(self):
        assert parse_recipe_text(SAMPLE_RECIPE_JSON) == parse_recipe_text(SAMPLE_RECIPE_JSON)


class TestParseLabeledSections:
    """Tests for the prose fallback tier."""

    def test_same_fields_as_json(self):
        assert parse_recipe_text(SAMPLE_RECIPE_PROSE) == parse_recipe_text(SAMPLE_RECIPE_JSON)

    def test_bold_labels(self):
        text = (
            "**RECIPE NAME:** Garlic Bread\n"
            "**DURATION:** 15 minutes\n\n"
            "**INGREDIENTS:**\n"
            "* 1 baguette\n"
            "* 3 cloves garlic\n\n"
            "**STEPS:**\n"
            "1) Slice the bread\n"
            "2) Spread garlic butter\n"
        )
        recipe = parse_recipe_text(text)
        assert recipe.name == "Garlic Bread"
        assert recipe.duration == "15 minutes"
        assert recipe.ingredients == ["1 baguette", "3 cloves garlic"]
        assert recipe.steps == ["Slice the bread", "Spread garlic butter"]

    def test_name_falls_back_to_first_line(self):
        text = "Lemon Rice\nINGREDIENTS:\n- rice\n- lemon\nSTEPS:\n- cook\n"
        recipe = parse_recipe_text(text)
        assert recipe.name == "Lemon Rice"

    def test_label_is_never_taken_as_name(self):
        text = "INGREDIENTS:\n- rice\nSTEPS:\n- cook\n"
        recipe = parse_recipe_text(text)
        assert recipe.name == DEFAULT_RECIPE_NAME
        assert recipe.ingredients == ["rice"]

    def test_section_stops_at_next_caps_header(self):
        text = "STEPS:\n1. Boil\n2. Serve\nNUTRITION NOTES:\nHigh in fiber\n"
        assert extract_list_section(text, "STEPS") == ["Boil", "Serve"]

    def test_quantities_are_not_mistaken_for_numbering(self):
        text = "INGREDIENTS:\n1.5 cups sugar\n- 2 eggs\n"
        assert extract_list_section(text, "INGREDIENTS") == ["1.5 cups sugar", "2 eggs"]

    def test_missing_sections_get_sentinels(self):
        recipe = parse_recipe_text("Just a nice dish with no structure")
        assert recipe.ingredients == [NO_INGREDIENTS]
        assert recipe.steps == [NO_STEPS]
        assert recipe.duration == DEFAULT_DURATION

    def test_empty_text(self):
        recipe = parse_recipe_text("")
        assert recipe.name == DEFAULT_RECIPE_NAME
        assert recipe.ingredients == [NO_INGREDIENTS]
        assert recipe.steps == [NO_STEPS]

    def test_invalid_json_falls_back_to_prose(self):
        text = '{"recipe_name": "broken",\nRECIPE NAME: Chili\nINGREDIENTS:\n- beans\nSTEPS:\n- simmer\n'
        recipe = parse_recipe_text(text)
        assert recipe.name == "Chili"
        assert recipe.ingredients == ["beans"]
        assert recipe.steps == ["simmer"]
