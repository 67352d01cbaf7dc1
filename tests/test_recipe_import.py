"""Tests for schema.org normalization and structured markup discovery."""

import json

from mealmate.recipe_import.json_ld import (
    UNKNOWN_RECIPE_NAME,
    extract_recipe_from_html,
    find_recipe_node,
    recipe_from_node,
)
from mealmate.recipe_import.models import (
    NO_INGREDIENTS,
    ExtractionMethod,
    ExtractionResult,
    Recipe,
)
from mealmate.recipe_import.normalizer import (
    extract_instructions_text,
    format_minutes,
    normalize_ingredients,
    parse_duration,
    recipe_duration,
)


def _page(json_ld: object) -> str:
    return (
        "<html><head><title>Recipe</title>"
        f'<script type="application/ld+json">{json.dumps(json_ld)}</script>'
        "</head><body><p>Some blog text</p></body></html>"
    )


class TestParseDuration:
    """Tests for ISO 8601 duration parsing."""

    def test_parse_minutes_only(self):
        assert parse_duration("PT30M") == 30
        assert parse_duration("PT5M") == 5

    def test_parse_hours_and_minutes(self):
        assert parse_duration("PT1H30M") == 90
        assert parse_duration("PT2H15M") == 135

    def test_parse_days(self):
        assert parse_duration("P1DT2H") == 1560

    def test_parse_with_seconds(self):
        assert parse_duration("PT20M30S") == 20

    def test_parse_plain_number(self):
        assert parse_duration("30") == 30
        assert parse_duration(45) == 45

    def test_parse_none_or_invalid(self):
        assert parse_duration(None) is None
        assert parse_duration("") is None
        assert parse_duration("30 minutes") is None
        assert parse_duration("PT0M") is None


class TestRecipeDuration:
    """Tests for picking a display duration."""

    def test_format_minutes(self):
        assert format_minutes(30) == "30 minutes"
        assert format_minutes(60) == "1 hour"
        assert format_minutes(61) == "1 hour 1 minute"
        assert format_minutes(135) == "2 hours 15 minutes"

    def test_total_time_wins(self):
        assert recipe_duration({"totalTime": "PT45M", "prepTime": "PT10M"}) == "45 minutes"

    def test_prep_plus_cook(self):
        assert recipe_duration({"prepTime": "PT15M", "cookTime": "PT1H"}) == "1 hour 15 minutes"

    def test_unparseable_total_kept(self):
        assert recipe_duration({"totalTime": "about an hour"}) == "about an hour"

    def test_no_times(self):
        assert recipe_duration({}) is None


class TestExtractInstructionsText:
    """Tests for instruction text extraction."""

    def test_extract_from_string(self):
        assert extract_instructions_text("Step 1\n\nStep 2\n") == ["Step 1", "Step 2"]

    def test_extract_from_howto_step_dicts(self):
        instructions = [
            {"@type": "HowToStep", "text": "Preheat oven"},
            {"@type": "HowToStep", "text": "  Mix batter  "},
        ]
        assert extract_instructions_text(instructions) == ["Preheat oven", "Mix batter"]

    def test_extract_from_howto_sections(self):
        instructions = [
            {
                "@type": "HowToSection",
                "name": "Sauce",
                "itemListElement": [
                    {"@type": "HowToStep", "text": "Simmer tomatoes"},
                    {"@type": "HowToStep", "text": "Season"},
                ],
            },
            {
                "@type": "HowToSection",
                "name": "Pasta",
                "itemListElement": [{"@type": "HowToStep", "text": "Boil pasta"}],
            },
        ]
        assert extract_instructions_text(instructions) == ["Simmer tomatoes", "Season", "Boil pasta"]

    def test_extract_empty(self):
        assert extract_instructions_text(None) == []
        assert extract_instructions_text([]) == []


class TestNormalizeIngredients:
    """Tests for ingredient normalization."""

    def test_string_list(self):
        assert normalize_ingredients([" 1 cup rice ", "", "2 cups water"]) == ["1 cup rice", "2 cups water"]

    def test_single_string(self):
        assert normalize_ingredients("salt") == ["salt"]

    def test_dict_items(self):
        assert normalize_ingredients([{"text": "1 egg"}, {"name": "flour"}]) == ["1 egg", "flour"]


class TestFindRecipeNode:
    """Tests for depth-first Recipe discovery."""

    def test_top_level_recipe(self):
        node = {"@type": "Recipe", "name": "Soup"}
        assert find_recipe_node([node]) is node

    def test_recipe_in_graph(self):
        data = {"@graph": [{"@type": "WebPage"}, {"@type": "Recipe", "name": "Stew"}]}
        assert find_recipe_node(data)["name"] == "Stew"

    def test_recipe_deeply_nested(self):
        data = [{"@type": "WebPage", "mainEntity": {"about": [{"@type": ["Thing", "Recipe"], "name": "Curry"}]}}]
        assert find_recipe_node(data)["name"] == "Curry"

    def test_type_with_schema_prefix(self):
        assert find_recipe_node({"@type": "http://schema.org/Recipe", "name": "Pie"})["name"] == "Pie"

    def test_no_recipe(self):
        assert find_recipe_node([{"@type": "Article"}, {"@type": "Organization"}]) is None

    def test_first_recipe_wins(self):
        data = [{"@type": "Recipe", "name": "First"}, {"@type": "Recipe", "name": "Second"}]
        assert find_recipe_node(data)["name"] == "First"


class TestRecipeFromMarkup:
    """Tests for mapping markup to a Recipe."""

    def test_recipe_from_node(self):
        recipe = recipe_from_node({
            "@type": "Recipe",
            "name": "Tomato Soup",
            "recipeIngredient": ["4 tomatoes", "1 onion"],
            "recipeInstructions": [{"@type": "HowToStep", "text": "Chop"}, {"@type": "HowToStep", "text": "Simmer"}],
            "totalTime": "PT40M",
        })
        assert recipe == Recipe(
            name="Tomato Soup",
            ingredients=["4 tomatoes", "1 onion"],
            steps=["Chop", "Simmer"],
            duration="40 minutes",
        )

    def test_missing_name_and_ingredients(self):
        recipe = recipe_from_node({"@type": "Recipe", "recipeInstructions": "Just eat it"})
        assert recipe.name == UNKNOWN_RECIPE_NAME
        assert recipe.ingredients == [NO_INGREDIENTS]
        assert recipe.steps == ["Just eat it"]

    def test_extract_from_html_graph(self):
        html = _page({
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "WebSite", "name": "Food Blog"},
                {
                    "@type": "Recipe",
                    "name": "Banana Bread",
                    "recipeIngredient": ["3 bananas", "2 cups flour"],
                    "recipeInstructions": [{"@type": "HowToStep", "text": "Mash bananas"}],
                    "prepTime": "PT15M",
                    "cookTime": "PT1H",
                },
            ],
        })
        recipe = extract_recipe_from_html(html, "https://blog.example.com/banana-bread")
        assert recipe is not None
        assert recipe.name == "Banana Bread"
        assert recipe.ingredients == ["3 bananas", "2 cups flour"]
        assert recipe.steps == ["Mash bananas"]
        assert recipe.duration == "1 hour 15 minutes"

    def test_extract_from_html_without_markup(self):
        assert extract_recipe_from_html("<html><body><p>Hello</p></body></html>") is None


class TestModels:
    """Tests for recipe import models."""

    def test_build_substitutes_sentinels(self):
        recipe = Recipe.build(name=" ", ingredients=[], steps=None, duration=None)
        assert recipe.name == "Generated Recipe"
        assert recipe.ingredients == ["No ingredients found"]
        assert recipe.steps == ["No steps found"]
        assert recipe.duration == "Not specified"

    def test_error_sentinel(self):
        recipe = Recipe.error()
        assert recipe.name == "Error"
        assert recipe.is_error
        assert recipe.ingredients and recipe.steps

    def test_extraction_result_success(self):
        result = ExtractionResult(recipe=Recipe.error(), method=ExtractionMethod.FAILED, error="nope")
        assert not result.success
        assert ExtractionResult(recipe=Recipe.build("a", ["b"], ["c"], "d"), method=ExtractionMethod.TEXT).success

    def test_to_dict(self):
        recipe = Recipe(name="Tea", ingredients=["tea"], steps=["steep"], duration="5 minutes")
        assert recipe.to_dict() == {
            "name": "Tea",
            "ingredients": ["tea"],
            "steps": ["steep"],
            "duration": "5 minutes",
        }
