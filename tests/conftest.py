"""
Pytest configuration and fixtures for Meal Mate tests.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing mealmate modules
os.environ["MEALMATE_ENV"] = "development"
os.environ["MEALMATE_LOG_PROMPTS"] = "0"
os.environ.setdefault("OPENAI_API_KEY", "test-key-not-real")


SAMPLE_RECIPE_JSON = """{
  "recipe_name": "Classic Pancakes",
  "ingredients": ["2 cups flour", "1.5 cups milk", "2 eggs"],
  "steps": ["Mix dry ingredients", "Whisk in milk and eggs", "Cook on a hot griddle"],
  "duration": "25 minutes"
}"""


SAMPLE_RECIPE_PROSE = """RECIPE NAME: Classic Pancakes

DURATION: 25 minutes

INGREDIENTS:
- 2 cups flour
- 1.5 cups milk
- 2 eggs

STEPS:
1. Mix dry ingredients
2. Whisk in milk and eggs
3. Cook on a hot griddle
"""


SAMPLE_WEEK_PLAN = """Here is your 7-day meal plan!

Monday
Breakfast: Oatmeal with berries
Lunch: Chicken salad
Dinner: Spaghetti bolognese

Tuesday
Breakfast: Yogurt parfait
Lunch: Tomato soup
Dinner: Chicken biryani

Wednesday
Breakfast: Banana pancakes
Lunch: Caesar salad
Dinner: Margherita pizza

Thursday
Breakfast: Scrambled eggs
Lunch: Turkey sandwich
Dinner: Beef stir fry

Friday
Breakfast: Smoothie bowl
Lunch: Lentil soup
Dinner: Fish tacos

Saturday
Breakfast: French toast
Lunch: Greek salad
Dinner: Mushroom risotto

Sunday
Breakfast: Avocado toast
Lunch: Minestrone
Dinner: Roast chicken

MEAL PREP TIPS:
- Cook grains on Sunday
"""


@pytest.fixture
def fake_gateway():
    """Gateway double: every verb is an AsyncMock returning canned text."""
    gateway = MagicMock()
    gateway.model = "test-model"
    gateway.recipe_from_text = AsyncMock(return_value=SAMPLE_RECIPE_JSON)
    gateway.recipe_from_image = AsyncMock(return_value=SAMPLE_RECIPE_PROSE)
    gateway.meal_plan_from_titles = AsyncMock(return_value=SAMPLE_WEEK_PLAN)
    gateway.chat_reply = AsyncMock(return_value="Try a veggie stir fry tonight!")
    return gateway


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations
    mock_table = MagicMock()
    mock_table.select.return_value = mock_table
    mock_table.insert.return_value = mock_table
    mock_table.update.return_value = mock_table
    mock_table.delete.return_value = mock_table
    mock_table.eq.return_value = mock_table
    mock_table.order.return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[])

    mock_client.table.return_value = mock_table

    return mock_client


@pytest.fixture
def mock_openai():
    """Mock AsyncOpenAI client for unit tests."""
    mock_client = MagicMock()

    # Mock chat completions
    mock_completion = MagicMock()
    mock_completion.choices = [MagicMock(message=MagicMock(content=SAMPLE_RECIPE_JSON))]
    mock_client.chat.completions.create = AsyncMock(return_value=mock_completion)

    return mock_client


@pytest.fixture
def sample_recipe_row():
    """A recipes table row as Supabase returns it."""
    return {
        "id": "recipe-1",
        "user_id": "user-1",
        "title": "Classic Pancakes",
        "description": "Cooking time: 25 minutes",
        "ingredients": ["2 cups flour", "1.5 cups milk", "2 eggs"],
        "instructions": ["Mix dry ingredients", "Whisk in milk and eggs", "Cook on a hot griddle"],
        "prep_time": "25 minutes",
        "cook_time": "25 minutes",
        "servings": 4,
        "image_url": None,
        "tags": ["breakfast"],
        "created_at": "2025-10-06T08:30:00+00:00",
    }


@pytest.fixture
def sample_meal_plan_row():
    """A meal_plans table row as Supabase returns it."""
    return {
        "id": "plan-1",
        "user_id": "user-1",
        "week_start_date": "2025-10-05",
        "week_end_date": "2025-10-07",
        "plan_data": [
            {
                "day": "Sunday",
                "date": "2025-10-05",
                "meals": {
                    "breakfast": {"name": "Oatmeal", "description": "Delicious morning meal"},
                    "lunch": {"name": "Salad", "description": "Satisfying midday meal"},
                    "dinner": {"name": "Pizza", "description": "Hearty evening meal"},
                },
            },
            {
                "day": "Monday",
                "date": "2025-10-06T00:00:00.000Z",
                "meals": {
                    "breakfast": {"name": "Toast", "description": ""},
                    "lunch": {"name": "Soup", "description": ""},
                    "dinner": {"name": "Pasta", "description": ""},
                },
            },
            {
                "day": "Tuesday",
                "date": "2025-10-07",
                "meals": {},
            },
        ],
        "created_at": "2025-10-05T12:00:00+00:00",
    }
