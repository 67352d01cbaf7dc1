"""Meal-plan generation: seed titles -> model text -> parsed MealPlan."""

import logging
import re
from datetime import date, timedelta

from mealmate.llm.gateway import GenerationGateway

from .models import MealPlan, period_end
from .parser import parse_meal_plan_text

logger = logging.getLogger(__name__)

DEFAULT_DAY_COUNT = 7
DEFAULT_SEED_TITLES = ["biryani", "pasta", "oatmeal", "salad", "pizza", "soup", "sandwich"]


def resolve_seed_titles(seed_titles: list[str] | None, user_message: str | None = None) -> list[str]:
    """
    Pick the recipe titles a plan is built from.

    Saved titles win; otherwise the user's message is split on commas and
    newlines; otherwise a default set of everyday dishes is used.
    """
    titles = [title.strip() for title in seed_titles or [] if title and title.strip()]
    if titles:
        return titles

    if user_message:
        titles = [item.strip() for item in re.split(r"[,\n]", user_message) if item.strip()]
        if titles:
            return titles

    return list(DEFAULT_SEED_TITLES)


def default_start_date(today: date | None = None) -> date:
    """Sunday that starts the current week."""
    today = today or date.today()
    return today - timedelta(days=(today.weekday() + 1) % 7)


async def generate_meal_plan(
    gateway: GenerationGateway,
    seed_titles: list[str] | None,
    day_count: int | None = None,
    start_date: date | None = None,
    user_message: str | None = None,
    today: date | None = None,
) -> MealPlan:
    """
    Generate a dated meal plan from recipe titles.

    Raises ValueError for an out-of-range day count or period (before any
    model call) and GatewayUnavailableError when the model call fails.
    """
    day_count = day_count or DEFAULT_DAY_COUNT
    start_date = start_date or default_start_date(today)
    period_end(start_date, day_count)
    titles = resolve_seed_titles(seed_titles, user_message)

    logger.info(f"Generating {day_count}-day meal plan from {start_date} with {len(titles)} recipes")
    raw_text = await gateway.meal_plan_from_titles(titles, day_count, start_date)
    return parse_meal_plan_text(raw_text, start_date, day_count)
