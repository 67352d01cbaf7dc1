"""Meal plans: generation and parsing of dated multi-day plans."""

from .generator import generate_meal_plan, resolve_seed_titles
from .models import Meal, MealPlan, MealPlanDay
from .parser import parse_meal_plan_text

__all__ = [
    "Meal",
    "MealPlan",
    "MealPlanDay",
    "generate_meal_plan",
    "parse_meal_plan_text",
    "resolve_seed_titles",
]
