"""
Meal Mate - Recipe and meal plan persistence.

Thin functions over a user-scoped Supabase client. Every query filters by
user_id as well; RLS enforces the same ownership on the server.

Tables:
    recipes     (id, user_id, title, description, ingredients, instructions,
                 prep_time, cook_time, servings, image_url, tags, created_at)
    meal_plans  (id, user_id, week_start_date, week_end_date, plan_data,
                 created_at)
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from mealmate.exceptions import StoreError
from mealmate.meal_plan.models import MealPlan, MealPlanDay, as_date
from mealmate.recipe_import.models import DEFAULT_DURATION, Recipe

logger = logging.getLogger(__name__)

RECIPES_TABLE = "recipes"
MEAL_PLANS_TABLE = "meal_plans"
DEFAULT_SERVINGS = 4


# =============================================================================
# Records
# =============================================================================


@dataclass
class RecipeRecord:
    """A recipe as the library stores and displays it."""

    title: str
    description: str
    ingredients: list[str]
    instructions: list[str]
    prep_time: str = DEFAULT_DURATION
    cook_time: str = DEFAULT_DURATION
    servings: int = DEFAULT_SERVINGS
    tags: list[str] = field(default_factory=list)
    image_url: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_recipe(cls, recipe: Recipe, title: str | None = None) -> "RecipeRecord":
        """Library card for a freshly extracted recipe (not yet saved)."""
        return cls(
            id=str(uuid.uuid4()),
            title=title or recipe.name,
            description=f"Cooking time: {recipe.duration}",
            ingredients=list(recipe.ingredients),
            instructions=list(recipe.steps),
            prep_time=recipe.duration,
            cook_time=recipe.duration,
            created_at=datetime.now(timezone.utc),
        )

    @classmethod
    def from_row(cls, row: dict) -> "RecipeRecord":
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            title=row.get("title") or "",
            description=row.get("description") or "",
            ingredients=list(row.get("ingredients") or []),
            instructions=list(row.get("instructions") or []),
            prep_time=row.get("prep_time") or DEFAULT_DURATION,
            cook_time=row.get("cook_time") or DEFAULT_DURATION,
            servings=row.get("servings") or DEFAULT_SERVINGS,
            tags=list(row.get("tags") or []),
            image_url=row.get("image_url"),
            created_at=_as_datetime(row.get("created_at")),
        )

    def to_row(self, user_id: str) -> dict:
        return {
            "user_id": user_id,
            "title": self.title,
            "description": self.description,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "servings": self.servings,
            "image_url": self.image_url,
            "tags": self.tags,
        }


def meal_plan_to_row(plan: MealPlan, user_id: str) -> dict:
    return {
        "user_id": user_id,
        "week_start_date": plan.period_start_date.isoformat(),
        "week_end_date": plan.period_end_date.isoformat(),
        "plan_data": [day.to_dict() for day in plan.days],
    }


def meal_plan_from_row(row: dict) -> MealPlan:
    return MealPlan(
        id=str(row["id"]),
        period_start_date=as_date(row["week_start_date"]),
        period_end_date=as_date(row["week_end_date"]),
        days=[MealPlanDay.from_dict(day) for day in row.get("plan_data") or []],
        created_at=_as_datetime(row.get("created_at")) or datetime.now(timezone.utc),
    )


# =============================================================================
# Recipe Operations
# =============================================================================


async def list_recipes(client: Client, user_id: str) -> list[RecipeRecord]:
    """Get a user's recipes, newest first."""
    try:
        response = (
            client.table(RECIPES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise StoreError(f"Failed to fetch recipes: {e}") from e
    return [RecipeRecord.from_row(row) for row in response.data or []]


async def save_recipe(client: Client, user_id: str, record: RecipeRecord) -> RecipeRecord:
    """Insert a recipe and return it with its database id."""
    try:
        response = client.table(RECIPES_TABLE).insert(record.to_row(user_id)).execute()
    except Exception as e:
        raise StoreError(f"Failed to save recipe: {e}") from e

    if not response.data:
        raise StoreError("Failed to save recipe: no row returned")
    saved = RecipeRecord.from_row(response.data[0])
    logger.info(f"Saved recipe {saved.id} for user {user_id}")
    return saved


async def delete_recipe(client: Client, user_id: str, recipe_id: str) -> None:
    """Delete a recipe. Deleting another user's recipe is a no-op."""
    try:
        client.table(RECIPES_TABLE).delete().eq("id", recipe_id).eq("user_id", user_id).execute()
    except Exception as e:
        raise StoreError(f"Failed to delete recipe: {e}") from e


# =============================================================================
# Meal Plan Operations
# =============================================================================


async def list_meal_plans(client: Client, user_id: str) -> list[MealPlan]:
    """Get a user's meal plans, newest first."""
    try:
        response = (
            client.table(MEAL_PLANS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise StoreError(f"Failed to fetch meal plans: {e}") from e
    return [meal_plan_from_row(row) for row in response.data or []]


async def save_meal_plan(client: Client, user_id: str, plan: MealPlan) -> MealPlan:
    """
    Insert a meal plan.

    Returns a new MealPlan carrying the database id and timestamp; the plan
    passed in is left untouched.
    """
    try:
        response = client.table(MEAL_PLANS_TABLE).insert(meal_plan_to_row(plan, user_id)).execute()
    except Exception as e:
        raise StoreError(f"Failed to save meal plan: {e}") from e

    if not response.data:
        raise StoreError("Failed to save meal plan: no row returned")
    row = response.data[0]
    saved = replace(
        plan,
        id=str(row.get("id") or plan.id),
        created_at=_as_datetime(row.get("created_at")) or plan.created_at,
    )
    logger.info(f"Saved {saved.day_count}-day meal plan {saved.id} for user {user_id}")
    return saved


async def delete_meal_plan(client: Client, user_id: str, plan_id: str) -> None:
    """Delete a meal plan. Deleting another user's plan is a no-op."""
    try:
        client.table(MEAL_PLANS_TABLE).delete().eq("id", plan_id).eq("user_id", user_id).execute()
    except Exception as e:
        raise StoreError(f"Failed to delete meal plan: {e}") from e


def _as_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
