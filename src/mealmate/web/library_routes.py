"""
API endpoints for the user's recipe library and saved meal plans.

All endpoints require a Supabase access token. Queries run through a
user-scoped client, so RLS applies on top of the user_id filters.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mealmate.db import store
from mealmate.db.client import get_authenticated_client
from mealmate.exceptions import StoreError
from mealmate.web.auth import AuthenticatedUser, get_current_user
from mealmate.web.schemas import (
    MealPlanListResponse,
    MealPlanOut,
    MealPlanResponse,
    RecipeCard,
    RecipeListResponse,
    RecipeResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["library"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# =============================================================================
# Recipes
# =============================================================================


@router.get("/recipes", response_model=RecipeListResponse)
async def list_recipes(user: AuthenticatedUser = Depends(get_current_user)):
    """Get the user's saved recipes, newest first."""
    try:
        client = get_authenticated_client(user.access_token)
        records = await store.list_recipes(client, user.id)
    except StoreError as e:
        logger.error(f"Error fetching recipes: {e}")
        return _error(500, "Failed to fetch recipes")

    return RecipeListResponse(recipes=[RecipeCard.from_record(record) for record in records])


@router.post("/recipes", response_model=RecipeResponse)
async def save_recipe(
    recipe: RecipeCard,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Save a reviewed recipe to the library."""
    try:
        client = get_authenticated_client(user.access_token)
        saved = await store.save_recipe(client, user.id, recipe.to_record())
    except StoreError as e:
        logger.error(f"Error saving recipe: {e}")
        return _error(500, "Failed to save recipe")

    return RecipeResponse(recipe=RecipeCard.from_record(saved))


@router.delete("/recipes", response_model=SuccessResponse)
async def delete_recipe(
    id: str | None = None,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Delete a recipe by `?id=`."""
    if not id:
        return _error(400, "Recipe ID required")

    try:
        client = get_authenticated_client(user.access_token)
        await store.delete_recipe(client, user.id, id)
    except StoreError as e:
        logger.error(f"Error deleting recipe: {e}")
        return _error(500, "Failed to delete recipe")

    return SuccessResponse()


# =============================================================================
# Meal plans
# =============================================================================


@router.get("/meal-plans", response_model=MealPlanListResponse)
async def list_meal_plans(user: AuthenticatedUser = Depends(get_current_user)):
    """Get the user's saved meal plans, newest first."""
    try:
        client = get_authenticated_client(user.access_token)
        plans = await store.list_meal_plans(client, user.id)
    except StoreError as e:
        logger.error(f"Error fetching meal plans: {e}")
        return _error(500, "Failed to fetch meal plans")

    return MealPlanListResponse(meal_plans=[MealPlanOut.from_plan(plan) for plan in plans])


@router.post("/meal-plans", response_model=MealPlanResponse)
async def save_meal_plan(
    meal_plan: MealPlanOut,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Save a meal plan (for example one generated while signed out)."""
    try:
        client = get_authenticated_client(user.access_token)
        saved = await store.save_meal_plan(client, user.id, meal_plan.to_plan())
    except StoreError as e:
        logger.error(f"Error saving meal plan: {e}")
        return _error(500, "Failed to save meal plan")

    return MealPlanResponse(meal_plan=MealPlanOut.from_plan(saved))


@router.delete("/meal-plans", response_model=SuccessResponse)
async def delete_meal_plan(
    id: str | None = None,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Delete a meal plan by `?id=`."""
    if not id:
        return _error(400, "Meal plan ID required")

    try:
        client = get_authenticated_client(user.access_token)
        await store.delete_meal_plan(client, user.id, id)
    except StoreError as e:
        logger.error(f"Error deleting meal plan: {e}")
        return _error(500, "Failed to delete meal plan")

    return SuccessResponse()
