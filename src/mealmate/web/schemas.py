"""
Request/response models for the Meal Mate API.

Field names are camelCase on the wire; snake_case is accepted on input too.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mealmate.db.store import DEFAULT_SERVINGS, RecipeRecord
from mealmate.meal_plan.models import MAX_DAY_COUNT, MealPlan, MealPlanDay
from mealmate.recipe_import.models import DEFAULT_DURATION


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Shared
# =============================================================================


class RecipeCard(ApiModel):
    """Recipe as shown in the library."""

    id: str | None = None
    title: str
    description: str = ""
    ingredients: list[str] = []
    instructions: list[str] = []
    prep_time: str | None = None
    cook_time: str | None = None
    servings: int | None = None
    image_url: str | None = None
    tags: list[str] = []
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: RecipeRecord) -> "RecipeCard":
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            ingredients=record.ingredients,
            instructions=record.instructions,
            prep_time=record.prep_time,
            cook_time=record.cook_time,
            servings=record.servings,
            image_url=record.image_url,
            tags=record.tags,
            created_at=record.created_at,
        )

    def to_record(self) -> RecipeRecord:
        return RecipeRecord(
            id=self.id,
            title=self.title,
            description=self.description,
            ingredients=self.ingredients,
            instructions=self.instructions,
            prep_time=self.prep_time or DEFAULT_DURATION,
            cook_time=self.cook_time or DEFAULT_DURATION,
            servings=self.servings or DEFAULT_SERVINGS,
            image_url=self.image_url,
            tags=self.tags,
        )


class MealOut(ApiModel):
    name: str
    description: str = ""


class MealPlanDayOut(ApiModel):
    day: str
    day_date: date = Field(alias="date")
    meals: dict[str, MealOut]

    def to_day(self) -> MealPlanDay:
        return MealPlanDay.from_dict(self.model_dump(by_alias=True))


class MealPlanOut(ApiModel):
    id: str | None = None
    period_start_date: date
    period_end_date: date
    days: list[MealPlanDayOut]
    created_at: datetime | None = None

    @classmethod
    def from_plan(cls, plan: MealPlan) -> "MealPlanOut":
        return cls.model_validate(plan.to_dict())

    def to_plan(self) -> MealPlan:
        return MealPlan(
            id=self.id or "",
            period_start_date=self.period_start_date,
            period_end_date=self.period_end_date,
            days=[day.to_day() for day in self.days],
        )


# =============================================================================
# Extraction
# =============================================================================


class ExtractRecipeRequest(ApiModel):
    message: str | None = None


class ExtractRecipeResponse(ApiModel):
    recipe: RecipeCard
    message: str


# =============================================================================
# Chat
# =============================================================================


class ChatRequest(ApiModel):
    message: str | None = None
    saved_recipe_count: int | None = None
    has_existing_plan: bool = False


class ChatResponse(ApiModel):
    message: str
    needs_action: bool | None = None
    needs_days: bool | None = None
    should_generate: bool | None = None
    number_of_days: int | None = None
    start_date: date | None = None


# =============================================================================
# Meal plans
# =============================================================================


class RecipeRef(ApiModel):
    title: str | None = None


class GeneratePlanRequest(ApiModel):
    seed_titles: list[str] | None = None
    recipes: list[RecipeRef] | None = None  # Saved recipes; only titles are used
    user_message: str | None = None
    day_count: int | None = Field(default=None, ge=1, le=MAX_DAY_COUNT)
    start_date: date | None = None


class MealPlanResponse(ApiModel):
    meal_plan: MealPlanOut
    message: str | None = None


# =============================================================================
# Library
# =============================================================================


class RecipeListResponse(ApiModel):
    recipes: list[RecipeCard]


class RecipeResponse(ApiModel):
    recipe: RecipeCard


class MealPlanListResponse(ApiModel):
    meal_plans: list[MealPlanOut]


class SuccessResponse(ApiModel):
    success: bool = True
