"""API endpoints for recipe extraction, chat, and meal-plan generation."""

import logging

import httpx
from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from mealmate.config import settings
from mealmate.conversation import ConversationTurnContext, FreeformReply, decide
from mealmate.db import store
from mealmate.db.client import get_authenticated_client
from mealmate.exceptions import GatewayUnavailableError, StoreError
from mealmate.llm.gateway import GenerationGateway
from mealmate.meal_plan import generate_meal_plan
from mealmate.recipe_import import RecipeSourceResolver
from mealmate.recipe_import.models import DEFAULT_RECIPE_NAME, ExtractionResult
from mealmate.web.auth import AuthenticatedUser, get_optional_user
from mealmate.web.schemas import (
    ChatRequest,
    ChatResponse,
    ExtractRecipeRequest,
    ExtractRecipeResponse,
    GeneratePlanRequest,
    MealPlanOut,
    MealPlanResponse,
    RecipeCard,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meal-mate"])

CHAT_FALLBACK_MESSAGE = (
    "I'd love to help plan meals! Ask me for a weekly meal plan and I'll share "
    "ideas for breakfast, lunch, dinner, and snacks."
)
MISSING_PROMPT_ERROR = "Please provide a prompt, image URL, or recipe link."
MISSING_IMAGE_ERROR = "No image provided"
EXTRACT_FAILED_ERROR = "Failed to extract recipe. Ensure your OpenAI API key is configured."
IMAGE_EXTRACT_FAILED_ERROR = "Failed to extract recipe from image. Ensure your OpenAI API key is configured."
PLAN_FAILED_ERROR = "Failed to generate meal plan. Ensure your OpenAI API key is configured."
INVALID_PLAN_PERIOD_ERROR = "Invalid meal plan period. Choose 1 to 31 days ending no later than 9999-12-31."

EXTRACTED_MESSAGE = "Recipe extracted successfully! Review and save it to your library."
IMAGE_EXTRACTED_MESSAGE = "Recipe extracted from image! Review and save it to your library."
IMAGE_RECIPE_TITLE = "Recipe from Image"
PLAN_SAVED_MESSAGE = "Your personalized meal plan has been created and saved!"
PLAN_CREATED_MESSAGE = "Your personalized meal plan has been created!"


# =============================================================================
# Dependencies
# =============================================================================


def get_gateway(request: Request) -> GenerationGateway | None:
    """Gateway built at startup; None when the API key is missing."""
    return getattr(request.app.state, "gateway", None)


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    return getattr(request.app.state, "http_client", None)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _build_resolver(gateway: GenerationGateway, http_client: httpx.AsyncClient | None) -> RecipeSourceResolver:
    return RecipeSourceResolver(
        gateway,
        http_client=http_client,
        fetch_timeout=settings.fetch_timeout_seconds,
        page_text_budget=settings.page_text_budget,
    )


# =============================================================================
# Recipe extraction
# =============================================================================


@router.post("/extract-recipe", response_model=ExtractRecipeResponse)
async def extract_recipe(
    req: ExtractRecipeRequest,
    gateway: GenerationGateway | None = Depends(get_gateway),
    http_client: httpx.AsyncClient | None = Depends(get_http_client),
):
    """
    Extract a recipe from a URL, an image URL, or a free-text description.

    The recipe is returned for review; saving is a separate call.
    """
    prompt = (req.message or "").strip()
    if not prompt:
        return _error(400, MISSING_PROMPT_ERROR)

    if gateway is None:
        logger.error("Recipe extraction requested but the generation gateway is not configured")
        return _error(500, EXTRACT_FAILED_ERROR)

    result = await _build_resolver(gateway, http_client).extract(prompt=prompt)
    if not result.success:
        logger.warning(f"Recipe extraction failed: {result.error}")
        return _error(500, EXTRACT_FAILED_ERROR)

    return ExtractRecipeResponse(recipe=_card(result), message=EXTRACTED_MESSAGE)


@router.post("/extract-from-image", response_model=ExtractRecipeResponse)
async def extract_from_image(
    image: UploadFile | None = File(None),
    gateway: GenerationGateway | None = Depends(get_gateway),
    http_client: httpx.AsyncClient | None = Depends(get_http_client),
):
    """Extract a recipe from an uploaded photo (multipart field `image`)."""
    image_bytes = await image.read() if image is not None else b""
    if not image_bytes:
        return _error(400, MISSING_IMAGE_ERROR)

    if gateway is None:
        logger.error("Image extraction requested but the generation gateway is not configured")
        return _error(500, IMAGE_EXTRACT_FAILED_ERROR)

    mime_type = image.content_type or "image/png"
    result = await _build_resolver(gateway, http_client).extract(
        image_bytes=image_bytes,
        image_mime_type=mime_type,
    )
    if not result.success:
        logger.warning(f"Image extraction failed: {result.error}")
        return _error(500, IMAGE_EXTRACT_FAILED_ERROR)

    return ExtractRecipeResponse(
        recipe=_card(result, default_title=IMAGE_RECIPE_TITLE),
        message=IMAGE_EXTRACTED_MESSAGE,
    )


def _card(result: ExtractionResult, default_title: str | None = None) -> RecipeCard:
    title = default_title if default_title and result.recipe.name == DEFAULT_RECIPE_NAME else None
    return RecipeCard.from_record(store.RecipeRecord.from_recipe(result.recipe, title=title))


# =============================================================================
# Chat
# =============================================================================


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(
    req: ChatRequest,
    gateway: GenerationGateway | None = Depends(get_gateway),
) -> ChatResponse:
    """
    One conversation turn.

    The policy either answers directly (questions about the plan, or a
    generate instruction the client acts on) or hands the message to the
    chat model. Model trouble never surfaces as an error status.
    """
    context = ConversationTurnContext(
        latest_message=req.message or "",
        saved_recipe_count=req.saved_recipe_count,
        has_existing_plan=req.has_existing_plan,
    )
    decision = decide(context)

    if not isinstance(decision, FreeformReply) or decision.reply:
        return ChatResponse(**decision.to_response())

    if gateway is None:
        logger.warning("Chat gateway unavailable, sending fallback reply")
        return ChatResponse(message=CHAT_FALLBACK_MESSAGE)

    try:
        reply = await gateway.chat_reply(context.latest_message.strip())
    except GatewayUnavailableError as e:
        logger.warning(f"Chat reply failed: {e}")
        return ChatResponse(message=CHAT_FALLBACK_MESSAGE)

    return ChatResponse(message=reply)


# =============================================================================
# Meal plan generation
# =============================================================================


@router.post("/generate-plan", response_model=MealPlanResponse)
async def generate_plan(
    req: GeneratePlanRequest,
    gateway: GenerationGateway | None = Depends(get_gateway),
    user: AuthenticatedUser | None = Depends(get_optional_user),
):
    """
    Generate a meal plan from recipe titles.

    Signed-in callers get the plan saved to their library. A failed save
    still returns the plan.
    """
    if gateway is None:
        logger.error("Meal plan requested but the generation gateway is not configured")
        return _error(500, PLAN_FAILED_ERROR)

    seed_titles = req.seed_titles
    if not seed_titles and req.recipes:
        seed_titles = [recipe.title for recipe in req.recipes if recipe.title]

    try:
        plan = await generate_meal_plan(
            gateway,
            seed_titles,
            day_count=req.day_count,
            start_date=req.start_date,
            user_message=req.user_message,
        )
    except ValueError as e:
        logger.warning(f"Rejected meal plan period: {e}")
        return _error(400, INVALID_PLAN_PERIOD_ERROR)
    except GatewayUnavailableError:
        logger.exception("Meal plan generation failed")
        return _error(500, PLAN_FAILED_ERROR)

    message = PLAN_CREATED_MESSAGE
    if user is not None:
        try:
            client = get_authenticated_client(user.access_token)
            plan = await store.save_meal_plan(client, user.id, plan)
            message = PLAN_SAVED_MESSAGE
        except StoreError as e:
            logger.warning(f"Generated meal plan could not be saved: {e}")

    return MealPlanResponse(meal_plan=MealPlanOut.from_plan(plan), message=message)
