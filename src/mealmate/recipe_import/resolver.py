"""Recipe source resolution: pick an extraction strategy for raw user input."""

import logging

import httpx

from mealmate.exceptions import FetchError, GatewayUnavailableError
from mealmate.llm.gateway import GenerationGateway
from mealmate.llm.prompts import WEBPAGE_CONTENT_PREFIX

from .fetch import DEFAULT_TIMEOUT, fetch_image, fetch_page, is_image_url, is_url, page_text
from .json_ld import extract_recipe_from_html
from .models import ExtractionMethod, ExtractionResult, Recipe
from .text_parser import parse_recipe_text

logger = logging.getLogger(__name__)

DEFAULT_PAGE_TEXT_BUDGET = 4000


class RecipeSourceResolver:
    """
    Turns a prompt, URL, or image into a Recipe.

    Extraction pipeline:
    1. Image bytes -> image understanding (prompt is ignored)
    2. Image URL -> fetch bytes -> image understanding
    3. Page URL -> embedded schema.org Recipe markup (no model call)
    4. Page URL -> page text (truncated) -> model
    5. Anything else, or a URL that could not be fetched -> model as text

    Fetch and model failures degrade to the next strategy. When nothing
    works the result carries the Error sentinel recipe instead of raising.
    """

    def __init__(
        self,
        gateway: GenerationGateway,
        *,
        http_client: httpx.AsyncClient | None = None,
        fetch_timeout: float = DEFAULT_TIMEOUT,
        page_text_budget: int = DEFAULT_PAGE_TEXT_BUDGET,
    ):
        self.gateway = gateway
        self.http_client = http_client
        self.fetch_timeout = fetch_timeout
        self.page_text_budget = page_text_budget

    async def resolve(
        self,
        prompt: str | None = None,
        image_bytes: bytes | None = None,
        image_mime_type: str | None = None,
    ) -> Recipe:
        """Extract a recipe; returns the Error sentinel when every strategy fails."""
        result = await self.extract(prompt, image_bytes, image_mime_type)
        return result.recipe

    async def extract(
        self,
        prompt: str | None = None,
        image_bytes: bytes | None = None,
        image_mime_type: str | None = None,
    ) -> ExtractionResult:
        """Extract a recipe and report which strategy produced it."""
        if image_bytes:
            recipe = await self._from_image(image_bytes, image_mime_type or "image/png")
            if recipe:
                return ExtractionResult(recipe=recipe, method=ExtractionMethod.IMAGE)
            return _failed("Could not read a recipe from this image")

        text = (prompt or "").strip()
        if not text:
            return _failed("No prompt, image, or URL provided")

        if is_url(text):
            return await self._from_url(text)

        recipe = await self._from_text(text)
        if recipe:
            return ExtractionResult(recipe=recipe, method=ExtractionMethod.TEXT)
        return _failed("Could not generate a recipe from this description")

    # =========================================================================
    # Strategies
    # =========================================================================

    async def _from_url(self, url: str) -> ExtractionResult:
        if is_image_url(url):
            logger.info(f"Fetching recipe image from {url}")
            try:
                image_bytes, mime_type = await fetch_image(
                    url, client=self.http_client, timeout=self.fetch_timeout
                )
            except FetchError as e:
                logger.warning(f"Image fetch failed, trying as text: {e}")
            else:
                recipe = await self._from_image(image_bytes, mime_type)
                if recipe:
                    return ExtractionResult(
                        recipe=recipe, method=ExtractionMethod.IMAGE_URL, source_url=url
                    )
        else:
            logger.info(f"Fetching recipe page {url}")
            try:
                page = await fetch_page(url, client=self.http_client, timeout=self.fetch_timeout)
            except FetchError as e:
                logger.warning(f"Page fetch failed, trying as text: {e}")
            else:
                recipe = extract_recipe_from_html(page.html, page.url)
                if recipe:
                    logger.info(f"Structured recipe markup found on {page.url}")
                    return ExtractionResult(
                        recipe=recipe, method=ExtractionMethod.JSON_LD, source_url=page.url
                    )

                text = page_text(page.html, self.page_text_budget)
                if text:
                    recipe = await self._from_text(f"{WEBPAGE_CONTENT_PREFIX}{text}")
                    if recipe:
                        return ExtractionResult(
                            recipe=recipe, method=ExtractionMethod.PAGE_TEXT, source_url=page.url
                        )

        # Last resort: let the model work from the URL itself
        recipe = await self._from_text(url)
        if recipe:
            return ExtractionResult(recipe=recipe, method=ExtractionMethod.TEXT, source_url=url)
        return _failed(f"Could not extract a recipe from {url}", source_url=url)

    async def _from_image(self, image_bytes: bytes, mime_type: str) -> Recipe | None:
        try:
            raw = await self.gateway.recipe_from_image(image_bytes, mime_type)
        except GatewayUnavailableError as e:
            logger.warning(f"Image extraction failed: {e}")
            return None
        return parse_recipe_text(raw)

    async def _from_text(self, prompt: str) -> Recipe | None:
        try:
            raw = await self.gateway.recipe_from_text(prompt)
        except GatewayUnavailableError as e:
            logger.warning(f"Text extraction failed: {e}")
            return None
        return parse_recipe_text(raw)


def _failed(error: str, source_url: str | None = None) -> ExtractionResult:
    logger.info(f"All extraction strategies failed: {error}")
    return ExtractionResult(
        recipe=Recipe.error(),
        method=ExtractionMethod.FAILED,
        source_url=source_url,
        error=error,
    )
