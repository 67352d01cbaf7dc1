"""
Meal Mate - Generation Gateway.

Thin facade over the OpenAI chat completions API. Each verb builds a prompt,
makes one completion call, and returns the raw response text for the
parsers in recipe_import and meal_plan.

The gateway is built once at startup and shared. It holds no per-request
state. Construction fails fast when the API key is missing.
"""

import base64
import logging
from datetime import date
from typing import Any

import openai
from openai import AsyncOpenAI

from mealmate.exceptions import GatewayConfigError, GatewayUnavailableError
from mealmate.llm import prompts
from mealmate.llm.prompt_logger import enable_prompt_logging, log_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"
MISSING_KEY_MESSAGE = "Missing OpenAI API key. Set OPENAI_API_KEY in the environment or .env file."


class GenerationGateway:
    """Facade over the language model service."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_output_tokens: int = 2048,
        client: Any | None = None,
    ):
        if not api_key or not api_key.strip():
            raise GatewayConfigError(MISSING_KEY_MESSAGE)

        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client = client or AsyncOpenAI(api_key=api_key.strip())

    @classmethod
    def from_settings(cls, settings: Any, client: Any | None = None) -> "GenerationGateway":
        """Build a gateway from application settings."""
        if settings.mealmate_log_prompts:
            enable_prompt_logging(True)
        return cls(
            settings.openai_api_key,
            model=settings.mealmate_model,
            temperature=settings.mealmate_temperature,
            max_output_tokens=settings.mealmate_max_output_tokens,
            client=client,
        )

    # =========================================================================
    # Verbs
    # =========================================================================

    async def recipe_from_image(self, image_bytes: bytes, mime_type: str) -> str:
        """Read a recipe from an image; the reply uses the labeled-section format."""
        encoded = base64.b64encode(image_bytes).decode("ascii")
        content = [
            {"type": "text", "text": prompts.RECIPE_FORMAT_PROMPT},
            {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
        ]
        return await self._complete(
            verb="recipe_from_image",
            messages=[{"role": "user", "content": content}],
            prompt=prompts.RECIPE_FORMAT_PROMPT,
            attachment=f"{mime_type}, {len(image_bytes)} bytes",
        )

    async def recipe_from_text(self, prompt: str) -> str:
        """Turn a recipe description (or page text) into recipe JSON."""
        user_prompt = prompts.build_structured_recipe_prompt(prompt)
        return await self._complete(
            verb="recipe_from_text",
            messages=[{"role": "user", "content": user_prompt}],
            prompt=user_prompt,
        )

    async def meal_plan_from_titles(
        self,
        titles: list[str],
        day_count: int,
        start_date: date | None = None,
    ) -> str:
        """Write a day-by-day meal plan that uses the given recipe titles."""
        if not titles:
            raise ValueError("No recipes provided for meal plan generation.")
        if day_count < 1:
            raise ValueError("A meal plan needs at least one day.")

        user_prompt = prompts.build_meal_plan_prompt(titles, day_count, start_date)
        return await self._complete(
            verb="meal_plan_from_titles",
            messages=[{"role": "user", "content": user_prompt}],
            prompt=user_prompt,
        )

    async def chat_reply(self, message: str) -> str:
        """Open-ended reply in the Meal Mate persona."""
        if not message or not message.strip():
            raise ValueError("Cannot generate reply for an empty message.")

        user_prompt = message.strip()
        return await self._complete(
            verb="chat_reply",
            messages=[
                {"role": "system", "content": prompts.CHAT_SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            prompt=user_prompt,
            system_prompt=prompts.CHAT_SYSTEM_PROMPT,
        )

    # =========================================================================
    # Completion round trip
    # =========================================================================

    async def _complete(
        self,
        *,
        verb: str,
        messages: list[dict],
        prompt: str,
        system_prompt: str | None = None,
        attachment: str | None = None,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_output_tokens,
            )
            text = _response_text(response)
        except openai.OpenAIError as e:
            logger.warning(f"Gateway {verb} failed: {e}")
            log_prompt(
                verb=verb,
                model=self.model,
                prompt=prompt,
                system_prompt=system_prompt,
                attachment=attachment,
                error=str(e),
            )
            raise GatewayUnavailableError(verb, str(e)) from e

        log_prompt(
            verb=verb,
            model=self.model,
            prompt=prompt,
            system_prompt=system_prompt,
            attachment=attachment,
            response=text,
        )

        if not text:
            raise GatewayUnavailableError(verb, "empty response")
        return text


def _response_text(response: Any) -> str:
    """Pull the text of the first choice out of a completion response."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        # Content parts: keep the text ones
        return "".join(
            part.get("text", "") for part in content if isinstance(part, dict)
        ).strip()
    return ""
