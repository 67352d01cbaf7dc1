"""
Meal Mate Web API - FastAPI application.

The generation gateway and a shared HTTP client are built once at startup.
A missing OpenAI key does not stop the app: chat falls back to a canned
reply and the generation endpoints answer with a configuration error.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mealmate import __version__
from mealmate.config import settings
from mealmate.exceptions import GatewayConfigError
from mealmate.llm.gateway import GenerationGateway
from mealmate.llm.prompt_logger import is_prompt_logging_enabled
from mealmate.recipe_import.fetch import DEFAULT_HEADERS
from mealmate.web.library_routes import router as library_router
from mealmate.web.routes import router as meal_mate_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api/meal-mate"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build shared clients on startup and close them on shutdown."""
    logger.info("Meal Mate starting up...")
    try:
        app.state.gateway = GenerationGateway.from_settings(settings)
        logger.info(f"  Model: {app.state.gateway.model}")
    except GatewayConfigError as e:
        logger.error(f"  Generation gateway disabled: {e}")
        app.state.gateway = None
    logger.info(f"  Prompt file logging: {is_prompt_logging_enabled()}")

    app.state.http_client = httpx.AsyncClient(
        headers=DEFAULT_HEADERS,
        timeout=settings.fetch_timeout_seconds,
        follow_redirects=True,
    )
    try:
        yield
    finally:
        await app.state.http_client.aclose()


app = FastAPI(title="Meal Mate", version=__version__, lifespan=lifespan)

# CORS middleware for the frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(meal_mate_router, prefix=API_PREFIX)
app.include_router(library_router, prefix=API_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
