"""
Meal Mate - CLI Entry Point.

Usage:
    mealmate chat                    Start interactive chat
    mealmate extract <url|text>      Extract a recipe
    mealmate extract --image PATH    Extract a recipe from a photo
    mealmate plan --days 5           Generate a meal plan
    mealmate health                  Check configuration
    mealmate serve                   Start the web API
"""

import asyncio
import logging
import mimetypes
from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

from mealmate.meal_plan.models import MAX_DAY_COUNT

app = typer.Typer(
    name="mealmate",
    help="Meal Mate - Save recipes from anywhere and plan your meals.",
    add_completion=False,
)
console = Console()

RECIPE_KEYWORDS = ["recipe", "cook", "make", "prepare", "ingredient", "dish"]
NO_RECIPES_MESSAGE = (
    "You need to save some recipes first before I can create a meal plan. "
    "Try sharing a URL or describing a recipe!"
)


def _setup(log_prompts: bool = False):
    """Configure logging and build the gateway; exits when the key is missing."""
    from mealmate.config import settings
    from mealmate.exceptions import GatewayConfigError
    from mealmate.llm.gateway import GenerationGateway
    from mealmate.llm.prompt_logger import enable_prompt_logging

    logging.basicConfig(level=settings.log_level)

    if log_prompts:
        enable_prompt_logging(True)
        console.print("[dim]Prompt logging enabled. Check prompt_logs/ after the session.[/dim]")

    try:
        return GenerationGateway.from_settings(settings)
    except GatewayConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _resolver(gateway):
    from mealmate.config import settings
    from mealmate.recipe_import import RecipeSourceResolver

    return RecipeSourceResolver(
        gateway,
        fetch_timeout=settings.fetch_timeout_seconds,
        page_text_budget=settings.page_text_budget,
    )


# =============================================================================
# Rendering
# =============================================================================


def _show_recipe(recipe) -> None:
    ingredients = "\n".join(f"  • {item}" for item in recipe.ingredients)
    steps = "\n".join(f"  {i}. {step}" for i, step in enumerate(recipe.steps, 1))
    console.print(
        Panel(
            f"[dim]Duration: {recipe.duration}[/dim]\n\n"
            f"[bold]Ingredients[/bold]\n{ingredients}\n\n"
            f"[bold]Steps[/bold]\n{steps}",
            title=f"[bold]{recipe.name}[/bold]",
            border_style="red" if recipe.is_error else "green",
        )
    )


def _show_meal_plan(plan) -> None:
    table = Table(
        title=f"Meal Plan {plan.period_start_date:%b %d} - {plan.period_end_date:%b %d, %Y}",
        show_lines=True,
    )
    table.add_column("Day", style="bold")
    table.add_column("Breakfast")
    table.add_column("Lunch")
    table.add_column("Dinner")

    for day in plan.days:
        table.add_row(
            f"{day.label}\n[dim]{day.date:%b %d}[/dim]",
            day.breakfast.name,
            day.lunch.name,
            day.dinner.name,
        )
    console.print(table)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def chat(
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Start an interactive chat session with Meal Mate."""
    gateway = _setup(log_prompts)

    console.print(
        Panel.fit(
            "[bold green]Meal Mate[/bold green]\n"
            "Share a recipe link, describe a dish, or ask for a meal plan.\n\n"
            "[dim]Type 'exit' or 'quit' to end the session.[/dim]\n"
            "[dim]Type 'recipes' to list the recipes saved this session.[/dim]",
            title="Welcome",
            border_style="green",
        )
    )

    asyncio.run(_chat_loop(gateway))


async def _chat_loop(gateway) -> None:
    from mealmate.llm.prompt_logger import get_session_log_dir

    resolver = _resolver(gateway)
    recipes = []
    current_plan = None

    while True:
        try:
            user_input = console.input("\n[bold blue]You:[/bold blue] ").strip()

            if user_input.lower() in ("exit", "quit", "q"):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if not user_input:
                continue

            if user_input.lower() == "recipes":
                names = ", ".join(recipe.name for recipe in recipes) or "none yet"
                console.print(f"[dim]Saved this session: {names}[/dim]")
                continue

            recipe, plan = await _chat_turn(gateway, resolver, user_input, recipes, current_plan)
            if recipe is not None and not recipe.is_error:
                recipes.append(recipe)
            if plan is not None:
                current_plan = plan

        except KeyboardInterrupt:
            console.print("\n\n[dim]Session interrupted. Goodbye![/dim]")
            break
        except Exception as e:
            console.print(f"\n[red]Error: {e}[/red]")

    log_dir = get_session_log_dir()
    if log_dir:
        console.print(f"[dim]Prompts logged to: {log_dir}[/dim]")


async def _chat_turn(gateway, resolver, message: str, recipes: list, current_plan):
    """Handle one chat message. Returns (new recipe, new plan), either may be None."""
    from mealmate.conversation import ConversationTurnContext, FreeformReply, Generate, decide
    from mealmate.conversation.policy import is_meal_plan_request
    from mealmate.exceptions import GatewayUnavailableError
    from mealmate.meal_plan import generate_meal_plan
    from mealmate.recipe_import.fetch import is_url

    if is_url(message):
        with Live(Spinner("dots", text="Analyzing the recipe from this URL..."), console=console, transient=True):
            recipe = await resolver.resolve(prompt=message)
        _show_recipe(recipe)
        return recipe, None

    if is_meal_plan_request(message) and not recipes:
        console.print(f"\n[bold green]Meal Mate:[/bold green] {NO_RECIPES_MESSAGE}")
        return None, None

    decision = decide(
        ConversationTurnContext(
            latest_message=message,
            saved_recipe_count=len(recipes),
            has_existing_plan=current_plan is not None,
        )
    )

    if isinstance(decision, Generate):
        console.print(f"\n[bold green]Meal Mate:[/bold green] {decision.message}")
        with Live(Spinner("dots", text="Planning meals..."), console=console, transient=True):
            plan = await generate_meal_plan(
                gateway,
                [recipe.name for recipe in recipes],
                day_count=decision.day_count,
                start_date=decision.start_date,
            )
        _show_meal_plan(plan)
        return None, plan

    if not isinstance(decision, FreeformReply) or decision.reply:
        console.print(f"\n[bold green]Meal Mate:[/bold green] {decision.message}")
        return None, None

    if any(keyword in message.lower() for keyword in RECIPE_KEYWORDS):
        with Live(Spinner("dots", text="Extracting recipe from your description..."), console=console, transient=True):
            recipe = await resolver.resolve(prompt=message)
        _show_recipe(recipe)
        return recipe, None

    try:
        with Live(Spinner("dots", text="Thinking..."), console=console, transient=True):
            reply = await gateway.chat_reply(message)
    except GatewayUnavailableError as e:
        console.print(f"[red]{e}[/red]")
        return None, None

    console.print(f"\n[bold green]Meal Mate:[/bold green] {reply}")
    return None, None


@app.command()
def extract(
    source: str = typer.Argument(None, help="Recipe URL, image URL, or a description"),
    image: Path = typer.Option(None, "--image", "-i", help="Photo of a recipe", exists=True, dir_okay=False),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Extract a recipe from a URL, a description, or a photo."""
    if not source and image is None:
        console.print("[red]Please provide a prompt, image URL, or recipe link.[/red]")
        raise typer.Exit(1)

    gateway = _setup(log_prompts)
    resolver = _resolver(gateway)

    image_bytes = None
    mime_type = None
    if image is not None:
        image_bytes = image.read_bytes()
        mime_type = mimetypes.guess_type(image.name)[0] or "image/png"

    with Live(Spinner("dots", text="Extracting recipe..."), console=console, transient=True):
        result = asyncio.run(
            resolver.extract(prompt=source, image_bytes=image_bytes, image_mime_type=mime_type)
        )

    _show_recipe(result.recipe)
    console.print(f"[dim]Method: {result.method.value}[/dim]")
    if not result.success:
        console.print(f"[red]{result.error}[/red]")
        raise typer.Exit(1)


@app.command()
def plan(
    days: int = typer.Option(7, "--days", "-d", min=1, max=MAX_DAY_COUNT, help="Number of days to plan"),
    start: str = typer.Option(None, "--start", "-s", help="Start date, e.g. 2025-10-10, 'Oct 10' or 'monday'"),
    recipe: list[str] = typer.Option(None, "--recipe", "-r", help="Recipe title to plan around (repeatable)"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Generate a meal plan from recipe titles."""
    from mealmate.conversation.dates import parse_start_date
    from mealmate.exceptions import GatewayUnavailableError
    from mealmate.meal_plan import generate_meal_plan

    start_date = None
    if start:
        start_date = parse_start_date(start, date.today())
        if start_date is None:
            console.print(f"[red]Could not understand start date: {start}[/red]")
            raise typer.Exit(1)

    gateway = _setup(log_prompts)

    try:
        with Live(Spinner("dots", text=f"Planning {days} days of meals..."), console=console, transient=True):
            meal_plan = asyncio.run(
                generate_meal_plan(gateway, recipe or None, day_count=days, start_date=start_date)
            )
    except (GatewayUnavailableError, ValueError) as e:
        console.print(f"[red]Failed to generate meal plan: {e}[/red]")
        raise typer.Exit(1)

    _show_meal_plan(meal_plan)


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from mealmate.config import get_settings

    console.print("\n[bold]Meal Mate Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("[green]OK[/green] Configuration loaded")
        console.print(f"   Environment: {settings.mealmate_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Model: {settings.mealmate_model}")

        # Check OpenAI
        if not settings.openai_api_key:
            console.print("[red]FAIL[/red] OpenAI API key missing")
            raise typer.Exit(1)
        if settings.openai_api_key.startswith("sk-"):
            console.print("[green]OK[/green] OpenAI API key configured")
        else:
            console.print("[yellow]WARN[/yellow] OpenAI API key may be invalid")

        # Check Supabase
        if settings.supabase_url and settings.supabase_url.startswith("https://"):
            console.print("[green]OK[/green] Supabase URL configured")
        else:
            console.print("[dim]INFO[/dim] Supabase not configured; recipe library disabled")

        console.print("\n[green]All checks passed![/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from mealmate import __version__

    console.print(f"Meal Mate version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web API server."""
    import os

    import uvicorn

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Meal Mate API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "mealmate.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
