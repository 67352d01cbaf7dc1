"""
Conversation policy for meal planning.

Each turn is decided from the ConversationTurnContext alone; there is no
session state. Rules, first match wins:

1. Blank message -> FreeformReply with a prompt for input
2. Meal-plan intent -> AskEditOrNew / AskDayCount / Generate
3. "edit" with an existing plan -> AskDayCount("edit")
4. "new" -> AskDayCount("new")
5. Bare day count answer with a known recipe count -> Generate
6. Anything else -> FreeformReply(None), answered by the chat model

Meal-plan intent is checked before the bare-number rule so that
"plan for 5 days" is never read as an answer to an earlier question.
"""

import logging
import re
from datetime import date

from mealmate.meal_plan.models import MAX_DAY_COUNT

from .dates import parse_start_date
from .models import (
    EMPTY_MESSAGE_REPLY,
    AskDayCount,
    AskEditOrNew,
    ConversationDecision,
    ConversationTurnContext,
    FreeformReply,
    Generate,
)

logger = logging.getLogger(__name__)

MEAL_PLAN_KEYWORDS = [
    "meal plan",
    "weekly plan",
    "week",
    "plan for",
    "create plan",
    "generate plan",
    "days",
]

_PLAN_REQUEST = re.compile(r"\b(?:create|make|plan)\b.*?\b\d+\s*-?\s*days?\b", re.IGNORECASE)
_WEEK_COUNT = re.compile(r"\b(\d+)\s*-?\s*weeks?\b", re.IGNORECASE)
_DAY_COUNT = re.compile(r"\b(\d+)\s*-?\s*days?\b", re.IGNORECASE)
_START_KEYWORD = re.compile(r"\b(?:from|starting|start)\s+(?:on\s+|from\s+)?", re.IGNORECASE)
_BARE_COUNT = re.compile(r"^(\d+)\s*-?\s*(days?|weeks?)?$", re.IGNORECASE)
_EDIT = re.compile(r"\bedit\b", re.IGNORECASE)
_NEW = re.compile(r"\bnew\b", re.IGNORECASE)


def decide(context: ConversationTurnContext, today: date | None = None) -> ConversationDecision:
    """
    Decide the next step of the conversation.

    Args:
        context: Latest message plus what the caller knows about the user
        today: Reference date for relative and year-less start dates

    Returns:
        Exactly one of AskEditOrNew, AskDayCount, Generate or FreeformReply
    """
    message = (context.latest_message or "").strip()
    if not message:
        return FreeformReply(reply=EMPTY_MESSAGE_REPLY)

    if is_meal_plan_request(message):
        return _decide_meal_plan(message, context, today)

    if _EDIT.search(message) and context.has_existing_plan:
        return AskDayCount(flavor="edit")

    if _NEW.search(message):
        return AskDayCount(flavor="new")

    bare = _BARE_COUNT.match(message)
    if bare and context.saved_recipe_count is not None:
        count = int(bare.group(1))
        unit = (bare.group(2) or "").lower()
        day_count = count * 7 if unit.startswith("week") else count
        if day_count >= 1:
            return Generate(day_count=min(day_count, MAX_DAY_COUNT), start_date=None)

    return FreeformReply()


def is_meal_plan_request(message: str) -> bool:
    lowered = message.lower()
    if any(keyword in lowered for keyword in MEAL_PLAN_KEYWORDS):
        return True
    return bool(_PLAN_REQUEST.search(message))


def parse_day_count(message: str) -> int | None:
    """
    Day count from "N weeks" (x7) or "N days"; weeks win when both appear.

    Counts above MAX_DAY_COUNT are clamped to it.
    """
    weeks = _WEEK_COUNT.search(message)
    if weeks and int(weeks.group(1)) > 0:
        return min(int(weeks.group(1)) * 7, MAX_DAY_COUNT)

    days = _DAY_COUNT.search(message)
    if days and int(days.group(1)) > 0:
        return min(int(days.group(1)), MAX_DAY_COUNT)

    return None


def _decide_meal_plan(
    message: str, context: ConversationTurnContext, today: date | None
) -> ConversationDecision:
    day_count = parse_day_count(message)

    start_date = parse_start_date_phrase(message, today)

    wants_edit = bool(_EDIT.search(message))
    wants_new = bool(_NEW.search(message))

    if day_count is None:
        if context.has_existing_plan and not (wants_edit or wants_new):
            return AskEditOrNew()
        if wants_edit and context.has_existing_plan:
            return AskDayCount(flavor="edit")
        if wants_new:
            return AskDayCount(flavor="new")
        return AskDayCount()

    return Generate(day_count=day_count, start_date=start_date)


def parse_start_date_phrase(message: str, today: date | None = None) -> date | None:
    """Start date after the first "from"/"starting"/"start" that names one."""
    for match in _START_KEYWORD.finditer(message):
        candidate = message[match.end():]
        start_date = parse_start_date(candidate, today)
        if start_date is not None:
            return start_date
        logger.debug(f"Ignoring unparseable start date: {candidate!r}")
    return None
