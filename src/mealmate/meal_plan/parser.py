"""
Meal-plan text parser.

Turns the model's free-form plan into exactly `day_count` dated days. Dates
and weekday labels come from the start date; the text is only mined for
meal names.

For each day the parser looks for its weekday name and reads the
Breakfast / Lunch / Dinner lines in that day's section. Each weekday keeps
its own search cursor: once a "Monday" section is used, the next Monday of a
multi-week plan reads the following "Monday" section. When no weekday
section is left, a "Day N" heading for the day's position is tried. Days
whose section (or a given meal) is missing get the bare meal label and a
filler description.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from .models import Meal, MealPlan, MealPlanDay, period_end

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

FALLBACK_MEALS = {
    "breakfast": Meal("Breakfast", "Delicious morning meal"),
    "lunch": Meal("Lunch", "Satisfying midday meal"),
    "dinner": Meal("Dinner", "Hearty evening meal"),
}

_HEADING_PREFIX = r"^[ \t>#*_\-•\d.)]*"

# A line that opens a new day section: "Tuesday", "**Day 8**", "- Wednesday:"
_DAY_HEADING = re.compile(
    _HEADING_PREFIX + r"(?:" + "|".join(WEEKDAY_NAMES) + r"|day\s+\d+)\b",
    re.IGNORECASE | re.MULTILINE,
)
_MEAL_LINE = {
    meal_type: re.compile(
        rf"\b{meal_type}\b[ \t*_]*(?:\([^)\n]*\))?[ \t*_]*[:\-–—][ \t*_]*([^\n\r]+)",
        re.IGNORECASE,
    )
    for meal_type in FALLBACK_MEALS
}
# "Oatmeal, Lunch - Salad" -> "Oatmeal"
_NEXT_MEAL = re.compile(r"\s*[,;|]\s*(?:breakfast|lunch|dinner|snacks?)\b.*$", re.IGNORECASE)


@dataclass
class _DayMatch:
    meals: dict[str, Meal]
    next_position: int
    found: bool


def parse_meal_plan_text(raw_text: str, start_date: date, day_count: int) -> MealPlan:
    """
    Parse plan text into a MealPlan of exactly `day_count` days.

    Args:
        raw_text: Model output describing the plan
        start_date: Date of the first day
        day_count: Number of days to produce (1..MAX_DAY_COUNT)

    Raises ValueError for an out-of-range day count or period.
    """
    end_date = period_end(start_date, day_count)

    text = raw_text or ""
    cursors: dict[str, int] = {}
    days = []

    for offset in range(day_count):
        day_date = start_date + timedelta(days=offset)
        weekday = WEEKDAY_NAMES[day_date.weekday()]

        match = _match_section(text, _weekday_patterns(weekday), cursors.get(weekday, 0))
        cursors[weekday] = match.next_position
        if not match.found:
            numbered = _match_section(text, [_numbered_heading(offset + 1)], 0)
            if numbered.found:
                match = numbered

        days.append(
            MealPlanDay(
                label=weekday,
                date=day_date,
                breakfast=match.meals["breakfast"],
                lunch=match.meals["lunch"],
                dinner=match.meals["dinner"],
            )
        )

    return MealPlan(
        id=str(uuid.uuid4()),
        period_start_date=start_date,
        period_end_date=end_date,
        days=days,
        created_at=datetime.now(timezone.utc),
    )


def _weekday_patterns(weekday: str) -> list[re.Pattern]:
    # Headings ("Monday", "**Day 2 - Tuesday**") before bare mentions, so a
    # meal such as "Sunday roast" is not read as a day
    return [
        re.compile(
            _HEADING_PREFIX + rf"(?:day\s+\d+[ \t*_:\-–—(]*)?{weekday}\b",
            re.IGNORECASE | re.MULTILINE,
        ),
        re.compile(rf"\b{weekday}\b", re.IGNORECASE),
    ]


def _numbered_heading(number: int) -> re.Pattern:
    return re.compile(_HEADING_PREFIX + rf"day\s+{number}\b", re.IGNORECASE | re.MULTILINE)


def _match_section(text: str, patterns: list[re.Pattern], start: int) -> _DayMatch:
    """
    Find meals under the first pattern that occurs at or after `start`.

    The first occurrence whose section names at least one meal wins; if none
    does, the first occurrence is consumed with fallback meals. No
    occurrence at all leaves the cursor where it was.
    """
    occurrences = []
    for pattern in patterns:
        occurrences = list(pattern.finditer(text, start))
        if occurrences:
            break
    if not occurrences:
        return _DayMatch(meals=dict(FALLBACK_MEALS), next_position=start, found=False)

    for occurrence in occurrences:
        section_start = occurrence.end()
        section = text[section_start:_section_end(text, section_start)]
        found = {meal_type: _meal_in(section, meal_type) for meal_type in FALLBACK_MEALS}
        if any(found.values()):
            meals = {
                meal_type: Meal(name, FALLBACK_MEALS[meal_type].description)
                if name else FALLBACK_MEALS[meal_type]
                for meal_type, name in found.items()
            }
            return _DayMatch(meals=meals, next_position=section_start, found=True)

    logger.debug(f"No meals listed under '{patterns[0].pattern}'")
    return _DayMatch(meals=dict(FALLBACK_MEALS), next_position=occurrences[0].end(), found=False)


def _section_end(text: str, position: int) -> int:
    """End of the day section that starts at `position`: the next day heading."""
    line_end = text.find("\n", position)
    if line_end == -1:
        return len(text)
    heading = _DAY_HEADING.search(text, line_end + 1)
    return heading.start() if heading else len(text)


def _meal_in(section: str, meal_type: str) -> str | None:
    match = _MEAL_LINE[meal_type].search(section)
    if not match:
        return None
    name = _NEXT_MEAL.sub("", match.group(1))
    name = name.strip().strip("*_").strip()
    return name or None
