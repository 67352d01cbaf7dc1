"""
Date parsing for meal-plan start dates in chat messages.

Accepts the forms people type: ISO dates, "today"/"tomorrow", weekday names,
"Oct 10", "October 10th", "10 Oct", "10/10" (month/day), each with an
optional year. A missing year takes the reference date's year.
"""

import re
from datetime import date, datetime, timedelta

WEEKDAYS = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
    "friday": 4, "saturday": 5, "sunday": 6,
}

_ORDINAL_SUFFIX = re.compile(r"(\d+)(st|nd|rd|th)\b", re.IGNORECASE)
_TRAILING_PUNCT = re.compile(r"[\s.,!?;:]+$")

# Tried in order; the ones without %Y get the reference year
_FORMATS_WITH_YEAR = ["%Y-%m-%d", "%b %d %Y", "%B %d %Y", "%d %b %Y", "%d %B %Y", "%m/%d/%Y"]
_FORMATS_WITHOUT_YEAR = ["%b %d", "%B %d", "%d %b", "%d %B", "%m/%d"]


def parse_start_date(text: str | None, today: date | None = None) -> date | None:
    """
    Parse a start date from the text that follows "from"/"starting"/"start".

    Returns None when nothing recognisable is found.
    """
    if not text:
        return None
    today = today or date.today()

    cleaned = text.strip().lower()
    cleaned = re.sub(r"^(on|from|the)\s+", "", cleaned)
    cleaned = re.sub(r"^(next|this)\s+(?=\w+day\b)", "", cleaned)

    if cleaned.startswith("today"):
        return today
    if cleaned.startswith("tomorrow"):
        return today + timedelta(days=1)

    first_word = cleaned.split(" ", 1)[0].rstrip(".,!?")
    if first_word in WEEKDAYS:
        return upcoming_weekday(first_word, today)

    candidate = _ORDINAL_SUFFIX.sub(r"\1", cleaned)
    candidate = candidate.replace(",", " ")
    candidate = re.sub(r"\s+", " ", candidate)

    # Try the longest leading word run first so trailing words are ignored
    words = candidate.split(" ")
    for length in range(min(len(words), 3), 0, -1):
        phrase = _TRAILING_PUNCT.sub("", " ".join(words[:length]))
        parsed = _parse_phrase(phrase, today)
        if parsed is not None:
            return parsed

    return None


def upcoming_weekday(weekday_name: str, today: date) -> date:
    """Next occurrence of a weekday; today counts."""
    days_ahead = (WEEKDAYS[weekday_name.lower()] - today.weekday()) % 7
    return today + timedelta(days=days_ahead)


def _parse_phrase(phrase: str, today: date) -> date | None:
    for fmt in _FORMATS_WITH_YEAR:
        try:
            return datetime.strptime(phrase, fmt).date()
        except ValueError:
            continue

    for fmt in _FORMATS_WITHOUT_YEAR:
        try:
            # Anchor on a leap year so "Feb 29" parses, then apply the real year
            parsed = datetime.strptime(f"{phrase} 2000", f"{fmt} %Y").date()
        except ValueError:
            continue
        try:
            return parsed.replace(year=today.year)
        except ValueError:
            return None

    return None
