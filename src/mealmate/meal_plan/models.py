"""Data models for meal plans."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any

MEAL_TYPES = ("breakfast", "lunch", "dinner")
MAX_DAY_COUNT = 31


@dataclass(frozen=True)
class Meal:
    name: str
    description: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict | None, fallback_name: str) -> "Meal":
        data = data or {}
        return cls(
            name=data.get("name") or fallback_name,
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class MealPlanDay:
    """One dated day of a plan; the label is the weekday name of `date`."""

    label: str
    date: date
    breakfast: Meal
    lunch: Meal
    dinner: Meal

    @property
    def meals(self) -> dict[str, Meal]:
        return {"breakfast": self.breakfast, "lunch": self.lunch, "dinner": self.dinner}

    def to_dict(self) -> dict:
        return {
            "day": self.label,
            "date": self.date.isoformat(),
            "meals": {meal_type: meal.to_dict() for meal_type, meal in self.meals.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MealPlanDay":
        meals = data.get("meals") or {}
        day_date = as_date(data["date"])
        return cls(
            label=data.get("day") or data.get("label") or day_date.strftime("%A"),
            date=day_date,
            breakfast=Meal.from_dict(meals.get("breakfast"), "Breakfast"),
            lunch=Meal.from_dict(meals.get("lunch"), "Lunch"),
            dinner=Meal.from_dict(meals.get("dinner"), "Dinner"),
        )


@dataclass(frozen=True)
class MealPlan:
    """
    A dated run of days.

    Never mutated in place: persisting or editing a plan produces a new
    instance (see dataclasses.replace).
    """

    id: str
    period_start_date: date
    period_end_date: date
    days: list[MealPlanDay]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def day_count(self) -> int:
        return len(self.days)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "period_start_date": self.period_start_date.isoformat(),
            "period_end_date": self.period_end_date.isoformat(),
            "days": [day.to_dict() for day in self.days],
            "created_at": self.created_at.isoformat(),
        }


def period_end(start_date: date, day_count: int) -> date:
    """
    Last date of a `day_count`-day period starting on `start_date`.

    Raises ValueError when day_count is outside 1..MAX_DAY_COUNT or the
    period runs past date.max.
    """
    if not 1 <= day_count <= MAX_DAY_COUNT:
        raise ValueError(f"day_count must be between 1 and {MAX_DAY_COUNT}")
    try:
        return start_date + timedelta(days=day_count - 1)
    except OverflowError as e:
        raise ValueError(f"A {day_count}-day plan starting {start_date} ends after {date.max}") from e


def as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if "T" in text:
        # Full ISO timestamp as stored by older clients
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)
