"""
Meal Mate - Prompt templates for the generation gateway.

The recipe prompts pin the output formats that
mealmate.recipe_import.text_parser reads back.
"""

from datetime import date, timedelta

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

CHAT_SYSTEM_PROMPT = """You are Meal Mate, a friendly AI meal planning assistant.

Respond conversationally and helpfully. Keep the tone friendly and concise. \
Encourage the user to explore meal planning features when relevant: saving \
recipes from images, URLs, or descriptions, and creating meal plans from \
their saved recipes."""

RECIPE_FORMAT_PROMPT = """You are a professional chef. Read the recipe in this image and format it EXACTLY as shown below. Do not deviate from this format:

RECIPE NAME: [Name of the recipe]

DURATION: [Total time like "30 minutes" or "1 hour 30 minutes"]

INGREDIENTS:
- [First ingredient with exact measurements]
- [Second ingredient with exact measurements]
- [Continue with each ingredient on a separate line starting with dash]

STEPS:
1. [First step with detailed instructions]
2. [Second step with detailed instructions]
3. [Continue with numbered steps]

CRITICAL: Follow this exact format. List EVERY ingredient and EVERY step; never \
shorten, summarize, or truncate long lists. Do not add extra text, \
explanations, or formatting outside these sections."""

STRUCTURED_RECIPE_PROMPT = """You are a professional chef. Using the user request below, produce a JSON object with this exact shape:
{{
  "recipe_name": string,
  "ingredients": string[],
  "steps": string[],
  "duration": string
}}

Rules:
- Only output JSON. Do not wrap in backticks.
- Each ingredient must include quantities when possible.
- Steps must be detailed instructions.
- Duration must be a total time string like "30 minutes".

User request: {request}"""

WEBPAGE_CONTENT_PREFIX = "Webpage content: "

MEAL_PLAN_PROMPT = """Create a comprehensive {day_count}-day meal plan using these recipes: {recipe_list}.

1. RECIPE LIST: {recipe_list}

2. MEAL PLAN:
{outline}

   Write each day as its own section starting with the day label, then one line per meal:
   Breakfast: [meal name]
   Lunch: [meal name]
   Dinner: [meal name]

3. MEAL PREP TIPS:
   - Suggestions for preparing meals in advance
   - Storage recommendations
   - Time-saving strategies

4. SHOPPING LIST:
   - Organized by food categories
   - Quantities for the entire plan

5. NUTRITIONAL NOTES:
   - Key nutrients and health benefits
   - Portion size recommendations
   - Dietary considerations

Make sure to incorporate the provided recipes throughout the plan in a balanced and practical way."""


def day_labels(day_count: int, start_date: date | None = None) -> list[str]:
    """
    Outline labels for a plan.

    The first seven days get weekday names (starting from the start date's
    weekday when known, else Monday); later days are "Day N".
    """
    labels = []
    for i in range(day_count):
        if i >= 7:
            labels.append(f"Day {i + 1}")
        elif start_date is not None:
            labels.append(WEEKDAY_NAMES[(start_date + timedelta(days=i)).weekday()])
        else:
            labels.append(WEEKDAY_NAMES[i])
    return labels


def build_structured_recipe_prompt(request: str) -> str:
    return STRUCTURED_RECIPE_PROMPT.format(request=request)


def build_meal_plan_prompt(titles: list[str], day_count: int, start_date: date | None = None) -> str:
    recipe_list = ", ".join(titles)
    outline = "\n".join(
        f"   - {label}: Breakfast, Lunch, Dinner" for label in day_labels(day_count, start_date)
    )
    return MEAL_PLAN_PROMPT.format(day_count=day_count, recipe_list=recipe_list, outline=outline)
