"""
Meal Mate - AI-assisted recipe extraction and meal planning.

Components:
- recipe_import: Turn text, images, and URLs into structured recipes
- meal_plan: Generate and parse dated multi-day meal plans
- conversation: Per-turn policy for the meal-planning chat
- llm: Generation gateway over the language model service
"""

__version__ = "1.0.0"
