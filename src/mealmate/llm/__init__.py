"""
Meal Mate - Generation gateway over the language model service.
"""

from mealmate.llm.gateway import GenerationGateway

__all__ = [
    "GenerationGateway",
]
