"""Meal Mate - Database layer (Supabase)."""

from .client import get_authenticated_client, get_service_client
from .store import RecipeRecord

__all__ = ["RecipeRecord", "get_authenticated_client", "get_service_client"]
