"""Meal Mate Web API."""
