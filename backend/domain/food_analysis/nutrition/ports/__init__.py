"""Nutrition domain ports (interfaces)."""

from domain.food_analysis.nutrition.ports.priors_store import IFoodPriorsStore

__all__ = ["IFoodPriorsStore"]
