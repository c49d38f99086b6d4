"""Nutrition domain services."""

from domain.food_analysis.nutrition.services.calorie_reconciler import (
    CalorieReconciler,
    CalorieSource,
    ReconciledCalories,
)
from domain.food_analysis.nutrition.services.macro_calculator import (
    MacroCalculator,
    MacroResolution,
    MacroTier,
)

__all__ = [
    "CalorieReconciler",
    "CalorieSource",
    "MacroCalculator",
    "MacroResolution",
    "MacroTier",
    "ReconciledCalories",
]
