"""Calorie reconciliation between raw and macro-derived estimates.

A vision model's single-pass calorie guess is less reliable than the sum
of its own per-macro guesses once those clear a plausibility floor.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.food_analysis.core.value_objects.macros import Macros, round_half_up
from domain.food_analysis.nutrition.services.lookup_tables import estimate_calories
from metrics.food_analysis import record_calorie_source

logger = logging.getLogger(__name__)

MIN_PLAUSIBLE_KCAL = 20
RAW_DOMINANCE_FACTOR = 0.5


class CalorieSource(str, Enum):
    MACROS = "macros"
    RAW = "raw"
    TABLE = "table"


@dataclass(frozen=True)
class ReconciledCalories:
    value: int
    source: CalorieSource


class CalorieReconciler:
    """
    Pick the more plausible of raw and macro-derived calories.

    Rule: the raw figure is rounded first, and NaN or infinite figures
    count as absent. With macros, ``m = round(p*4 + c*4 + f*9)`` wins when
    ``m >= 20`` and the rounded raw figure is absent, below 20, or below
    ``2 * m``. Otherwise the raw figure is used (0 included), and the static
    per-label table only when no raw figure exists.

    Example:
        >>> CalorieReconciler().reconcile("pasta", 100, Macros(30, 0, 20)).value
        300
    """

    def reconcile(
        self,
        label: str,
        calories: Optional[float],
        macros: Optional[Macros],
    ) -> ReconciledCalories:
        result = self._decide(label, calories, macros)
        record_calorie_source(result.source.value)
        logger.debug(
            "Calories reconciled",
            extra={
                "label": label,
                "raw_calories": calories,
                "calories": result.value,
                "source": result.source.value,
            },
        )
        return result

    def _decide(
        self,
        label: str,
        calories: Optional[float],
        macros: Optional[Macros],
    ) -> ReconciledCalories:
        raw: Optional[int] = None
        if calories is not None and math.isfinite(calories):
            raw = int(round_half_up(max(0.0, calories)))

        if macros is not None:
            from_macros = macros.atwater_calories()
            if from_macros >= MIN_PLAUSIBLE_KCAL and (
                raw is None
                or raw < MIN_PLAUSIBLE_KCAL
                or from_macros > raw * RAW_DOMINANCE_FACTOR
            ):
                return ReconciledCalories(from_macros, CalorieSource.MACROS)

        if raw is not None:
            return ReconciledCalories(raw, CalorieSource.RAW)
        return ReconciledCalories(estimate_calories(label), CalorieSource.TABLE)
