"""Tiered macronutrient calculation.

Tiers are tried in order of decreasing reliability, first success wins:

1. priors: per-100 g reference values from the food priors store
2. ratio: split total calories with a category-based ratio table
3. unknown: no macros (never zero macros)
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from domain.food_analysis.core.exceptions.domain_errors import PriorsStoreError
from domain.food_analysis.core.value_objects.macros import (
    CARBS_KCAL_PER_G,
    FAT_KCAL_PER_G,
    PROTEIN_KCAL_PER_G,
    Macros,
    round1,
)
from domain.food_analysis.nutrition.ports.priors_store import IFoodPriorsStore
from metrics.food_analysis import record_macro_tier

logger = logging.getLogger(__name__)


class MacroTier(str, Enum):
    PRIORS = "priors"
    RATIO = "ratio"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class MacroRatio:
    """Share of calories coming from protein, carbs and fat (sums to 1)."""

    protein: float
    carbs: float
    fat: float


PROTEIN_DOMINANT = MacroRatio(protein=0.30, carbs=0.00, fat=0.20)
CARB_DOMINANT = MacroRatio(protein=0.10, carbs=0.75, fat=0.15)
PRODUCE = MacroRatio(protein=0.20, carbs=0.60, fat=0.20)
DEFAULT_RATIO = MacroRatio(protein=0.15, carbs=0.55, fat=0.30)

_CATEGORY_PATTERNS: Tuple[Tuple[re.Pattern, MacroRatio], ...] = (
    (re.compile(r"chicken|beef|fish|meat"), PROTEIN_DOMINANT),
    (re.compile(r"rice|pasta|bread"), CARB_DOMINANT),
    (re.compile(r"salad|vegetable|broccoli"), PRODUCE),
)


def ratio_for(label: str) -> MacroRatio:
    """Category ratio for a label, by keyword."""
    lowered = label.lower()
    for pattern, ratio in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return ratio
    return DEFAULT_RATIO


def macros_from_ratio(calories: float, ratio: MacroRatio) -> Macros:
    return Macros(
        protein_g=round1(calories * ratio.protein / PROTEIN_KCAL_PER_G),
        carbs_g=round1(calories * ratio.carbs / CARBS_KCAL_PER_G),
        fat_g=round1(calories * ratio.fat / FAT_KCAL_PER_G),
    )


@dataclass(frozen=True)
class MacroResolution:
    """Macros together with the tier that produced them."""

    tier: MacroTier
    macros: Optional[Macros] = None


class MacroCalculator:
    """
    Domain service filling in protein/carbs/fat grams for a portion.

    The priors store is optional: without one the calculator starts at the
    ratio tier. A failing store is logged and treated as a miss, so macro
    calculation never fails a request.

    Example:
        >>> calculator = MacroCalculator(priors_store=None)
        >>> macros = await calculator.calculate("chicken breast", 150, 231)
        >>> macros.protein_g
        17.3
    """

    def __init__(self, priors_store: Optional[IFoodPriorsStore] = None):
        self._priors = priors_store

    async def calculate(
        self, label: str, weight_grams: float, calories: Optional[float]
    ) -> Optional[Macros]:
        """Macros for the portion, or None when no tier applies."""
        resolution = await self.resolve(label, weight_grams, calories)
        return resolution.macros

    async def resolve(
        self, label: str, weight_grams: float, calories: Optional[float]
    ) -> MacroResolution:
        """
        Run the tiers in order and report which one answered.

        Args:
            label: Sanitized food label
            weight_grams: Portion weight
            calories: Portion calories, if known

        Returns:
            MacroResolution (macros is None for the unknown tier)
        """
        resolution = await self._from_priors(label, weight_grams)
        if resolution is None:
            resolution = self._from_ratio(label, weight_grams, calories)
        if resolution is None:
            resolution = MacroResolution(tier=MacroTier.UNKNOWN)

        record_macro_tier(resolution.tier.value)
        logger.debug(
            "Macros resolved",
            extra={"label": label, "tier": resolution.tier.value},
        )
        return resolution

    async def _from_priors(
        self, label: str, weight_grams: float
    ) -> Optional[MacroResolution]:
        if self._priors is None or weight_grams <= 0:
            return None
        try:
            priors = await self._priors.find_by_label(label)
        except PriorsStoreError as e:
            logger.warning(
                "Priors lookup failed, falling back to ratio tier",
                extra={"label": label, "error": str(e)},
            )
            return None
        if priors is None or priors.macros_per_100g is None:
            return None
        macros = priors.macros_per_100g.scaled(weight_grams / 100.0)
        return MacroResolution(tier=MacroTier.PRIORS, macros=macros)

    def _from_ratio(
        self, label: str, weight_grams: float, calories: Optional[float]
    ) -> Optional[MacroResolution]:
        if weight_grams <= 0 or not calories or calories <= 0:
            return None
        macros = macros_from_ratio(calories, ratio_for(label))
        return MacroResolution(tier=MacroTier.RATIO, macros=macros)
