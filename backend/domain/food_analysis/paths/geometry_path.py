"""Geometry path: visual portion estimate with density priors.

Used for prepared food, and for restaurant photos whose chain could not
be resolved. Weight and calories are the least reliable here, so the
density and energy-density priors are carried forward for downstream
combination with an independent volume measurement.
"""

import logging

from domain.food_analysis.core.entities.analysis import AnalyzeInput, AnalyzeItem
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.macros import round1, round_half_up
from domain.food_analysis.core.value_objects.priors import GaussianPrior, ItemPriors
from domain.food_analysis.nutrition.services.calorie_reconciler import (
    CalorieReconciler,
)
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.paths.base import EvidencePathHandler
from domain.food_analysis.recognition.ports.inference_service import IInferenceService
from domain.food_analysis.recognition.services.labels import (
    derive_parent_label,
    sanitize_label,
)

logger = logging.getLogger(__name__)

DENSITY_RELATIVE_SIGMA = 0.15
KCAL_PER_G_RELATIVE_SIGMA = 0.20


class GeometryPath(EvidencePathHandler):
    """Prepared food: density x energy density x estimated portion (sigma 15 %)."""

    evidence_tag = "Geometry"

    def __init__(
        self,
        inference: IInferenceService,
        macro_calculator: MacroCalculator,
        reconciler: CalorieReconciler,
        default_portion_grams: float,
        weight_relative_sigma: float,
    ):
        super().__init__(inference, macro_calculator, reconciler)
        self._default_portion_grams = default_portion_grams
        self._weight_relative_sigma = weight_relative_sigma

    async def run(self, image: AnalyzeInput) -> AnalyzeItem:
        estimate = await self._ask(
            "estimate_geometry", lambda: self._inference.estimate_geometry(image)
        )

        label = sanitize_label(estimate.label)
        weight = (
            estimate.estimated_weight_g
            if estimate.estimated_weight_g
            else self._default_portion_grams
        )
        raw_calories = (
            estimate.total_calories
            if estimate.total_calories is not None
            else round_half_up(weight * estimate.kcal_per_g)
        )

        macros = estimate.macros
        if macros is None:
            macros = await self._macros.calculate(label, weight, raw_calories)
        else:
            macros = macros.rounded()
        calories = self._reconciler.reconcile(label, raw_calories, macros).value

        priors = ItemPriors(
            kcal_per_g=GaussianPrior.relative(
                estimate.kcal_per_g, KCAL_PER_G_RELATIVE_SIGMA
            ),
            density=GaussianPrior.relative(
                estimate.density_g_ml, DENSITY_RELATIVE_SIGMA
            ),
        )
        parent_label = (
            sanitize_label(estimate.parent_label)
            if estimate.parent_label
            else derive_parent_label(label)
        )

        logger.info(
            "Geometry path complete",
            extra={
                "label": label,
                "parent_label": parent_label,
                "raw_calories": raw_calories,
                "calories": calories,
                "weight_grams": weight,
            },
        )
        return AnalyzeItem(
            label=label,
            confidence=estimate.confidence,
            calories=calories,
            sigma_calories=EvidencePath.GEOMETRY.sigma_for(calories),
            weight_grams=round1(weight),
            volume_ml=round1(estimate.estimated_volume_ml or 0.0),
            path=EvidencePath.GEOMETRY,
            priors=priors,
            macros=macros,
            evidence=self._evidence(),
            sigma_weight_grams=round1(weight * self._weight_relative_sigma),
            parent_label=parent_label,
        )
