"""Label path: nutrition facts panel of a packaged product."""

import logging
import re
from typing import Optional

from domain.food_analysis.core.entities.analysis import (
    AnalyzeInput,
    AnalyzeItem,
    NutritionLabelInfo,
)
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.macros import round1
from domain.food_analysis.paths.base import EvidencePathHandler, weight_from_calories
from domain.food_analysis.recognition.entities.evidence import NutritionLabelReading
from domain.food_analysis.recognition.services.labels import sanitize_label

logger = logging.getLogger(__name__)

DEFAULT_PACKAGED_LABEL = "packaged food"

# "28g", "1 cup (240 g)", "30 grams"; never "240mg".
_SERVING_GRAMS = re.compile(
    r"(?<![\w.])(\d+(?:\.\d+)?)\s*(?:g|grams?)\b", re.IGNORECASE
)


def serving_grams(serving_size: str) -> Optional[float]:
    """Grams stated in a serving size string, if any."""
    match = _SERVING_GRAMS.search(serving_size or "")
    if match is None:
        return None
    grams = float(match.group(1))
    return grams if grams > 0 else None


def label_weight(reading: NutritionLabelReading) -> float:
    """
    Portion weight for a label reading.

    When the serving size states grams, scale it by the number of servings
    the calories represent; otherwise back-derive from calories.

    Example:
        >>> reading = NutritionLabelReading("granola", 0.9, 240, "60g", 240)
        >>> label_weight(reading)
        60.0
    """
    grams = serving_grams(reading.serving_size)
    if grams is not None and reading.calories_per_serving > 0:
        return round1(grams * reading.calories / reading.calories_per_serving)
    return weight_from_calories(reading.calories)


class LabelPath(EvidencePathHandler):
    """Packaged products: read the nutrition facts panel (sigma 5 %)."""

    evidence_tag = "Label"

    async def run(self, image: AnalyzeInput) -> AnalyzeItem:
        reading = await self._ask(
            "extract_nutrition_label",
            lambda: self._inference.extract_nutrition_label(image),
        )

        label = sanitize_label(reading.label.strip() or DEFAULT_PACKAGED_LABEL)
        weight = label_weight(reading)
        macros = await self._macros.calculate(label, weight, reading.calories)
        calories = self._reconciler.reconcile(label, reading.calories, macros).value

        logger.info(
            "Label path complete",
            extra={"label": label, "calories": calories, "weight_grams": weight},
        )
        return AnalyzeItem(
            label=label,
            confidence=reading.confidence,
            calories=calories,
            sigma_calories=EvidencePath.LABEL.sigma_for(calories),
            weight_grams=weight,
            volume_ml=0.0,
            path=EvidencePath.LABEL,
            macros=macros,
            evidence=self._evidence(),
            nutrition_label=NutritionLabelInfo(
                serving_size=reading.serving_size,
                calories_per_serving=reading.calories_per_serving,
                total_servings=reading.total_servings,
            ),
        )
