"""Result normalization.

Maps whatever a backend returned into the canonical AnalyzeOutput:

* typed ``AnalyzeOutput`` (in-process backends)
* JSON mapping with ``items`` (managed edge function)
* legacy summary shape ``{foodType, confidence, calories, weight, macros}``

Policy applied to the top-ranked (first) item:

* label sanitized, confidence clamped to [0, 1] (0.6 when missing/invalid)
* macros rounded to 1 decimal, negatives floored to 0
* calories reconciled against macros
* sigmaCalories recomputed from the evidence path
* weight and emoji filled from lookup tables only when absent
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from domain.food_analysis.core.entities.analysis import (
    AnalyzeItem,
    AnalyzeMeta,
    AnalyzeOutput,
    FoodAnalysisResult,
    MenuItemInfo,
    NutritionLabelInfo,
)
from domain.food_analysis.core.exceptions.domain_errors import BackendError
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.macros import (
    Macros,
    round_half_up,
)
from domain.food_analysis.core.value_objects.priors import ItemPriors
from domain.food_analysis.nutrition.services.calorie_reconciler import (
    CalorieReconciler,
)
from domain.food_analysis.nutrition.services.lookup_tables import (
    estimate_weight,
    food_emoji,
)
from domain.food_analysis.recognition.services.labels import sanitize_label

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.6
DEFAULT_SIGMA_FRACTION = 0.15


# ---- Field coercion helpers ----


def _number(value: Any) -> Optional[float]:
    """Finite number or None (bools are not numbers here)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def _non_negative(value: Any) -> Optional[float]:
    number = _number(value)
    if number is None:
        return None
    return max(0.0, number)


def clamp_confidence(value: Any, default: float = DEFAULT_CONFIDENCE) -> float:
    """
    Clamp a backend confidence into [0, 1].

    Example:
        >>> clamp_confidence(1.7), clamp_confidence(-0.2), clamp_confidence("x")
        (1.0, 0.0, 0.6)
    """
    number = _number(value)
    if number is None:
        return default
    return min(max(number, 0.0), 1.0)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _macros(value: Any) -> Optional[Macros]:
    if isinstance(value, Macros):
        return value.rounded()
    if not isinstance(value, Mapping):
        return None
    if "proteinG" not in value and "protein" in value:
        # legacy {protein, carbs, fat, fiber}
        value = {
            "proteinG": value.get("protein"),
            "carbsG": value.get("carbs"),
            "fatG": value.get("fat"),
            "fiberG": value.get("fiber"),
        }
    macros = Macros.from_mapping(value)
    return macros.rounded() if macros is not None else None


def _path(value: Any) -> Optional[EvidencePath]:
    if isinstance(value, EvidencePath):
        return value
    try:
        return EvidencePath(value)
    except ValueError:
        return None


def _nutrition_label(value: Any) -> Optional[NutritionLabelInfo]:
    if not isinstance(value, Mapping):
        return None
    per_serving = _non_negative(value.get("caloriesPerServing"))
    if per_serving is None:
        return None
    servings = _number(value.get("totalServings"))
    return NutritionLabelInfo(
        serving_size=str(value.get("servingSize") or ""),
        calories_per_serving=per_serving,
        total_servings=servings if servings is not None and servings > 0 else None,
    )


def _menu_item(value: Any) -> Optional[MenuItemInfo]:
    if not isinstance(value, Mapping):
        return None
    restaurant = _text(value.get("restaurant"))
    item_name = _text(value.get("itemName"))
    calories = _non_negative(value.get("calories"))
    if restaurant is None or item_name is None or calories is None:
        return None
    return MenuItemInfo(restaurant=restaurant, item_name=item_name, calories=calories)


def _meta(value: Any) -> Optional[AnalyzeMeta]:
    if not isinstance(value, Mapping):
        return None
    used = []
    for raw in value.get("used") or ():
        try:
            used.append(BackendId(raw))
        except ValueError:
            continue
    if not used:
        return None
    latency = _non_negative(value.get("latencyMs"))
    return AnalyzeMeta(
        used=tuple(used),
        latency_ms=int(latency) if latency is not None else None,
        is_fallback=len(used) > 1,
    )


def _legacy_to_canonical(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Legacy summary response -> canonical ``{items, meta}`` mapping."""
    return {
        "items": [
            {
                "label": data.get("foodType"),
                "confidence": data.get("confidence"),
                "calories": data.get("calories"),
                "weightGrams": data.get("weight"),
                "macros": data.get("macros"),
                "evidence": data.get("evidence") or [],
                "emoji": data.get("emoji"),
            }
        ],
        "meta": data.get("meta"),
    }


class ResultNormalizer:
    """
    Domain service producing the canonical output of any backend.

    Example:
        >>> normalizer = ResultNormalizer()
        >>> out = normalizer.normalize({"items": [{"label": "Apple.jpg"}]})
        >>> out.top_item.label, out.top_item.calories, out.top_item.emoji
        ('apple', 95, '🍎')
    """

    def __init__(self, reconciler: Optional[CalorieReconciler] = None):
        self._reconciler = reconciler or CalorieReconciler()

    def normalize(self, raw: Any) -> AnalyzeOutput:
        """
        Normalize a backend response.

        Args:
            raw: AnalyzeOutput or JSON mapping (canonical or legacy shape)

        Returns:
            AnalyzeOutput with exactly the top-ranked item

        Raises:
            BackendError: If the payload is empty or unrecognised
        """
        if isinstance(raw, AnalyzeOutput):
            raw = raw.to_dict()
        if not isinstance(raw, Mapping) or not raw:
            raise BackendError("Analyzer returned empty payload")

        if "items" not in raw and "foodType" in raw:
            raw = _legacy_to_canonical(raw)

        items = raw.get("items")
        if not isinstance(items, Sequence) or isinstance(items, (str, bytes)):
            raise BackendError("Analyzer payload has no items")
        if not items or not isinstance(items[0], Mapping):
            raise BackendError("Analyzer payload has no items")

        item = self._normalize_item(items[0])
        logger.debug(
            "Backend result normalized",
            extra={"label": item.label, "calories": item.calories},
        )
        return AnalyzeOutput(items=(item,), meta=_meta(raw.get("meta")))

    def _normalize_item(self, data: Mapping[str, Any]) -> AnalyzeItem:
        label = sanitize_label(_text(data.get("label")))
        macros = _macros(data.get("macros"))
        raw_calories = _non_negative(data.get("calories"))
        calories = self._reconciler.reconcile(label, raw_calories, macros).value

        path = _path(data.get("path"))
        backend_sigma = _number(data.get("sigmaCalories"))
        if path is not None:
            sigma = path.sigma_for(calories)
        elif backend_sigma is not None and backend_sigma >= 0:
            sigma = backend_sigma
        else:
            sigma = calories * DEFAULT_SIGMA_FRACTION

        weight = _non_negative(data.get("weightGrams"))
        if weight is None:
            weight = float(estimate_weight(label))

        evidence = data.get("evidence") or ()
        if isinstance(evidence, str):
            evidence = (evidence,)
        sigma_weight = _non_negative(data.get("sigmaWeightGrams"))

        return AnalyzeItem(
            label=label,
            confidence=clamp_confidence(data.get("confidence")),
            calories=calories,
            sigma_calories=sigma,
            weight_grams=weight,
            volume_ml=_non_negative(data.get("volumeML")) or 0.0,
            path=path,
            priors=(
                ItemPriors.from_mapping(data["priors"])
                if isinstance(data.get("priors"), Mapping)
                else None
            ),
            macros=macros,
            evidence=tuple(str(tag) for tag in evidence if tag),
            nutrition_label=_nutrition_label(data.get("nutritionLabel")),
            menu_item=_menu_item(data.get("menuItem")),
            sigma_weight_grams=sigma_weight,
            parent_label=_text(data.get("parentLabel")),
            emoji=_text(data.get("emoji")) or food_emoji(label),
        )

    def summarize(self, output: AnalyzeOutput) -> FoodAnalysisResult:
        """
        Client-facing summary of a normalized output.

        ``analyzer_source`` is the backend that produced the answer (the
        last attempted one), ``stub`` when provenance is unknown.
        """
        item = output.top_item
        used = output.meta.used if output.meta is not None else ()
        source = used[-1] if used else BackendId.STUB
        return FoodAnalysisResult(
            food_type=item.label,
            confidence=item.confidence,
            calories=item.calories,
            weight=round_half_up(item.weight_grams),
            emoji=item.emoji or food_emoji(item.label),
            analyzer_source=source,
            used_fallback=bool(output.meta and output.meta.is_fallback),
            analysis=output,
            macros=item.macros,
            evidence=item.evidence,
        )


def with_meta(output: AnalyzeOutput, meta: AnalyzeMeta) -> AnalyzeOutput:
    """Copy of ``output`` carrying ``meta``."""
    return replace(output, meta=meta)


__all__ = ["ResultNormalizer", "clamp_confidence", "with_meta"]
