"""Shared plumbing of the evidence path handlers."""

import logging
from typing import Awaitable, Callable, TypeVar

from domain.food_analysis.core.exceptions.domain_errors import PathExecutionError
from domain.food_analysis.core.value_objects.macros import round1
from domain.food_analysis.nutrition.services.calorie_reconciler import (
    CalorieReconciler,
)
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.recognition.ports.inference_service import IInferenceService

logger = logging.getLogger(__name__)

# Average energy density used to back-derive a weight from calories.
AVERAGE_KCAL_PER_G = 2.5

CLASSIFIER_EVIDENCE = "Classifier"

T = TypeVar("T")


def weight_from_calories(calories: float) -> float:
    """Portion grams implied by calories at 2.5 kcal/g (0 for no calories)."""
    if calories <= 0:
        return 0.0
    return round1(calories / AVERAGE_KCAL_PER_G)


class EvidencePathHandler:
    """Base class: holds the collaborators every path needs."""

    evidence_tag: str = ""

    def __init__(
        self,
        inference: IInferenceService,
        macro_calculator: MacroCalculator,
        reconciler: CalorieReconciler,
    ):
        self._inference = inference
        self._macros = macro_calculator
        self._reconciler = reconciler

    def _evidence(self) -> tuple:
        return (CLASSIFIER_EVIDENCE, self._inference.name, self.evidence_tag)

    async def _ask(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run one inference call, mapping any failure to PathExecutionError."""
        try:
            return await call()
        except PathExecutionError:
            raise
        except Exception as e:
            logger.warning(
                "Evidence path inference failed",
                extra={
                    "path": self.evidence_tag,
                    "operation": operation,
                    "error": str(e),
                },
            )
            raise PathExecutionError(f"{self.evidence_tag} path failed: {e}") from e
