"""Evidence path routing and the per-image analysis pipeline."""

import logging
from typing import Optional

from domain.food_analysis.core.entities.analysis import AnalyzeInput, AnalyzeItem
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.nutrition.services.calorie_reconciler import (
    CalorieReconciler,
)
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.paths.geometry_path import GeometryPath
from domain.food_analysis.paths.label_path import LabelPath
from domain.food_analysis.paths.menu_path import MenuPath
from domain.food_analysis.recognition.entities.evidence import ImageTypeResult
from domain.food_analysis.recognition.ports.inference_service import IInferenceService
from domain.food_analysis.recognition.services.image_type_classifier import (
    ImageTypeClassifier,
)

logger = logging.getLogger(__name__)


def select_path(classification: ImageTypeResult) -> EvidencePath:
    """
    Terminal evidence path for a classification.

    packaged -> label; restaurant with a resolved chain -> menu;
    everything else -> geometry.
    """
    if classification.image_type == ImageType.PACKAGED:
        return EvidencePath.LABEL
    if (
        classification.image_type == ImageType.RESTAURANT
        and classification.restaurant_name
    ):
        return EvidencePath.MENU
    return EvidencePath.GEOMETRY


class FoodImageAnalysisService:
    """
    Domain service: classify a photo, then run exactly one evidence path.

    Example:
        >>> service = FoodImageAnalysisService.create(
        ...     inference, MacroCalculator(), default_portion_grams=180,
        ...     weight_relative_sigma=0.35,
        ... )
        >>> item = await service.analyze(AnalyzeInput(image_url=url))
        >>> item.path
        <EvidencePath.GEOMETRY: 'geometry'>
    """

    def __init__(
        self,
        classifier: ImageTypeClassifier,
        label_path: LabelPath,
        menu_path: MenuPath,
        geometry_path: GeometryPath,
    ):
        self._classifier = classifier
        self._label = label_path
        self._menu = menu_path
        self._geometry = geometry_path

    @classmethod
    def create(
        cls,
        inference: IInferenceService,
        macro_calculator: MacroCalculator,
        default_portion_grams: float,
        weight_relative_sigma: float,
        reconciler: Optional[CalorieReconciler] = None,
    ) -> "FoodImageAnalysisService":
        """Wire classifier and paths around a single inference service."""
        reconciler = reconciler or CalorieReconciler()
        return cls(
            classifier=ImageTypeClassifier(inference),
            label_path=LabelPath(inference, macro_calculator, reconciler),
            menu_path=MenuPath(inference, macro_calculator, reconciler),
            geometry_path=GeometryPath(
                inference,
                macro_calculator,
                reconciler,
                default_portion_grams=default_portion_grams,
                weight_relative_sigma=weight_relative_sigma,
            ),
        )

    async def analyze(self, image: AnalyzeInput) -> AnalyzeItem:
        """
        Analyze one photo.

        Raises:
            ClassificationError: If classification fails
            PathExecutionError: If the selected path fails
        """
        classification = await self._classifier.classify(image)
        path = select_path(classification)
        logger.info(
            "Evidence path selected",
            extra={"image_type": classification.image_type.value, "path": path.value},
        )

        if path == EvidencePath.LABEL:
            return await self._label.run(image)
        if path == EvidencePath.MENU:
            return await self._menu.run(image, classification.restaurant_name or "")
        return await self._geometry.run(image)
