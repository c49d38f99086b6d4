"""Image-type classification: which evidence regime applies to a photo."""

import logging

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.core.exceptions.domain_errors import ClassificationError
from domain.food_analysis.recognition.entities.evidence import ImageTypeResult
from domain.food_analysis.recognition.ports.inference_service import IInferenceService
from metrics.food_analysis import record_image_type

logger = logging.getLogger(__name__)


class ImageTypeClassifier:
    """
    Domain service deciding between packaged, restaurant and prepared.

    Delegates to the inference service and never retries: a failure is
    surfaced as ClassificationError and handled by the fallback chain.
    """

    def __init__(self, inference: IInferenceService):
        self._inference = inference

    async def classify(self, image: AnalyzeInput) -> ImageTypeResult:
        """
        Classify the evidence regime of a photo.

        Args:
            image: Photo to classify

        Returns:
            ImageTypeResult (restaurant_name set only for resolved chains)

        Raises:
            ClassificationError: If the service is unreachable or returns a
                non-conforming payload
        """
        try:
            result = await self._inference.classify_image_type(image)
        except ClassificationError:
            raise
        except Exception as e:
            raise ClassificationError(f"Image type classification failed: {e}") from e

        if result is None or getattr(result, "image_type", None) is None:
            raise ClassificationError("Classifier response is missing imageType")

        record_image_type(result.image_type.value)
        logger.info(
            "Image classified",
            extra={
                "image_type": result.image_type.value,
                "confidence": result.confidence,
                "restaurant": result.restaurant_name,
                "brand": result.brand_name,
            },
        )
        return result
