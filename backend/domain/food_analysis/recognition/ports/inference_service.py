"""Port (interface) for the vision-capable inference service.

The model is treated as an external capability behind a narrow interface:
each method asks one question and returns a schema-validated entity.
"""

from typing import Protocol

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.recognition.entities.evidence import (
    GeometryEstimate,
    ImageTypeResult,
    MenuItemReading,
    NutritionLabelReading,
)


class IInferenceService(Protocol):
    """
    Interface for vision inference providers.

    Implementations:
    - OpenAI-compatible chat completions with structured outputs
    - Mock provider (for testing)

    Implementations must not retry: a single failure is reported and the
    fallback chain decides what happens next.
    """

    @property
    def name(self) -> str:
        """Evidence tag identifying this provider (e.g. "gpt-4o-mini")."""
        ...

    async def classify_image_type(self, image: AnalyzeInput) -> ImageTypeResult:
        """
        Classify the evidence regime of the photo.

        Raises:
            ClassificationError: Service unreachable or non-conforming payload
        """
        ...

    async def extract_nutrition_label(
        self, image: AnalyzeInput
    ) -> NutritionLabelReading:
        """
        Read the nutrition facts panel of a packaged product.

        Raises:
            PathExecutionError: Service unreachable or non-conforming payload
        """
        ...

    async def lookup_menu_item(
        self, image: AnalyzeInput, restaurant: str
    ) -> MenuItemReading:
        """
        Identify the menu item of a known chain and its published calories.

        Args:
            image: Photo of the dish
            restaurant: Chain name, embedded in the prompt

        Raises:
            PathExecutionError: Service unreachable or non-conforming payload
        """
        ...

    async def estimate_geometry(self, image: AnalyzeInput) -> GeometryEstimate:
        """
        Estimate label, densities, portion and macros from visual cues.

        Raises:
            PathExecutionError: Service unreachable or non-conforming payload
        """
        ...
