"""Direct vision backend - Implements IAnalyzerBackend port.

Runs the classifier + evidence path pipeline in-process against an
OpenAI-compatible vision model.
"""

from domain.food_analysis.core.entities.analysis import AnalyzeInput, AnalyzeOutput
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.paths.router import FoodImageAnalysisService


class VisionAnalyzerBackend:
    """In-process pipeline exposed as a chain backend."""

    backend_id = BackendId.VISION

    def __init__(self, pipeline: FoodImageAnalysisService):
        self._pipeline = pipeline

    async def analyze(self, image: AnalyzeInput) -> AnalyzeOutput:
        """
        Raises:
            ClassificationError: If classification fails
            PathExecutionError: If the selected evidence path fails
        """
        item = await self._pipeline.analyze(image)
        return AnalyzeOutput(items=(item,))
