"""Unit tests for the stub and in-process vision backends."""

import pytest

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.core.exceptions.domain_errors import PathExecutionError
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.paths.router import FoodImageAnalysisService
from domain.food_analysis.recognition.entities.evidence import ImageTypeResult
from infrastructure.food_analysis.backends.stub_backend import (
    STUB_ITEMS,
    StubAnalyzerBackend,
)
from infrastructure.food_analysis.backends.vision_backend import (
    VisionAnalyzerBackend,
)


class TestStubAnalyzerBackend:
    def test_items_are_consistent(self):
        for item in STUB_ITEMS:
            assert item.calories == item.macros.atwater_calories()
            assert item.evidence == ("Stub",)
            assert item.confidence == 0.5

    @pytest.mark.asyncio
    async def test_deterministic_per_image(self):
        backend = StubAnalyzerBackend()
        image = AnalyzeInput(image_url="https://example.com/1.jpg")

        first = await backend.analyze(image)
        second = await backend.analyze(image)

        assert first == second
        assert first.top_item in STUB_ITEMS

    @pytest.mark.asyncio
    async def test_spreads_over_items(self):
        backend = StubAnalyzerBackend()
        labels = {
            backend.pick(AnalyzeInput(image_url=f"https://example.com/{i}.jpg")).label
            for i in range(50)
        }

        assert len(labels) > 1

    def test_backend_id(self):
        assert StubAnalyzerBackend.backend_id == BackendId.STUB


class TestVisionAnalyzerBackend:
    @pytest.mark.asyncio
    async def test_wraps_pipeline_item(self, packaged_inference, image):
        pipeline = FoodImageAnalysisService.create(
            packaged_inference,
            MacroCalculator(),
            default_portion_grams=180,
            weight_relative_sigma=0.35,
        )
        backend = VisionAnalyzerBackend(pipeline)

        output = await backend.analyze(image)

        assert backend.backend_id == BackendId.VISION
        assert output.top_item.path == EvidencePath.LABEL
        assert output.meta is None

    @pytest.mark.asyncio
    async def test_path_failure_propagates(self, make_inference, image):
        inference = make_inference(
            classification=ImageTypeResult(
                image_type=ImageType.PREPARED, confidence=0.9
            ),
            geometry=RuntimeError("timeout"),
        )
        pipeline = FoodImageAnalysisService.create(
            inference,
            MacroCalculator(),
            default_portion_grams=180,
            weight_relative_sigma=0.35,
        )

        with pytest.raises(PathExecutionError):
            await VisionAnalyzerBackend(pipeline).analyze(image)
