"""Unit test fixtures: fake inference service and fake analyzer backends."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

import pytest

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.core.value_objects.macros import Macros
from domain.food_analysis.recognition.entities.evidence import (
    GeometryEstimate,
    ImageTypeResult,
    MenuItemReading,
    NutritionLabelReading,
)


class FakeInferenceService:
    """IInferenceService returning canned answers (or raising them)."""

    name = "fake-vision"

    def __init__(
        self,
        classification: Any = None,
        label: Any = None,
        menu: Any = None,
        geometry: Any = None,
    ):
        self.classification = classification
        self.label = label
        self.menu = menu
        self.geometry = geometry
        self.calls: List[str] = []
        self.restaurants: List[str] = []

    @staticmethod
    def _answer(value: Any) -> Any:
        if isinstance(value, BaseException):
            raise value
        return value

    async def classify_image_type(self, image: AnalyzeInput) -> Any:
        self.calls.append("classify_image_type")
        return self._answer(self.classification)

    async def extract_nutrition_label(self, image: AnalyzeInput) -> Any:
        self.calls.append("extract_nutrition_label")
        return self._answer(self.label)

    async def lookup_menu_item(self, image: AnalyzeInput, restaurant: str) -> Any:
        self.calls.append("lookup_menu_item")
        self.restaurants.append(restaurant)
        return self._answer(self.menu)

    async def estimate_geometry(self, image: AnalyzeInput) -> Any:
        self.calls.append("estimate_geometry")
        return self._answer(self.geometry)


class FakeBackend:
    """IAnalyzerBackend with a fixed response, error or delay."""

    def __init__(
        self,
        backend_id: BackendId,
        response: Any = None,
        error: Optional[BaseException] = None,
        delay_s: float = 0.0,
        on_call: Optional[Callable[[BackendId], None]] = None,
    ):
        self.backend_id = backend_id
        self._response = response
        self._error = error
        self._delay_s = delay_s
        self._on_call = on_call
        self.calls = 0

    async def analyze(self, image: AnalyzeInput) -> Any:
        self.calls += 1
        if self._on_call is not None:
            self._on_call(self.backend_id)
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        if self._error is not None:
            raise self._error
        return self._response


@pytest.fixture
def image() -> AnalyzeInput:
    return AnalyzeInput(image_url="https://example.com/meal.jpg")


@pytest.fixture
def packaged_inference() -> FakeInferenceService:
    """Cereal box: 10 servings of 30 g at 120 kcal."""
    return FakeInferenceService(
        classification=ImageTypeResult(
            image_type=ImageType.PACKAGED, confidence=0.95, brand_name="Acme"
        ),
        label=NutritionLabelReading(
            label="Honey Oat Cereal",
            confidence=0.9,
            calories=1200,
            serving_size="1 cup (30g)",
            calories_per_serving=120,
            total_servings=10,
        ),
    )


@pytest.fixture
def restaurant_inference() -> FakeInferenceService:
    return FakeInferenceService(
        classification=ImageTypeResult(
            image_type=ImageType.RESTAURANT,
            confidence=0.88,
            restaurant_name="Chipotle",
        ),
        menu=MenuItemReading(
            restaurant="Chipotle",
            item_name="Burrito Bowl",
            calories=1200,
            confidence=0.8,
        ),
    )


@pytest.fixture
def prepared_inference() -> FakeInferenceService:
    """Home-cooked dish whose macros disagree with the raw calorie guess."""
    return FakeInferenceService(
        classification=ImageTypeResult(
            image_type=ImageType.PREPARED, confidence=0.9
        ),
        geometry=GeometryEstimate(
            label="Pasta Carbonara",
            confidence=0.7,
            density_g_ml=1.1,
            kcal_per_g=1.5,
            parent_label="pasta",
            estimated_volume_ml=230,
            estimated_weight_g=250,
            total_calories=100,
            macros=Macros(protein_g=30, carbs_g=0, fat_g=20),
        ),
    )


@pytest.fixture
def make_inference() -> Callable[..., FakeInferenceService]:
    return FakeInferenceService


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    return FakeBackend
