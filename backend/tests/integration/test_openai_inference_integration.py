"""Integration tests for the food analysis pipeline with the real OpenAI API.

These tests are opt-in and require:
- OPENAI_API_KEY environment variable
- Run with: pytest -m integration_real

They verify that structured outputs parse into domain entities and that a
full classification + evidence path run produces a usable item.
"""

import os

import pytest

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.paths.router import FoodImageAnalysisService
from infrastructure.ai.openai.client import OpenAIInferenceClient

pytestmark = pytest.mark.integration_real

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
SKIP_REASON = "OPENAI_API_KEY not set - set it in .env to run integration tests"

# Public photo of a salad bowl
PHOTO_URL = "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=400"


@pytest.mark.skipif(not OPENAI_API_KEY, reason=SKIP_REASON)
@pytest.mark.asyncio
async def test_classify_image_type_real_api():
    assert OPENAI_API_KEY
    client = OpenAIInferenceClient(api_key=OPENAI_API_KEY)

    result = await client.classify_image_type(AnalyzeInput(image_url=PHOTO_URL))

    assert isinstance(result.image_type, ImageType)
    assert 0.0 <= result.confidence <= 1.0


@pytest.mark.skipif(not OPENAI_API_KEY, reason=SKIP_REASON)
@pytest.mark.asyncio
async def test_full_pipeline_real_api():
    assert OPENAI_API_KEY
    pipeline = FoodImageAnalysisService.create(
        OpenAIInferenceClient(api_key=OPENAI_API_KEY),
        MacroCalculator(),
        default_portion_grams=180,
        weight_relative_sigma=0.35,
    )

    item = await pipeline.analyze(AnalyzeInput(image_url=PHOTO_URL))

    assert item.label
    assert item.calories > 0
    assert item.path is not None
    assert item.evidence[0] == "Classifier"
