"""OpenAI inference client - implements IInferenceService port.

Key Features:
- Structured outputs (native Pydantic support)
- One question per call (classification, label OCR, menu match, geometry)
- No retries: the SDK is built with max_retries=0, the fallback chain
  decides what happens after a failure
- Any failure is mapped to the domain error of the calling step
"""

import logging
import math
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.core.exceptions.domain_errors import (
    ClassificationError,
    FoodAnalysisError,
    PathExecutionError,
)
from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.core.value_objects.macros import Macros
from domain.food_analysis.recognition.entities.evidence import (
    GeometryEstimate,
    ImageTypeResult,
    MenuItemReading,
    NutritionLabelReading,
)
from infrastructure.ai.openai.models import (
    GeometryResponse,
    ImageTypeResponse,
    MenuItemResponse,
    NutritionLabelResponse,
)
from infrastructure.ai.prompts.food_analysis import (
    GEOMETRY_SYSTEM_PROMPT,
    IMAGE_TYPE_SYSTEM_PROMPT,
    MENU_ITEM_SYSTEM_PROMPT,
    NUTRITION_LABEL_SYSTEM_PROMPT,
    menu_item_user_prompt,
    region_hint,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# Default confidences when the model leaves confidence null.
CLASSIFIER_DEFAULT_CONFIDENCE = 0.5
READING_DEFAULT_CONFIDENCE = 0.6

# Failures of a single call: transport/API, schema, domain invariants.
_CALL_ERRORS = (OpenAIError, ValidationError, ValueError, TypeError)


def _confidence(value: Optional[float], default: float) -> float:
    if value is None:
        return default
    return min(max(float(value), 0.0), 1.0)


def _floor_zero(value: float) -> float:
    """Clamp a model figure to >= 0, rejecting NaN and infinities."""
    if not math.isfinite(value):
        raise ValueError(f"Model returned a non-finite figure: {value}")
    return max(0.0, value)


class OpenAIInferenceClient:
    """
    OpenAI vision client implementing IInferenceService port.

    Works with any OpenAI-compatible endpoint (``base_url``).

    Example:
        >>> client = OpenAIInferenceClient(api_key="sk-...", model="gpt-4o-mini")
        >>> result = await client.classify_image_type(
        ...     AnalyzeInput(image_url="https://example.com/cereal.jpg")
        ... )
        >>> result.image_type
        <ImageType.PACKAGED: 'packaged'>
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout_s: float = 12.0,
        temperature: float = 0.1,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: API key of the endpoint
            model: Vision-capable model id
            base_url: OpenAI-compatible endpoint (default: api.openai.com)
            timeout_s: Per-call timeout
            temperature: Sampling temperature (0.1 for consistency)
        """
        self._client = AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout_s, max_retries=0
        )
        self._model = model
        self._temperature = temperature

    @property
    def name(self) -> str:
        return self._model

    async def classify_image_type(self, image: AnalyzeInput) -> ImageTypeResult:
        """
        Classify the evidence regime of a photo.

        Raises:
            ClassificationError: On API, schema or parsing failures
        """
        try:
            response = await self._structured_completion(
                image, ImageTypeResponse, IMAGE_TYPE_SYSTEM_PROMPT
            )
            return ImageTypeResult(
                image_type=ImageType(response.image_type),
                confidence=_confidence(
                    response.confidence, CLASSIFIER_DEFAULT_CONFIDENCE
                ),
                reasoning=response.reasoning,
                restaurant_name=response.restaurant_name,
                brand_name=response.brand_name,
            )
        except _CALL_ERRORS as e:
            raise self._failure(ClassificationError, "classify_image_type", e) from e

    async def extract_nutrition_label(
        self, image: AnalyzeInput
    ) -> NutritionLabelReading:
        """
        Read the nutrition facts panel.

        Raises:
            PathExecutionError: On API, schema or parsing failures
        """
        try:
            response = await self._structured_completion(
                image, NutritionLabelResponse, NUTRITION_LABEL_SYSTEM_PROMPT
            )
            calories = response.calories
            if calories is None:
                calories = response.calories_per_serving * (
                    response.total_servings or 1
                )
            return NutritionLabelReading(
                label=response.label or "",
                confidence=_confidence(
                    response.confidence, READING_DEFAULT_CONFIDENCE
                ),
                calories=calories,
                serving_size=response.serving_size,
                calories_per_serving=response.calories_per_serving,
                total_servings=response.total_servings,
            )
        except _CALL_ERRORS as e:
            raise self._failure(
                PathExecutionError, "extract_nutrition_label", e
            ) from e

    async def lookup_menu_item(
        self, image: AnalyzeInput, restaurant: str
    ) -> MenuItemReading:
        """
        Match the dish to the chain's menu.

        Raises:
            PathExecutionError: On API, schema or parsing failures
        """
        try:
            response = await self._structured_completion(
                image,
                MenuItemResponse,
                MENU_ITEM_SYSTEM_PROMPT,
                user_text=menu_item_user_prompt(restaurant),
            )
            return MenuItemReading(
                restaurant=response.restaurant,
                item_name=response.item_name,
                calories=response.calories,
                confidence=_confidence(
                    response.confidence, READING_DEFAULT_CONFIDENCE
                ),
            )
        except _CALL_ERRORS as e:
            raise self._failure(PathExecutionError, "lookup_menu_item", e) from e

    async def estimate_geometry(self, image: AnalyzeInput) -> GeometryEstimate:
        """
        Estimate densities, portion and macros of prepared food.

        Raises:
            PathExecutionError: On API, schema or parsing failures
        """
        try:
            response = await self._structured_completion(
                image, GeometryResponse, GEOMETRY_SYSTEM_PROMPT
            )
            macros = None
            if None not in (response.protein_g, response.carbs_g, response.fat_g):
                macros = Macros(
                    protein_g=_floor_zero(response.protein_g),
                    carbs_g=_floor_zero(response.carbs_g),
                    fat_g=_floor_zero(response.fat_g),
                )
            return GeometryEstimate(
                label=response.label,
                confidence=_confidence(
                    response.confidence, READING_DEFAULT_CONFIDENCE
                ),
                density_g_ml=response.density_g_ml,
                kcal_per_g=response.kcal_per_g,
                parent_label=response.parent_label,
                estimated_volume_ml=response.estimated_volume_ml,
                estimated_weight_g=response.estimated_weight_g,
                total_calories=response.total_calories,
                macros=macros,
            )
        except _CALL_ERRORS as e:
            raise self._failure(PathExecutionError, "estimate_geometry", e) from e

    def _failure(
        self, error_type: Type[FoodAnalysisError], operation: str, error: Exception
    ) -> FoodAnalysisError:
        logger.warning(
            "OpenAI inference call failed",
            extra={
                "operation": operation,
                "model": self._model,
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
        return error_type(f"{operation} failed: {error}")

    async def _structured_completion(
        self,
        image: AnalyzeInput,
        response_model: Type[ResponseT],
        system_prompt: str,
        user_text: Optional[str] = None,
    ) -> ResponseT:
        """
        Execute OpenAI completion with structured output.

        Uses beta.chat.completions.parse() for native Pydantic support.

        Returns:
            Parsed Pydantic model instance

        Raises:
            OpenAIError: On API failures
            ValidationError: On schema validation failures
            ValueError: On empty parsed response
        """
        content: List[Dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": image.image_data_url()}}
        ]
        if user_text:
            content.append({"type": "text", "text": user_text})
        if image.region:
            content.append({"type": "text", "text": region_hint(image.region)})

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": content},
        ]

        start_time = time.time()
        response = await self._client.beta.chat.completions.parse(
            model=self._model,
            messages=messages,  # type: ignore[arg-type]
            response_format=response_model,
            temperature=self._temperature,
        )

        parsed = response.choices[0].message.parsed
        if not parsed:
            raise ValueError("OpenAI returned empty parsed response")

        usage = response.usage
        logger.info(
            "OpenAI response received",
            extra={
                "model": self._model,
                "response_model": response_model.__name__,
                "total_tokens": getattr(usage, "total_tokens", None),
                "processing_time_ms": int((time.time() - start_time) * 1000),
            },
        )
        return parsed
